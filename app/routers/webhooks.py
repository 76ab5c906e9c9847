import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Header
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.schemas.webhook import ShopifyOrder, WebhookResponse
from app.services.order_ingestion import HANDLED_TOPICS, ingest_order
from app.services.shopify_client import ShopifyClient, get_shopify_client

logger = logging.getLogger("app.routers.webhooks")

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/shopify/orders", response_model=WebhookResponse)
def receive_order_webhook(
    payload: dict = Body(...),
    x_shopify_topic: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    shopify_client: ShopifyClient = Depends(get_shopify_client)
):
    """
    Shopify Order-Webhook (orders/create, orders/updated).

    Antwortet mit Erfolg, sobald alle Positionen versucht wurden, auch wenn
    einzelne fehlschlagen. Andere Topics werden bestätigt und ignoriert.
    """
    logger.info(f"Webhook erhalten: {x_shopify_topic} für Order #{payload.get('order_number')}")

    if x_shopify_topic not in HANDLED_TOPICS:
        return WebhookResponse(success=True, message="Webhook topic not handled")

    try:
        order = ShopifyOrder.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Ungültige Order im Webhook: {e}")
        return JSONResponse(status_code=400, content={"error": "Invalid order payload"})

    try:
        report = ingest_order(
            db,
            order,
            shopify_client,
            waiver_url=settings.waiver_url,
            placeholder_email=settings.placeholder_email
        )
    except Exception as e:
        logger.exception(f"Webhook für Order {order.id} abgebrochen: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return WebhookResponse(
        success=True,
        message="Webhook processed",
        created=report.created,
        duplicates=report.duplicates,
        skipped=report.skipped,
        failed=report.failed
    )
