import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.exceptions import ConfigurationError, UpstreamError
from app.services.shopify_client import ShopifyClient, get_shopify_client
from app.utils.security import get_current_subject

logger = logging.getLogger("app.routers.catalog")

router = APIRouter(prefix="/shopify", tags=["shopify"])

ACTION_PRODUCTS = "products"
ACTION_PRODUCT = "product"


@router.get("/products")
def get_catalog(
    action: str = Query(default=ACTION_PRODUCTS),
    id: Optional[str] = Query(default=None),
    shopify_client: ShopifyClient = Depends(get_shopify_client),
    subject: str = Depends(get_current_subject)
):
    """
    Produktkatalog aus Shopify für die Verknüpfung von Aktivitäten/Varianten.

    action=products -> alle Produkte (max. 1000)
    action=product&id=... -> ein Produkt
    """
    if not shopify_client.config.is_configured:
        raise HTTPException(status_code=400, detail="Shopify not configured")

    if action not in (ACTION_PRODUCTS, ACTION_PRODUCT):
        raise HTTPException(status_code=400, detail="Invalid action")

    if action == ACTION_PRODUCT and not id:
        raise HTTPException(status_code=400, detail="Product ID required")

    try:
        if action == ACTION_PRODUCTS:
            return {"products": shopify_client.fetch_catalog()}
        return shopify_client.fetch_product(id)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UpstreamError as e:
        logger.error(f"Katalog-Abruf fehlgeschlagen: {e}")
        raise HTTPException(status_code=500, detail=str(e))
