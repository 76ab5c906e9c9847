"""
Spiegelt die Zustimmung zum Haftungsausschluss in den Shopify-Kundendatensatz.

Best effort: genau ein Versuch, Fehler werden geloggt und verworfen.
Eine Buchung scheitert niemals an diesem Schritt.
"""
import logging
from datetime import datetime

from app.exceptions import BookingCoreError
from app.services.shopify_client import ShopifyClient

logger = logging.getLogger("app.services.consent_sync")


def build_waiver_metafields(accepted_at: datetime, waiver_url: str) -> list[dict]:
    return [
        {
            "namespace": "custom",
            "key": "waiver_accepted",
            "value": "true",
            "type": "boolean",
        },
        {
            "namespace": "custom",
            "key": "waiver_accepted_at",
            "value": accepted_at.isoformat(),
            "type": "date_time",
        },
        {
            "namespace": "custom",
            "key": "waiver_url",
            "value": waiver_url,
            "type": "single_line_text_field",
        },
    ]


def sync_waiver_consent(client: ShopifyClient, customer_id: int | str, accepted_at: datetime, waiver_url: str) -> bool:
    if not client.config.is_configured:
        logger.info(f"Shopify nicht konfiguriert, Kunde {customer_id} wird nicht aktualisiert")
        return False

    try:
        client.update_customer_metafields(
            customer_id,
            build_waiver_metafields(accepted_at, waiver_url),
            timeout=client.config.consent_timeout
        )
    except BookingCoreError as e:
        logger.error(f"Shopify-Kunde {customer_id} konnte nicht aktualisiert werden: {e}")
        return False

    logger.info(f"Shopify-Kunde {customer_id} mit Waiver-Zustimmung aktualisiert")
    return True
