import json
import sys
import traceback

from app.config import get_shopify_config
from app.exceptions import BookingCoreError
from app.services.shopify_client import ShopifyClient
from app.utils.logging_config import setup_logging

logger = setup_logging()


def main() -> int:
    """
    Holt den Shopify-Katalog und schreibt ihn als JSON nach stdout.
    Gibt Exit-Code zurück: 0 = Erfolg, 1 = Fehler
    """
    logger.info("Katalog-Abruf gestartet")

    client = ShopifyClient(get_shopify_config())
    try:
        products = client.fetch_catalog()
    except BookingCoreError as e:
        logger.error(f"Katalog-Abruf fehlgeschlagen: {e}")
        return 1
    except Exception as e:
        logger.error(f"Katalog-Abruf fehlgeschlagen: {e}")
        logger.error(traceback.format_exc())
        return 1

    json.dump({"products": products}, sys.stdout, ensure_ascii=False, indent=2)
    logger.info(f"Katalog-Abruf beendet: {len(products)} Produkte")
    return 0


if __name__ == "__main__":
    sys.exit(main())
