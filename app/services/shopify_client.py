"""
Shopify Admin API Client.

Keine Retries: ein Fehler bricht den laufenden Aufruf ab (UpstreamError).
Beim Katalog-Abruf werden niemals unvollständige Daten zurückgegeben.
"""
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse, parse_qs

import requests
from fastapi import Depends

from app.config import ShopifyConfig, get_shopify_config
from app.exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger("app.services.shopify_client")


@dataclass(frozen=True)
class PageCursor:
    """Fortsetzungs-Token der Cursor-Pagination (page_info aus der rel="next"-Relation)."""
    page_info: str

    @classmethod
    def from_response(cls, response: requests.Response) -> Optional["PageCursor"]:
        # requests zerlegt den Link-Header bereits in {rel: {"url": ..., "rel": ...}}
        next_link = response.links.get("next")
        if not next_link:
            return None
        query = parse_qs(urlparse(next_link.get("url", "")).query)
        page_info = query.get("page_info")
        if not page_info:
            return None
        return cls(page_info=page_info[0])


class ShopifyClient:

    def __init__(self, config: ShopifyConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def _headers(self) -> dict:
        return {
            "X-Shopify-Access-Token": self.config.access_token,
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        payload: dict | None = None,
        timeout: int | None = None
    ) -> requests.Response:
        if not self.config.is_configured:
            raise ConfigurationError()

        url = f"{self.config.base_url}/{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=payload,
                headers=self._headers(),
                timeout=timeout or self.config.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Shopify nicht erreichbar ({method} {path}): {e}")
            raise UpstreamError(None, f"Shopify API error: {e}") from e

        if not response.ok:
            logger.error(f"Shopify API-Fehler {response.status_code} bei {method} {path}")
            raise UpstreamError(response.status_code)

        return response

    def fetch_catalog(self) -> list[dict]:
        """
        Holt alle Produkte inkl. Varianten seitenweise.

        Abbruch wenn keine rel="next"-Relation mehr kommt oder max_items erreicht ist
        (auch wenn noch Seiten übrig sind). Das Ergebnis hat höchstens max_items Einträge.
        """
        products: list[dict] = []
        cursor: Optional[PageCursor] = None
        page = 1

        while True:
            params = {"limit": self.config.page_size}
            if cursor:
                params["page_info"] = cursor.page_info

            response = self._request("GET", "products.json", params=params)
            batch = response.json().get("products", [])
            products.extend(batch)

            logger.info(f"Seite {page}: {len(batch)} Produkte geholt (Gesamt: {len(products)})")

            cursor = PageCursor.from_response(response)

            if len(products) >= self.config.max_items:
                if cursor:
                    logger.warning(f"Katalog auf {self.config.max_items} Produkte begrenzt, weitere Seiten ignoriert")
                break

            if cursor is None:
                break

            page += 1

        return products[:self.config.max_items]

    def fetch_product(self, product_id: str) -> dict:
        response = self._request("GET", f"products/{product_id}.json")
        return response.json()

    def update_customer_metafields(self, customer_id: int | str, metafields: list[dict], timeout: int | None = None) -> dict:
        payload = {
            "customer": {
                "id": customer_id,
                "metafields": metafields,
            }
        }
        response = self._request("PUT", f"customers/{customer_id}.json", payload=payload, timeout=timeout)
        return response.json() if response.content else {}


def get_shopify_client(config: ShopifyConfig = Depends(get_shopify_config)) -> ShopifyClient:
    """FastAPI-Dependency, in Tests per dependency_overrides ersetzbar."""
    return ShopifyClient(config)
