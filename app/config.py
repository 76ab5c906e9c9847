from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    # Database
    database_url: str = "sqlite:///./buchungssystem.db"


    # Auth/JWT (Tokens werden vom Admin-Backend ausgestellt)
    jwt_algorithm: str = 'HS256'
    secret_key: str = "change-me"

    # App
    app_name: str = 'Buchungssystem'
    debug: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shopify
    shopify_shop_domain: str = ""
    shopify_access_token: str = ""
    shopify_api_version: str = "2024-01"
    shopify_timeout_seconds: int = 30
    # Kunden-Update läuft innerhalb des Webhooks, Shopify wartet dort nur ca. 5 s
    shopify_consent_timeout_seconds: int = 3

    # Katalog-Abruf
    catalog_page_size: int = 250
    catalog_max_items: int = 1000

    # Haftungsausschluss, wird bei Zustimmung an der Buchung gespeichert
    waiver_url: str = "https://www.spaceverbania.com/pages/liberatoria-unica-it"
    placeholder_email: str = "no-email@shopify.com"


settings = Settings()


@dataclass(frozen=True)
class ShopifyConfig:
    """Zugangsdaten für die Shopify Admin API, wird explizit an Komponenten übergeben."""
    shop_domain: str
    access_token: str
    api_version: str = "2024-01"
    timeout: int = 30
    consent_timeout: int = 3
    page_size: int = 250
    max_items: int = 1000

    @property
    def is_configured(self) -> bool:
        return bool(self.shop_domain and self.access_token)

    @property
    def base_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}"


def get_shopify_config() -> ShopifyConfig:
    """FastAPI-Dependency: baut die Shopify-Konfiguration aus den Settings."""
    return ShopifyConfig(
        shop_domain=settings.shopify_shop_domain.strip(),
        access_token=settings.shopify_access_token.strip(),
        api_version=settings.shopify_api_version,
        timeout=settings.shopify_timeout_seconds,
        consent_timeout=settings.shopify_consent_timeout_seconds,
        page_size=settings.catalog_page_size,
        max_items=settings.catalog_max_items,
    )
