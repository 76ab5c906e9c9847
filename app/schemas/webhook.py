from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ShopifyProperty(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: Optional[str] = None
    value: Optional[str] = None


class ShopifyLineItem(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[int] = None
    variant_id: Optional[int] = None
    title: Optional[str] = None
    quantity: Optional[int] = None
    price: Optional[str] = None
    properties: Optional[list[ShopifyProperty]] = Field(default_factory=list)


class ShopifyCustomer(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ShopifyOrder(BaseModel):
    """Relevanter Ausschnitt des Shopify Order-Webhooks."""
    id: int
    order_number: Optional[int] = None
    email: Optional[str] = None
    customer: Optional[ShopifyCustomer] = None
    line_items: list[ShopifyLineItem] = Field(default_factory=list)
    financial_status: Optional[str] = None
    created_at: Optional[str] = None


class WebhookResponse(BaseModel):
    success: bool
    message: str
    created: int = 0
    duplicates: int = 0
    skipped: int = 0
    failed: int = 0
