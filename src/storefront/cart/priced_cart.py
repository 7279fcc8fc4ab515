"""Priced cart read model — plain pydantic values, never persisted.

Field names serialize in camelCase (``totalDiscount``, ``lineTotal``) so the
cached JSON and the API responses share one shape.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductSnapshot(CamelModel):
    id: str
    name: str
    sku: str
    price: float
    discount_price: float | None = None
    stock: int
    images: list[str] = Field(default_factory=list)
    is_active: bool


class AppliedOffer(CamelModel):
    id: str
    name: str
    description: str | None = None
    offer_type: str


class PricedCartLine(CamelModel):
    id: str
    product: ProductSnapshot
    quantity: int
    unit_price: float
    subtotal: float
    product_discount: float
    offer_discount: float
    applied_offer: AppliedOffer | None = None
    line_total: float
    added_at: datetime | None = None


class CartSummary(CamelModel):
    subtotal: float = 0.0
    total_product_discount: float = 0.0
    total_offer_discount: float = 0.0
    total_discount: float = 0.0
    total: float = 0.0
    total_items: int = 0
    item_count: int = 0


class PricedCart(CamelModel):
    user_id: str
    items: list[PricedCartLine] = Field(default_factory=list)
    summary: CartSummary = Field(default_factory=CartSummary)

    @property
    def is_empty(self) -> bool:
        return not self.items
