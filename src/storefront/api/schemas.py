"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. Field names travel in camelCase; requests also
accept snake_case.
"""

import json
from datetime import datetime

from pydantic import Field

from storefront.cart.priced_cart import CamelModel


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class MessageResponse(CamelModel):
    message: str


class CountResponse(CamelModel):
    count: int


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = 1  # Range is enforced by the command so violations surface as 400

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "productId": "0b6f1c9e-2f0e-4a55-9d2c-5f3f1c1d2e3f",
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateCartQuantityRequest(CamelModel):
    quantity: int


class CartItemResponse(CamelModel):
    item_id: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CreateOrderRequest(CamelModel):
    shipping_address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    notes: str | None = None


class UpdateOrderStatusRequest(CamelModel):
    status: str


class OrderItemResponse(CamelModel):
    product_id: str
    product_name: str
    sku: str | None = None
    quantity: int
    price: float
    discount_price: float | None = None
    images: list[str] = Field(default_factory=list)
    subtotal: float
    offer_discount: float = 0.0
    applied_offer_id: str | None = None


class StatusChangeResponse(CamelModel):
    status: str
    changed_at: datetime


class OrderResponse(CamelModel):
    id: str
    order_id: str
    user_id: str
    items: list[OrderItemResponse]
    subtotal: float
    discount: float
    total_amount: float
    total_items: int
    status: str
    shipping_address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    notes: str | None = None
    status_history: list[StatusChangeResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            order_id=order.order_id,
            user_id=str(order.user_id),
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    sku=item.sku,
                    quantity=item.quantity,
                    price=item.price,
                    discount_price=item.discount_price,
                    images=json.loads(item.images) if item.images else [],
                    subtotal=item.subtotal,
                    offer_discount=item.offer_discount or 0.0,
                    applied_offer_id=str(item.applied_offer_id) if item.applied_offer_id else None,
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            discount=order.discount or 0.0,
            total_amount=order.total_amount,
            total_items=order.total_items,
            status=order.status,
            shipping_address=order.shipping_address,
            contact_email=order.contact_email,
            contact_phone=order.contact_phone,
            notes=order.notes,
            status_history=sorted(
                (StatusChangeResponse(status=c.status, changed_at=c.changed_at) for c in order.status_history),
                key=lambda c: c.changed_at,
            ),
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class StatusBucket(CamelModel):
    count: int
    total_amount: float


class OrderStatsResponse(CamelModel):
    total_orders: int
    total_revenue: float
    by_status: dict[str, StatusBucket]


# ---------------------------------------------------------------------------
# Offers
# ---------------------------------------------------------------------------
class OfferRuleSchema(CamelModel):
    buy_quantity: int | None = None
    get_quantity: int | None = None
    bundle_price: float | None = None
    discount_percentage: float | None = None
    discount_amount: float | None = None
    min_quantity: int | None = None


class CreateOfferRequest(CamelModel):
    name: str
    description: str | None = None
    offer_type: str
    rules: OfferRuleSchema
    product_ids: list[str] = Field(default_factory=list)
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    usage_limit: int | None = None
    priority: int = 1


class UpdateOfferRequest(CamelModel):
    name: str | None = None
    description: str | None = None
    offer_type: str | None = None
    rules: OfferRuleSchema | None = None
    product_ids: list[str] | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool | None = None
    usage_limit: int | None = None
    priority: int | None = None


class OfferResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    offer_type: str
    rules: OfferRuleSchema
    product_ids: list[str]
    start_date: datetime
    end_date: datetime
    is_active: bool
    usage_limit: int | None = None
    usage_count: int
    priority: int
    created_at: datetime | None = None

    @classmethod
    def from_offer(cls, offer) -> "OfferResponse":
        rule = offer.rule
        return cls(
            id=str(offer.id),
            name=offer.name,
            description=offer.description,
            offer_type=offer.offer_type,
            rules=OfferRuleSchema(
                buy_quantity=rule.buy_quantity,
                get_quantity=rule.get_quantity,
                bundle_price=rule.bundle_price,
                discount_percentage=rule.discount_percentage,
                discount_amount=rule.discount_amount,
                min_quantity=rule.min_quantity,
            ),
            product_ids=offer.product_id_list,
            start_date=offer.start_date,
            end_date=offer.end_date,
            is_active=offer.is_active,
            usage_limit=offer.usage_limit,
            usage_count=offer.usage_count or 0,
            priority=offer.priority,
            created_at=offer.created_at,
        )


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class RegisterProductRequest(CamelModel):
    name: str
    gender_name: str
    category_name: str
    sku: str | None = None
    price: float
    discount_price: float | None = None
    stock: int = 0
    images: list[str] = Field(default_factory=list)
    is_active: bool = True


class AdjustStockRequest(CamelModel):
    quantity: int  # Signed delta


class ProductResponse(CamelModel):
    id: str
    name: str
    sku: str
    price: float
    discount_price: float | None = None
    stock: int
    images: list[str]
    is_active: bool

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        return cls(
            id=str(product.id),
            name=product.name,
            sku=product.sku,
            price=product.price,
            discount_price=product.discount_price,
            stock=product.stock,
            images=product.image_list,
            is_active=product.is_active,
        )
