"""Order aggregate (CQRS) — a priced snapshot of a cart and its lifecycle status.

Item rows are snapshots of product data at order time and never follow later
product edits. Amounts are fixed at creation; only the status moves, along
the transition table below.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Rounding slack when comparing money amounts
_AMOUNT_TOLERANCE = 0.01


@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=200)
    sku = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)  # Unit price charged before offers
    discount_price = Float()
    images = Text()  # JSON array of image URLs
    subtotal = Float(required=True, min_value=0.0)
    offer_discount = Float(default=0.0, min_value=0.0)
    applied_offer_id = Identifier()


@storefront.entity(part_of="Order")
class StatusChange:
    status = String(required=True, choices=OrderStatus)
    changed_at = DateTime(required=True)


@storefront.aggregate
class Order:
    order_id = String(required=True, max_length=40, unique=True)
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    subtotal = Float(required=True, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    total_amount = Float(required=True, min_value=0.0)
    total_items = Integer(required=True, min_value=1)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    shipping_address = String(max_length=500)
    contact_email = String(max_length=254)
    contact_phone = String(max_length=20)
    notes = String(max_length=1000)
    status_history = HasMany(StatusChange)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_subtotal_less_discount(self):
        expected = (self.subtotal or 0.0) - (self.discount or 0.0)
        if abs((self.total_amount or 0.0) - expected) > _AMOUNT_TOLERANCE:
            raise ValidationError(
                {"total_amount": [f"Total {self.total_amount} does not equal subtotal less discount ({expected:.2f})"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_id,
        user_id,
        items_data,
        subtotal,
        discount,
        total_amount,
        total_items,
        shipping_address=None,
        contact_email=None,
        contact_phone=None,
        notes=None,
    ):
        """Create a pending order from priced cart data.

        Args:
            items_data: List of dicts with product_id, product_name, sku,
                        quantity, price, discount_price, images (list),
                        subtotal, offer_discount, applied_offer_id.
        """
        if not items_data:
            raise ValidationError({"items": ["Cart is empty"]})

        now = datetime.now(UTC)
        order = cls(
            order_id=order_id,
            user_id=user_id,
            subtotal=subtotal,
            discount=discount,
            total_amount=total_amount,
            total_items=total_items,
            status=OrderStatus.PENDING.value,
            shipping_address=shipping_address,
            contact_email=contact_email,
            contact_phone=contact_phone,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            order.add_items(OrderItem(**{**item_data, "images": json.dumps(item_data.get("images") or [])}))
        order.add_status_history(StatusChange(status=OrderStatus.PENDING.value, changed_at=now))

        order.raise_(
            OrderPlaced(
                order_pk=str(order.id),
                order_id=order_id,
                user_id=str(user_id),
                subtotal=subtotal,
                discount=discount,
                total_amount=total_amount,
                total_items=total_items,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status lifecycle
    # -------------------------------------------------------------------
    def can_transition_to(self, target_status) -> bool:
        return OrderStatus(target_status) in _VALID_TRANSITIONS[OrderStatus(self.status)]

    def change_status(self, new_status):
        """Move to ``new_status`` if the transition table allows it."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]}) from None

        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError(
                {"status": [f"Order {self.order_id} cannot move from {current.value} to {target.value}"]}
            )

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.add_status_history(StatusChange(status=target.value, changed_at=now))

        self.raise_(
            OrderStatusChanged(
                order_pk=str(self.id),
                order_id=self.order_id,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return current.value

    @property
    def applied_offer_ids(self) -> list[str]:
        return sorted({str(i.applied_offer_id) for i in self.items if i.applied_offer_id})
