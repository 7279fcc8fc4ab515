"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """An order was created from a user's cart."""

    __version__ = 1

    order_pk = Identifier(required=True)  # Aggregate identity; order_id is the human-readable number
    order_id = String(required=True)
    user_id = Identifier(required=True)
    subtotal = Float(required=True)
    discount = Float(required=True)
    total_amount = Float(required=True)
    total_items = Integer(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An order moved to a new lifecycle status."""

    __version__ = 1

    order_pk = Identifier(required=True)
    order_id = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
