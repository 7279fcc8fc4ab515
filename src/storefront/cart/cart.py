"""Shopping Cart aggregate (CQRS) — one cart per user, one line per product.

Prices are never stored on the cart. They are computed on read by
``storefront.cart.pricing`` from live product and offer data.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from storefront.domain import storefront


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(i.product_id) for i in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------
    def find_item(self, item_id) -> CartItem:
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError({"item_id": [f"Cart item {item_id} not found"]})
        return item

    def line_for_product(self, product_id) -> CartItem | None:
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    @property
    def total_quantity(self) -> int:
        return sum(i.quantity for i in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, available_stock):
        """Add a product, merging into its existing line if there is one.

        The resulting line quantity must not exceed ``available_stock``.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if available_stock < quantity:
            raise ValidationError(
                {
                    "quantity": [
                        f"Insufficient stock for product {product_id}. "
                        f"Available: {available_stock}, Requested: {quantity}"
                    ]
                }
            )

        existing = self.line_for_product(product_id)
        now = datetime.now(UTC)

        if existing:
            merged_quantity = existing.quantity + quantity
            if available_stock < merged_quantity:
                raise ValidationError(
                    {
                        "quantity": [
                            f"Insufficient stock for product {product_id}. "
                            f"Available: {available_stock}, In cart: {existing.quantity}"
                        ]
                    }
                )
            existing.quantity = merged_quantity
            item_id = str(existing.id)
        else:
            item = CartItem(product_id=product_id, quantity=quantity, added_at=now)
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                item_id=item_id,
                product_id=str(product_id),
                quantity=quantity,
                merged=existing is not None,
            )
        )
        return item_id

    def update_item_quantity(self, item_id, new_quantity, available_stock):
        """Set the quantity of a line, re-checked against live stock."""
        item = self.find_item(item_id)

        if new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if available_stock < new_quantity:
            raise ValidationError(
                {
                    "quantity": [
                        f"Insufficient stock for product {item.product_id}. "
                        f"Available: {available_stock}, Requested: {new_quantity}"
                    ]
                }
            )

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        item = self.find_item(item_id)

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
                product_id=str(item.product_id),
            )
        )

    def clear(self):
        """Remove every line. Clearing an empty cart is a no-op."""
        removed = len(self.items)
        if not removed:
            return

        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                items_removed=removed,
            )
        )
