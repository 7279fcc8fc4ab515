"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Boolean, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, or its quantity merged into an existing line."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    merged = Boolean(default=False)


@storefront.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items_removed = Integer(required=True)
