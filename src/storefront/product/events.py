"""Domain events for the Product aggregate."""

from protean.fields import Boolean, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductRegistered:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    sku = String(required=True)
    name = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)


@storefront.event(part_of="Product")
class StockAdjusted:
    """The stock count of a product changed by a signed delta."""

    __version__ = 1

    product_id = Identifier(required=True)
    delta = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)


@storefront.event(part_of="Product")
class ProductAvailabilityChanged:
    """A product was activated or deactivated."""

    __version__ = 1

    product_id = Identifier(required=True)
    is_active = Boolean(required=True)
