"""Product aggregate — the catalogue record that owns the authoritative stock count."""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.domain import storefront
from storefront.product.events import (
    ProductAvailabilityChanged,
    ProductRegistered,
    StockAdjusted,
)


@storefront.aggregate
class Product:
    name = String(required=True, max_length=200)
    sku = String(required=True, max_length=50, unique=True)
    price = Float(required=True, min_value=0.0)
    discount_price = Float(min_value=0.0)
    stock = Integer(default=0, min_value=0)
    images = Text()  # JSON array of image URLs
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def discount_price_must_be_below_price(self):
        if self.discount_price and self.discount_price >= self.price:
            raise ValidationError({"discount_price": ["Discount price must be less than the regular price"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(cls, name, sku, price, discount_price=None, stock=0, images=None, is_active=True):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            sku=sku,
            price=price,
            discount_price=discount_price,
            stock=stock,
            images=json.dumps(images or []),
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductRegistered(
                product_id=str(product.id),
                sku=product.sku,
                name=product.name,
                price=product.price,
                stock=product.stock,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Pricing helpers
    # -------------------------------------------------------------------
    @property
    def unit_price(self) -> float:
        """Price a customer pays per unit before offers: the discount price when set."""
        return self.discount_price or self.price

    @property
    def image_list(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def adjust_stock(self, delta):
        """Apply a signed stock delta. Stock never drops below zero."""
        previous = self.stock or 0
        new_stock = previous + delta
        if new_stock < 0:
            raise ValidationError(
                {"stock": [f"Insufficient stock for this operation on product {self.name}. Available: {previous}"]}
            )

        self.stock = new_stock
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockAdjusted(
                product_id=str(self.id),
                delta=delta,
                previous_stock=previous,
                new_stock=new_stock,
            )
        )

    def has_stock_for(self, quantity) -> bool:
        return (self.stock or 0) >= quantity

    # -------------------------------------------------------------------
    # Availability
    # -------------------------------------------------------------------
    def activate(self):
        self._change_availability(True)

    def deactivate(self):
        self._change_availability(False)

    def _change_availability(self, is_active):
        if self.is_active == is_active:
            return
        self.is_active = is_active
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductAvailabilityChanged(product_id=str(self.id), is_active=is_active))
