"""Cart pricing — joins cart lines with live products and offers.

The priced cart is recomputed on every cache miss and cached per user as a
``PricedCartView``. Every cart mutation invalidates that entry. Checkout never
reads the cached view; it prices the cart afresh.
"""

import pydantic
import structlog
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.priced_cart import (
    AppliedOffer,
    CartSummary,
    PricedCart,
    PricedCartLine,
    ProductSnapshot,
)
from storefront.cart.view_cache import CartViewCache, cart_view_cache
from storefront.offer.engine import best_offer
from storefront.offer.offer import Offer
from storefront.product.ledger import StockLedger
from storefront.shared.dates import EPOCH, as_utc

logger = structlog.get_logger(__name__)


def price_line(item, product, offers) -> PricedCartLine:
    """Price one cart line: product discount first, then the best offer on top."""
    quantity = item.quantity
    unit_price = product.unit_price
    product_discount = (product.price - unit_price) * quantity if product.discount_price else 0.0

    line_discount = best_offer(product.id, quantity, unit_price, offers)
    offer = line_discount.offer

    return PricedCartLine(
        id=str(item.id),
        product=ProductSnapshot(
            id=str(product.id),
            name=product.name,
            sku=product.sku,
            price=product.price,
            discount_price=product.discount_price,
            stock=product.stock,
            images=product.image_list,
            is_active=product.is_active,
        ),
        quantity=quantity,
        unit_price=round(unit_price, 2),
        subtotal=round(unit_price * quantity, 2),
        product_discount=round(product_discount, 2),
        offer_discount=line_discount.amount,
        applied_offer=(
            AppliedOffer(
                id=str(offer.id),
                name=offer.name,
                description=offer.description,
                offer_type=offer.offer_type,
            )
            if offer
            else None
        ),
        line_total=round(unit_price * quantity - line_discount.amount, 2),
        added_at=item.added_at,
    )


def summarize(lines: list[PricedCartLine]) -> CartSummary:
    subtotal = sum(line.product.price * line.quantity for line in lines)
    product_discount = sum(line.product_discount for line in lines)
    offer_discount = sum(line.offer_discount for line in lines)
    total_discount = product_discount + offer_discount
    return CartSummary(
        subtotal=round(subtotal, 2),
        total_product_discount=round(product_discount, 2),
        total_offer_discount=round(offer_discount, 2),
        total_discount=round(total_discount, 2),
        total=round(subtotal - total_discount, 2),
        total_items=sum(line.quantity for line in lines),
        item_count=len(lines),
    )


class CartPricingService:
    """Builds the priced view of a user's cart, with a cache in front of it."""

    def __init__(self, ledger: StockLedger | None = None, cache: CartViewCache | None = None):
        self.ledger = ledger or StockLedger()
        self._cache = cache

    @property
    def cache(self) -> CartViewCache:
        return self._cache or cart_view_cache()

    def get_priced_cart(self, user_id) -> PricedCart:
        cached = self.cache.get(user_id)
        if cached is not None:
            try:
                return PricedCart.model_validate_json(cached)
            except pydantic.ValidationError:
                logger.warning("Discarding unreadable cached cart", user_id=str(user_id))
                self.cache.invalidate(user_id)

        priced = self.compute(user_id)
        self.cache.put(user_id, priced.model_dump_json(by_alias=True))
        return priced

    def compute(self, user_id) -> PricedCart:
        """Price the cart from the repositories, bypassing the cache."""
        cart = current_domain.repository_for(ShoppingCart).find_by_user(user_id)
        if cart is None or not cart.items:
            return PricedCart(user_id=str(user_id))

        products = self.ledger.find_many([item.product_id for item in cart.items])
        offers = current_domain.repository_for(Offer).applicable()

        # Newest lines first
        items = sorted(cart.items, key=lambda i: as_utc(i.added_at) or EPOCH, reverse=True)

        lines = []
        for item in items:
            product = products.get(str(item.product_id))
            if product is None:
                logger.warning(
                    "Skipping cart line for missing product",
                    user_id=str(user_id),
                    item_id=str(item.id),
                    product_id=str(item.product_id),
                )
                continue
            lines.append(price_line(item, product, offers))

        return PricedCart(user_id=str(user_id), items=lines, summary=summarize(lines))

    def invalidate(self, user_id):
        self.cache.invalidate(user_id)
