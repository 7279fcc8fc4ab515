"""CartStore — the application service behind the cart endpoints.

Each operation runs its command in its own unit of work and then drops the
user's priced-cart cache entry, so the next read reflects the change.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.pricing import CartPricingService

logger = structlog.get_logger(__name__)


class CartStore:
    def __init__(self, pricing: CartPricingService | None = None):
        self.pricing = pricing or CartPricingService()

    def add(self, user_id, product_id, quantity=1) -> str:
        item_id = current_domain.process(
            AddToCart(user_id=user_id, product_id=product_id, quantity=quantity),
            asynchronous=False,
        )
        self.pricing.invalidate(user_id)
        logger.info("Item added to cart", user_id=str(user_id), product_id=str(product_id), quantity=quantity)
        return item_id

    def update_quantity(self, user_id, item_id, quantity):
        current_domain.process(
            UpdateCartQuantity(user_id=user_id, item_id=item_id, quantity=quantity),
            asynchronous=False,
        )
        self.pricing.invalidate(user_id)

    def remove(self, user_id, item_id):
        current_domain.process(RemoveFromCart(user_id=user_id, item_id=item_id), asynchronous=False)
        self.pricing.invalidate(user_id)

    def clear(self, user_id):
        current_domain.process(ClearCart(user_id=user_id), asynchronous=False)
        self.pricing.invalidate(user_id)

    def count(self, user_id) -> int:
        """Number of lines (not units) in the user's cart."""
        cart = current_domain.repository_for(ShoppingCart).find_by_user(user_id)
        return len(cart.items) if cart else 0
