"""Repository for the ShoppingCart aggregate."""

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_by_user(self, user_id) -> ShoppingCart | None:
        """Load a user's cart with its lines, or None if the user has no cart yet."""
        results = self._dao.query.filter(user_id=str(user_id)).all().items
        if not results:
            return None
        return self.get(results[0].id)
