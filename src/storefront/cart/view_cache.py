"""Priced cart view — the cached read model in front of cart pricing.

The view lives in a Protean cache (``caches.default``): the in-memory adapter
by default, Redis where the ``production`` config overlay points it there.
Each entry holds one user's priced cart as camelCase JSON and expires after
``STOREFRONT_CART_CACHE_TTL`` seconds.

Setting ``STOREFRONT_CART_CACHE=off`` swaps in ``NullCartViewCache``, which
never stores anything, so every read recomputes.
"""

from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.inflection import underscore

from storefront import config
from storefront.domain import storefront


@storefront.projection(cache="default", externally_populated=True)
class PricedCartView:
    user_id = Identifier(identifier=True, required=True)
    payload = Text(required=True)  # JSON: PricedCart, camelCase


class CartViewCache:
    def _cache(self):
        return current_domain.cache_for(PricedCartView)

    @staticmethod
    def key(user_id) -> str:
        return f"{underscore(PricedCartView.__name__)}:::{user_id}"

    def get(self, user_id) -> str | None:
        view = self._cache().get(self.key(user_id))
        return view.payload if view else None

    def put(self, user_id, payload: str):
        self._cache().add(
            PricedCartView(user_id=str(user_id), payload=payload),
            ttl=config.CART_CACHE_TTL_SECONDS,
        )

    def invalidate(self, user_id):
        try:
            self._cache().remove_by_key(self.key(user_id))
        except KeyError:
            # The memory adapter raises for keys it never held
            pass


class NullCartViewCache(CartViewCache):
    """Stores nothing; every read misses."""

    def get(self, user_id) -> str | None:
        return None

    def put(self, user_id, payload: str):
        pass

    def invalidate(self, user_id):
        pass


def cart_view_cache() -> CartViewCache:
    if config.CART_CACHE_ENABLED:
        return CartViewCache()
    return NullCartViewCache()
