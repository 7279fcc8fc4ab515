"""Storefront domain API package."""

from storefront.api.routes import cart_router, offer_router, order_router, product_router

__all__ = ["cart_router", "order_router", "offer_router", "product_router"]
