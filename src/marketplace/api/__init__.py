"""Marketplace domain API package."""

from marketplace.api.routes import cart_router, order_router, product_router, trade_router

__all__ = ["product_router", "cart_router", "order_router", "trade_router"]
