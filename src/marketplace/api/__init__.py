"""Marketplace API package."""

from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import cart_router, favourites_router, order_router, restaurant_router

__all__ = [
    "cart_router",
    "order_router",
    "favourites_router",
    "restaurant_router",
    "register_error_handlers",
]
