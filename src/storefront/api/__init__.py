"""Storefront domain API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import admin_router, cart_router, order_router

__all__ = ["order_router", "admin_router", "cart_router", "register_error_handlers"]
