"""API package."""

from storefront.api.admin import router as admin_router
from storefront.api.middleware import LoggingMiddleware, RateLimitMiddleware
from storefront.api.orders import router as orders_router
from storefront.api.routes import router

__all__ = [
    "router",
    "orders_router",
    "admin_router",
    "LoggingMiddleware",
    "RateLimitMiddleware",
]
