"""Data models package."""

from storefront.models.order import (
    LineItem,
    OrderCreatedResponse,
    OrderCreateRequest,
    OrderInDB,
    OrderItemRequest,
    OrderListResponse,
    OrderStatus,
    OrderSummary,
    OrderUpdatedResponse,
    OrderUpdateRequest,
    PaymentMethod,
    PaymentStatus,
    ShippingAddress,
)
from storefront.models.product import ProductBase, ProductCreate, ProductInDB, ProductSize
from storefront.models.request import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    ProductCreatedResponse,
    ProductListResponse,
    UserListResponse,
    UserUpdatedResponse,
)
from storefront.models.user import (
    UserBlockUpdate,
    UserCreate,
    UserInDB,
    UserResponse,
    UserRole,
    UserRoleUpdate,
    UserSummary,
)

__all__ = [
    # User models
    "UserCreate",
    "UserInDB",
    "UserResponse",
    "UserRole",
    "UserRoleUpdate",
    "UserBlockUpdate",
    "UserSummary",
    # Product models
    "ProductBase",
    "ProductCreate",
    "ProductInDB",
    "ProductSize",
    # Order models
    "LineItem",
    "OrderCreateRequest",
    "OrderCreatedResponse",
    "OrderInDB",
    "OrderItemRequest",
    "OrderListResponse",
    "OrderStatus",
    "OrderSummary",
    "OrderUpdateRequest",
    "OrderUpdatedResponse",
    "PaymentMethod",
    "PaymentStatus",
    "ShippingAddress",
    # Request/Response models
    "ProductListResponse",
    "HealthResponse",
    "ErrorResponse",
    "MessageResponse",
    "ProductCreatedResponse",
    "UserListResponse",
    "UserUpdatedResponse",
]
