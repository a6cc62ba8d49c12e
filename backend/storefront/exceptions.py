"""Domain exceptions surfaced to API callers."""

from typing import Optional


class StorefrontError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code: int = 500
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class Unauthorized(StorefrontError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(StorefrontError):
    status_code = 403
    default_message = "Forbidden - Admin access required"


class OrderValidationError(StorefrontError):
    status_code = 400
    default_message = "Invalid order"


class ProductNotFound(StorefrontError):
    status_code = 400

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class InsufficientStock(StorefrontError):
    status_code = 400

    def __init__(self, product_name: str, size: Optional[str] = None) -> None:
        label = f"{product_name} ({size})" if size else product_name
        super().__init__(f"Insufficient stock for {label}")
        self.product_name = product_name
        self.size = size


class TotalsMismatch(OrderValidationError):
    def __init__(self, field: str, submitted: float, expected: float) -> None:
        super().__init__(
            f"Order {field} does not match: submitted {submitted:.2f}, expected {expected:.2f}"
        )
        self.field = field
        self.submitted = submitted
        self.expected = expected


class OrderNotFound(StorefrontError):
    status_code = 404
    default_message = "Order not found"


class InvalidStatusTransition(StorefrontError):
    status_code = 400

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot change order status from {current} to {requested}")
        self.current = current
        self.requested = requested


class OrderNumberExhausted(StorefrontError):
    status_code = 500
    default_message = "Failed to create order after multiple attempts"


class OrderTransactionTimeout(StorefrontError):
    status_code = 500
    default_message = "Order processing timed out, please try again"


class InvalidProductId(StorefrontError):
    status_code = 400
    default_message = "Invalid product ID"


class CatalogProductNotFound(StorefrontError):
    """Admin lookup of a product that does not exist."""

    status_code = 404
    default_message = "Product not found"


class UserNotFound(StorefrontError):
    status_code = 404
    default_message = "User not found"
