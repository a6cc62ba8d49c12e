"""API request and response models shared across routers."""

from typing import Optional

from pydantic import BaseModel

from storefront.models.product import ProductInDB
from storefront.models.user import UserSummary


class ProductListResponse(BaseModel):
    products: list[ProductInDB]
    count: int


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    services: dict[str, str]
    environment: Optional[str] = None


class ProductCreatedResponse(BaseModel):
    message: str = "Product created successfully"
    product: ProductInDB


class MessageResponse(BaseModel):
    message: str


class UserListResponse(BaseModel):
    users: list[UserSummary]


class UserUpdatedResponse(BaseModel):
    message: str
    user: UserSummary
