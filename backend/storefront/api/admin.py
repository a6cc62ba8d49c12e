"""Admin routes for orders, products and users."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from storefront.api.dependencies import require_admin
from storefront.config import get_settings
from storefront.exceptions import StorefrontError
from storefront.models.order import (
    OrderInDB,
    OrderListResponse,
    OrderStatus,
    OrderUpdatedResponse,
    OrderUpdateRequest,
)
from storefront.models.product import ProductCreate, ProductInDB
from storefront.models.request import (
    MessageResponse,
    ProductCreatedResponse,
    ProductListResponse,
    UserListResponse,
    UserUpdatedResponse,
)
from storefront.models.user import UserBlockUpdate, UserRoleUpdate
from storefront.services.order_service import order_service
from storefront.services.product_service import product_service
from storefront.services.user_service import user_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix=f"{settings.api_prefix}/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
    limit: int = Query(0, ge=0, le=500, description="0 returns every order"),
    skip: int = Query(0, ge=0),
) -> OrderListResponse:
    """List orders, newest first."""
    try:
        orders = await order_service.list_orders(order_status, skip=skip, limit=limit)
        return OrderListResponse(orders=orders)
    except Exception as e:
        logger.error("Fetch orders error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch orders",
        )


@router.get("/orders/{order_id}", response_model=OrderInDB)
async def get_order(order_id: str) -> OrderInDB:
    """Get a single order."""
    return await order_service.get_order(order_id)


@router.put("/orders/{order_id}", response_model=OrderUpdatedResponse)
async def update_order(order_id: str, update: OrderUpdateRequest) -> OrderUpdatedResponse:
    """Update status, payment status, tracking number or notes."""
    try:
        order = await order_service.update_order(order_id, update)
        return OrderUpdatedResponse(order=order)
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error("Update order error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update order",
        )


# ---------- Products ----------


@router.post("/products", response_model=ProductCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_product(product: ProductCreate) -> ProductCreatedResponse:
    """Add a product to the catalog."""
    try:
        created = await product_service.create_product(product)
        return ProductCreatedResponse(product=created)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/products", response_model=ProductListResponse)
async def list_products() -> ProductListResponse:
    """Every product, including inactive ones."""
    products = await product_service.list_products()
    return ProductListResponse(products=products, count=len(products))


@router.get("/products/{product_id}", response_model=ProductInDB)
async def get_product(product_id: str) -> ProductInDB:
    return await product_service.get_product(product_id)


@router.delete("/products/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: str) -> MessageResponse:
    """Delete a product. Orders that contain it keep their line items."""
    await product_service.delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")


# ---------- Users ----------


@router.get("/users", response_model=UserListResponse)
async def list_users() -> UserListResponse:
    """Every account with its order count."""
    return UserListResponse(users=await user_service.list_users())


@router.put("/users/{user_id}/role", response_model=UserUpdatedResponse)
async def update_user_role(user_id: str, update: UserRoleUpdate) -> UserUpdatedResponse:
    user = await user_service.update_user(user_id, role=update.role.value)
    return UserUpdatedResponse(message="User role updated successfully", user=user)


@router.put("/users/{user_id}/block", response_model=UserUpdatedResponse)
async def update_user_block(user_id: str, update: UserBlockUpdate) -> UserUpdatedResponse:
    """Block or unblock an account; blocked accounts cannot authenticate."""
    user = await user_service.update_user(user_id, isBlocked=update.isBlocked)
    message = "User blocked" if update.isBlocked else "User unblocked"
    return UserUpdatedResponse(message=message, user=user)
