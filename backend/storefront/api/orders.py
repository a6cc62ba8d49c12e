"""Customer order routes."""

import logging
from typing import Any, Sequence

from fastapi import APIRouter, Depends, HTTPException, status

from storefront.api.dependencies import get_current_user
from storefront.config import get_settings
from storefront.exceptions import StorefrontError
from storefront.models.order import OrderCreatedResponse, OrderCreateRequest, OrderListResponse
from storefront.models.user import UserInDB
from storefront.services.order_service import order_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix=settings.api_prefix, tags=["orders"])

ORDERS_PATH = f"{settings.api_prefix}/orders"


def describe_order_errors(errors: Sequence[dict[str, Any]]) -> str:
    """Turn request validation errors for a checkout body into one message."""
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())][1:]
        if loc[:1] == ["items"] and len(loc) == 1:
            return "Order must have at least one item"
        if loc[:1] == ["shippingAddress"]:
            return "Shipping address is required"
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "body"
    return f"Invalid {field}: {first.get('msg', 'invalid value')}"


@router.post("/orders", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderCreateRequest,
    user: UserInDB = Depends(get_current_user),
) -> OrderCreatedResponse:
    """Place an order for the caller's cart.

    Stock is checked and decremented, an order number is allocated and the
    order is stored in one transaction; on any failure nothing is written.
    """
    try:
        summary = await order_service.place_order(user, request)
        return OrderCreatedResponse(order=summary)
    except (StorefrontError, HTTPException):
        raise
    except Exception as e:
        logger.error("Create order error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create order",
        )


@router.get("/user/orders", response_model=OrderListResponse)
async def get_my_orders(user: UserInDB = Depends(get_current_user)) -> OrderListResponse:
    """Order history for the caller, newest first."""
    try:
        orders = await order_service.get_user_orders(user.userId)
        return OrderListResponse(orders=orders)
    except Exception as e:
        logger.error("Fetch user orders error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch orders",
        )
