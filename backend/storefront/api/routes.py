"""API routes for health, catalog and users."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from storefront.api.dependencies import get_current_user
from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.models.product import ProductInDB
from storefront.models.request import HealthResponse, ProductListResponse
from storefront.models.user import UserCreate, UserInDB, UserResponse
from storefront.services.user_service import user_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix=settings.api_prefix)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    mongodb_status = "disconnected"
    if mongodb.client is not None:
        try:
            await mongodb.client.admin.command("ping")
            mongodb_status = "connected"
        except Exception as e:
            logger.error("Health check ping failed: %s", e)

    return HealthResponse(
        status="healthy" if mongodb_status == "connected" else "degraded",
        version=settings.app_version,
        services={"mongodb": mongodb_status},
        environment=settings.environment,
    )


@router.get("/products", response_model=ProductListResponse, tags=["catalog"])
async def list_products(
    category: Optional[str] = Query(None, description="Category slug"),
    limit: int = Query(12, ge=1, le=100),
    skip: int = Query(0, ge=0),
) -> ProductListResponse:
    """List active products."""
    products = await mongodb.list_products(category=category, skip=skip, limit=limit)
    return ProductListResponse(products=products, count=len(products))


@router.get("/products/{slug}", response_model=ProductInDB, tags=["catalog"])
async def get_product(slug: str) -> ProductInDB:
    """Get an active product by slug."""
    product = await mongodb.get_product_by_slug(slug)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product not found: {slug}",
        )
    return product


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user: UserCreate) -> UserResponse:
    """Register a customer account."""
    try:
        created_user = await user_service.create_user(user)
        return UserResponse(**created_user.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error("Error creating user: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
        )


@router.get("/users/me", response_model=UserResponse)
async def get_me(user: UserInDB = Depends(get_current_user)) -> UserResponse:
    """Return the caller's account."""
    return UserResponse(**user.model_dump())
