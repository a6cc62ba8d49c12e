"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.admin import router as admin_router
from storefront.api.middleware import LoggingMiddleware, RateLimitMiddleware
from storefront.api.orders import ORDERS_PATH, describe_order_errors
from storefront.api.orders import router as orders_router
from storefront.api.routes import router
from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.exceptions import OrderValidationError, StorefrontError
from storefront.utils.logger import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting application...")
    try:
        await mongodb.connect()
        logger.info("Database connection established")

        yield

    finally:
        logger.info("Shutting down application...")
        await mongodb.disconnect()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Storefront and back-office API for custom 3D printed products",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add custom middleware
app.add_middleware(LoggingMiddleware)
if settings.rate_limit_enabled:
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_period=settings.rate_limit_requests,
        period_s=settings.rate_limit_period,
    )

# Include routers
app.include_router(router)
app.include_router(orders_router)
app.include_router(admin_router)


# Exception handlers
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Render domain errors with their own status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Checkout gets a 400 with one readable message; other routes keep the 422."""
    if request.method == "POST" and request.url.path == ORDERS_PATH:
        error = OrderValidationError(describe_order_errors(exc.errors()))
        logger.info("Order request rejected: %s", error.message)
        return JSONResponse(status_code=error.status_code, content={"detail": error.message})
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
        },
    )


# Root endpoint
@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
