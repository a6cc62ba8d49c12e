"""Application configuration management using Pydantic Settings."""
import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Get the directory where config.py is located
BASE_DIR = Path(__file__).resolve().parent

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "ProjectKaaru Storefront"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern="^(development|staging|production)$")

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api"
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    # MongoDB
    mongodb_url: str = Field(default="mongodb://localhost:27017/?replicaSet=rs0")
    mongodb_database: str = "storefront"
    mongodb_user_collection: str = "users"
    mongodb_product_collection: str = "products"
    mongodb_order_collection: str = "orders"
    mongodb_max_pool_size: int = 10
    mongodb_min_pool_size: int = 1

    # Orders
    order_number_prefix: str = "PK"
    order_number_max_attempts: int = Field(default=10, ge=1)
    order_transaction_timeout_s: float = Field(default=15.0, gt=0)
    order_transaction_max_attempts: int = Field(default=3, ge=1)
    verify_order_totals: bool = Field(
        default=True, description="Recompute items total and fee server-side"
    )
    order_total_tolerance: float = Field(default=0.01, ge=0)
    payment_fee_rate: float = Field(default=0.018, ge=0, le=1)
    payment_fee_methods: Annotated[list[str], NoDecode] = ["bkash", "nagad"]
    customization_max_length: int = 200

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 60
    rate_limit_period: int = 60  # seconds

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = Field(default="json", pattern="^(json|text)$")

    model_config = SettingsConfigDict(
        env_file=BASE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_origins", "payment_fee_methods", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Parse a comma-separated string, a JSON array or a list."""
        if isinstance(v, str) and v.strip().startswith("["):
            return json.loads(v)
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
