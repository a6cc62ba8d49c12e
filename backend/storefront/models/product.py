"""Product data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProductSize(BaseModel):
    """A named size variant with its own price and stock."""

    name: str = Field(..., min_length=1, max_length=50)
    price: float = Field(..., ge=0)
    discountedPrice: Optional[float] = Field(None, ge=0)
    stock: int = Field(0, ge=0)


class ProductBase(BaseModel):
    """Base product model mirroring the catalog document."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1)
    description: str = Field("", max_length=2000)
    shortDescription: Optional[str] = Field(None, max_length=200)
    price: float = Field(..., ge=0, description="List price")
    discountedPrice: Optional[float] = Field(None, ge=0, description="Sale price, if any")
    category: str = Field(..., min_length=1, description="Category slug")
    subcategory: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    stock: int = Field(0, ge=0, description="Units available when the product has no sizes")
    sizes: list[ProductSize] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    isTopProduct: bool = False
    isActive: bool = True
    sold: int = Field(0, ge=0)


class ProductCreate(ProductBase):
    """Admin product creation; the slug is derived from the name when omitted."""

    slug: Optional[str] = Field(None, min_length=1)
    sold: int = Field(0, ge=0, exclude=True)


class ProductInDB(ProductBase):
    """Product as stored in database."""

    id: str = Field(..., description="Record identifier")
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "665f1c2ab1e8a9d4c0a1b2c3",
                "name": "Custom Name Keychain",
                "slug": "custom-name-keychain",
                "description": "3D printed keychain with your name.",
                "price": 250.0,
                "discountedPrice": 200.0,
                "category": "key-chains",
                "images": ["/api/images/665f1c2ab1e8a9d4c0a1b2c3/0"],
                "stock": 40,
                "sizes": [],
                "isActive": True,
                "sold": 12,
            }
        }
    }

    def find_size(self, size: Optional[str]) -> Optional[ProductSize]:
        """Return the size variant whose name matches exactly."""
        if not size:
            return None
        for variant in self.sizes:
            if variant.name == size:
                return variant
        return None

    def unit_price(self, size: Optional[str] = None) -> float:
        """Effective selling price, preferring a discount over the list price."""
        variant = self.find_size(size)
        if variant is not None:
            return variant.discountedPrice if variant.discountedPrice else variant.price
        return self.discountedPrice if self.discountedPrice else self.price

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""
