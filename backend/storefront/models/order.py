"""Order data models."""

from datetime import UTC, datetime
from enum import Enum
from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator

from storefront.config import get_settings

settings = get_settings()


class OrderStatus(str, Enum):
    """Fulfillment status, in progression order."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    COD = "cod"
    BKASH = "bkash"
    NAGAD = "nagad"
    CARD = "card"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class ShippingAddress(BaseModel):
    """Shipping address embedded in the order."""

    name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=30)
    street: str = Field(..., min_length=1, max_length=300)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postalCode: Optional[str] = Field(None, max_length=20)
    country: str = Field("Bangladesh", max_length=100)

    @field_validator("name", "phone", "street", "city", mode="before")
    @classmethod
    def strip_required(cls, v):
        """Blank strings count as missing."""
        return v.strip() if isinstance(v, str) else v


class Customization(BaseModel):
    """Per-item personalization chosen at checkout."""

    size: Optional[str] = None
    color: Optional[str] = None
    font: Optional[str] = None
    backgroundColor: Optional[str] = None
    borderColor: Optional[str] = None
    customization: Optional[str] = Field(None, description="Free-text personalization")


class OrderItemRequest(Customization):
    """A cart line submitted at checkout."""

    product: str = Field(..., description="Product record id")
    quantity: int = Field(..., ge=1, le=1000)

    @field_validator("product")
    @classmethod
    def validate_product_id(cls, v: str) -> str:
        if not ObjectId.is_valid(v):
            raise ValueError(f"Invalid product id: {v}")
        # Canonical lowercase hex, the form stored ids are compared in
        return str(ObjectId(v))

    @field_validator("customization")
    @classmethod
    def limit_customization(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > settings.customization_max_length:
            raise ValueError(
                f"Customization cannot exceed {settings.customization_max_length} characters"
            )
        return v


class OrderCreateRequest(BaseModel):
    """Checkout request body."""

    items: list[OrderItemRequest] = Field(..., min_length=1)
    shippingAddress: ShippingAddress
    paymentMethod: PaymentMethod = PaymentMethod.COD
    paymentStatus: PaymentStatus = PaymentStatus.PENDING
    itemsTotal: float = Field(..., ge=0)
    shippingCost: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)
    paymentProcessingFee: float = Field(0, ge=0)
    total: float = Field(..., ge=0)
    notes: Optional[str] = Field(None, max_length=1000)
    transactionId: Optional[str] = Field(None, max_length=100)

    model_config = {
        "json_schema_extra": {
            "example": {
                "items": [{"product": "665f1c2ab1e8a9d4c0a1b2c3", "quantity": 2}],
                "shippingAddress": {
                    "name": "Rahim Uddin",
                    "phone": "01712345678",
                    "street": "House 12, Road 5",
                    "city": "Dhaka",
                },
                "paymentMethod": "cod",
                "itemsTotal": 400.0,
                "shippingCost": 60.0,
                "discount": 0,
                "paymentProcessingFee": 0,
                "total": 460.0,
            }
        }
    }


class LineItem(Customization):
    """Line item snapshot stored with the order."""

    product: str = Field(..., description="Product id at time of purchase")
    name: str = Field(..., description="Product name")
    image: str = Field("", description="Product image URL")
    price: float = Field(..., ge=0, description="Unit price at checkout")
    quantity: int = Field(..., ge=1)


class OrderInDB(BaseModel):
    """Order model as stored in database."""

    id: str
    orderNumber: str
    userId: str
    items: list[LineItem]
    shippingAddress: ShippingAddress
    paymentMethod: PaymentMethod
    paymentStatus: PaymentStatus = PaymentStatus.PENDING
    itemsTotal: float
    shippingCost: float = 0
    discount: float = 0
    paymentProcessingFee: float = 0
    total: float
    status: OrderStatus = OrderStatus.PENDING
    notes: Optional[str] = None
    transactionId: Optional[str] = None
    trackingNumber: Optional[str] = None
    deliveredAt: Optional[datetime] = None
    createdAt: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updatedAt: datetime = Field(default_factory=lambda: datetime.now(UTC))


class OrderSummary(BaseModel):
    """Fields returned to the customer after checkout."""

    id: str
    orderNumber: str
    status: OrderStatus
    total: float
    createdAt: datetime


class OrderCreatedResponse(BaseModel):
    message: str = "Order created successfully"
    order: OrderSummary


class OrderUpdateRequest(BaseModel):
    """Admin changes to an existing order."""

    status: Optional[OrderStatus] = None
    paymentStatus: Optional[PaymentStatus] = None
    trackingNumber: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=1000)


class OrderUpdatedResponse(BaseModel):
    message: str = "Order updated successfully"
    order: OrderInDB


class OrderListResponse(BaseModel):
    orders: list[OrderInDB]
