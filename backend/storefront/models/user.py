"""User data models."""

from datetime import UTC, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class UserBase(BaseModel):
    """Base user model."""

    userId: str = Field(..., min_length=1, description="Unique user identifier")
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, pattern=r"^\+?\d{9,15}$")


class UserCreate(UserBase):
    """User registration model; the role is never taken from the caller."""

    pass


class UserInDB(UserBase):
    """User model as stored in database."""

    role: UserRole = UserRole.USER
    isBlocked: bool = False
    createdAt: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updatedAt: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {
        "json_schema_extra": {
            "example": {
                "userId": "user_001",
                "name": "Rahim Uddin",
                "email": "rahim@example.com",
                "phone": "+8801712345678",
                "role": "user",
                "isBlocked": False,
                "createdAt": "2024-01-01T00:00:00",
                "updatedAt": "2024-01-01T00:00:00",
            }
        }
    }

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserResponse(UserBase):
    """User response model."""

    role: UserRole
    createdAt: datetime
    updatedAt: datetime


class UserSummary(UserResponse):
    """Admin view of an account."""

    isBlocked: bool = False
    orderCount: int = 0


class UserRoleUpdate(BaseModel):
    role: UserRole


class UserBlockUpdate(BaseModel):
    isBlocked: bool
