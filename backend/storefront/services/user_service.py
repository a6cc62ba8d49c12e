"""User service for business logic."""

import logging
from typing import Optional

from storefront.database.mongodb import mongodb
from storefront.exceptions import UserNotFound
from storefront.models.user import UserCreate, UserInDB, UserRole, UserSummary

logger = logging.getLogger(__name__)


class UserService:
    """User service for handling user-related operations."""

    @staticmethod
    async def create_user(user: UserCreate, role: UserRole = UserRole.USER) -> UserInDB:
        """Create a new user."""
        try:
            return await mongodb.create_user(user, role=role.value)
        except ValueError as e:
            logger.error("Error creating user: %s", e)
            raise
        except Exception as e:
            logger.error("Unexpected error creating user: %s", e)
            raise

    @staticmethod
    async def get_user(user_id: str) -> Optional[UserInDB]:
        """Get user by ID."""
        return await mongodb.get_user(user_id)

    @staticmethod
    async def list_users() -> list[UserSummary]:
        """Accounts with their order counts, newest first."""
        users = await mongodb.list_users()
        return [
            UserSummary(**user.model_dump(), orderCount=await mongodb.count_user_orders(user.userId))
            for user in users
        ]

    @staticmethod
    async def update_user(user_id: str, **fields) -> UserSummary:
        """Change role or blocked flag of an account.

        Raises:
            UserNotFound: no account with that id
        """
        user = await mongodb.update_user(user_id, fields)
        if user is None:
            raise UserNotFound()
        logger.info(
            "User %s updated: %s", user_id, ", ".join(f"{k}={v}" for k, v in fields.items())
        )
        return UserSummary(
            **user.model_dump(), orderCount=await mongodb.count_user_orders(user_id)
        )


# Global user service instance
user_service = UserService()
