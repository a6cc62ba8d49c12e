"""Database initialization script.

Creates indexes and a few sample accounts, including one admin.
Transactions require MongoDB to run as a replica set (a single-node set is
enough for development).
"""

import asyncio
import logging

from storefront.database.mongodb import mongodb
from storefront.models.user import UserCreate, UserRole
from storefront.services.user_service import user_service
from storefront.utils.logger import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


SAMPLE_USERS = [
    (
        UserCreate(
            userId="admin_001",
            name="Store Admin",
            email="admin@projectkaaru.com",
            phone="+8801712345678",
        ),
        UserRole.ADMIN,
    ),
    (
        UserCreate(
            userId="user_001",
            name="Rahim Uddin",
            email="rahim@example.com",
            phone="+8801812345678",
        ),
        UserRole.USER,
    ),
    (
        UserCreate(
            userId="user_002",
            name="Nusrat Jahan",
            email="nusrat@example.com",
            phone="+8801912345678",
        ),
        UserRole.USER,
    ),
]


async def init_databases():
    """Initialize indexes and create sample users."""
    try:
        logger.info("Initializing database...")

        # connect() also creates indexes
        await mongodb.connect()

        for user, role in SAMPLE_USERS:
            try:
                await user_service.create_user(user, role=role)
                logger.info("Created %s: %s", role.value, user.userId)
            except ValueError as e:
                logger.warning("User %s already exists: %s", user.userId, e)

        logger.info("Database initialization completed successfully")

    except Exception as e:
        logger.error("Error initializing database: %s", e)
        raise

    finally:
        await mongodb.disconnect()


if __name__ == "__main__":
    asyncio.run(init_databases())
