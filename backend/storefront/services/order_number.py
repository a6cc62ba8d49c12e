"""Human-readable order number allocation."""

import logging
import random
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClientSession

from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.exceptions import OrderNumberExhausted
from storefront.utils.helpers import epoch_millis

logger = logging.getLogger(__name__)
settings = get_settings()


def generate_order_number(timestamp_ms: Optional[int] = None, suffix: Optional[int] = None) -> str:
    """Build ``<prefix><epoch millis><3-digit random suffix>``, e.g. ``PK1718000000000042``."""
    if timestamp_ms is None:
        timestamp_ms = epoch_millis()
    if suffix is None:
        suffix = random.randrange(1000)
    return f"{settings.order_number_prefix}{timestamp_ms}{suffix:03d}"


async def allocate_order_number(session: Optional[AsyncIOMotorClientSession] = None) -> str:
    """Generate order numbers until one is unused.

    Raises:
        OrderNumberExhausted: every attempt collided with an existing order
    """
    for attempt in range(1, settings.order_number_max_attempts + 1):
        candidate = generate_order_number()
        if not await mongodb.order_number_exists(candidate, session=session):
            return candidate
        logger.warning("Order number collision on %s (attempt %d)", candidate, attempt)

    raise OrderNumberExhausted()
