"""Request-scoped identity resolution."""

import logging
from typing import Optional

from fastapi import Depends, Header

from storefront.exceptions import Forbidden, Unauthorized
from storefront.models.user import UserInDB
from storefront.services.user_service import user_service

logger = logging.getLogger(__name__)


async def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> UserInDB:
    """Resolve the caller from the ``X-User-ID`` header.

    Raises:
        Unauthorized: header missing, user unknown or blocked
    """
    if not x_user_id:
        raise Unauthorized()

    user = await user_service.get_user(x_user_id)
    if user is None:
        logger.info("Rejected unknown user id %s", x_user_id)
        raise Unauthorized()
    if user.isBlocked:
        raise Unauthorized("Account blocked")
    return user


async def require_admin(user: UserInDB = Depends(get_current_user)) -> UserInDB:
    """Like ``get_current_user`` but only for admins."""
    if not user.is_admin:
        raise Forbidden()
    return user
