"""Utility helper functions."""

import re
import uuid
from datetime import UTC, datetime
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId


def generate_request_id() -> str:
    """Generate a short request identifier."""
    return uuid.uuid4().hex[:12]


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def epoch_millis(moment: Optional[datetime] = None) -> int:
    """Milliseconds since the Unix epoch."""
    moment = moment or utcnow()
    return int(moment.timestamp() * 1000)


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a record id, returning None for malformed input."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated slug."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def document_to_dict(doc: dict[str, Any]) -> dict[str, Any]:
    """Replace Mongo's ``_id`` with a string ``id``."""
    data = dict(doc)
    if "_id" in data:
        data["id"] = str(data.pop("_id"))
    return data
