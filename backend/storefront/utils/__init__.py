"""Utilities package."""

from storefront.utils.helpers import (
    document_to_dict,
    epoch_millis,
    generate_request_id,
    slugify,
    to_object_id,
    utcnow,
)
from storefront.utils.logger import setup_logging

__all__ = [
    "setup_logging",
    "document_to_dict",
    "epoch_millis",
    "generate_request_id",
    "slugify",
    "to_object_id",
    "utcnow",
]
