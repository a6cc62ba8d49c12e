"""Database package."""

from storefront.database.mongodb import MongoDB, mongodb

__all__ = [
    "MongoDB",
    "mongodb",
]
