"""Storefront order and catalog backend."""

__version__ = "1.0.0"
