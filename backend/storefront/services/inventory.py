"""Inventory ledger: stock validation and decrement for checkout."""

import logging
from dataclasses import dataclass
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClientSession

from storefront.database.mongodb import mongodb
from storefront.exceptions import InsufficientStock, ProductNotFound
from storefront.models.product import ProductInDB

logger = logging.getLogger(__name__)

StockKey = tuple[str, Optional[str]]


@dataclass(frozen=True)
class StockLine:
    """One requested (product, size, quantity) reservation."""

    product_id: str
    size: Optional[str]
    quantity: int


def _bucket_size(product: ProductInDB, size: Optional[str]) -> Optional[str]:
    """Name of the size record a line draws from, or None for product stock.

    Products without size variants ignore the requested size.
    """
    if size and product.sizes:
        return size
    return None


def available_stock(product: ProductInDB, size: Optional[str]) -> int:
    """Units available for a product/size pair."""
    bucket = _bucket_size(product, size)
    if bucket is None:
        return product.stock
    variant = product.find_size(bucket)
    return variant.stock if variant is not None else 0


class InventoryLedger:
    """Validates and reserves stock inside an order transaction."""

    @staticmethod
    def aggregate(
        lines: list[StockLine], products: dict[str, ProductInDB]
    ) -> dict[StockKey, int]:
        """Sum quantities per stock bucket, preserving cart order."""
        totals: dict[StockKey, int] = {}
        for line in lines:
            product = products.get(line.product_id)
            if product is None or not product.isActive:
                raise ProductNotFound(line.product_id)
            key = (line.product_id, _bucket_size(product, line.size))
            totals[key] = totals.get(key, 0) + line.quantity
        return totals

    def validate(
        self, lines: list[StockLine], products: dict[str, ProductInDB]
    ) -> dict[StockKey, int]:
        """Check every line against current stock before anything is written."""
        totals = self.aggregate(lines, products)
        for (product_id, size), quantity in totals.items():
            product = products[product_id]
            if available_stock(product, size) < quantity:
                logger.info(
                    "Stock check failed for %s (%s): requested %d, available %d",
                    product.name,
                    size or "-",
                    quantity,
                    available_stock(product, size),
                )
                raise InsufficientStock(product.name, size)
        return totals

    async def reserve(
        self,
        lines: list[StockLine],
        products: dict[str, ProductInDB],
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> None:
        """Validate all lines, then decrement stock and bump sold counters.

        Raises:
            ProductNotFound: a line references an unknown or inactive product
            InsufficientStock: any line asks for more than is available
        """
        totals = self.validate(lines, products)

        for (product_id, size), quantity in totals.items():
            decremented = await mongodb.decrement_stock(product_id, quantity, size, session=session)
            if not decremented:
                # Stock moved between our read and write
                raise InsufficientStock(products[product_id].name, size)

        logger.debug("Reserved stock for %d bucket(s)", len(totals))


# Global inventory ledger instance
inventory_ledger = InventoryLedger()
