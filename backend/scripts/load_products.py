"""Product data loading script.

Loads catalog JSON files from backend/data/products/ (or a path given on the
command line) into the products collection. Products are upserted by slug:
catalog fields are replaced, the ``sold`` counter and creation time are kept.

Usage:
    python -m scripts.load_products
    python -m scripts.load_products --path data/products/keychains.json
"""

import argparse
import asyncio
import logging
from pathlib import Path

from storefront.database.mongodb import mongodb
from storefront.services.data_loader import DataLoader
from storefront.utils.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data" / "products"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load product data into MongoDB")
    parser.add_argument(
        "--path",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help="JSON file or directory of JSON files",
    )
    return parser.parse_args()


async def load_products(path: Path) -> None:
    """Validate product records and upsert them into MongoDB."""
    try:
        logger.info("Starting product data loading from %s", path)

        if path.is_dir():
            raw = DataLoader.load_directory(path)
        else:
            raw = DataLoader.load_json_file(path)

        products = DataLoader.validate_and_parse_products(raw)
        if not products:
            logger.warning("No products found to load")
            return

        await mongodb.connect()

        inserted = 0
        for product in products:
            if await mongodb.upsert_product(product.model_dump(exclude={"sold"})):
                inserted += 1

        logger.info(
            "Product loading completed: %d inserted, %d updated",
            inserted,
            len(products) - inserted,
        )

    except Exception as e:
        logger.error("Error loading products: %s", e)
        raise
    finally:
        await mongodb.disconnect()


if __name__ == "__main__":
    args = _parse_args()
    asyncio.run(load_products(args.path))
