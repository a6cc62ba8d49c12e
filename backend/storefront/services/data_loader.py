"""Data loader service for importing catalog data."""

import json
import logging
from pathlib import Path
from typing import Any

from storefront.models.product import ProductBase
from storefront.utils.helpers import slugify

logger = logging.getLogger(__name__)


class DataLoader:
    """Service for loading product data from JSON files."""

    @staticmethod
    def load_json_file(file_path: str | Path) -> list[dict[str, Any]]:
        """Load data from a single JSON file.

        Supports both:
        - Catalog export format: { "products": [...] }
        - Flat array [...] or a single product object
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if file_path.suffix.lower() != ".json":
            raise ValueError(f"File must be a JSON file: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)

            if isinstance(data, dict) and "products" in data:
                data = data["products"]
            elif isinstance(data, dict):
                data = [data]
            elif not isinstance(data, list):
                raise ValueError("JSON must contain a 'products' array, an object, or an array")

            logger.info("Loaded %d records from %s", len(data), file_path)
            return data

        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in file %s: %s", file_path, e)
            raise

    @staticmethod
    def transform_product(raw: dict[str, Any]) -> dict[str, Any]:
        """Normalize a raw catalog record into a ProductBase-compatible dict.

        Derives the slug from the name when absent, drops a discounted price
        that is not below the list price, and coerces sizes to
        ``{name, price, discountedPrice, stock}``.
        """
        price = float(raw.get("price", 0.0))
        discounted = raw.get("discountedPrice")
        discounted = float(discounted) if discounted not in (None, "") else None
        if discounted is not None and discounted >= price:
            discounted = None

        sizes = []
        for size in raw.get("sizes") or []:
            size_price = float(size.get("price", price))
            size_discount = size.get("discountedPrice")
            sizes.append(
                {
                    "name": str(size["name"]).strip(),
                    "price": size_price,
                    "discountedPrice": float(size_discount) if size_discount else None,
                    "stock": int(size.get("stock", 0)),
                }
            )

        name = str(raw.get("name", "")).strip()
        images = raw.get("images") or []
        if isinstance(images, str):
            images = [images]

        return {
            "name": name,
            "slug": raw.get("slug") or slugify(name),
            "description": raw.get("description", ""),
            "shortDescription": raw.get("shortDescription") or None,
            "price": price,
            "discountedPrice": discounted,
            "category": raw.get("category", ""),
            "subcategory": raw.get("subcategory") or None,
            "images": list(images),
            "stock": int(raw.get("stock", 0)),
            "sizes": sizes,
            "colors": list(raw.get("colors") or []),
            "isTopProduct": bool(raw.get("isTopProduct", False)),
            "isActive": bool(raw.get("isActive", True)),
        }

    @staticmethod
    def load_directory(directory_path: str | Path) -> list[dict[str, Any]]:
        """Load all JSON files from a directory."""
        directory_path = Path(directory_path)

        if not directory_path.exists():
            raise FileNotFoundError(f"Directory not found: {directory_path}")

        if not directory_path.is_dir():
            raise ValueError(f"Path is not a directory: {directory_path}")

        all_data: list[dict[str, Any]] = []
        json_files = sorted(directory_path.glob("*.json"))

        if not json_files:
            logger.warning("No JSON files found in %s", directory_path)
            return all_data

        for json_file in json_files:
            try:
                all_data.extend(DataLoader.load_json_file(json_file))
            except (ValueError, OSError) as e:
                logger.error("Skipping file %s: %s", json_file, e)

        logger.info("Loaded %d total records from %d files", len(all_data), len(json_files))
        return all_data

    @staticmethod
    def validate_and_parse_products(data: list[dict[str, Any]]) -> list[ProductBase]:
        """Validate raw records into ProductBase models, skipping bad ones."""
        products: list[ProductBase] = []
        errors = 0

        for idx, item in enumerate(data):
            try:
                products.append(ProductBase(**DataLoader.transform_product(item)))
            except (ValueError, KeyError, TypeError) as e:
                errors += 1
                logger.warning("Invalid product data at index %d: %s", idx, e)

        if errors:
            logger.warning("Failed to parse %d out of %d records", errors, len(data))

        logger.info("Successfully validated %d products", len(products))
        return products
