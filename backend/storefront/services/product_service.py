"""Product service for admin catalog management."""

import logging

from storefront.database.mongodb import mongodb
from storefront.exceptions import CatalogProductNotFound, InvalidProductId
from storefront.models.product import ProductCreate, ProductInDB
from storefront.utils.helpers import epoch_millis, slugify, to_object_id

logger = logging.getLogger(__name__)


class ProductService:
    """Product service for back-office catalog operations."""

    @staticmethod
    async def create_product(product: ProductCreate) -> ProductInDB:
        """Create a product, making its slug unique if the name is taken."""
        slug = product.slug or slugify(product.name)
        if await mongodb.slug_exists(slug):
            slug = f"{slug}-{epoch_millis()}"

        data = product.model_dump(mode="json")
        data["slug"] = slug
        created = await mongodb.create_product(data)
        logger.info("Product created: %s (%s)", created.name, created.id)
        return created

    @staticmethod
    async def list_products() -> list[ProductInDB]:
        return await mongodb.list_all_products()

    @staticmethod
    async def get_product(product_id: str) -> ProductInDB:
        """Get a product by id.

        Raises:
            InvalidProductId: the id is not a record id
            CatalogProductNotFound: no product with that id
        """
        if to_object_id(product_id) is None:
            raise InvalidProductId()
        product = await mongodb.get_product(product_id)
        if product is None:
            raise CatalogProductNotFound()
        return product

    async def delete_product(self, product_id: str) -> None:
        """Delete a product; existing orders are left as they are."""
        product = await self.get_product(product_id)
        if not await mongodb.delete_product(product_id):
            raise CatalogProductNotFound()
        logger.info("Product deleted: %s (%s)", product.name, product_id)


# Global product service instance
product_service = ProductService()
