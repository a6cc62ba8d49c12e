"""MongoDB database connection and operations."""

import logging
from datetime import UTC, datetime
from typing import Any, Awaitable, Callable, Optional, TypeVar

from bson import ObjectId
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorClientSession,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING, ReadPreference, ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from storefront.config import get_settings
from storefront.models.order import OrderInDB
from storefront.models.product import ProductInDB
from storefront.models.user import UserCreate, UserInDB
from storefront.utils.helpers import document_to_dict, to_object_id

logger = logging.getLogger(__name__)
settings = get_settings()

T = TypeVar("T")

TRANSIENT_TRANSACTION_ERROR = "TransientTransactionError"


class MongoDB:
    """MongoDB connection manager."""

    def __init__(self) -> None:
        """Initialize MongoDB connection."""
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(
                settings.mongodb_url,
                maxPoolSize=settings.mongodb_max_pool_size,
                minPoolSize=settings.mongodb_min_pool_size,
                tz_aware=True,
            )
            self.db = self.client[settings.mongodb_database]

            # Test connection
            await self.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", settings.mongodb_database)

            await self.create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB: %s", e)
            raise

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    def _collection(self, name: str) -> AsyncIOMotorCollection:
        if self.db is None:
            raise ConnectionError("Database not connected")
        return self.db[name]

    @property
    def users(self) -> AsyncIOMotorCollection:
        return self._collection(settings.mongodb_user_collection)

    @property
    def products(self) -> AsyncIOMotorCollection:
        return self._collection(settings.mongodb_product_collection)

    @property
    def orders(self) -> AsyncIOMotorCollection:
        return self._collection(settings.mongodb_order_collection)

    async def create_indexes(self) -> None:
        """Create database indexes."""
        await self.users.create_index("userId", unique=True, name="userId_unique")
        await self.users.create_index("email", name="email_index")

        await self.products.create_index("slug", unique=True, name="slug_unique")
        await self.products.create_index(
            [("category", ASCENDING), ("isActive", ASCENDING)], name="category_active"
        )

        await self.orders.create_index("orderNumber", unique=True, name="orderNumber_unique")
        await self.orders.create_index(
            [("userId", ASCENDING), ("createdAt", DESCENDING)], name="user_createdAt"
        )
        await self.orders.create_index("status", name="status_index")
        logger.info("MongoDB indexes created")

    # ---------- Transactions ----------

    async def run_transaction(
        self, callback: Callable[[AsyncIOMotorClientSession], Awaitable[T]]
    ) -> T:
        """Run ``callback`` inside a multi-document transaction.

        Reads use snapshot read concern from the primary and the commit waits
        for a majority, so a competing transaction that touched the same
        documents fails with a write conflict instead of reading around it.
        Transient errors rerun the whole callback; anything else aborts and
        propagates.
        """
        if self.client is None:
            raise ConnectionError("Database not connected")

        attempts = settings.order_transaction_max_attempts
        attempt = 0
        async with await self.client.start_session() as session:
            while True:
                attempt += 1
                try:
                    async with session.start_transaction(
                        read_concern=ReadConcern("snapshot"),
                        write_concern=WriteConcern("majority"),
                        read_preference=ReadPreference.PRIMARY,
                        max_commit_time_ms=int(settings.order_transaction_timeout_s * 1000),
                    ):
                        return await callback(session)
                except PyMongoError as e:
                    if not e.has_error_label(TRANSIENT_TRANSACTION_ERROR) or attempt >= attempts:
                        raise
                    logger.warning(
                        "Transient transaction error, retrying (%d/%d): %s", attempt, attempts, e
                    )

    # ---------- Users ----------

    async def create_user(self, user: UserCreate, role: str = "user") -> UserInDB:
        """Create a new user."""
        try:
            now = datetime.now(UTC)
            user_data = user.model_dump()
            user_data.update({"role": role, "isBlocked": False, "createdAt": now, "updatedAt": now})

            result = await self.users.insert_one(user_data)

            if result.inserted_id:
                created_user = await self.get_user(user.userId)
                if created_user:
                    return created_user

            raise ValueError("Failed to create user")

        except DuplicateKeyError:
            raise ValueError(f"User with userId '{user.userId}' already exists")

    async def get_user(self, user_id: str) -> Optional[UserInDB]:
        """Get user by ID."""
        user_data = await self.users.find_one({"userId": user_id}, {"_id": 0})

        if user_data:
            return UserInDB(**user_data)
        return None

    async def list_users(self) -> list[UserInDB]:
        """All accounts, newest first."""
        cursor = self.users.find({}, {"_id": 0}).sort("createdAt", DESCENDING)
        docs = await cursor.to_list(length=None)
        return [UserInDB(**doc) for doc in docs]

    async def update_user(self, user_id: str, fields: dict[str, Any]) -> Optional[UserInDB]:
        """Apply ``$set`` to an account; None when the user does not exist."""
        doc = await self.users.find_one_and_update(
            {"userId": user_id},
            {"$set": {**fields, "updatedAt": datetime.now(UTC)}},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )
        return UserInDB(**doc) if doc else None

    # ---------- Products ----------

    async def get_products_by_ids(
        self,
        product_ids: list[str],
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> dict[str, ProductInDB]:
        """Bulk lookup keyed by string id. Unknown ids are simply absent."""
        object_ids = [oid for oid in (to_object_id(pid) for pid in product_ids) if oid]
        cursor = self.products.find({"_id": {"$in": object_ids}}, session=session)
        docs = await cursor.to_list(length=None)
        products = [ProductInDB(**document_to_dict(doc)) for doc in docs]
        return {product.id: product for product in products}

    async def get_product(self, product_id: str) -> Optional[ProductInDB]:
        """Get a product by record id, active or not."""
        oid = to_object_id(product_id)
        if oid is None:
            return None
        doc = await self.products.find_one({"_id": oid})
        return ProductInDB(**document_to_dict(doc)) if doc else None

    async def get_product_by_slug(self, slug: str) -> Optional[ProductInDB]:
        """Get an active product by slug."""
        doc = await self.products.find_one({"slug": slug, "isActive": True})
        return ProductInDB(**document_to_dict(doc)) if doc else None

    async def list_products(
        self, category: Optional[str] = None, skip: int = 0, limit: int = 12
    ) -> list[ProductInDB]:
        """List active products, newest first."""
        query: dict[str, Any] = {"isActive": True}
        if category:
            query["category"] = category
        cursor = self.products.find(query).sort("createdAt", DESCENDING).skip(skip).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [ProductInDB(**document_to_dict(doc)) for doc in docs]

    async def list_all_products(self) -> list[ProductInDB]:
        """Every product including inactive ones, newest first."""
        cursor = self.products.find({}).sort("createdAt", DESCENDING)
        docs = await cursor.to_list(length=None)
        return [ProductInDB(**document_to_dict(doc)) for doc in docs]

    async def slug_exists(self, slug: str) -> bool:
        return await self.products.find_one({"slug": slug}, {"_id": 1}) is not None

    async def create_product(self, product_data: dict[str, Any]) -> ProductInDB:
        """Insert a new product with zero sales."""
        now = datetime.now(UTC)
        doc = {**product_data, "sold": 0, "createdAt": now, "updatedAt": now}
        try:
            result = await self.products.insert_one(doc)
        except DuplicateKeyError:
            raise ValueError(f"Product with slug '{product_data['slug']}' already exists")
        return ProductInDB(**document_to_dict({**doc, "_id": result.inserted_id}))

    async def delete_product(self, product_id: str) -> bool:
        """Remove a product. Orders keep their own line-item snapshots."""
        oid = to_object_id(product_id)
        if oid is None:
            return False
        result = await self.products.delete_one({"_id": oid})
        return result.deleted_count == 1

    async def upsert_product(self, product_data: dict[str, Any]) -> bool:
        """Insert or replace catalog fields of a product keyed by slug.

        Returns True when a new product was inserted.
        """
        now = datetime.now(UTC)
        fields = {k: v for k, v in product_data.items() if k not in ("sold", "createdAt")}
        fields["updatedAt"] = now
        result = await self.products.update_one(
            {"slug": product_data["slug"]},
            {"$set": fields, "$setOnInsert": {"sold": 0, "createdAt": now}},
            upsert=True,
        )
        return result.upserted_id is not None

    async def decrement_stock(
        self,
        product_id: str,
        quantity: int,
        size: Optional[str],
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> bool:
        """Take ``quantity`` units from a product or one of its sizes.

        The update only matches while enough stock remains, so it returns
        False instead of driving stock negative.
        """
        oid = to_object_id(product_id)
        if size is not None:
            query = {
                "_id": oid,
                "sizes": {"$elemMatch": {"name": size, "stock": {"$gte": quantity}}},
            }
            update = {"$inc": {"sizes.$.stock": -quantity, "sold": quantity}}
        else:
            query = {"_id": oid, "stock": {"$gte": quantity}}
            update = {"$inc": {"stock": -quantity, "sold": quantity}}

        update["$set"] = {"updatedAt": datetime.now(UTC)}
        result = await self.products.update_one(query, update, session=session)
        return result.matched_count == 1

    # ---------- Orders ----------

    async def order_number_exists(
        self, order_number: str, session: Optional[AsyncIOMotorClientSession] = None
    ) -> bool:
        """Check whether an order already uses ``order_number``."""
        doc = await self.orders.find_one(
            {"orderNumber": order_number}, {"_id": 1}, session=session
        )
        return doc is not None

    async def insert_order(
        self, order_data: dict[str, Any], session: Optional[AsyncIOMotorClientSession] = None
    ) -> OrderInDB:
        """Persist a new order document."""
        result = await self.orders.insert_one(order_data, session=session)
        return OrderInDB(**document_to_dict({**order_data, "_id": result.inserted_id}))

    async def get_order(self, order_id: str) -> Optional[OrderInDB]:
        """Get an order by record id."""
        oid = to_object_id(order_id)
        if oid is None:
            return None
        doc = await self.orders.find_one({"_id": oid})
        return OrderInDB(**document_to_dict(doc)) if doc else None

    async def count_user_orders(self, user_id: str) -> int:
        return await self.orders.count_documents({"userId": user_id})

    async def get_user_orders(self, user_id: str) -> list[OrderInDB]:
        """All orders placed by a user, newest first."""
        cursor = self.orders.find({"userId": user_id}).sort("createdAt", DESCENDING)
        docs = await cursor.to_list(length=None)
        return [OrderInDB(**document_to_dict(doc)) for doc in docs]

    async def list_orders(
        self, status: Optional[str] = None, skip: int = 0, limit: int = 0
    ) -> list[OrderInDB]:
        """List orders, newest first. A limit of 0 means no limit."""
        query: dict[str, Any] = {"status": status} if status else {}
        cursor = self.orders.find(query).sort("createdAt", DESCENDING).skip(skip)
        if limit > 0:
            cursor = cursor.limit(limit)
        docs = await cursor.to_list(length=limit or None)
        return [OrderInDB(**document_to_dict(doc)) for doc in docs]

    async def update_order(
        self, order_id: str, update_data: dict[str, Any], expected_status: Optional[str] = None
    ) -> Optional[OrderInDB]:
        """Apply ``$set`` to an order, optionally only if its status is unchanged."""
        oid = to_object_id(order_id)
        if oid is None:
            return None
        query: dict[str, Any] = {"_id": oid}
        if expected_status is not None:
            query["status"] = expected_status

        update_data = {**update_data, "updatedAt": datetime.now(UTC)}
        doc = await self.orders.find_one_and_update(
            query, {"$set": update_data}, return_document=ReturnDocument.AFTER
        )
        return OrderInDB(**document_to_dict(doc)) if doc else None


# Global MongoDB instance
mongodb = MongoDB()
