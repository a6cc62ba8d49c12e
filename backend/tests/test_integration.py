"""Order placement against a real MongoDB replica set.

Runs only when ``MONGODB_URL`` points at a replica set (transactions need
one), e.g. ``mongodb://localhost:27017/?replicaSet=rs0``.
"""

import asyncio
import os
import uuid
from datetime import UTC, datetime

import pytest

from conftest import order_body
from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.exceptions import InsufficientStock
from storefront.models.order import OrderCreateRequest, OrderSummary
from storefront.models.user import UserCreate
from storefront.services.order_service import order_service

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not os.environ.get("MONGODB_URL"), reason="MONGODB_URL not set"),
]

settings = get_settings()


@pytest.fixture
async def live_db(monkeypatch):
    """Connect to a throwaway database and drop it afterwards."""
    monkeypatch.setattr(settings, "mongodb_database", f"storefront_test_{uuid.uuid4().hex[:8]}")
    monkeypatch.setattr(mongodb, "client", None)
    monkeypatch.setattr(mongodb, "db", None)

    await mongodb.connect()
    try:
        yield mongodb
    finally:
        await mongodb.client.drop_database(settings.mongodb_database)
        await mongodb.disconnect()


async def _seed_widget(db, stock: int) -> str:
    now = datetime.now(UTC)
    result = await db.products.insert_one(
        {
            "name": "Widget",
            "slug": "widget",
            "description": "",
            "price": 100.0,
            "category": "key-chains",
            "images": ["/images/widget.jpg"],
            "stock": stock,
            "sizes": [],
            "isActive": True,
            "sold": 0,
            "createdAt": now,
            "updatedAt": now,
        }
    )
    return str(result.inserted_id)


class TestReplicaSetTransactions:
    async def test_contention_for_limited_stock(self, live_db):
        widget = await _seed_widget(live_db, stock=10)
        buyers = [
            await live_db.create_user(
                UserCreate(userId=f"buyer_{i}", name=f"Buyer {i}", email=f"buyer{i}@example.com")
            )
            for i in range(2)
        ]
        request = OrderCreateRequest(**order_body([{"product": widget, "quantity": 6}], 600.0))

        results = await asyncio.gather(
            *(order_service.place_order(buyer, request) for buyer in buyers),
            return_exceptions=True,
        )

        assert sum(isinstance(r, OrderSummary) for r in results) == 1
        assert sum(isinstance(r, InsufficientStock) for r in results) == 1

        product = await live_db.get_product(widget)
        assert product.stock == 4
        assert product.sold == 6
        assert await live_db.orders.count_documents({}) == 1

    async def test_failed_order_leaves_stock(self, live_db):
        widget = await _seed_widget(live_db, stock=3)
        buyer = await live_db.create_user(
            UserCreate(userId="buyer_x", name="Buyer", email="buyer@example.com")
        )
        request = OrderCreateRequest(**order_body([{"product": widget, "quantity": 4}], 400.0))

        with pytest.raises(InsufficientStock):
            await order_service.place_order(buyer, request)

        assert (await live_db.get_product(widget)).stock == 3
        assert await live_db.orders.count_documents({}) == 0
