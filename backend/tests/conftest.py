"""Pytest fixtures for storefront tests."""

import os
from datetime import UTC, datetime
from typing import Any, Optional

# Must be set before the app reads its settings
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from fake_mongo import FakeCollection, FakeMongoClient
from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.models.user import UserInDB

settings = get_settings()

ADDRESS = {
    "name": "Rahim Uddin",
    "phone": "01712345678",
    "street": "House 12, Road 5",
    "city": "Dhaka",
}


@pytest.fixture
def fake_client(monkeypatch):
    """Point the global MongoDB manager at an in-memory client."""
    client = FakeMongoClient()
    db = client[settings.mongodb_database]
    monkeypatch.setattr(mongodb, "client", client)
    monkeypatch.setattr(mongodb, "db", db)

    # Same unique constraints create_indexes() declares
    db[settings.mongodb_user_collection]._unique_fields.append("userId")
    db[settings.mongodb_product_collection]._unique_fields.append("slug")
    db[settings.mongodb_order_collection]._unique_fields.append("orderNumber")
    return client


@pytest.fixture
def products(fake_client) -> FakeCollection:
    return fake_client[settings.mongodb_database][settings.mongodb_product_collection]


@pytest.fixture
def orders(fake_client) -> FakeCollection:
    return fake_client[settings.mongodb_database][settings.mongodb_order_collection]


@pytest.fixture
def users(fake_client) -> FakeCollection:
    return fake_client[settings.mongodb_database][settings.mongodb_user_collection]


@pytest.fixture
def make_product(products):
    """Insert a product and return its id as a string."""

    def _make(
        name: str = "Widget",
        stock: int = 10,
        price: float = 100.0,
        discounted_price: Optional[float] = None,
        sizes: Optional[list[dict[str, Any]]] = None,
        is_active: bool = True,
        image: str = "/images/widget.jpg",
    ) -> str:
        now = datetime.now(UTC)
        oid = products.seed(
            {
                "name": name,
                "slug": name.lower().replace(" ", "-"),
                "description": f"{name} description",
                "price": price,
                "discountedPrice": discounted_price,
                "category": "key-chains",
                "images": [image],
                "stock": stock,
                "sizes": sizes or [],
                "colors": [],
                "isTopProduct": False,
                "isActive": is_active,
                "sold": 0,
                "createdAt": now,
                "updatedAt": now,
            }
        )
        return str(oid)

    return _make


@pytest.fixture
def make_user(users):
    def _make(user_id: str = "user_001", role: str = "user", blocked: bool = False) -> UserInDB:
        now = datetime.now(UTC)
        doc = {
            "userId": user_id,
            "name": f"User {user_id}",
            "email": f"{user_id}@example.com",
            "phone": "+8801712345678",
            "role": role,
            "isBlocked": blocked,
            "createdAt": now,
            "updatedAt": now,
        }
        users.seed(doc)
        return UserInDB(**doc)

    return _make


@pytest.fixture
def customer(make_user) -> UserInDB:
    return make_user("user_001")


@pytest.fixture
def admin(make_user) -> UserInDB:
    return make_user("admin_001", role="admin")


@pytest.fixture
def api_client(fake_client):
    """Test client; lifespan is not entered so no real connection is made."""
    from storefront.main import app

    return TestClient(app, raise_server_exceptions=False)


def stock_of(collection: FakeCollection, product_id: str, size: Optional[str] = None) -> int:
    doc = collection.get(ObjectId(product_id))
    if size is None:
        return doc["stock"]
    return next(s["stock"] for s in doc["sizes"] if s["name"] == size)


def order_body(
    items: list[dict[str, Any]],
    items_total: float,
    shipping: float = 60.0,
    method: str = "cod",
    fee: float = 0.0,
    **overrides,
) -> dict[str, Any]:
    """Checkout payload whose totals add up."""
    body = {
        "items": items,
        "shippingAddress": dict(ADDRESS),
        "paymentMethod": method,
        "itemsTotal": items_total,
        "shippingCost": shipping,
        "discount": 0,
        "paymentProcessingFee": fee,
        "total": items_total + shipping + fee,
    }
    body.update(overrides)
    return body
