"""API tests for health, catalog, users and middleware."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.api.middleware import RateLimitMiddleware


class TestHealth:
    def test_connected(self, api_client):
        response = api_client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["services"] == {"mongodb": "connected"}
        assert response.json()["status"] == "healthy"


class TestCatalog:
    def test_lists_active_products(self, api_client, make_product):
        make_product("Lamp")
        make_product("Retired", is_active=False)

        response = api_client.get("/api/products")

        assert response.status_code == 200
        assert [p["slug"] for p in response.json()["products"]] == ["lamp"]

    def test_product_by_slug(self, api_client, make_product):
        make_product("Moon Lamp", stock=4)

        response = api_client.get("/api/products/moon-lamp")

        assert response.status_code == 200
        assert response.json()["stock"] == 4

    def test_unknown_slug(self, api_client, fake_client):
        assert api_client.get("/api/products/none").status_code == 404


class TestUsers:
    def test_register_and_me(self, api_client, fake_client):
        response = api_client.post(
            "/api/users",
            json={"userId": "user_100", "name": "Sadia", "email": "sadia@example.com"},
        )
        assert response.status_code == 201
        assert response.json()["role"] == "user"

        me = api_client.get("/api/users/me", headers={"X-User-ID": "user_100"})
        assert me.json()["email"] == "sadia@example.com"

    def test_duplicate_registration(self, api_client, customer):
        response = api_client.post(
            "/api/users",
            json={"userId": "user_001", "name": "Again", "email": "again@example.com"},
        )
        assert response.status_code == 400


class TestMiddleware:
    def test_request_id_is_echoed(self, api_client, fake_client):
        response = api_client.get("/api/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert "X-Process-Time" in response.headers

    def test_rate_limit_per_user(self):
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, requests_per_period=2, period_s=60)

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        client = TestClient(app)
        alice = {"X-User-ID": "alice"}
        assert client.get("/ping", headers=alice).status_code == 200
        assert client.get("/ping", headers=alice).status_code == 200

        limited = client.get("/ping", headers=alice)
        assert limited.status_code == 429
        assert limited.headers["Retry-After"] == "60"

        assert client.get("/ping", headers={"X-User-ID": "bob"}).status_code == 200
