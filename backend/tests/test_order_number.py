"""Tests for order number generation and allocation."""

import re

import pytest

from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.exceptions import OrderNumberExhausted
from storefront.services import order_number
from storefront.services.order_number import allocate_order_number, generate_order_number

settings = get_settings()


class TestGenerate:
    def test_format(self):
        assert generate_order_number(1718000000000, 7) == "PK1718000000000007"

    def test_suffix_is_zero_padded(self):
        assert generate_order_number(1, 0) == "PK1000"
        assert generate_order_number(1, 999) == "PK1999"

    def test_defaults_use_clock_and_random_suffix(self):
        number = generate_order_number()
        assert re.fullmatch(r"PK\d{16}", number)


class TestAllocate:
    async def test_returns_unused_number(self, fake_client):
        number = await allocate_order_number()
        assert re.fullmatch(r"PK\d+", number)

    async def test_retries_past_collisions(self, orders, monkeypatch):
        orders.seed({"orderNumber": "PK1000"})
        orders.seed({"orderNumber": "PK1001"})
        candidates = iter(["PK1000", "PK1001", "PK1002"])
        monkeypatch.setattr(order_number, "generate_order_number", lambda: next(candidates))

        assert await allocate_order_number() == "PK1002"

    async def test_exhaustion_after_max_attempts(self, fake_client, monkeypatch):
        calls = []

        async def always_taken(candidate, session=None):
            calls.append(candidate)
            return True

        monkeypatch.setattr(mongodb, "order_number_exists", always_taken)

        with pytest.raises(OrderNumberExhausted):
            await allocate_order_number()
        assert len(calls) == settings.order_number_max_attempts == 10
