"""Tests for the inventory ledger."""

import pytest

from conftest import stock_of
from storefront.database.mongodb import mongodb
from storefront.exceptions import InsufficientStock, ProductNotFound
from storefront.models.product import ProductInDB
from storefront.services.inventory import StockLine, available_stock, inventory_ledger

SIZES = [
    {"name": "Small", "price": 150.0, "discountedPrice": None, "stock": 3},
    {"name": "Large", "price": 300.0, "discountedPrice": 250.0, "stock": 1},
]


def _product(**overrides) -> ProductInDB:
    data = {
        "id": "665f1c2ab1e8a9d4c0a1b2c3",
        "name": "Planter",
        "slug": "planter",
        "price": 200.0,
        "category": "home-decor",
        "stock": 5,
    }
    data.update(overrides)
    return ProductInDB(**data)


class TestAvailableStock:
    def test_product_level_stock(self):
        assert available_stock(_product(), None) == 5

    def test_size_stock_by_exact_name(self):
        product = _product(sizes=SIZES)
        assert available_stock(product, "Small") == 3
        assert available_stock(product, "Large") == 1

    def test_unknown_size_has_nothing_available(self):
        product = _product(sizes=SIZES)
        assert available_stock(product, "small") == 0
        assert available_stock(product, "Medium") == 0

    def test_size_ignored_for_product_without_sizes(self):
        assert available_stock(_product(), "Large") == 5

    def test_no_size_on_sized_product_uses_product_stock(self):
        assert available_stock(_product(sizes=SIZES), None) == 5


class TestValidate:
    def test_missing_product(self):
        with pytest.raises(ProductNotFound) as exc_info:
            inventory_ledger.validate([StockLine("665f1c2ab1e8a9d4c0a1b2c3", None, 1)], {})
        assert "665f1c2ab1e8a9d4c0a1b2c3" in str(exc_info.value)

    def test_inactive_product_is_not_found(self):
        product = _product(isActive=False)
        with pytest.raises(ProductNotFound):
            inventory_ledger.validate([StockLine(product.id, None, 1)], {product.id: product})

    def test_error_names_product_and_size(self):
        product = _product(sizes=SIZES)
        with pytest.raises(InsufficientStock) as exc_info:
            inventory_ledger.validate([StockLine(product.id, "Large", 2)], {product.id: product})
        assert exc_info.value.product_name == "Planter"
        assert exc_info.value.size == "Large"
        assert str(exc_info.value) == "Insufficient stock for Planter (Large)"

    def test_repeated_lines_are_summed(self):
        product = _product()
        lines = [StockLine(product.id, None, 3), StockLine(product.id, None, 3)]
        with pytest.raises(InsufficientStock):
            inventory_ledger.validate(lines, {product.id: product})

    def test_exact_stock_is_allowed(self):
        product = _product()
        totals = inventory_ledger.validate([StockLine(product.id, None, 5)], {product.id: product})
        assert totals == {(product.id, None): 5}


class TestReserve:
    async def test_decrements_stock_and_bumps_sold(self, products, make_product):
        widget = make_product("Widget", stock=10)
        gadget = make_product("Gadget", stock=4)

        resolved = await mongodb.get_products_by_ids([widget, gadget])
        await inventory_ledger.reserve(
            [StockLine(widget, None, 5), StockLine(gadget, None, 4)], resolved
        )

        assert stock_of(products, widget) == 5
        assert stock_of(products, gadget) == 0
        assert products.docs[0]["sold"] == 5
        assert products.docs[1]["sold"] == 4

    async def test_decrements_matching_size_only(self, products, make_product):
        planter = make_product("Planter", stock=50, sizes=SIZES)

        resolved = await mongodb.get_products_by_ids([planter])
        await inventory_ledger.reserve([StockLine(planter, "Small", 2)], resolved)

        assert stock_of(products, planter, "Small") == 1
        assert stock_of(products, planter, "Large") == 1
        assert stock_of(products, planter) == 50

    async def test_failure_writes_nothing(self, products, make_product):
        widget = make_product("Widget", stock=10)
        gadget = make_product("Gadget", stock=1)

        resolved = await mongodb.get_products_by_ids([widget, gadget])
        with pytest.raises(InsufficientStock):
            await inventory_ledger.reserve(
                [StockLine(widget, None, 2), StockLine(gadget, None, 2)], resolved
            )

        assert stock_of(products, widget) == 10
        assert stock_of(products, gadget) == 1

    async def test_stale_read_cannot_oversell(self, products, make_product):
        widget = make_product("Widget", stock=10)

        resolved = await mongodb.get_products_by_ids([widget])
        # Another checkout takes stock after our read
        products.docs[0]["stock"] = 2

        with pytest.raises(InsufficientStock):
            await inventory_ledger.reserve([StockLine(widget, None, 5)], resolved)
        assert stock_of(products, widget) == 2
