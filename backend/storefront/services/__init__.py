"""Services package."""

from storefront.services.data_loader import DataLoader
from storefront.services.inventory import InventoryLedger, StockLine, inventory_ledger
from storefront.services.order_number import allocate_order_number, generate_order_number
from storefront.services.order_service import OrderService, order_service
from storefront.services.product_service import ProductService, product_service
from storefront.services.user_service import UserService, user_service

__all__ = [
    "DataLoader",
    "InventoryLedger",
    "StockLine",
    "inventory_ledger",
    "allocate_order_number",
    "generate_order_number",
    "OrderService",
    "order_service",
    "ProductService",
    "product_service",
    "UserService",
    "user_service",
]
