"""Order placement and management."""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClientSession

from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.exceptions import (
    InvalidStatusTransition,
    OrderNotFound,
    OrderTransactionTimeout,
    StorefrontError,
    TotalsMismatch,
)
from storefront.models.order import (
    LineItem,
    OrderCreateRequest,
    OrderInDB,
    OrderStatus,
    OrderSummary,
    OrderUpdateRequest,
)
from storefront.models.product import ProductInDB
from storefront.models.user import UserInDB
from storefront.services.inventory import StockLine, inventory_ledger
from storefront.services.order_number import allocate_order_number

logger = logging.getLogger(__name__)
settings = get_settings()

_PROGRESSION = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]
_TERMINAL = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Statuses only move forward; cancellation is allowed until delivery."""
    if current == target:
        return True
    if current in _TERMINAL:
        return False
    if target == OrderStatus.CANCELLED:
        return True
    return _PROGRESSION.index(target) > _PROGRESSION.index(current)


def _within(submitted: float, expected: float) -> bool:
    return abs(submitted - expected) <= settings.order_total_tolerance


def verify_totals(request: OrderCreateRequest, products: dict[str, ProductInDB]) -> None:
    """Check client-computed totals against catalog prices.

    Raises:
        TotalsMismatch: items total, processing fee or grand total is off
    """
    items_total = sum(
        products[item.product].unit_price(item.size) * item.quantity for item in request.items
    )
    if not _within(request.itemsTotal, items_total):
        raise TotalsMismatch("itemsTotal", request.itemsTotal, items_total)

    subtotal = request.itemsTotal + request.shippingCost - request.discount
    fee = 0.0
    if request.paymentMethod.value in settings.payment_fee_methods:
        fee = subtotal * settings.payment_fee_rate
    if not _within(request.paymentProcessingFee, fee):
        raise TotalsMismatch("paymentProcessingFee", request.paymentProcessingFee, fee)

    expected_total = subtotal + request.paymentProcessingFee
    if not _within(request.total, expected_total):
        raise TotalsMismatch("total", request.total, expected_total)


def build_line_items(
    request: OrderCreateRequest, products: dict[str, ProductInDB]
) -> list[LineItem]:
    """Snapshot product name, image and price as they are at checkout."""
    line_items = []
    for item in request.items:
        product = products[item.product]
        line_items.append(
            LineItem(
                product=product.id,
                name=product.name,
                image=product.primary_image,
                price=product.unit_price(item.size),
                quantity=item.quantity,
                size=item.size,
                color=item.color,
                font=item.font,
                backgroundColor=item.backgroundColor,
                borderColor=item.borderColor,
                customization=item.customization,
            )
        )
    return line_items


class OrderService:
    """Order service for checkout and fulfillment operations."""

    async def place_order(self, user: UserInDB, request: OrderCreateRequest) -> OrderSummary:
        """Reserve stock and create the order in a single transaction.

        Nothing is written unless every step succeeds: a failure at any point
        aborts the transaction, rolling back stock decrements along with the
        order itself.
        """
        lines = [StockLine(item.product, item.size, item.quantity) for item in request.items]
        product_ids = list(dict.fromkeys(line.product_id for line in lines))

        async def _create(session: AsyncIOMotorClientSession) -> OrderInDB:
            products = await mongodb.get_products_by_ids(product_ids, session=session)
            await inventory_ledger.reserve(lines, products, session=session)

            if settings.verify_order_totals:
                verify_totals(request, products)

            order_number = await allocate_order_number(session=session)
            now = datetime.now(UTC)
            order_data: dict[str, Any] = {
                "orderNumber": order_number,
                "userId": user.userId,
                "items": [
                    line.model_dump(mode="json") for line in build_line_items(request, products)
                ],
                "shippingAddress": request.shippingAddress.model_dump(mode="json"),
                "paymentMethod": request.paymentMethod.value,
                "paymentStatus": request.paymentStatus.value,
                "itemsTotal": request.itemsTotal,
                "shippingCost": request.shippingCost,
                "discount": request.discount,
                "paymentProcessingFee": request.paymentProcessingFee,
                "total": request.total,
                "status": OrderStatus.PENDING.value,
                "notes": request.notes,
                "transactionId": request.transactionId,
                "trackingNumber": None,
                "deliveredAt": None,
                "createdAt": now,
                "updatedAt": now,
            }
            return await mongodb.insert_order(order_data, session=session)

        try:
            async with asyncio.timeout(settings.order_transaction_timeout_s):
                order = await mongodb.run_transaction(_create)
        except TimeoutError:
            logger.error(
                "Order transaction for user %s exceeded %.1fs",
                user.userId,
                settings.order_transaction_timeout_s,
            )
            raise OrderTransactionTimeout()
        except StorefrontError as e:
            logger.warning("Order rejected for user %s: %s", user.userId, e)
            raise

        logger.info(
            "Order %s created for user %s (%d items, total %.2f)",
            order.orderNumber,
            user.userId,
            len(order.items),
            order.total,
            extra={"order_number": order.orderNumber, "user_id": user.userId},
        )
        return OrderSummary(
            id=order.id,
            orderNumber=order.orderNumber,
            status=order.status,
            total=order.total,
            createdAt=order.createdAt,
        )

    @staticmethod
    async def get_user_orders(user_id: str) -> list[OrderInDB]:
        """Order history for a customer."""
        return await mongodb.get_user_orders(user_id)

    @staticmethod
    async def list_orders(
        status: Optional[OrderStatus] = None, skip: int = 0, limit: int = 0
    ) -> list[OrderInDB]:
        """All orders for the admin back-office."""
        return await mongodb.list_orders(status.value if status else None, skip, limit)

    @staticmethod
    async def get_order(order_id: str) -> OrderInDB:
        order = await mongodb.get_order(order_id)
        if order is None:
            raise OrderNotFound()
        return order

    async def update_order(self, order_id: str, update: OrderUpdateRequest) -> OrderInDB:
        """Apply an admin update, enforcing one-way status progression.

        Raises:
            OrderNotFound: no order with that id
            InvalidStatusTransition: the status change would move backwards
                or leave a terminal state
        """
        order = await self.get_order(order_id)

        update_data = update.model_dump(exclude_unset=True, exclude_none=True, mode="json")
        if not update_data:
            return order

        if update.status is not None and update.status != order.status:
            if not can_transition(order.status, update.status):
                raise InvalidStatusTransition(order.status.value, update.status.value)
            if update.status == OrderStatus.DELIVERED:
                update_data["deliveredAt"] = datetime.now(UTC)

        status_change = "status" in update_data
        updated = await mongodb.update_order(
            order_id,
            update_data,
            expected_status=order.status.value if status_change else None,
        )
        if updated is None:
            if not status_change:
                raise OrderNotFound()
            # Status changed underneath us
            current = await self.get_order(order_id)
            raise InvalidStatusTransition(current.status.value, update_data["status"])

        logger.info(
            "Order %s updated: %s",
            updated.orderNumber,
            ", ".join(f"{k}={v}" for k, v in update_data.items() if k != "deliveredAt"),
        )
        return updated


# Global order service instance
order_service = OrderService()
