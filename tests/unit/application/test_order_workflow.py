"""
Unit tests for the order workflow.

Tests order creation with stock reservation, all-or-nothing behaviour,
status transitions and stock restoration on cancellation.
"""

import asyncio
from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from storefront.application.services import ErrorCode, LineItem, OrderWorkflow
from storefront.domain.entities import OrderStatus, PaymentMethod, PaymentStatus


async def stock_of(container, product_id) -> int:
    return (await container.products.get(product_id)).stock


async def place(container, customer, address, *line_items):
    return await container.order_workflow.create_order(
        customer.id, list(line_items), address, PaymentMethod.CREDIT_CARD
    )


class TestCreateOrder:
    """Test order creation."""

    @pytest.mark.asyncio
    async def test_create_reserves_stock(self, container, customer, address, laptop, book):
        result = await place(
            container, customer, address, LineItem(laptop.id, 2), LineItem(book.id, 1)
        )

        assert result.success
        order = result.data
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.UNPAID
        assert order.total_amount == Decimal("2425.50")
        assert order.shipping_address == address
        assert [item.product_name for item in order.items] == ["Laptop", "Python Book"]
        assert await stock_of(container, laptop.id) == 8
        assert await stock_of(container, book.id) == 2

    @pytest.mark.asyncio
    async def test_prices_are_captured(self, container, customer, address, laptop):
        order = (await place(container, customer, address, LineItem(laptop.id, 1))).data

        await container.catalog.update_product(laptop.id, price=Decimal("1.00"))

        stored = (await container.order_workflow.get_order(order.id)).data
        assert stored.items[0].price_at_order == Decimal("1200.00")
        assert stored.total_amount == Decimal("1200.00")

    @pytest.mark.asyncio
    async def test_exact_stock_is_allowed(self, container, customer, address, book):
        result = await place(container, customer, address, LineItem(book.id, 3))

        assert result.success
        assert await stock_of(container, book.id) == 0

    @pytest.mark.asyncio
    async def test_insufficient_stock_changes_nothing(
        self, container, customer, address, laptop, book
    ):
        result = await place(
            container, customer, address, LineItem(laptop.id, 1), LineItem(book.id, 4)
        )

        assert not result.success
        assert result.error_code == ErrorCode.INSUFFICIENT_STOCK
        assert result.error == (
            "Not enough stock for product 'Python Book'. Available: 3, Requested: 4."
        )
        assert await stock_of(container, laptop.id) == 10
        assert await stock_of(container, book.id) == 3
        assert await container.orders.count() == 0

    @pytest.mark.asyncio
    async def test_repeated_product_quantities_are_summed(
        self, container, customer, address, book
    ):
        result = await place(
            container, customer, address, LineItem(book.id, 2), LineItem(book.id, 2)
        )

        assert result.error_code == ErrorCode.INSUFFICIENT_STOCK
        assert await stock_of(container, book.id) == 3

    @pytest.mark.asyncio
    async def test_missing_product_changes_nothing(self, container, customer, address, laptop):
        missing = uuid4()

        result = await place(
            container, customer, address, LineItem(laptop.id, 1), LineItem(missing, 1)
        )

        assert result.error_code == ErrorCode.PRODUCT_NOT_FOUND
        assert result.error == f"Product with ID {missing} not found."
        assert await stock_of(container, laptop.id) == 10

    @pytest.mark.asyncio
    async def test_unknown_user(self, container, address, laptop):
        result = await container.order_workflow.create_order(
            uuid4(), [LineItem(laptop.id, 1)], address, PaymentMethod.PAYPAL
        )

        assert result.error_code == ErrorCode.USER_NOT_FOUND
        assert await stock_of(container, laptop.id) == 10

    @pytest.mark.asyncio
    async def test_empty_order(self, container, customer, address):
        result = await place(container, customer, address)

        assert result.error_code == ErrorCode.MALFORMED_REQUEST

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
    async def test_invalid_quantity(self, container, customer, address, laptop, quantity):
        result = await place(container, customer, address, LineItem(laptop.id, quantity))

        assert result.error_code == ErrorCode.MALFORMED_REQUEST
        assert await stock_of(container, laptop.id) == 10

    @pytest.mark.asyncio
    async def test_concurrent_orders_for_last_unit(
        self, container, customer, address, product_factory
    ):
        product = (await container.catalog.add_product(product_factory(stock=1))).data

        results = await asyncio.gather(
            *(place(container, customer, address, LineItem(product.id, 1)) for _ in range(5))
        )

        successes = [result for result in results if result.success]
        assert len(successes) == 1
        assert all(
            result.error_code == ErrorCode.INSUFFICIENT_STOCK
            for result in results
            if not result.success
        )
        assert await stock_of(container, product.id) == 0
        assert await container.orders.count() == 1


class TestReadOrders:
    """Test order lookups."""

    @pytest.mark.asyncio
    async def test_get_missing_order(self, container):
        result = await container.order_workflow.get_order(uuid4())

        assert result.error_code == ErrorCode.ORDER_NOT_FOUND
        assert result.error == "Order not found."

    @pytest.mark.asyncio
    async def test_orders_for_user(self, container, customer, seller, address, laptop):
        first = (await place(container, customer, address, LineItem(laptop.id, 1))).data
        second = (await place(container, customer, address, LineItem(laptop.id, 1))).data
        await place(container, seller, address, LineItem(laptop.id, 1))

        result = await container.order_workflow.get_orders_for_user(customer.id)

        assert [order.id for order in result.data] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_orders_for_user_without_orders(self, container, customer):
        result = await container.order_workflow.get_orders_for_user(customer.id)

        assert result.success
        assert result.data == []


class TestSetStatus:
    """Test status transitions."""

    @pytest.mark.asyncio
    async def test_ship_and_deliver(self, container, customer, address, laptop):
        order = (await place(container, customer, address, LineItem(laptop.id, 1))).data

        shipped = await container.order_workflow.set_status(order.id, OrderStatus.SHIPPED)
        delivered = await container.order_workflow.set_status(order.id, OrderStatus.DELIVERED)

        assert shipped.data.status == OrderStatus.SHIPPED
        assert shipped.data.shipped_date is not None
        assert delivered.data.status == OrderStatus.DELIVERED
        assert delivered.data.delivered_date is not None
        assert delivered.data.shipped_date == shipped.data.shipped_date

    @pytest.mark.asyncio
    async def test_uses_injected_clock(self, container, customer, address, laptop):
        fixed = datetime(2024, 6, 1, 9, 30, tzinfo=UTC)
        workflow = OrderWorkflow(
            container.orders,
            container.products,
            container.users,
            container.unit_of_work_factory,
            clock=lambda: fixed,
        )
        order = (await place(container, customer, address, LineItem(laptop.id, 1))).data

        result = await workflow.set_status(order.id, OrderStatus.SHIPPED)

        assert result.data.shipped_date == fixed

    @pytest.mark.asyncio
    async def test_cancel_restores_stock(self, container, customer, address, laptop, book):
        order = (
            await place(container, customer, address, LineItem(laptop.id, 2), LineItem(book.id, 3))
        ).data

        result = await container.order_workflow.set_status(order.id, OrderStatus.CANCELLED)

        assert result.success
        assert result.data.status == OrderStatus.CANCELLED
        assert await stock_of(container, laptop.id) == 10
        assert await stock_of(container, book.id) == 3

    @pytest.mark.asyncio
    async def test_repeated_cancel_restores_once(self, container, customer, address, laptop):
        order = (await place(container, customer, address, LineItem(laptop.id, 2))).data

        await container.order_workflow.set_status(order.id, OrderStatus.CANCELLED)
        second = await container.order_workflow.set_status(order.id, OrderStatus.CANCELLED)

        assert second.success
        assert await stock_of(container, laptop.id) == 10

    @pytest.mark.asyncio
    async def test_concurrent_cancels_restore_once(self, container, customer, address, laptop):
        order = (await place(container, customer, address, LineItem(laptop.id, 4))).data

        results = await asyncio.gather(
            *(
                container.order_workflow.set_status(order.id, OrderStatus.CANCELLED)
                for _ in range(3)
            )
        )

        assert all(result.success for result in results)
        assert await stock_of(container, laptop.id) == 10

    @pytest.mark.asyncio
    async def test_cancel_after_product_deleted(self, container, customer, address, laptop, book):
        order = (
            await place(container, customer, address, LineItem(laptop.id, 1), LineItem(book.id, 1))
        ).data
        await container.catalog.delete_product(book.id)

        result = await container.order_workflow.set_status(order.id, OrderStatus.CANCELLED)

        assert result.success
        assert await stock_of(container, laptop.id) == 10

    @pytest.mark.asyncio
    async def test_cancelled_order_cannot_ship(self, container, customer, address, laptop):
        order = (await place(container, customer, address, LineItem(laptop.id, 1))).data
        await container.order_workflow.set_status(order.id, OrderStatus.CANCELLED)

        result = await container.order_workflow.set_status(order.id, OrderStatus.SHIPPED)

        assert result.error_code == ErrorCode.INVALID_STATUS_TRANSITION
        assert result.error == "Cannot change order status from Cancelled to Shipped."
        assert await stock_of(container, laptop.id) == 10

    @pytest.mark.asyncio
    async def test_delivered_order_cannot_be_cancelled(self, container, customer, address, laptop):
        order = (await place(container, customer, address, LineItem(laptop.id, 1))).data
        await container.order_workflow.set_status(order.id, OrderStatus.DELIVERED)

        result = await container.order_workflow.set_status(order.id, OrderStatus.CANCELLED)

        assert result.error_code == ErrorCode.INVALID_STATUS_TRANSITION
        assert await stock_of(container, laptop.id) == 9

    @pytest.mark.asyncio
    async def test_missing_order(self, container):
        result = await container.order_workflow.set_status(uuid4(), OrderStatus.SHIPPED)

        assert result.error_code == ErrorCode.ORDER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_missing_orders_leave_no_locks(self, container):
        for _ in range(100):
            result = await container.order_workflow.set_status(uuid4(), OrderStatus.SHIPPED)
            assert result.error_code == ErrorCode.ORDER_NOT_FOUND

        assert container.orders._locks == {}

    @pytest.mark.asyncio
    async def test_status_given_as_value(self, container, customer, address, laptop):
        order = (await place(container, customer, address, LineItem(laptop.id, 1))).data

        result = await container.order_workflow.set_status(order.id, "Cancelled")

        assert result.success
        assert result.data.status == OrderStatus.CANCELLED
        assert await stock_of(container, laptop.id) == 10

    @pytest.mark.asyncio
    async def test_unknown_status_value(self, container, customer, address, laptop):
        order = (await place(container, customer, address, LineItem(laptop.id, 1))).data

        result = await container.order_workflow.set_status(order.id, "Lost")

        assert result.error_code == ErrorCode.MALFORMED_REQUEST
        assert (await container.orders.get(order.id)).status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_invalid_transition_given_as_value(self, container, customer, address, laptop):
        order = (await place(container, customer, address, LineItem(laptop.id, 1))).data

        result = await container.order_workflow.set_status(order.id, "Processing")

        assert result.error_code == ErrorCode.INVALID_STATUS_TRANSITION
