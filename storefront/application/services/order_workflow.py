"""
Order Workflow

Creates orders with stock reservation and drives them through the status
state machine. This is the one place where stock and orders must change
together, so every multi-record change runs inside a unit of work while the
affected records are locked.

Lock order is always order id first, then product ids (sorted), which keeps
the workflow, the catalog and the review aggregator free of lock cycles.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from storefront.application.interfaces import IRepository, IUnitOfWorkFactory
from storefront.domain.entities import (
    Address,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    User,
    calculate_total,
)
from storefront.domain.services import OrderStateMachine

from .base import ApplicationService, ErrorCode, ServiceResult, service_operation


@dataclass(frozen=True)
class LineItem:
    """A product and quantity requested when creating an order."""

    product_id: UUID
    quantity: int


class OrderWorkflow(ApplicationService):
    """
    Service for order creation and fulfilment.

    Coordinates the product, user and order repositories.
    """

    def __init__(
        self,
        orders: IRepository[Order],
        products: IRepository[Product],
        users: IRepository[User],
        unit_of_work_factory: IUnitOfWorkFactory,
        state_machine: OrderStateMachine | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__("OrderWorkflow")
        self._orders = orders
        self._products = products
        self._users = users
        self._unit_of_work_factory = unit_of_work_factory
        self._state_machine = state_machine or OrderStateMachine()
        self._clock = clock or (lambda: datetime.now(UTC))

    @staticmethod
    def _requested_quantities(line_items: Sequence[LineItem]) -> dict[UUID, int]:
        """Total requested quantity per product, in first-seen order."""
        quantities: dict[UUID, int] = {}
        for item in line_items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
        return quantities

    @staticmethod
    def _is_valid_quantity(quantity: object) -> bool:
        return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0

    @service_operation("create_order")
    async def create_order(
        self,
        user_id: UUID,
        line_items: Sequence[LineItem],
        shipping_address: Address,
        payment_method: PaymentMethod,
    ) -> ServiceResult[Order]:
        """
        Create an order and reserve stock for every line item.

        All items are checked before any stock changes, and the reservation
        and the new order are written in one unit of work. Either every
        product's stock is decremented and the order exists, or nothing
        changed.

        Args:
            user_id: Ordering user
            line_items: Products and quantities requested
            shipping_address: Address copied onto the order
            payment_method: Method the user intends to pay with

        Returns:
            Result with the created order, or USER_NOT_FOUND,
            PRODUCT_NOT_FOUND, INSUFFICIENT_STOCK or MALFORMED_REQUEST
        """
        items = list(line_items)
        if not items:
            return self._failure(
                ErrorCode.MALFORMED_REQUEST, "An order needs at least one item.", user_id=user_id
            )
        if not all(self._is_valid_quantity(item.quantity) for item in items):
            return self._failure(
                ErrorCode.MALFORMED_REQUEST,
                "Quantities must be positive integers.",
                user_id=user_id,
            )

        if not await self._users.exists(user_id):
            return self._failure(ErrorCode.USER_NOT_FOUND, "User not found.", user_id=user_id)

        requested = self._requested_quantities(items)

        async with self._products.locked(*requested):
            products: dict[UUID, Product] = {}
            for product_id in requested:
                product = await self._products.get(product_id)
                if product is None:
                    return self._failure(
                        ErrorCode.PRODUCT_NOT_FOUND,
                        f"Product with ID {product_id} not found.",
                        product_id=product_id,
                    )
                products[product_id] = product

            for product_id, quantity in requested.items():
                product = products[product_id]
                if not product.has_stock_for(quantity):
                    return self._failure(
                        ErrorCode.INSUFFICIENT_STOCK,
                        f"Not enough stock for product '{product.name}'. "
                        f"Available: {product.stock}, Requested: {quantity}.",
                        product_id=product_id,
                    )

            order_items = [
                OrderItem(
                    product_id=item.product_id,
                    product_name=products[item.product_id].name,
                    quantity=item.quantity,
                    price_at_order=products[item.product_id].price,
                )
                for item in items
            ]

            async with self._unit_of_work_factory.create_unit_of_work() as uow:
                for product_id, quantity in requested.items():
                    await uow.products.update(
                        product_id, stock=products[product_id].stock - quantity
                    )

                order = await uow.orders.add(
                    Order(
                        user_id=user_id,
                        items=order_items,
                        total_amount=calculate_total(order_items),
                        shipping_address=shipping_address,
                        payment_method=payment_method,
                    )
                )

        self.logger.info(
            "Order created",
            extra={
                "order_id": str(order.id),
                "user_id": str(user_id),
                "total_amount": str(order.total_amount),
                "item_count": len(order_items),
            },
        )
        return ServiceResult.success_response(order)

    @service_operation("get_order")
    async def get_order(self, order_id: UUID) -> ServiceResult[Order]:
        order = await self._orders.get(order_id)
        if order is None:
            return self._failure(ErrorCode.ORDER_NOT_FOUND, "Order not found.", order_id=order_id)
        return ServiceResult.success_response(order)

    @service_operation("get_orders_for_user")
    async def get_orders_for_user(self, user_id: UUID) -> ServiceResult[list[Order]]:
        return ServiceResult.success_response(await self._orders.find_by("user_id", user_id))

    @service_operation("set_status")
    async def set_status(
        self, order_id: UUID, new_status: OrderStatus | str
    ) -> ServiceResult[Order]:
        """
        Move an order to a new status.

        Cancelling restores the reserved stock of every item in the same unit
        of work as the status change. Setting the current status again changes
        nothing, so a repeated cancellation never restores stock twice.
        A status may also be given by its value, e.g. "Cancelled".

        Returns:
            Result with the refreshed order, or ORDER_NOT_FOUND /
            INVALID_STATUS_TRANSITION / MALFORMED_REQUEST
        """
        try:
            new_status = OrderStatus(new_status)
        except ValueError:
            return self._failure(
                ErrorCode.MALFORMED_REQUEST,
                f"Unknown order status: {new_status}.",
                order_id=order_id,
            )

        async with self._orders.locked(order_id):
            order = await self._orders.get(order_id)
            if order is None:
                return self._failure(
                    ErrorCode.ORDER_NOT_FOUND, "Order not found.", order_id=order_id
                )

            transition = self._state_machine.plan(order, new_status, self._clock())
            if not transition.allowed:
                return self._failure(
                    ErrorCode.INVALID_STATUS_TRANSITION,
                    f"Cannot change order status from {order.status.value} "
                    f"to {new_status.value}.",
                    order_id=order_id,
                )
            if transition.is_noop:
                return ServiceResult.success_response(order)

            if transition.restores_stock:
                updated = await self._cancel(order, transition.changes)
            else:
                updated = await self._orders.update(order_id, **transition.changes)

        self.logger.info(
            "Order status changed",
            extra={
                "order_id": str(order_id),
                "from_status": transition.current.value,
                "to_status": transition.target.value,
            },
        )
        return ServiceResult.success_response(updated)

    async def _cancel(self, order: Order, changes: dict) -> Order | None:
        """Restore reserved stock and mark the order cancelled, atomically."""
        reserved = order.reserved_quantities()

        async with self._products.locked(*reserved):
            async with self._unit_of_work_factory.create_unit_of_work() as uow:
                for product_id, quantity in reserved.items():
                    product = await uow.products.get(product_id)
                    if product is None:
                        self.logger.warning(
                            "Product no longer in catalog, stock not restored",
                            extra={"order_id": str(order.id), "product_id": str(product_id)},
                        )
                        continue
                    await uow.products.update(product_id, stock=product.stock + quantity)

                return await uow.orders.update(order.id, **changes)

