"""
Order State Machine

Decides which status changes an order may go through and which fields each
change touches. The order workflow applies the resulting changes; nothing
here reads or writes a repository.

Allowed manual transitions (``set_status``):

    Pending    -> Shipped, Delivered, Cancelled
    Processing -> Shipped, Delivered, Cancelled
    Shipped    -> Delivered, Cancelled
    Delivered  -> Shipped
    Cancelled  -> (terminal)

Pending -> Processing only happens through a successful payment. Setting an
order to the status it already has is a no-op, which makes a repeated
cancellation harmless.
"""

from __future__ import annotations

# Standard library imports
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..entities.order import Order, OrderStatus, PaymentStatus

MANUAL_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class StatusTransition:
    """Outcome of planning a status change."""

    current: OrderStatus
    target: OrderStatus
    allowed: bool
    changes: dict[str, Any] = field(default_factory=dict)
    restores_stock: bool = False

    @property
    def is_noop(self) -> bool:
        """Allowed but nothing to write."""
        return self.allowed and not self.changes


class OrderStateMachine:
    """Plans order status transitions."""

    def __init__(
        self, transitions: dict[OrderStatus, frozenset[OrderStatus]] | None = None
    ) -> None:
        self.transitions = transitions or MANUAL_TRANSITIONS

    def allowed_targets(self, status: OrderStatus) -> frozenset[OrderStatus]:
        return self.transitions.get(status, frozenset())

    def plan(self, order: Order, target: OrderStatus, now: datetime) -> StatusTransition:
        """
        Plan a manual status change.

        Args:
            order: Current state of the order
            target: Requested status
            now: Timestamp to use for shipped/delivered dates

        Returns:
            The planned transition; ``allowed`` is False if the change is not permitted
        """
        current = order.status

        if target == current:
            return StatusTransition(current=current, target=target, allowed=True)

        if target not in self.allowed_targets(current):
            return StatusTransition(current=current, target=target, allowed=False)

        changes: dict[str, Any] = {"status": target}
        if target == OrderStatus.SHIPPED and order.shipped_date is None:
            changes["shipped_date"] = now
        elif target == OrderStatus.DELIVERED and order.delivered_date is None:
            changes["delivered_date"] = now

        return StatusTransition(
            current=current,
            target=target,
            allowed=True,
            changes=changes,
            restores_stock=target == OrderStatus.CANCELLED,
        )

    @staticmethod
    def can_accept_payment(order: Order) -> bool:
        """An order can be paid once, and never after it was cancelled."""
        return not order.is_paid and not order.is_cancelled

    @staticmethod
    def payment_changes(order: Order) -> dict[str, Any]:
        """
        Fields to write after a successful payment.

        A pending order advances to Processing; an order already shipped or
        delivered (e.g. cash on delivery) keeps its status.
        """
        changes: dict[str, Any] = {"payment_status": PaymentStatus.PAID}
        if order.status == OrderStatus.PENDING:
            changes["status"] = OrderStatus.PROCESSING
        return changes
