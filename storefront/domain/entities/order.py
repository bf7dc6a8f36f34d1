"""
Order Entity - a customer's order with captured prices and fulfilment status
"""

from __future__ import annotations

# Standard library imports
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ..value_objects import ZERO
from .base import BaseEntity
from .user import Address


class OrderStatus(Enum):
    """Order status enumeration"""

    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentMethod(Enum):
    """Payment method enumeration"""

    CREDIT_CARD = "Credit Card"
    PAYPAL = "PayPal"
    BANK_TRANSFER = "Bank Transfer"
    CASH_ON_DELIVERY = "Cash on Delivery"


class PaymentStatus(Enum):
    """Order payment status enumeration"""

    UNPAID = "Unpaid"
    PAID = "Paid"


@dataclass(frozen=True)
class OrderItem:
    """A line of an order with the product name and price frozen at order time."""

    product_id: UUID
    product_name: str
    quantity: int
    price_at_order: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price_at_order * self.quantity


def calculate_total(items: Iterable[OrderItem]) -> Decimal:
    """Sum the captured subtotals of the given items."""
    return sum((item.subtotal for item in items), ZERO)


@dataclass(kw_only=True)
class Order(BaseEntity):
    """
    Order entity.

    ``total_amount`` and every ``price_at_order`` are fixed when the order is
    created and never recomputed from current catalog prices. The shipping
    address is a copy, not a reference to the user's address.
    """

    user_id: UUID
    items: list[OrderItem] = field(default_factory=list)
    total_amount: Decimal = ZERO
    status: OrderStatus = OrderStatus.PENDING
    shipping_address: Address
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    shipped_date: datetime | None = None
    delivered_date: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    def reserved_quantities(self) -> dict[UUID, int]:
        """Total quantity per product across all items of this order."""
        quantities: dict[UUID, int] = {}
        for item in self.items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
        return quantities
