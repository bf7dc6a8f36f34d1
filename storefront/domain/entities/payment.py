"""
Payment Transaction Entity - one recorded payment attempt
"""

# Standard library imports
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from uuid import UUID

from .base import BaseEntity
from .order import PaymentMethod


class TransactionStatus(Enum):
    """Payment transaction status enumeration"""

    SUCCESS = "Success"
    FAILED = "Failed"
    REFUNDED = "Refunded"


@dataclass(kw_only=True)
class PaymentTransaction(BaseEntity):
    """Payment attempt against an order. Recorded whatever the gateway decided."""

    order_id: UUID
    user_id: UUID
    amount: Decimal
    method: PaymentMethod
    transaction_id: str
    status: TransactionStatus

    @property
    def succeeded(self) -> bool:
        return self.status == TransactionStatus.SUCCESS
