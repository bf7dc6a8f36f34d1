"""
Payment Gateway Interface

The gateway decides whether a payment attempt is approved. It is a local
decision function, so implementations must not block on the network.
"""

# Standard library imports
from abc import abstractmethod
from decimal import Decimal
from typing import Protocol
from uuid import UUID

# Local imports
from storefront.domain.entities import PaymentMethod


class IPaymentGateway(Protocol):
    """Approves or declines payment attempts."""

    @abstractmethod
    def authorize(self, order_id: UUID, amount: Decimal, method: PaymentMethod) -> bool:
        """
        Decide the outcome of a payment attempt.

        Args:
            order_id: Order being paid
            amount: Amount charged
            method: Payment method used

        Returns:
            True if the payment is approved, False if declined
        """
        ...
