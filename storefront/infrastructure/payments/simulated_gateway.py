"""
Simulated payment gateways.

No real payment provider is contacted. The simulated gateway approves a
configurable share of attempts at random; the fixed gateway always gives
the same answer and is what tests use.
"""

import logging
import random
from decimal import Decimal
from uuid import UUID

from storefront.domain.entities import PaymentMethod

logger = logging.getLogger(__name__)


class SimulatedPaymentGateway:
    """Approves payments with a fixed probability."""

    def __init__(self, success_rate: float = 0.9, rng: random.Random | None = None) -> None:
        """
        Initialize the gateway.

        Args:
            success_rate: Probability in [0, 1] that an attempt is approved
            rng: Random source; pass a seeded instance for reproducible runs
        """
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError(f"success_rate must be between 0 and 1, got {success_rate}")
        self.success_rate = success_rate
        self._rng = rng or random.Random()

    def authorize(self, order_id: UUID, amount: Decimal, method: PaymentMethod) -> bool:
        approved = self._rng.random() < self.success_rate
        logger.debug(
            f"Simulated payment {'approved' if approved else 'declined'}",
            extra={"order_id": str(order_id), "amount": str(amount), "method": method.value},
        )
        return approved


class FixedPaymentGateway:
    """Gives the same outcome for every attempt and remembers what it was asked."""

    def __init__(self, approve: bool = True) -> None:
        self.approve = approve
        self.attempts: list[tuple[UUID, Decimal, PaymentMethod]] = []

    def authorize(self, order_id: UUID, amount: Decimal, method: PaymentMethod) -> bool:
        self.attempts.append((order_id, amount, method))
        return self.approve
