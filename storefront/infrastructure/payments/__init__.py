"""Payment gateway implementations."""

from .simulated_gateway import FixedPaymentGateway, SimulatedPaymentGateway

__all__ = ["FixedPaymentGateway", "SimulatedPaymentGateway"]
