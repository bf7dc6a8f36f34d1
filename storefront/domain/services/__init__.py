"""Domain services - business rules that span a single entity's lifecycle."""

from .order_state_machine import MANUAL_TRANSITIONS, OrderStateMachine, StatusTransition
from .rating_calculator import ProductRatingCalculator, RatingSummary

__all__ = [
    "MANUAL_TRANSITIONS",
    "OrderStateMachine",
    "StatusTransition",
    "ProductRatingCalculator",
    "RatingSummary",
]
