"""
Application Services

Store services built on the generic entity repository. Every operation
returns a ServiceResult.
"""

from .base import (
    ApplicationService,
    ErrorCategory,
    ErrorCode,
    ServiceResult,
    service_operation,
)
from .catalog import Catalog
from .order_workflow import LineItem, OrderWorkflow
from .payment_processor import PaymentProcessor
from .review_aggregator import ReviewAggregator
from .user_directory import UserDirectory, UserRegistration

__all__ = [
    "ApplicationService",
    "ErrorCategory",
    "ErrorCode",
    "ServiceResult",
    "service_operation",
    "Catalog",
    "LineItem",
    "OrderWorkflow",
    "PaymentProcessor",
    "ReviewAggregator",
    "UserDirectory",
    "UserRegistration",
]
