"""Domain entities for the storefront."""

from .base import SYSTEM_FIELDS, BaseEntity
from .order import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    calculate_total,
)
from .payment import PaymentTransaction, TransactionStatus
from .product import Product, ProductCategory
from .review import MAX_RATING, MIN_RATING, Review
from .user import Address, User, UserProfile, UserRole

__all__ = [
    "SYSTEM_FIELDS",
    "BaseEntity",
    "Address",
    "User",
    "UserProfile",
    "UserRole",
    "Product",
    "ProductCategory",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "calculate_total",
    "Review",
    "MIN_RATING",
    "MAX_RATING",
    "PaymentTransaction",
    "TransactionStatus",
]
