"""
Application Interfaces

Contracts that the infrastructure layer implements: repositories, units of
work, the payment gateway, credential hashing and product decoding.
"""

from .exceptions import (
    DuplicateEntityError,
    ImmutableFieldError,
    RepositoryError,
    TransactionAlreadyActiveError,
    TransactionError,
    TransactionNotActiveError,
    UnknownFieldError,
)
from .payment_gateway import IPaymentGateway
from .repositories import IRepository, TEntity
from .security import IPasswordHasher
from .serialization import IProductDecoder
from .unit_of_work import IUnitOfWork, IUnitOfWorkFactory

__all__ = [
    # Repository interfaces
    "IRepository",
    "TEntity",
    # Unit of Work interfaces
    "IUnitOfWork",
    "IUnitOfWorkFactory",
    # Collaborators
    "IPaymentGateway",
    "IPasswordHasher",
    "IProductDecoder",
    # Exceptions
    "RepositoryError",
    "UnknownFieldError",
    "ImmutableFieldError",
    "DuplicateEntityError",
    "TransactionError",
    "TransactionNotActiveError",
    "TransactionAlreadyActiveError",
]
