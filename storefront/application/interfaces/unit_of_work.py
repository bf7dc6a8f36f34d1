"""
Unit of Work Interface

Defines the contract for managing transactions across multiple repositories.
Implements the Unit of Work pattern for atomic operations.
"""

# Standard library imports
from abc import abstractmethod
from typing import Protocol

# Local imports
from storefront.domain.entities import Order, PaymentTransaction, Product, Review

from .repositories import IRepository


class IUnitOfWork(Protocol):
    """
    Unit of Work interface for transaction management.

    Changes made through the repositories exposed here become visible
    immediately but are undone by ``rollback``.
    """

    # Repository access
    products: IRepository[Product]
    orders: IRepository[Order]
    reviews: IRepository[Review]
    payments: IRepository[PaymentTransaction]

    @abstractmethod
    async def begin_transaction(self) -> None:
        """
        Begin a new transaction.

        Raises:
            TransactionAlreadyActiveError: If a transaction is already active
        """
        ...

    @abstractmethod
    async def commit(self) -> None:
        """
        Commit the current transaction, keeping every change.

        Raises:
            TransactionNotActiveError: If no transaction is active
        """
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """
        Rollback the current transaction.

        Restores every record touched through this unit of work to the state
        it had when first touched. Does nothing if no transaction is active.
        """
        ...

    @abstractmethod
    async def is_active(self) -> bool:
        ...

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        """Begin a transaction and return self."""
        ...

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Commit on a clean exit, roll back if an exception escaped."""
        ...


class IUnitOfWorkFactory(Protocol):
    """
    Factory interface for creating Unit of Work instances.

    Allows for different implementations (e.g., for testing vs production).
    """

    @abstractmethod
    def create_unit_of_work(self) -> IUnitOfWork:
        ...
