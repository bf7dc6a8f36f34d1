"""
In-Memory Unit of Work Implementation

Concrete implementation of IUnitOfWork over the in-memory repositories.
Writes go straight to the shared repositories; the unit of work journals
the state each touched record had before its first change and puts it
back on rollback.
"""

# Standard library imports
import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Generic
from uuid import UUID

# Local imports
from storefront.application.interfaces import (
    IUnitOfWork,
    IUnitOfWorkFactory,
    TEntity,
    TransactionAlreadyActiveError,
    TransactionNotActiveError,
)
from storefront.domain.entities import Order, PaymentTransaction, Product, Review

from .in_memory_repository import InMemoryRepository

logger = logging.getLogger(__name__)


class _TrackedRepository(Generic[TEntity]):
    """Repository view that records before-images of every write."""

    def __init__(self, repository: InMemoryRepository[TEntity], unit_of_work: "InMemoryUnitOfWork"):
        self._repository = repository
        self._unit_of_work = unit_of_work
        self._journal: dict[UUID, TEntity | None] = {}

    def _remember(self, entity_id: UUID) -> None:
        self._unit_of_work.ensure_active()
        if entity_id not in self._journal:
            self._journal[entity_id] = self._repository.snapshot(entity_id)

    async def add(self, draft: TEntity) -> TEntity:
        self._unit_of_work.ensure_active()
        created = await self._repository.add(draft)
        self._journal.setdefault(created.id, None)
        return created

    async def update(self, entity_id: UUID, **changes: Any) -> TEntity | None:
        self._remember(entity_id)
        return await self._repository.update(entity_id, **changes)

    async def delete(self, entity_id: UUID) -> bool:
        self._remember(entity_id)
        return await self._repository.delete(entity_id)

    async def get(self, entity_id: UUID) -> TEntity | None:
        return await self._repository.get(entity_id)

    async def get_all(self) -> list[TEntity]:
        return await self._repository.get_all()

    async def find_by(self, field_name: str, value: Any) -> list[TEntity]:
        return await self._repository.find_by(field_name, value)

    async def exists(self, entity_id: UUID) -> bool:
        return await self._repository.exists(entity_id)

    async def count(self) -> int:
        return await self._repository.count()

    def locked(self, *entity_ids: UUID) -> AbstractAsyncContextManager[None]:
        return self._repository.locked(*entity_ids)

    def discard_journal(self) -> None:
        self._journal.clear()

    def undo(self) -> int:
        """Restore journaled records, newest first. Returns how many were restored."""
        restored = 0
        for entity_id, snapshot in reversed(list(self._journal.items())):
            self._repository.restore(entity_id, snapshot)
            restored += 1
        self._journal.clear()
        return restored


class InMemoryUnitOfWork(IUnitOfWork):
    """
    In-memory implementation of IUnitOfWork.

    Ensures all writes made within a unit of work are kept or undone
    together. Locking is left to the caller.
    """

    def __init__(
        self,
        products: InMemoryRepository[Product],
        orders: InMemoryRepository[Order],
        reviews: InMemoryRepository[Review],
        payments: InMemoryRepository[PaymentTransaction],
    ) -> None:
        self.products = _TrackedRepository(products, self)
        self.orders = _TrackedRepository(orders, self)
        self.reviews = _TrackedRepository(reviews, self)
        self.payments = _TrackedRepository(payments, self)
        self._active = False

    @property
    def _tracked(self) -> tuple[_TrackedRepository[Any], ...]:
        return (self.products, self.orders, self.reviews, self.payments)

    def ensure_active(self) -> None:
        if not self._active:
            raise TransactionNotActiveError()

    async def begin_transaction(self) -> None:
        if self._active:
            raise TransactionAlreadyActiveError()
        self._active = True
        logger.debug("Unit of Work transaction started")

    async def commit(self) -> None:
        self.ensure_active()
        for repository in self._tracked:
            repository.discard_journal()
        self._active = False
        logger.debug("Unit of Work transaction committed")

    async def rollback(self) -> None:
        if not self._active:
            logger.warning("No active transaction to rollback")
            return

        restored = sum(repository.undo() for repository in self._tracked)
        self._active = False
        logger.debug(f"Unit of Work transaction rolled back, {restored} records restored")

    async def is_active(self) -> bool:
        return self._active

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        """
        Async context manager entry.

        Automatically begins a transaction.
        """
        await self.begin_transaction()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        """
        Async context manager exit.

        Automatically commits on success or rolls back on exception.
        """
        if exc_type is None:
            await self.commit()
        else:
            logger.debug(f"Rolling back after {exc_type.__name__}: {exc_val}")
            await self.rollback()

        return False  # Don't suppress exceptions


class InMemoryUnitOfWorkFactory(IUnitOfWorkFactory):
    """Creates units of work bound to one set of shared repositories."""

    def __init__(
        self,
        products: InMemoryRepository[Product],
        orders: InMemoryRepository[Order],
        reviews: InMemoryRepository[Review],
        payments: InMemoryRepository[PaymentTransaction],
    ) -> None:
        self._products = products
        self._orders = orders
        self._reviews = reviews
        self._payments = payments

    def create_unit_of_work(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self._products, self._orders, self._reviews, self._payments)
