"""
Repository Interface Definitions

Defines the contract that entity stores must implement.
Following the Repository pattern and clean architecture principles.
"""

# Standard library imports
from abc import abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol, TypeVar
from uuid import UUID

# Local imports
from storefront.domain.entities import BaseEntity

TEntity = TypeVar("TEntity", bound=BaseEntity)


class IRepository(Protocol[TEntity]):
    """
    Generic entity repository interface.

    One repository holds records of one entity type keyed by id. Absence is a
    normal outcome and is reported as None or False, never raised.
    """

    @abstractmethod
    async def add(self, draft: TEntity) -> TEntity:
        """
        Store a new record.

        Args:
            draft: Record without id or timestamps

        Returns:
            The stored record with id, created_at and updated_at assigned

        Raises:
            DuplicateEntityError: If the draft already carries an id
        """
        ...

    @abstractmethod
    async def get(self, entity_id: UUID) -> TEntity | None:
        """
        Retrieve a record by id.

        Returns:
            The record if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_all(self) -> list[TEntity]:
        """Snapshot of every record, in insertion order."""
        ...

    @abstractmethod
    async def update(self, entity_id: UUID, **changes: Any) -> TEntity | None:
        """
        Merge the given fields into an existing record.

        Only the named fields change; ``updated_at`` is refreshed and
        ``id``/``created_at`` are preserved.

        Returns:
            The updated record, or None if no record has that id

        Raises:
            ImmutableFieldError: If a repository-managed field is named
            UnknownFieldError: If a field does not exist on the entity
        """
        ...

    @abstractmethod
    async def delete(self, entity_id: UUID) -> bool:
        """Remove a record. Returns whether a record was actually removed."""
        ...

    @abstractmethod
    async def find_by(self, field_name: str, value: Any) -> list[TEntity]:
        """
        All records whose field equals the value.

        Raises:
            UnknownFieldError: If the field does not exist on the entity
        """
        ...

    @abstractmethod
    async def exists(self, entity_id: UUID) -> bool:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    def locked(self, *entity_ids: UUID) -> AbstractAsyncContextManager[None]:
        """
        Serialize read-modify-write cycles on the given records.

        Holds one lock per id for the duration of the ``async with`` block.
        Multiple ids are always acquired in the same order.
        """
        ...
