"""
In-Memory Repository Implementation

Generic keyed store used for every entity type. Records are held as private
deep copies, so nothing a caller does to a returned object can change what
is stored.
"""

# Standard library imports
import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import AsyncExitStack, asynccontextmanager
from copy import deepcopy
from dataclasses import fields
from datetime import UTC, datetime, timedelta
import logging
from typing import Any, Generic
from uuid import UUID, uuid4

# Local imports
from storefront.application.interfaces import (
    DuplicateEntityError,
    ImmutableFieldError,
    TEntity,
    UnknownFieldError,
)
from storefront.domain.entities import SYSTEM_FIELDS

logger = logging.getLogger(__name__)

_TICK = timedelta(microseconds=1)


class InMemoryRepository(Generic[TEntity]):
    """
    In-memory implementation of IRepository.

    Every method body runs without awaiting, so each call is atomic on the
    event loop. Multi-step read-modify-write cycles use ``locked``.
    """

    def __init__(
        self,
        entity_type: type[TEntity],
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize an empty repository.

        Args:
            entity_type: Dataclass entity stored here
            clock: Source of timestamps; defaults to the current UTC time
        """
        self.entity_type = entity_type
        self.entity_name = entity_type.__name__
        self._field_names = frozenset(entity_field.name for entity_field in fields(entity_type))
        self._clock = clock or (lambda: datetime.now(UTC))

        self._records: dict[UUID, TEntity] = {}
        # Ids are never reissued, even after deletion
        self._issued_ids: set[UUID] = set()
        self._locks: dict[UUID, asyncio.Lock] = {}
        # Holders plus waiters per lock; an entry is dropped when this reaches zero
        self._lock_users: dict[UUID, int] = {}
        self._last_timestamp: datetime | None = None

    def _now(self) -> datetime:
        """Current time, strictly later than any timestamp issued before."""
        now = self._clock()
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + _TICK
        self._last_timestamp = now
        return now

    def _new_id(self) -> UUID:
        entity_id = uuid4()
        while entity_id in self._issued_ids:
            entity_id = uuid4()
        self._issued_ids.add(entity_id)
        return entity_id

    def _check_field(self, field_name: str) -> None:
        if field_name not in self._field_names:
            raise UnknownFieldError(self.entity_name, field_name)

    async def add(self, draft: TEntity) -> TEntity:
        if draft.id is not None:
            raise DuplicateEntityError(self.entity_name, draft.id)

        record = deepcopy(draft)
        record.id = self._new_id()
        record.created_at = record.updated_at = self._now()
        self._records[record.id] = record

        logger.debug(f"Added {self.entity_name} {record.id}")
        return deepcopy(record)

    async def get(self, entity_id: UUID) -> TEntity | None:
        record = self._records.get(entity_id)
        return deepcopy(record) if record is not None else None

    async def get_all(self) -> list[TEntity]:
        return [deepcopy(record) for record in self._records.values()]

    async def update(self, entity_id: UUID, **changes: Any) -> TEntity | None:
        for field_name in changes:
            if field_name in SYSTEM_FIELDS:
                raise ImmutableFieldError(self.entity_name, field_name)
            self._check_field(field_name)

        record = self._records.get(entity_id)
        if record is None:
            logger.debug(f"Update skipped, {self.entity_name} {entity_id} not found")
            return None

        for field_name, value in changes.items():
            setattr(record, field_name, deepcopy(value))
        record.updated_at = self._now()

        logger.debug(
            f"Updated {self.entity_name} {entity_id}",
            extra={"fields": sorted(changes)},
        )
        return deepcopy(record)

    async def delete(self, entity_id: UUID) -> bool:
        removed = self._records.pop(entity_id, None) is not None
        if removed:
            logger.debug(f"Deleted {self.entity_name} {entity_id}")
        return removed

    async def find_by(self, field_name: str, value: Any) -> list[TEntity]:
        self._check_field(field_name)
        return [
            deepcopy(record)
            for record in self._records.values()
            if getattr(record, field_name) == value
        ]

    async def exists(self, entity_id: UUID) -> bool:
        return entity_id in self._records

    async def count(self) -> int:
        return len(self._records)

    @asynccontextmanager
    async def locked(self, *entity_ids: UUID) -> AsyncIterator[None]:
        # Sorted acquisition keeps overlapping multi-id locks deadlock free
        async with AsyncExitStack() as stack:
            for entity_id in sorted(set(entity_ids), key=str):
                await stack.enter_async_context(self._entity_lock(entity_id))
            yield

    @asynccontextmanager
    async def _entity_lock(self, entity_id: UUID) -> AsyncIterator[None]:
        lock = self._locks.get(entity_id)
        if lock is None:
            lock = self._locks[entity_id] = asyncio.Lock()
        self._lock_users[entity_id] = self._lock_users.get(entity_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[entity_id] -= 1
            if not self._lock_users[entity_id]:
                del self._lock_users[entity_id]
                del self._locks[entity_id]

    def snapshot(self, entity_id: UUID) -> TEntity | None:
        """Private copy of a record as it is now, or None if absent."""
        record = self._records.get(entity_id)
        return deepcopy(record) if record is not None else None

    def restore(self, entity_id: UUID, snapshot: TEntity | None) -> None:
        """
        Put a record back to a previously taken snapshot.

        A None snapshot means the record did not exist, so it is removed.
        """
        if snapshot is None:
            self._records.pop(entity_id, None)
        else:
            self._records[entity_id] = deepcopy(snapshot)
