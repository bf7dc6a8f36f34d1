"""
Base Entity - identity and timestamps shared by every persisted record
"""

from __future__ import annotations

# Standard library imports
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

# Fields managed by the repository; callers never set them directly.
SYSTEM_FIELDS = frozenset({"id", "created_at", "updated_at"})


@dataclass(kw_only=True)
class BaseEntity:
    """
    Common attributes of every stored record.

    A record whose ``id`` is None is a draft: it has not been added to a
    repository yet. The repository assigns ``id`` and both timestamps on add,
    and refreshes ``updated_at`` on every update.
    """

    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_draft(self) -> bool:
        """True until the record has been stored."""
        return self.id is None
