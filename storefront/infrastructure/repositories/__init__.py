"""
Repository implementations for the storefront.

In-memory repositories and the unit of work that makes multi-record
changes atomic.
"""

from .in_memory_repository import InMemoryRepository
from .unit_of_work import InMemoryUnitOfWork, InMemoryUnitOfWorkFactory

__all__ = [
    "InMemoryRepository",
    "InMemoryUnitOfWork",
    "InMemoryUnitOfWorkFactory",
]
