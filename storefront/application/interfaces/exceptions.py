"""
Repository Exception Definitions

Defines exceptions that repositories and units of work may raise.
These signal programming errors or transaction misuse; expected business
outcomes such as a missing record are returned as values instead.
"""

# Standard library imports
from uuid import UUID


class RepositoryError(Exception):
    """Base exception for repository operations."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class UnknownFieldError(RepositoryError):
    """Raised when a query or update names a field the entity does not have."""

    def __init__(self, entity_type: str, field: str) -> None:
        super().__init__(f"{entity_type} has no field '{field}'")
        self.entity_type = entity_type
        self.field = field


class ImmutableFieldError(RepositoryError):
    """Raised when an update tries to change a repository-managed field."""

    def __init__(self, entity_type: str, field: str) -> None:
        super().__init__(f"{entity_type}.{field} cannot be changed by an update")
        self.entity_type = entity_type
        self.field = field


class DuplicateEntityError(RepositoryError):
    """Raised when a record that already has an identity is added again."""

    def __init__(self, entity_type: str, identifier: UUID | str) -> None:
        super().__init__(f"{entity_type} with identifier '{identifier}' already exists")
        self.entity_type = entity_type
        self.identifier = identifier


class TransactionError(RepositoryError):
    """Base exception for transaction operations."""

    pass


class TransactionNotActiveError(TransactionError):
    """Raised when operation requires active transaction but none exists."""

    def __init__(self) -> None:
        super().__init__("No active transaction")


class TransactionAlreadyActiveError(TransactionError):
    """Raised when attempting to start transaction when one is already active."""

    def __init__(self) -> None:
        super().__init__("Transaction is already active")
