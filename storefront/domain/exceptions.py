"""
Domain-level exceptions for the storefront.

Expected business failures (missing records, bad prices, duplicate usernames)
are reported through service results, not raised. The exceptions here cover
input that cannot be interpreted at all.
"""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class MalformedDataError(DomainException):
    """
    Raised when externally supplied data cannot be decoded into an entity.

    Decoding happens before any repository is touched, so a raised
    MalformedDataError never leaves partial state behind.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        index: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if field is not None:
            details["field"] = field
        if index is not None:
            details["index"] = index

        super().__init__(message, details)
        self.field = field
        self.index = index
