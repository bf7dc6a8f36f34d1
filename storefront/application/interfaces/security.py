"""Credential hashing interface used by the user directory."""

# Standard library imports
from abc import abstractmethod
from typing import Protocol


class IPasswordHasher(Protocol):
    """One-way credential transform."""

    @abstractmethod
    def validate(self, password: str) -> list[str]:
        """Reasons the password cannot be hashed, empty if it can."""
        ...

    @abstractmethod
    def hash(self, password: str) -> str:
        """Derive the stored hash for a plaintext password."""
        ...

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plaintext password against a stored hash."""
        ...
