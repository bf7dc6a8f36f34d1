"""
User Entity - store accounts and their public profile view
"""

from __future__ import annotations

# Standard library imports
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from .base import BaseEntity


class UserRole(Enum):
    """User role enumeration"""

    CUSTOMER = "Customer"
    ADMIN = "Admin"
    SELLER = "Seller"


@dataclass(frozen=True)
class Address:
    """Postal address embedded in users and orders. Has no identity of its own."""

    street: str
    city: str
    state: str
    zip_code: str
    country: str


@dataclass(kw_only=True)
class User(BaseEntity):
    """
    User entity.

    ``password_hash`` never leaves the user directory; callers receive a
    UserProfile instead.
    """

    username: str
    email: str
    password_hash: str
    role: UserRole = UserRole.CUSTOMER
    address: Address | None = None
    phone: str | None = None


@dataclass(frozen=True, kw_only=True)
class UserProfile:
    """Read model of a user with the credential hash removed."""

    id: UUID
    username: str
    email: str
    role: UserRole
    address: Address | None
    phone: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserProfile:
        """Build a profile from a stored user."""
        if user.id is None or user.created_at is None or user.updated_at is None:
            raise ValueError("Cannot build a profile from a draft user")

        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            address=user.address,
            phone=user.phone,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
