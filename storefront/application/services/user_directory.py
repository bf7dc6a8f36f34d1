"""
User Directory

Registration, authentication and profile maintenance. The stored password
hash never leaves this service: every operation returns a UserProfile.
"""

import asyncio
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from storefront.application.interfaces import IPasswordHasher, IRepository
from storefront.domain.entities import SYSTEM_FIELDS, Address, User, UserProfile, UserRole

from .base import ApplicationService, ErrorCode, ServiceResult, service_operation

# Fields callers may never set through update_profile.
PROTECTED_PROFILE_FIELDS = SYSTEM_FIELDS | {"password_hash", "password"}


@dataclass(kw_only=True)
class UserRegistration:
    """Data needed to register a user. ``password`` is plaintext and never stored."""

    username: str
    email: str
    password: str
    role: UserRole = UserRole.CUSTOMER
    address: Address | None = None
    phone: str | None = None

    def __repr__(self) -> str:
        return f"UserRegistration(username={self.username!r}, role={self.role.value})"


class UserDirectory(ApplicationService):
    """
    Service for user accounts.

    Username uniqueness is checked and written under one directory-wide lock,
    so two concurrent registrations of the same name cannot both succeed.
    """

    def __init__(self, users: IRepository[User], password_hasher: IPasswordHasher) -> None:
        super().__init__("UserDirectory")
        self._users = users
        self._password_hasher = password_hasher
        self._username_lock = asyncio.Lock()

    @service_operation("register")
    async def register(self, registration: UserRegistration) -> ServiceResult[UserProfile]:
        """
        Register a new user.

        Args:
            registration: Username, contact details, role and plaintext password

        Returns:
            Result with the new user's profile, or DUPLICATE_USERNAME
        """
        if not registration.username or not registration.password:
            return self._failure(
                ErrorCode.MALFORMED_REQUEST, "Username and password are required."
            )
        password_errors = self._password_hasher.validate(registration.password)
        if password_errors:
            return self._failure(
                ErrorCode.MALFORMED_REQUEST,
                f"{'; '.join(password_errors)}.",
                username=registration.username,
            )

        async with self._username_lock:
            if await self._users.find_by("username", registration.username):
                return self._failure(
                    ErrorCode.DUPLICATE_USERNAME,
                    "Username already exists.",
                    username=registration.username,
                )

            user = await self._users.add(
                User(
                    username=registration.username,
                    email=registration.email,
                    password_hash=self._password_hasher.hash(registration.password),
                    role=registration.role,
                    address=registration.address,
                    phone=registration.phone,
                )
            )

        self.logger.info(
            "User registered", extra={"user_id": str(user.id), "role": user.role.value}
        )
        return ServiceResult.success_response(UserProfile.from_user(user))

    @service_operation("authenticate")
    async def authenticate(self, username: str, password: str) -> ServiceResult[UserProfile]:
        """Check a username/password pair and return the matching profile."""
        matches = await self._users.find_by("username", username)
        if not matches:
            return self._failure(ErrorCode.USER_NOT_FOUND, "User not found.", username=username)

        user = matches[0]
        if not self._password_hasher.verify(password, user.password_hash):
            return self._failure(
                ErrorCode.INVALID_CREDENTIALS, "Invalid credentials.", user_id=user.id
            )

        return ServiceResult.success_response(UserProfile.from_user(user))

    @service_operation("get_profile")
    async def get_profile(self, user_id: UUID) -> ServiceResult[UserProfile]:
        user = await self._users.get(user_id)
        if user is None:
            return self._failure(ErrorCode.USER_NOT_FOUND, "User not found.", user_id=user_id)
        return ServiceResult.success_response(UserProfile.from_user(user))

    @service_operation("update_profile")
    async def update_profile(self, user_id: UUID, **changes: Any) -> ServiceResult[UserProfile]:
        """
        Update profile fields of an existing user.

        Credentials and repository-managed fields cannot be changed here.
        A new username must not belong to another user.
        """
        rejected = sorted(
            PROTECTED_PROFILE_FIELDS.intersection(changes).union(
                self._unknown_fields(User, changes)
            )
        )
        if rejected:
            return self._failure(
                ErrorCode.MALFORMED_REQUEST,
                f"Fields cannot be updated: {', '.join(rejected)}.",
                user_id=user_id,
            )
        if "username" in changes and not changes["username"]:
            return self._failure(
                ErrorCode.MALFORMED_REQUEST, "Username cannot be empty.", user_id=user_id
            )

        async with self._username_lock:
            if "username" in changes:
                owners = await self._users.find_by("username", changes["username"])
                if any(owner.id != user_id for owner in owners):
                    return self._failure(
                        ErrorCode.DUPLICATE_USERNAME, "Username already exists.", user_id=user_id
                    )

            async with self._users.locked(user_id):
                updated = await self._users.update(user_id, **changes)

        if updated is None:
            return self._failure(ErrorCode.USER_NOT_FOUND, "User not found.", user_id=user_id)
        return ServiceResult.success_response(UserProfile.from_user(updated))

    async def user_exists(self, user_id: UUID) -> bool:
        return await self._users.exists(user_id)
