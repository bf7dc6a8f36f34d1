"""
Password hashing service.

Handles one-way hashing of user passwords and verification at login.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)


class PasswordValidator:
    """Checks that a password can be hashed."""

    # bcrypt only reads the first 72 bytes of its input
    MAX_BYTES = 72

    @classmethod
    def validate(cls, password: str) -> tuple[bool, list[str]]:
        """
        Validate a plaintext password.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        if not password:
            errors.append("Password is required")
        elif len(password.encode("utf-8")) > cls.MAX_BYTES:
            errors.append(f"Password must not exceed {cls.MAX_BYTES} bytes")

        return len(errors) == 0, errors


class PasswordHasher:
    """Bcrypt password hashing utility."""

    def __init__(self, rounds: int = 12) -> None:
        """Initialize with bcrypt rounds (cost factor)."""
        self.rounds = rounds
        self.validator = PasswordValidator()

    def validate(self, password: str) -> list[str]:
        _, errors = self.validator.validate(password)
        return errors

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Raises:
            ValueError: If the password fails validation
        """
        errors = self.validate(password)
        if errors:
            raise ValueError("; ".join(errors))

        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against its hash. A corrupt hash never matches."""
        if self.validate(password):
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError as e:
            logger.error(f"Password verification failed: {e}")
            return False
