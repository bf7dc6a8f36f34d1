"""Credential handling for the storefront."""

from .password_service import PasswordHasher, PasswordValidator

__all__ = ["PasswordHasher", "PasswordValidator"]
