"""
Store Configuration - Central configuration management.

This module provides configuration for the store services: credential
hashing cost, the simulated payment gateway, and logging. Values come from
environment variables (a ``.env`` file is loaded first) or a YAML file.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# bcrypt accepts cost factors in this range
MIN_HASH_ROUNDS = 4
MAX_HASH_ROUNDS = 31

LOG_FORMAT_TYPES = ("json", "text")


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class SecurityConfig:
    """Credential hashing configuration."""

    password_hash_rounds: int = 12

    @classmethod
    def from_env(cls) -> "SecurityConfig":
        """Create configuration from environment variables."""
        return cls(password_hash_rounds=int(os.getenv("PASSWORD_HASH_ROUNDS", "12")))


@dataclass
class PaymentConfig:
    """Payment gateway configuration."""

    success_rate: float = 0.9

    @classmethod
    def from_env(cls) -> "PaymentConfig":
        """Create configuration from environment variables."""
        return cls(success_rate=float(os.getenv("PAYMENT_SUCCESS_RATE", "0.9")))


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format_type: str = "json"
    file: str | None = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create configuration from environment variables."""
        file_path = os.getenv("LOG_FILE")
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            format_type=os.getenv("LOG_FORMAT_TYPE", "json").lower(),
            file=file_path if file_path else None,
        )


@dataclass
class StoreConfig:
    """Main store configuration."""

    environment: Environment = Environment.DEVELOPMENT
    security: SecurityConfig = field(default_factory=SecurityConfig)
    payment: PaymentConfig = field(default_factory=PaymentConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "StoreConfig":
        """
        Create configuration from environment variables.

        Args:
            dotenv_path: Optional .env file; variables already set in the
                environment take precedence over it

        Returns:
            StoreConfig: Configuration loaded from environment
        """
        load_dotenv(dotenv_path)

        env_str = os.getenv("ENVIRONMENT", "development")
        try:
            environment = Environment(env_str)
        except ValueError:
            raise ValueError(f"Invalid environment: {env_str}")

        return cls(
            environment=environment,
            security=SecurityConfig.from_env(),
            payment=PaymentConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "StoreConfig":
        """
        Load configuration from a YAML file.

        Missing sections and keys keep their defaults.
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        config = cls()

        # Handle empty or null YAML files
        if not data:
            return config

        if "environment" in data:
            config.environment = Environment(data["environment"])

        if "security" in data:
            config.security = SecurityConfig(
                password_hash_rounds=int(
                    data["security"].get(
                        "password_hash_rounds", config.security.password_hash_rounds
                    )
                )
            )

        if "payment" in data:
            config.payment = PaymentConfig(
                success_rate=float(
                    data["payment"].get("success_rate", config.payment.success_rate)
                )
            )

        if "logging" in data:
            log_data = data["logging"]
            config.logging = LoggingConfig(
                level=str(log_data.get("level", config.logging.level)).upper(),
                format_type=str(log_data.get("format_type", config.logging.format_type)).lower(),
                file=log_data.get("file", config.logging.file),
            )

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "environment": self.environment.value,
            "security": {
                "password_hash_rounds": self.security.password_hash_rounds,
            },
            "payment": {
                "success_rate": self.payment.success_rate,
            },
            "logging": {
                "level": self.logging.level,
                "format_type": self.logging.format_type,
                "file": self.logging.file,
            },
        }

    def validate(self) -> bool:
        """
        Validate the configuration.

        Returns:
            True if valid, raises exception otherwise
        """
        rounds = self.security.password_hash_rounds
        if not MIN_HASH_ROUNDS <= rounds <= MAX_HASH_ROUNDS:
            raise ValueError(
                f"Password hash rounds must be between {MIN_HASH_ROUNDS} and "
                f"{MAX_HASH_ROUNDS}, got {rounds}"
            )

        if not 0.0 <= self.payment.success_rate <= 1.0:
            raise ValueError(
                f"Payment success rate must be between 0 and 1, got {self.payment.success_rate}"
            )

        if self.logging.format_type not in LOG_FORMAT_TYPES:
            raise ValueError(f"Invalid log format type: {self.logging.format_type}")

        if self.environment == Environment.PRODUCTION and rounds < 10:
            raise ValueError("Password hash rounds below 10 are not allowed in production")

        return True


# Global configuration singleton
_config: StoreConfig | None = None


def get_config() -> StoreConfig:
    """
    Get the store configuration singleton.

    Returns:
        StoreConfig: The store configuration, loaded from the environment on first use
    """
    global _config
    if _config is None:
        _config = StoreConfig.from_env()
    return _config


def set_config(config: StoreConfig) -> None:
    """
    Set the store configuration.

    Args:
        config: The new configuration
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the configuration singleton."""
    global _config
    _config = None
