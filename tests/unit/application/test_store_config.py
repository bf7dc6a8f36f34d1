"""
Tests for the store configuration module.

Tests configuration classes, environment and YAML loading, validation and
the module-level singleton.
"""

import os

import pytest

from storefront.application.config import (
    Environment,
    LoggingConfig,
    PaymentConfig,
    SecurityConfig,
    StoreConfig,
    get_config,
    reset_config,
    set_config,
)

STORE_ENV_VARS = (
    "ENVIRONMENT",
    "PASSWORD_HASH_ROUNDS",
    "PAYMENT_SUCCESS_RATE",
    "LOG_LEVEL",
    "LOG_FORMAT_TYPE",
    "LOG_FILE",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Private environment without store variables, run from an empty directory."""
    # .env loading writes to os.environ directly, so work on a copy
    environ = {k: v for k, v in os.environ.items() if k not in STORE_ENV_VARS}
    monkeypatch.setattr(os, "environ", environ)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestDefaults:
    def test_default_values(self):
        config = StoreConfig()

        assert config.environment == Environment.DEVELOPMENT
        assert config.security.password_hash_rounds == 12
        assert config.payment.success_rate == 0.9
        assert config.logging.level == "INFO"
        assert config.logging.format_type == "json"
        assert config.logging.file is None
        assert config.validate()

    def test_to_dict(self):
        assert StoreConfig().to_dict() == {
            "environment": "development",
            "security": {"password_hash_rounds": 12},
            "payment": {"success_rate": 0.9},
            "logging": {"level": "INFO", "format_type": "json", "file": None},
        }


class TestFromEnv:
    """Test loading from environment variables."""

    def test_reads_environment(self, clean_env):
        clean_env.setenv("ENVIRONMENT", "staging")
        clean_env.setenv("PASSWORD_HASH_ROUNDS", "10")
        clean_env.setenv("PAYMENT_SUCCESS_RATE", "0.5")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("LOG_FORMAT_TYPE", "TEXT")
        clean_env.setenv("LOG_FILE", "/tmp/store.log")

        config = StoreConfig.from_env()

        assert config.environment == Environment.STAGING
        assert config.security == SecurityConfig(password_hash_rounds=10)
        assert config.payment == PaymentConfig(success_rate=0.5)
        assert config.logging == LoggingConfig(
            level="DEBUG", format_type="text", file="/tmp/store.log"
        )

    def test_empty_log_file_means_none(self, clean_env):
        clean_env.setenv("LOG_FILE", "")

        assert StoreConfig.from_env().logging.file is None

    def test_invalid_environment(self, clean_env):
        clean_env.setenv("ENVIRONMENT", "moon")

        with pytest.raises(ValueError, match="Invalid environment"):
            StoreConfig.from_env()

    def test_reads_dotenv_file(self, clean_env, tmp_path):
        dotenv = tmp_path / "store.env"
        dotenv.write_text("PASSWORD_HASH_ROUNDS=6\nPAYMENT_SUCCESS_RATE=0.25\n")

        config = StoreConfig.from_env(dotenv)

        assert config.security.password_hash_rounds == 6
        assert config.payment.success_rate == 0.25

    def test_environment_wins_over_dotenv(self, clean_env, tmp_path):
        dotenv = tmp_path / "store.env"
        dotenv.write_text("PASSWORD_HASH_ROUNDS=6\n")
        clean_env.setenv("PASSWORD_HASH_ROUNDS", "8")

        assert StoreConfig.from_env(dotenv).security.password_hash_rounds == 8


class TestFromYaml:
    """Test loading from YAML files."""

    def test_partial_yaml(self, tmp_path):
        path = tmp_path / "store.yaml"
        path.write_text(
            "environment: testing\n"
            "security:\n"
            "  password_hash_rounds: 5\n"
            "logging:\n"
            "  level: warning\n"
        )

        config = StoreConfig.from_yaml(path)

        assert config.environment == Environment.TESTING
        assert config.security.password_hash_rounds == 5
        assert config.payment.success_rate == 0.9
        assert config.logging.level == "WARNING"
        assert config.logging.format_type == "json"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert StoreConfig.from_yaml(path) == StoreConfig()


class TestValidate:
    """Test configuration validation."""

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_hash_rounds_out_of_range(self, rounds):
        config = StoreConfig(security=SecurityConfig(password_hash_rounds=rounds))

        with pytest.raises(ValueError, match="hash rounds"):
            config.validate()

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_success_rate_out_of_range(self, rate):
        config = StoreConfig(payment=PaymentConfig(success_rate=rate))

        with pytest.raises(ValueError, match="success rate"):
            config.validate()

    def test_unknown_log_format(self):
        config = StoreConfig(logging=LoggingConfig(format_type="xml"))

        with pytest.raises(ValueError, match="log format"):
            config.validate()

    def test_production_requires_strong_hashing(self):
        config = StoreConfig(
            environment=Environment.PRODUCTION,
            security=SecurityConfig(password_hash_rounds=4),
        )

        with pytest.raises(ValueError, match="production"):
            config.validate()


class TestSingleton:
    def test_set_and_get(self):
        config = StoreConfig(environment=Environment.TESTING)
        set_config(config)

        assert get_config() is config

    def test_reset_reloads_from_environment(self, clean_env):
        set_config(StoreConfig(environment=Environment.TESTING))
        reset_config()

        assert get_config().environment == Environment.DEVELOPMENT
