"""
Structured Logging for the Storefront

JSON structured logs with correlation IDs, OpenTelemetry trace context,
store-specific log fields and sensitive data masking. Credentials never
reach a log line: password fields are dropped and card or token values
are masked.
"""

import json
import logging
import re
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from opentelemetry import trace

# Context variables for correlation tracking
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)

# Fields grouped under "store" in JSON output
STORE_FIELDS = ("service", "operation", "order_id", "product_id", "transaction_id")

# Attributes every LogRecord carries; anything else came in through ``extra``
_STANDARD_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "correlation_id",
        "user_id",
        "trace_id",
        "span_id",
        *STORE_FIELDS,
    }
)


@dataclass
class SensitiveDataConfig:
    """Field-name patterns whose values are masked in store logs."""

    # Card details that may travel with a payment attempt
    payment_patterns: list[str] = field(
        default_factory=lambda: [
            r"credit[_-]?card",
            r"card[_-]?number",
            r"cvv",
            r"card[_-]?expiry",
        ]
    )

    # Customer contact details kept out of operational logs
    contact_patterns: list[str] = field(default_factory=lambda: [r"phone", r"email"])

    # Deployment secrets
    secret_patterns: list[str] = field(
        default_factory=lambda: [r"api[_-]?key", r"secret[_-]?key", r"access[_-]?token"]
    )

    mask_replacement: str = "***MASKED***"

    # Dropped from extra fields entirely
    excluded_fields: set[str] = field(
        default_factory=lambda: {"password", "password_hash", "passwd", "secret", "token"}
    )

    @property
    def patterns(self) -> list[str]:
        return self.payment_patterns + self.contact_patterns + self.secret_patterns


class SensitiveDataMasker:
    """Masks sensitive data in log messages and extra fields."""

    def __init__(self, config: SensitiveDataConfig | None = None) -> None:
        self.config = config or SensitiveDataConfig()
        self._compiled_patterns = self._compile_patterns()

    def _compile_patterns(self) -> list[re.Pattern[str]]:
        """Compile all sensitive data patterns."""
        compiled = []
        for pattern in self.config.patterns:
            try:
                # Match key:value or key=value pairs
                full_pattern = rf'("{pattern}":\s*"[^"]*"|{pattern}=\S+|{pattern}:\s*\S+)'
                compiled.append(re.compile(full_pattern, re.IGNORECASE))
            except re.error as e:
                logging.getLogger(__name__).warning(f"Invalid regex pattern '{pattern}': {e}")

        return compiled

    def mask_message(self, message: str) -> str:
        """Mask sensitive data in log message."""
        masked_message = message

        for pattern in self._compiled_patterns:
            masked_message = pattern.sub(lambda m: self._replace_value(m.group(0)), masked_message)

        return masked_message

    def mask_extra_fields(self, extra: dict[str, Any]) -> dict[str, Any]:
        """Mask sensitive data in extra log fields."""
        if not extra:
            return extra

        masked_extra = {}

        for key, value in extra.items():
            # Exclude sensitive fields entirely
            if key.lower() in self.config.excluded_fields:
                continue

            if self._is_sensitive_field(key):
                masked_extra[key] = self.config.mask_replacement
            elif isinstance(value, str):
                masked_extra[key] = self.mask_message(value)
            elif isinstance(value, dict):
                masked_extra[key] = self.mask_extra_fields(value)  # type: ignore[assignment]
            else:
                masked_extra[key] = value

        return masked_extra

    def _is_sensitive_field(self, field_name: str) -> bool:
        """Check if field name indicates sensitive data."""
        field_lower = field_name.lower()
        return any(re.search(pattern, field_lower) for pattern in self.config.patterns)

    def _replace_value(self, match: str) -> str:
        """Replace matched value with mask."""
        if ":" in match:
            key_part = match.split(":", 1)[0]
            return f'{key_part}: "{self.config.mask_replacement}"'
        elif "=" in match:
            key_part = match.split("=", 1)[0]
            return f"{key_part}={self.config.mask_replacement}"
        else:
            return self.config.mask_replacement


class StoreContextFilter(logging.Filter):
    """Attaches correlation and tracing context to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        # An explicit user_id passed through ``extra`` wins over the context
        if getattr(record, "user_id", None) is None:
            record.user_id = user_id_var.get()

        span = trace.get_current_span()
        span_context = span.get_span_context()
        if span.is_recording() and span_context.is_valid:
            record.trace_id = format(span_context.trace_id, "032x")
            record.span_id = format(span_context.span_id, "016x")
        else:
            record.trace_id = None
            record.span_id = None

        return True


class StoreJSONFormatter(logging.Formatter):
    """JSON formatter for structured store logs."""

    def __init__(
        self,
        sensitive_data_config: SensitiveDataConfig | None = None,
        include_extra: bool = True,
        sort_keys: bool = True,
    ):
        super().__init__()
        self.include_extra = include_extra
        self.sort_keys = sort_keys
        self.masker = SensitiveDataMasker(sensitive_data_config)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self.masker.mask_message(record.getMessage()),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Correlation and tracing context
        for context_field in ("correlation_id", "user_id", "trace_id", "span_id"):
            value = getattr(record, context_field, None)
            if value:
                log_entry[context_field] = self._serialize_value(value)

        store_fields = {
            name: self._serialize_value(getattr(record, name))
            for name in STORE_FIELDS
            if getattr(record, name, None) is not None
        }
        if store_fields:
            log_entry["store"] = store_fields

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_extra:
            extra = {
                key: self._serialize_value(value)
                for key, value in record.__dict__.items()
                if key not in _STANDARD_FIELDS and not key.startswith("_")
            }
            extra = self.masker.mask_extra_fields(extra)
            if extra:
                log_entry["extra"] = extra

        return json.dumps(log_entry, sort_keys=self.sort_keys, default=self._serialize_value)

    def _serialize_value(self, value: Any) -> Any:
        """Serialize complex values for JSON output."""
        # Money stays exact
        if isinstance(value, (Decimal, UUID)):
            return str(value)
        elif isinstance(value, Enum):
            return value.value
        elif isinstance(value, datetime):
            return value.isoformat()
        elif isinstance(value, (set, frozenset)):
            return sorted(str(item) for item in value)
        elif hasattr(value, "__dict__"):
            return str(value)
        return value


# Correlation ID management
def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def get_correlation_id() -> str | None:
    """Get current correlation ID."""
    return correlation_id_var.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Context manager for correlation ID scope."""
    if correlation_id is None:
        correlation_id = generate_correlation_id()

    token = correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_var.reset(token)


@contextmanager
def user_context(user_id: str) -> Generator[None, None, None]:
    """Context manager for the acting user's scope."""
    token = user_id_var.set(user_id)
    try:
        yield
    finally:
        user_id_var.reset(token)


def mask_sensitive_data(
    data: str | dict[str, Any], config: SensitiveDataConfig | None = None
) -> str | dict[str, Any]:
    """Utility function to mask sensitive data."""
    masker = SensitiveDataMasker(config)

    if isinstance(data, str):
        return masker.mask_message(data)
    return masker.mask_extra_fields(data)


def setup_structured_logging(
    level: str = "INFO",
    format_type: str = "json",
    sensitive_data_config: SensitiveDataConfig | None = None,
    log_file: str | None = None,
    stream: Any = None,
) -> None:
    """
    Setup structured logging for the storefront.

    Args:
        level: Logging level
        format_type: Formatter type ('json' or 'text')
        sensitive_data_config: Sensitive data masking configuration
        log_file: Optional log file path
        stream: Console stream; defaults to stdout
    """
    # Clear any existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter: StoreJSONFormatter | logging.Formatter
    if format_type == "json":
        formatter = StoreJSONFormatter(sensitive_data_config)
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    context_filter = StoreContextFilter()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, level.upper()))

    logging.info("Structured logging configured successfully")
