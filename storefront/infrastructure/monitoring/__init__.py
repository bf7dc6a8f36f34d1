"""Logging and tracing support for the storefront."""

from .logging import (
    SensitiveDataConfig,
    SensitiveDataMasker,
    StoreContextFilter,
    StoreJSONFormatter,
    correlation_context,
    get_correlation_id,
    mask_sensitive_data,
    setup_structured_logging,
    user_context,
)

__all__ = [
    "SensitiveDataConfig",
    "SensitiveDataMasker",
    "StoreContextFilter",
    "StoreJSONFormatter",
    "correlation_context",
    "get_correlation_id",
    "mask_sensitive_data",
    "setup_structured_logging",
    "user_context",
]
