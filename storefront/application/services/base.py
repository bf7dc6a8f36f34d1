"""
Base Service

Provides the foundation for all store services in the application layer:
the uniform result envelope, the error taxonomy, and the logging that wraps
every service operation.
"""

import functools
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Generic, ParamSpec, TypeVar
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")


class ErrorCategory(Enum):
    """Broad classes of expected failures."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    AUTH_FAILURE = "auth_failure"


class ErrorCode(Enum):
    """Every expected failure a service can report."""

    USER_NOT_FOUND = "user_not_found"
    PRODUCT_NOT_FOUND = "product_not_found"
    ORDER_NOT_FOUND = "order_not_found"

    INVALID_PRICE = "invalid_price"
    INVALID_STOCK = "invalid_stock"
    INVALID_RATING = "invalid_rating"
    MALFORMED_REQUEST = "malformed_request"
    INVALID_STATUS_TRANSITION = "invalid_status_transition"

    DUPLICATE_USERNAME = "duplicate_username"
    INVALID_PAYMENT = "invalid_payment"
    INSUFFICIENT_STOCK = "insufficient_stock"
    PAYMENT_DECLINED = "payment_declined"

    INVALID_CREDENTIALS = "invalid_credentials"

    @property
    def category(self) -> ErrorCategory:
        return _ERROR_CATEGORIES[self]


_ERROR_CATEGORIES: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.USER_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.PRODUCT_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.ORDER_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.INVALID_PRICE: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_STOCK: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_RATING: ErrorCategory.VALIDATION,
    ErrorCode.MALFORMED_REQUEST: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_STATUS_TRANSITION: ErrorCategory.VALIDATION,
    ErrorCode.DUPLICATE_USERNAME: ErrorCategory.CONFLICT,
    ErrorCode.INVALID_PAYMENT: ErrorCategory.CONFLICT,
    ErrorCode.INSUFFICIENT_STOCK: ErrorCategory.CONFLICT,
    ErrorCode.PAYMENT_DECLINED: ErrorCategory.CONFLICT,
    ErrorCode.INVALID_CREDENTIALS: ErrorCategory.AUTH_FAILURE,
}


@dataclass
class ServiceResult(Generic[T]):
    """
    Uniform envelope returned by every service operation.

    ``success=False`` always carries ``error`` and ``error_code``. A failure
    may still carry ``data`` (a declined payment returns the recorded
    transaction); ``is_partial`` flags that case.
    """

    success: bool
    data: T | None = None
    message: str | None = None
    error: str | None = None
    error_code: ErrorCode | None = None
    request_id: UUID = field(default_factory=uuid4)

    @classmethod
    def success_response(
        cls, data: T | None = None, message: str | None = None
    ) -> "ServiceResult[T]":
        """Create a successful response."""
        return cls(success=True, data=data, message=message)

    @classmethod
    def error_response(
        cls, error_code: ErrorCode, error: str, data: T | None = None
    ) -> "ServiceResult[T]":
        """Create an error response."""
        return cls(success=False, data=data, error=error, error_code=error_code)

    @property
    def error_category(self) -> ErrorCategory | None:
        return self.error_code.category if self.error_code else None

    @property
    def is_partial(self) -> bool:
        """A failure that still produced a payload."""
        return not self.success and self.data is not None

    def to_dict(self) -> dict[str, Any]:
        """Render the envelope with only the populated keys."""
        result: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data
        if self.message is not None:
            result["message"] = self.message
        if self.error is not None:
            result["error"] = self.error
        if self.error_code is not None:
            result["error_code"] = self.error_code.value
        return result


ServiceCall = Callable[P, Awaitable[ServiceResult[Any]]]


def service_operation(operation: str) -> Callable[[ServiceCall[P]], ServiceCall[P]]:
    """
    Decorator for logging service operations.

    Logs the call, its outcome and duration on the service's logger.
    Unexpected exceptions are logged with traceback and re-raised.
    """

    def decorator(func: ServiceCall[P]) -> ServiceCall[P]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> ServiceResult[Any]:
            service = args[0]
            service_logger = getattr(service, "logger", logger)
            service_name = getattr(service, "name", type(service).__name__)
            extra = {"service": service_name, "operation": operation}

            service_logger.debug(f"Executing {service_name}.{operation}", extra=extra)
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                service_logger.error(
                    f"Error executing {service_name}.{operation}: {e}",
                    extra={
                        **extra,
                        "duration_ms": (time.perf_counter() - start_time) * 1000,
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
                raise

            service_logger.info(
                f"{service_name}.{operation} completed",
                extra={
                    **extra,
                    "duration_ms": (time.perf_counter() - start_time) * 1000,
                    "success": result.success,
                    "request_id": str(result.request_id),
                },
            )
            return result

        return wrapper

    return decorator


class ApplicationService:
    """
    Base class for store services.

    Gives each service a named logger and a helper that logs expected
    failures before wrapping them in a result.
    """

    def __init__(self, name: str | None = None) -> None:
        """
        Initialize service.

        Args:
            name: Optional name for the service (defaults to class name)
        """
        self.name = name or self.__class__.__name__
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @staticmethod
    def _unknown_fields(entity_type: type, changes: dict[str, Any]) -> list[str]:
        """Names in ``changes`` that are not fields of the entity type."""
        known = {entity_field.name for entity_field in fields(entity_type)}
        return sorted(name for name in changes if name not in known)

    def _failure(
        self,
        error_code: ErrorCode,
        error: str,
        data: Any | None = None,
        **context: Any,
    ) -> ServiceResult[Any]:
        """Log an expected failure and build the error result."""
        self.logger.warning(
            f"{self.name}: {error}",
            extra={
                "service": self.name,
                "error_code": error_code.value,
                **{key: str(value) for key, value in context.items()},
            },
        )
        return ServiceResult.error_response(error_code, error, data=data)
