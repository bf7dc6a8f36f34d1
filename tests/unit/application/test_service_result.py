"""Unit tests for the service result envelope and operation logging."""

import logging

import pytest

from storefront.application.services import (
    ApplicationService,
    ErrorCategory,
    ErrorCode,
    ServiceResult,
    service_operation,
)


class TestServiceResult:
    """Test ServiceResult construction and rendering."""

    def test_success_response(self):
        result = ServiceResult.success_response({"id": 1}, message="done")

        assert result.success
        assert result.data == {"id": 1}
        assert result.message == "done"
        assert result.error is None
        assert result.error_code is None
        assert not result.is_partial

    def test_error_response(self):
        result = ServiceResult.error_response(ErrorCode.PRODUCT_NOT_FOUND, "Product not found.")

        assert not result.success
        assert result.error == "Product not found."
        assert result.error_category == ErrorCategory.NOT_FOUND
        assert not result.is_partial

    def test_partial_failure(self):
        result = ServiceResult.error_response(
            ErrorCode.PAYMENT_DECLINED, "Payment failed.", data="txn"
        )

        assert result.is_partial

    def test_request_ids_are_unique(self):
        assert ServiceResult.success_response().request_id != (
            ServiceResult.success_response().request_id
        )

    def test_to_dict_omits_empty_keys(self):
        assert ServiceResult.success_response().to_dict() == {"success": True}
        assert ServiceResult.error_response(ErrorCode.INVALID_RATING, "bad").to_dict() == {
            "success": False,
            "error": "bad",
            "error_code": "invalid_rating",
        }

    @pytest.mark.parametrize(
        "code,category",
        [
            (ErrorCode.USER_NOT_FOUND, ErrorCategory.NOT_FOUND),
            (ErrorCode.INVALID_PRICE, ErrorCategory.VALIDATION),
            (ErrorCode.DUPLICATE_USERNAME, ErrorCategory.CONFLICT),
            (ErrorCode.INSUFFICIENT_STOCK, ErrorCategory.CONFLICT),
            (ErrorCode.INVALID_CREDENTIALS, ErrorCategory.AUTH_FAILURE),
        ],
    )
    def test_error_categories(self, code, category):
        assert code.category == category

    def test_every_code_has_a_category(self):
        for code in ErrorCode:
            assert isinstance(code.category, ErrorCategory)


class EchoService(ApplicationService):
    @service_operation("echo")
    async def echo(self, value):
        return ServiceResult.success_response(value)

    @service_operation("reject")
    async def reject(self):
        return self._failure(ErrorCode.MALFORMED_REQUEST, "Rejected.", order_id="o-1")

    @service_operation("explode")
    async def explode(self):
        raise RuntimeError("boom")


class TestServiceOperation:
    """Test the logging decorator."""

    @pytest.mark.asyncio
    async def test_logs_completion(self, caplog):
        service = EchoService()

        with caplog.at_level(logging.DEBUG):
            result = await service.echo(42)

        assert result.data == 42
        completed = [r for r in caplog.records if r.getMessage() == "EchoService.echo completed"]
        assert len(completed) == 1
        assert completed[0].success is True
        assert completed[0].request_id == str(result.request_id)

    @pytest.mark.asyncio
    async def test_expected_failure_logged_as_warning(self, caplog):
        service = EchoService()

        with caplog.at_level(logging.INFO):
            result = await service.reject()

        assert result.error_code == ErrorCode.MALFORMED_REQUEST
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert warnings[0].error_code == "malformed_request"
        assert warnings[0].order_id == "o-1"

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_logged_and_raised(self, caplog):
        service = EchoService()

        with caplog.at_level(logging.ERROR), pytest.raises(RuntimeError, match="boom"):
            await service.explode()

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert errors[0].error_type == "RuntimeError"
        assert errors[0].exc_info is not None

    def test_service_name_defaults_to_class(self):
        assert EchoService().name == "EchoService"
        assert EchoService("custom").logger.name.endswith(".custom")
