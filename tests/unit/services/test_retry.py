"""
Unit Tests for Retry and Error Wrapper

Tests exception classification, retry counts for transient failures
and the non-raising safe_async wrapper.
"""

import pytest
from sqlalchemy.exc import DataError, OperationalError, SQLAlchemyError
from tenacity import wait_none

from zentia.domain.enums.error_kind import ErrorKind, ErrorSeverity
from zentia.domain.errors import AppError, ExternalServiceError
from zentia.services.resilience import retry as retry_module
from zentia.services.resilience.retry import (
    classify_exception,
    is_retryable,
    log_error,
    safe_async,
    with_retry,
)


def _operational_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection reset"))


class Flaky:
    """Async callable that raises scripted errors before returning a value."""

    def __init__(self, errors: list[BaseException], value: object = "ok") -> None:
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    async def __call__(self) -> object:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


class TestClassifyException:
    """Test exception classification."""

    @pytest.mark.parametrize(
        "exc,kind",
        [
            (ConnectionError("refused"), ErrorKind.NETWORK),
            (TimeoutError("timed out"), ErrorKind.NETWORK),
            (_operational_error(), ErrorKind.NETWORK),
            (DataError("SELECT 1", {}, Exception("invalid uuid")), ErrorKind.VALIDATION),
            (SQLAlchemyError("boom"), ErrorKind.DATABASE),
            (ValueError("bad"), ErrorKind.VALIDATION),
            (RuntimeError("???"), ErrorKind.UNKNOWN),
        ],
    )
    def test_kinds(self, exc: Exception, kind: ErrorKind) -> None:
        error = classify_exception(exc)
        assert error.kind == kind
        assert error.original_error is exc

    def test_app_error_passes_through(self) -> None:
        original = AppError("already classified", kind=ErrorKind.NOT_FOUND)
        assert classify_exception(original) is original

    def test_context_attached(self) -> None:
        error = classify_exception(ValueError("bad"), action="fetch_notes")
        assert error.context == {"action": "fetch_notes"}

    def test_unknown_is_high_severity(self) -> None:
        assert classify_exception(RuntimeError("x")).severity == ErrorSeverity.HIGH

    def test_retryable_kinds(self) -> None:
        assert is_retryable(classify_exception(ConnectionError()))
        assert is_retryable(classify_exception(SQLAlchemyError("x")))
        assert not is_retryable(classify_exception(ValueError()))
        assert not is_retryable(ExternalServiceError("gemini", "boom"))
        assert not is_retryable(RuntimeError("not an AppError"))


class TestWithRetry:
    """Test retry behaviour."""

    @pytest.mark.asyncio
    async def test_success_first_try(self) -> None:
        operation = Flaky([])
        assert await with_retry(operation, wait=wait_none()) == "ok"
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_transient_failures_then_success(self) -> None:
        operation = Flaky([ConnectionError("1"), ConnectionError("2")])
        result = await with_retry(operation, action="fetch", max_attempts=3, wait=wait_none())
        assert result == "ok"
        assert operation.calls == 3

    @pytest.mark.asyncio
    async def test_validation_error_not_retried(self) -> None:
        operation = Flaky([ValueError("bad id")])
        with pytest.raises(AppError) as exc_info:
            await with_retry(operation, wait=wait_none())
        assert exc_info.value.kind == ErrorKind.VALIDATION
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_exhausted_attempts_raise_last_error(self) -> None:
        operation = Flaky([_operational_error() for _ in range(5)])
        with pytest.raises(AppError) as exc_info:
            await with_retry(operation, max_attempts=3, wait=wait_none())
        assert exc_info.value.kind == ErrorKind.NETWORK
        assert operation.calls == 3

    @pytest.mark.asyncio
    async def test_external_service_error_not_retried(self) -> None:
        operation = Flaky([ExternalServiceError("gemini", "quota exceeded")])
        with pytest.raises(ExternalServiceError):
            await with_retry(operation, wait=wait_none())
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_custom_predicate(self) -> None:
        operation = Flaky([ValueError("a"), ValueError("b")])
        result = await with_retry(
            operation,
            should_retry=lambda error: error.kind == ErrorKind.VALIDATION,
            wait=wait_none(),
        )
        assert result == "ok"
        assert operation.calls == 3

    @pytest.mark.asyncio
    async def test_retries_counted(self, monkeypatch: pytest.MonkeyPatch) -> None:
        tracked: list[tuple[str, str]] = []
        monkeypatch.setattr(
            retry_module, "track_retry", lambda action, kind: tracked.append((action, kind))
        )
        operation = Flaky([ConnectionError(), ConnectionError()])
        await with_retry(operation, action="fetch_notes", wait=wait_none())
        assert tracked == [("fetch_notes", "network"), ("fetch_notes", "network")]


class TestSafeAsync:
    """Test the non-raising wrapper."""

    @pytest.fixture(autouse=True)
    def no_sentry(self, monkeypatch: pytest.MonkeyPatch) -> list:
        captured: list = []
        monkeypatch.setattr(
            retry_module, "capture_app_error", lambda error, **kwargs: captured.append(error)
        )
        return captured

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        result = await safe_async(Flaky([], value=42), action="a", component="c")
        assert result.ok
        assert result.data == 42

    @pytest.mark.asyncio
    async def test_failure_returns_fallback(self) -> None:
        result = await safe_async(
            Flaky([RuntimeError("boom")]),
            action="a",
            component="c",
            fallback="fallback",
        )
        assert not result.ok
        assert result.data == "fallback"
        assert result.error.kind == ErrorKind.UNKNOWN

    @pytest.mark.asyncio
    async def test_failure_reported(self, no_sentry: list) -> None:
        await safe_async(Flaky([RuntimeError("boom")]), action="a", component="c")
        assert len(no_sentry) == 1


class TestLogError:
    """Test severity-based reporting."""

    @pytest.fixture
    def captured(self, monkeypatch: pytest.MonkeyPatch) -> list:
        calls: list = []
        monkeypatch.setattr(
            retry_module, "capture_app_error", lambda error, **kwargs: calls.append(kwargs)
        )
        return calls

    def test_medium_is_reported(self, captured: list) -> None:
        error = AppError("db down", kind=ErrorKind.DATABASE, severity=ErrorSeverity.MEDIUM)
        log_error(error, action="fetch", component="repo", client_id="abc")
        assert captured == [{"action": "fetch", "component": "repo", "extra": {"client_id": "abc"}}]

    def test_low_is_not_reported(self, captured: list) -> None:
        error = AppError("bad", kind=ErrorKind.VALIDATION, severity=ErrorSeverity.LOW)
        log_error(error, action="fetch", component="repo")
        assert captured == []
