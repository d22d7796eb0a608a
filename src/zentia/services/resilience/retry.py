"""
Retry and Error Wrapper

Brackets the data-fetch steps that feed prompt building:

- `classify_exception` turns any exception into an AppError with a kind
- `with_retry` re-runs an async operation on NETWORK/DATABASE failures
- `safe_async` runs an operation and returns a SafeResult instead of raising
- `log_error` logs a classified error and reports it to Sentry

AI generation is deliberately not wrapped here; a failed generation
goes straight to the fallback analyzer.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from sqlalchemy.exc import DataError, InterfaceError, OperationalError, SQLAlchemyError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from zentia.config.logging_config import get_logger
from zentia.domain.enums.error_kind import ErrorKind, ErrorSeverity
from zentia.domain.errors import AppError
from zentia.infrastructure.metrics.prometheus_metrics import track_retry
from zentia.infrastructure.monitoring.sentry_integration import capture_app_error

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3

_NETWORK_ERRORS = (OperationalError, InterfaceError, ConnectionError, TimeoutError, OSError)


def classify_exception(exc: BaseException, **context: Any) -> AppError:
    """
    Map an arbitrary exception to an AppError.

    AppErrors pass through unchanged. Connection-level failures are
    NETWORK, malformed query input (e.g. a non-UUID id) is VALIDATION,
    any other SQLAlchemy failure is DATABASE.
    """
    if isinstance(exc, AppError):
        return exc

    if isinstance(exc, _NETWORK_ERRORS):
        kind, severity = ErrorKind.NETWORK, ErrorSeverity.MEDIUM
    elif isinstance(exc, DataError):
        kind, severity = ErrorKind.VALIDATION, ErrorSeverity.LOW
    elif isinstance(exc, SQLAlchemyError):
        kind, severity = ErrorKind.DATABASE, ErrorSeverity.MEDIUM
    elif isinstance(exc, ValueError):
        kind, severity = ErrorKind.VALIDATION, ErrorSeverity.LOW
    else:
        kind, severity = ErrorKind.UNKNOWN, ErrorSeverity.HIGH

    return AppError(
        f"{type(exc).__name__}: {exc}",
        kind=kind,
        severity=severity,
        context=context,
        original_error=exc if isinstance(exc, Exception) else None,
    )


def is_retryable(error: BaseException) -> bool:
    """Retry only network and database failures."""
    return isinstance(error, AppError) and error.is_retryable


def _before_sleep(action: str) -> Callable[[RetryCallState], None]:
    def log_retry(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        kind = error.kind.value if isinstance(error, AppError) else "unknown"
        track_retry(action, kind)
        logger.warning(
            "Retrying operation",
            action=action,
            attempt=state.attempt_number,
            error_kind=kind,
        )
    return log_retry


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    action: str = "operation",
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    should_retry: Callable[[AppError], bool] = is_retryable,
    wait: Optional[wait_base] = None,
) -> T:
    """
    Run an async operation, retrying classified transient failures.

    Args:
        operation: Zero-argument coroutine factory
        action: Name used in logs and metrics
        max_attempts: Total attempts including the first
        should_retry: Predicate over the classified error
        wait: Tenacity wait strategy (exponential backoff by default)

    Returns:
        The operation's result

    Raises:
        AppError: The classified error of the final attempt, or the
            first error that should not be retried
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait if wait is not None else wait_exponential(multiplier=0.5, max=5),
        retry=retry_if_exception(lambda e: isinstance(e, AppError) and should_retry(e)),
        before_sleep=_before_sleep(action),
        reraise=True,
    )

    async for attempt in retrying:
        with attempt:
            try:
                return await operation()
            except AppError:
                raise
            except Exception as exc:
                raise classify_exception(exc, action=action) from exc

    # AsyncRetrying with reraise=True either returns or raises above
    raise AppError(f"{action} produced no result", context={"action": action})


@dataclass
class SafeResult(Generic[T]):
    """
    Outcome of `safe_async`.

    Attributes:
        data: Operation result, or the fallback value on failure
        error: Classified error when the operation failed
    """

    data: Optional[T] = None
    error: Optional[AppError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def safe_async(
    operation: Callable[[], Awaitable[T]],
    *,
    action: str,
    component: str,
    fallback: Optional[T] = None,
    **context: Any,
) -> SafeResult[T]:
    """
    Run an operation without raising.

    Failures are classified, logged and reported, and the fallback
    value is returned in their place.
    """
    try:
        return SafeResult(data=await operation())
    except Exception as exc:
        error = classify_exception(exc, action=action, **context)
        log_error(error, action=action, component=component, **context)
        return SafeResult(data=fallback, error=error)


def log_error(error: AppError, action: str, component: str, **context: Any) -> None:
    """
    Log a classified error and report it to Sentry.

    LOW severity errors are logged only.
    """
    fields = {
        **error.to_log_dict(),
        "action": action,
        "component": component,
        **context,
    }

    if error.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
        logger.error("Operation failed", **fields)
    elif error.severity is ErrorSeverity.MEDIUM:
        logger.warning("Operation failed", **fields)
    else:
        logger.info("Operation failed", **fields)

    if error.severity is not ErrorSeverity.LOW:
        capture_app_error(error, action=action, component=component, extra=context)
