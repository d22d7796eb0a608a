"""Retry and error handling package."""

from zentia.services.resilience.retry import (
    SafeResult,
    classify_exception,
    is_retryable,
    log_error,
    safe_async,
    with_retry,
)

__all__ = [
    "SafeResult",
    "classify_exception",
    "is_retryable",
    "log_error",
    "safe_async",
    "with_retry",
]
