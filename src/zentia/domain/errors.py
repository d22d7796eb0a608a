"""
Application Errors

Typed errors carrying a machine kind, a severity, structured context
and an optional user-safe message.

The user-safe message is the only part that may ever reach an end
user; `str(error)` is for logs.
"""

from typing import Any, Optional

from zentia.domain.enums.error_kind import ErrorKind, ErrorSeverity, RETRYABLE_KINDS


class AppError(Exception):
    """
    Base application error.

    Attributes:
        kind: Machine-readable classification
        severity: Operational severity
        context: Structured data for logs (no message text)
        user_message: Safe text to show an end user, if any
        original_error: Wrapped lower-level exception
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[dict[str, Any]] = None,
        user_message: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.severity = severity
        self.context = context or {}
        self.user_message = user_message
        self.original_error = original_error

    @property
    def is_retryable(self) -> bool:
        """Only network and database failures are worth retrying."""
        return self.kind in RETRYABLE_KINDS

    def to_log_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        return {
            "error_kind": self.kind.value,
            "error_severity": self.severity.value,
            "error_message": str(self),
            "error_context": self.context,
            "original_error": type(self.original_error).__name__ if self.original_error else None,
        }


class ServiceUnavailableError(AppError):
    """AI service is not configured; the system runs in fallback mode."""

    def __init__(self, provider: str, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            f"{provider} API key not configured",
            kind=ErrorKind.EXTERNAL_SERVICE,
            severity=ErrorSeverity.MEDIUM,
            context={"provider": provider, **(context or {})},
            user_message="AI service temporarily unavailable. Using fallback responses.",
        )
        self.provider = provider


class ExternalServiceError(AppError):
    """The AI service was reached but failed or refused to answer."""

    def __init__(
        self,
        provider: str,
        message: str,
        reason: str = "error",
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            f"{provider} error: {message}",
            kind=ErrorKind.EXTERNAL_SERVICE,
            severity=ErrorSeverity.HIGH,
            context={"provider": provider, "reason": reason},
            user_message="AI service temporarily unavailable. Using fallback responses.",
            original_error=original_error,
        )
        self.provider = provider
        self.reason = reason


class MalformedResponseError(AppError):
    """AI output could not be turned into the expected structure."""

    def __init__(self, reason: str, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            f"Malformed AI response: {reason}",
            kind=ErrorKind.MALFORMED_RESPONSE,
            severity=ErrorSeverity.LOW,
            context={"reason": reason, **(context or {})},
        )
        self.reason = reason


def validation_error(
    message: str,
    user_message: str,
    **context: Any,
) -> AppError:
    """Build a validation error (never retried)."""
    return AppError(
        message,
        kind=ErrorKind.VALIDATION,
        severity=ErrorSeverity.MEDIUM,
        context=context,
        user_message=user_message,
    )
