"""
Error Classification Enumerations

Machine-readable kinds drive the retry policy; severity drives
how loudly an error is reported.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Application error taxonomy."""

    VALIDATION = "validation"
    """Bad caller input. Never retried."""

    NETWORK = "network"
    """Transport failure reaching a hosted service. Retried."""

    DATABASE = "database"
    """Query failure reported by the database. Retried."""

    EXTERNAL_SERVICE = "external_service"
    """AI service unavailable or errored. Not retried, triggers fallback."""

    MALFORMED_RESPONSE = "malformed_response"
    """AI output could not be parsed. Triggers fallback."""

    NOT_FOUND = "not_found"
    """Requested record does not exist. Never retried."""

    UNKNOWN = "unknown"


class ErrorSeverity(StrEnum):
    """How serious an error is for operations."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset({
    ErrorKind.NETWORK,
    ErrorKind.DATABASE,
})
