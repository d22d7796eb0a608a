"""Domain enums package."""

from zentia.domain.enums.levels import UrgencyLevel, Intensity
from zentia.domain.enums.error_kind import ErrorKind, ErrorSeverity, RETRYABLE_KINDS
from zentia.domain.enums.status import ProviderStatus, ResponseSource

__all__ = [
    "UrgencyLevel",
    "Intensity",
    "ErrorKind",
    "ErrorSeverity",
    "RETRYABLE_KINDS",
    "ProviderStatus",
    "ResponseSource",
]
