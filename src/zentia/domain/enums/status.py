"""Service status enumerations."""

from enum import StrEnum


class ProviderStatus(StrEnum):
    """Availability of the external AI provider."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class ResponseSource(StrEnum):
    """Which path produced a response."""

    GEMINI = "gemini"
    FALLBACK = "fallback"
