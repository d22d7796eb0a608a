"""
Urgency and Intensity Enumerations

Coarse three-step scales attached to chat responses and derived
emotional context.

CLINICAL_REVIEW_REQUIRED: The meaning of each level for human
follow-up should be agreed with the therapist team.
"""

from enum import StrEnum


class UrgencyLevel(StrEnum):
    """
    Triage signal attached to a generated chat response.

    Used by the therapist dashboard to flag messages for follow-up.
    """

    LOW = "low"
    """No follow-up signal."""

    MEDIUM = "medium"
    """Distress detected; therapist should review at next opportunity."""

    HIGH = "high"
    """Prompt human follow-up recommended."""

    @classmethod
    def parse(cls, value: object) -> "UrgencyLevel":
        """
        Parse a loosely-typed value into an urgency level.

        Anything unrecognised (including None) maps to LOW so the
        level is never missing.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.LOW
        return cls.LOW


class Intensity(StrEnum):
    """Emotional intensity estimated from a single message."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
