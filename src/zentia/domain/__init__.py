"""
Zentia Domain Layer

Core entities, enums and errors.
These models are independent of infrastructure.
"""

from zentia.domain.models import (
    ChatResponse,
    ChatMetadata,
    NotesAnalysis,
    EmotionalContext,
    ClientContext,
    TherapyNote,
    ProgressData,
)
from zentia.domain.enums import UrgencyLevel, Intensity, ErrorKind, ErrorSeverity
from zentia.domain.errors import (
    AppError,
    ServiceUnavailableError,
    ExternalServiceError,
    MalformedResponseError,
)

__all__ = [
    # Models
    "ChatResponse",
    "ChatMetadata",
    "NotesAnalysis",
    "EmotionalContext",
    "ClientContext",
    "TherapyNote",
    "ProgressData",
    # Enums
    "UrgencyLevel",
    "Intensity",
    "ErrorKind",
    "ErrorSeverity",
    # Errors
    "AppError",
    "ServiceUnavailableError",
    "ExternalServiceError",
    "MalformedResponseError",
]
