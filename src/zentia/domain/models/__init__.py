"""Domain models package."""

from zentia.domain.models.chat_response import ChatResponse, ChatMetadata
from zentia.domain.models.notes_analysis import NotesAnalysis
from zentia.domain.models.emotional_context import EmotionalContext
from zentia.domain.models.client_context import (
    ClientContext,
    TherapyNote,
    MoodEntry,
    JournalEntry,
    AssessmentResult,
    ProgressData,
)

__all__ = [
    # Responses
    "ChatResponse",
    "ChatMetadata",
    "NotesAnalysis",
    # Per-message context
    "EmotionalContext",
    # Client data
    "ClientContext",
    "TherapyNote",
    "MoodEntry",
    "JournalEntry",
    "AssessmentResult",
    "ProgressData",
]
