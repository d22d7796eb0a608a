"""
Database ORM models package.
"""

from zentia.infrastructure.database.models.client_model import ClientModel
from zentia.infrastructure.database.models.note_model import NoteModel
from zentia.infrastructure.database.models.progress_models import (
    AssessmentModel,
    JournalEntryModel,
    MoodEntryModel,
)

__all__ = [
    "ClientModel",
    "NoteModel",
    "MoodEntryModel",
    "JournalEntryModel",
    "AssessmentModel",
]
