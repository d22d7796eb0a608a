"""
Client Context Domain Models

Read-only views of client data used to build prompts and summaries.
Built from database rows by the repository layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


UNKNOWN = "Unknown"


@dataclass
class ClientContext:
    """
    Known facts about a client.

    Attributes:
        name: Display name, "Unknown" when not available
        age: Age as text, "Unknown" when not available
        triggers: Known triggers
        coping_strategies: Known coping strategies (strings or
            mappings with a "title" key, as stored by the web client)
    """

    name: str = UNKNOWN
    age: str = UNKNOWN
    triggers: list[str] = field(default_factory=list)
    coping_strategies: list[Any] = field(default_factory=list)

    @property
    def coping_strategy_titles(self) -> list[str]:
        """Coping strategies rendered as plain titles."""
        titles = []
        for strategy in self.coping_strategies:
            if isinstance(strategy, dict):
                title = strategy.get("title")
            else:
                title = strategy
            if title:
                titles.append(str(title))
        return titles


def display_name_for(client_id: str) -> str:
    """Pseudonymous display name used when a client has no stored name."""
    return f"Client {client_id[:8]}" if client_id else UNKNOWN


@dataclass
class TherapyNote:
    """
    A single therapy note.

    Attributes:
        content: Note body
        title: Note title, if any
        created_at: Creation time, if known
        tags: Free-form tags
    """

    content: str
    title: Optional[str] = None
    created_at: Optional[datetime] = None
    tags: list[str] = field(default_factory=list)

    @property
    def date_label(self) -> str:
        """Date as YYYY-MM-DD, or "Unknown date"."""
        if self.created_at is None:
            return "Unknown date"
        return self.created_at.date().isoformat()


@dataclass
class MoodEntry:
    """Daily mood check-in."""

    mood_rating: Optional[float] = None
    created_at: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass
class JournalEntry:
    """Client journal entry."""

    content: str = ""
    created_at: Optional[datetime] = None


@dataclass
class AssessmentResult:
    """Scored questionnaire result (e.g. PHQ-9, GAD-7)."""

    instrument: str
    score: Optional[float] = None
    created_at: Optional[datetime] = None


@dataclass
class ProgressData:
    """
    Everything recorded for a client over a reporting period.

    Attributes:
        mood_entries: Daily mood check-ins
        journal_entries: Journal entries
        assessments: Assessment results
        notes: Therapy notes
    """

    mood_entries: list[MoodEntry] = field(default_factory=list)
    journal_entries: list[JournalEntry] = field(default_factory=list)
    assessments: list[AssessmentResult] = field(default_factory=list)
    notes: list[TherapyNote] = field(default_factory=list)

    # Rating assumed for entries saved without one (midpoint of 1-10)
    DEFAULT_MOOD_RATING = 5

    def average_mood(self) -> Optional[float]:
        """Mean mood rating, or None when there are no entries."""
        if not self.mood_entries:
            return None
        ratings = [
            entry.mood_rating if entry.mood_rating is not None else self.DEFAULT_MOOD_RATING
            for entry in self.mood_entries
        ]
        return sum(ratings) / len(ratings)
