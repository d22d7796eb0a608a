"""
Progress Tracking Database Models

Read-only mappings of the tables feeding progress summaries:
daily mood check-ins, journal entries and assessment results.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from zentia.infrastructure.database.connection import Base


class MoodEntryModel(Base):
    """Table: mood_entries"""

    __tablename__ = "mood_entries"

    id: Mapped[str] = mapped_column(PGUUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(PGUUID(as_uuid=False), index=True)
    mood_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, doc="1-10")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class JournalEntryModel(Base):
    """Table: journal_entries"""

    __tablename__ = "journal_entries"

    id: Mapped[str] = mapped_column(PGUUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(PGUUID(as_uuid=False), index=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class AssessmentModel(Base):
    """Table: assessments"""

    __tablename__ = "assessments"

    id: Mapped[str] = mapped_column(PGUUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(PGUUID(as_uuid=False), index=True)
    instrument: Mapped[str] = mapped_column(String, doc="Questionnaire, e.g. PHQ-9")
    score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
