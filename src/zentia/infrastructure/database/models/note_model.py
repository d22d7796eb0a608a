"""
Therapy Note Database Model

Read-only mapping of the Supabase `notes` table.

PRIVACY: Note content is clinical data and must never be logged.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from zentia.infrastructure.database.connection import Base


class NoteModel(Base):
    """
    Therapy note written about a client.

    Table: notes
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(PGUUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        PGUUID(as_uuid=False),
        index=True,
        doc="Client the note is about",
    )
    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<NoteModel(id={self.id}, user_id={self.user_id})>"
