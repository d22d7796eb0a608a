"""
Therapy Data Repository

Read access to the client data that feeds prompts and summaries.
Rows are converted to domain dataclasses before leaving this module.

Single queries raise SQLAlchemy errors unchanged; callers wrap them with
the retry layer, which classifies and retries transient failures. The
concurrent progress fetch reports any failure as one DATABASE error.
"""

import asyncio
from datetime import datetime
from typing import Optional, Protocol, Sequence

from sqlalchemy import select

from zentia.config.logging_config import get_logger
from zentia.domain.enums.error_kind import ErrorKind, ErrorSeverity
from zentia.domain.errors import AppError
from zentia.domain.models.client_context import (
    UNKNOWN,
    AssessmentResult,
    ClientContext,
    JournalEntry,
    MoodEntry,
    ProgressData,
    TherapyNote,
)
from zentia.infrastructure.database.connection import DatabaseManager
from zentia.infrastructure.database.models import (
    AssessmentModel,
    ClientModel,
    JournalEntryModel,
    MoodEntryModel,
    NoteModel,
)

logger = get_logger(__name__)

# Notes included in an analysis when no explicit ids are given
DEFAULT_NOTES_LIMIT = 10


class TherapyRepository(Protocol):
    """Data access needed by the therapy AI service."""

    async def get_client_context(self, client_id: str) -> Optional[ClientContext]:
        ...

    async def list_notes(
        self,
        client_id: str,
        note_ids: Optional[Sequence[str]] = None,
        limit: Optional[int] = DEFAULT_NOTES_LIMIT,
    ) -> list[TherapyNote]:
        ...

    async def fetch_progress_data(self, client_id: str, since: datetime) -> ProgressData:
        ...

    async def health_check(self) -> bool:
        ...


class SqlAlchemyTherapyRepository:
    """
    TherapyRepository backed by the Supabase Postgres database.

    Usage:
        repo = SqlAlchemyTherapyRepository(get_db_manager())
        notes = await repo.list_notes(client_id)
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_client_context(self, client_id: str) -> Optional[ClientContext]:
        """
        Load the client's profile.

        Returns:
            ClientContext, or None when the client has no profile row
        """
        async with self._db.session() as session:
            client = await session.get(ClientModel, client_id)

        if client is None:
            return None

        return ClientContext(
            name=client.full_name or UNKNOWN,
            age=str(client.age) if client.age else UNKNOWN,
            triggers=[str(t) for t in client.triggers or [] if t],
            coping_strategies=list(client.coping_strategies or []),
        )

    async def list_notes(
        self,
        client_id: str,
        note_ids: Optional[Sequence[str]] = None,
        limit: Optional[int] = DEFAULT_NOTES_LIMIT,
    ) -> list[TherapyNote]:
        """
        Load a client's notes, newest first.

        Args:
            client_id: Client identifier
            note_ids: Restrict to these notes (limit is ignored)
            limit: Maximum notes to return; None for all
        """
        query = (
            select(NoteModel)
            .where(NoteModel.user_id == client_id)
            .order_by(NoteModel.created_at.desc())
        )
        if note_ids:
            query = query.where(NoteModel.id.in_(list(note_ids)))
        elif limit is not None:
            query = query.limit(limit)

        async with self._db.session() as session:
            result = await session.execute(query)
            rows = result.scalars().all()

        return [_to_note(row) for row in rows]

    async def fetch_progress_data(self, client_id: str, since: datetime) -> ProgressData:
        """
        Load everything recorded for a client since a point in time.

        The four queries run concurrently, each in its own session. Any
        failing query fails the whole fetch with a DATABASE AppError.
        """
        try:
            mood_rows, journal_rows, assessment_rows, note_rows = await asyncio.gather(
                self._rows_since(MoodEntryModel, client_id, since),
                self._rows_since(JournalEntryModel, client_id, since),
                self._rows_since(AssessmentModel, client_id, since),
                self._rows_since(NoteModel, client_id, since),
            )
        except AppError:
            raise
        except Exception as e:
            raise AppError(
                f"Progress data fetch failed: {type(e).__name__}",
                kind=ErrorKind.DATABASE,
                severity=ErrorSeverity.MEDIUM,
                context={"client_id": client_id},
                original_error=e,
            ) from e

        logger.debug(
            "Progress data fetched",
            client_id=client_id,
            mood_entries=len(mood_rows),
            journal_entries=len(journal_rows),
            assessments=len(assessment_rows),
            notes=len(note_rows),
        )

        return ProgressData(
            mood_entries=[
                MoodEntry(mood_rating=r.mood_rating, created_at=r.created_at, notes=r.notes)
                for r in mood_rows
            ],
            journal_entries=[
                JournalEntry(content=r.content or "", created_at=r.created_at)
                for r in journal_rows
            ],
            assessments=[
                AssessmentResult(instrument=r.instrument, score=r.score, created_at=r.created_at)
                for r in assessment_rows
            ],
            notes=[_to_note(r) for r in note_rows],
        )

    async def _rows_since(self, model, client_id: str, since: datetime) -> list:
        query = (
            select(model)
            .where(model.user_id == client_id, model.created_at >= since)
            .order_by(model.created_at.desc())
        )
        async with self._db.session() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def health_check(self) -> bool:
        return await self._db.health_check()


def _to_note(row: NoteModel) -> TherapyNote:
    return TherapyNote(
        content=row.content or "",
        title=row.title,
        created_at=row.created_at,
    )
