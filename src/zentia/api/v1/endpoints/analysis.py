"""
Client Analysis Endpoints

Therapist-facing analyses: structured notes analysis and narrative
progress summaries.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from zentia.api.dependencies import get_therapy_service
from zentia.services.ai.therapy_ai_service import (
    MAX_SUMMARY_DAYS,
    MIN_SUMMARY_DAYS,
    TherapyAIService,
)

router = APIRouter()


class NotesAnalysisRequest(BaseModel):
    """Optional restriction to specific notes."""

    note_ids: Optional[list[str]] = Field(
        default=None,
        description="Notes to analyze; the latest 10 when omitted",
    )


class ProgressSummaryResponse(BaseModel):
    """Progress summary for a reporting period."""

    client_id: str
    days: int
    summary: str


@router.post(
    "/{client_id}/notes/analysis",
    summary="Analyze therapy notes",
)
async def analyze_notes(
    client_id: str,
    request: Optional[NotesAnalysisRequest] = None,
    service: TherapyAIService = Depends(get_therapy_service),
) -> dict:
    """Structured analysis of a client's therapy notes (camelCase wire names)."""
    note_ids = request.note_ids if request else None
    analysis = await service.analyze_therapy_notes(client_id, note_ids=note_ids)
    return analysis.to_dict()


@router.get(
    "/{client_id}/progress-summary",
    response_model=ProgressSummaryResponse,
    summary="Progress summary",
)
async def progress_summary(
    client_id: str,
    days: int = Query(default=30, ge=MIN_SUMMARY_DAYS, le=MAX_SUMMARY_DAYS),
    service: TherapyAIService = Depends(get_therapy_service),
) -> ProgressSummaryResponse:
    """Narrative summary of the client's progress over the last `days` days."""
    summary = await service.generate_progress_summary(client_id, days=days)
    return ProgressSummaryResponse(client_id=client_id, days=days, summary=summary)
