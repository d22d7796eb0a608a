"""
Notes Analysis Domain Model

Structured analysis of a client's therapy notes, shown on the
therapist dashboard.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from zentia.domain.models.chat_response import first_present, unique_strings


WELLBEING_MIN = 0
WELLBEING_MAX = 100
WELLBEING_NEUTRAL = 50

NOTES_ANALYSIS_ALIASES: dict[str, tuple[str, ...]] = {
    "summary": ("summary", "riassunto"),
    "main_themes": ("mainThemes", "main_themes", "temiPrincipali"),
    "progress_notes": ("progressNotes", "progress_notes", "progressi"),
    "recommendations": ("recommendations", "raccomandazioni"),
    "wellbeing_score": ("wellbeingScore", "wellbeing_score", "punteggioBenessere"),
    "attention_areas": ("attentionAreas", "attention_areas", "areeAttenzione"),
    "strategies": ("strategies", "strategie"),
}


def clamp_wellbeing(score: Any) -> int:
    """
    Coerce a score to an int clamped to [0, 100].

    Unparseable values and NaN mean neutral; infinities clamp by sign.
    """
    if isinstance(score, int):
        return max(WELLBEING_MIN, min(WELLBEING_MAX, score))
    try:
        value = float(score)
    except (TypeError, ValueError, OverflowError):
        return WELLBEING_NEUTRAL
    if math.isnan(value):
        return WELLBEING_NEUTRAL
    if math.isinf(value):
        return WELLBEING_MAX if value > 0 else WELLBEING_MIN
    return max(WELLBEING_MIN, min(WELLBEING_MAX, int(round(value))))


@dataclass
class NotesAnalysis:
    """
    Therapy notes analysis.

    Attributes:
        summary: Short narrative summary
        main_themes: Recurring themes
        progress_notes: Observed progress
        recommendations: Suggested next steps
        wellbeing_score: Overall wellbeing estimate (0-100)
        attention_areas: Areas needing attention
        strategies: Coping strategies in use or suggested
    """

    summary: str
    main_themes: list[str] = field(default_factory=list)
    progress_notes: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    wellbeing_score: int = WELLBEING_NEUTRAL
    attention_areas: list[str] = field(default_factory=list)
    strategies: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.wellbeing_score = clamp_wellbeing(self.wellbeing_score)

    @classmethod
    def empty(cls) -> "NotesAnalysis":
        """Fixed analysis returned when a client has no notes."""
        return cls(
            summary=(
                "No therapy notes available for analysis. "
                "Continue regular monitoring and therapeutic activities."
            ),
            main_themes=["Initial assessment", "Baseline establishment"],
            progress_notes=[
                "Started mental health monitoring",
                "Engaged with digital therapy tools",
            ],
            recommendations=[
                "Continue regular monitoring",
                "Schedule therapy sessions",
                "Complete initial assessments",
            ],
            wellbeing_score=WELLBEING_NEUTRAL,
            attention_areas=["Assessment completion", "Regular engagement"],
            strategies=["Daily check-ins", "Mood tracking", "Coping skills practice"],
        )

    @classmethod
    def from_payload(cls, data: dict) -> "NotesAnalysis":
        """
        Build an analysis from a parsed model payload.

        Raises:
            ValueError: If the summary is missing or empty
        """
        summary = first_present(data, NOTES_ANALYSIS_ALIASES["summary"])
        if not isinstance(summary, str) or not summary.strip():
            raise ValueError("NotesAnalysis summary must be a non-empty string")

        def strings(name: str) -> list[str]:
            return unique_strings(first_present(data, NOTES_ANALYSIS_ALIASES[name]))

        return cls(
            summary=summary.strip(),
            main_themes=strings("main_themes"),
            progress_notes=strings("progress_notes"),
            recommendations=strings("recommendations"),
            wellbeing_score=first_present(data, NOTES_ANALYSIS_ALIASES["wellbeing_score"]),
            attention_areas=strings("attention_areas"),
            strategies=strings("strategies"),
        )

    def to_dict(self) -> dict:
        """Serialize with wire names."""
        return {
            "summary": self.summary,
            "mainThemes": list(self.main_themes),
            "progressNotes": list(self.progress_notes),
            "recommendations": list(self.recommendations),
            "wellbeingScore": self.wellbeing_score,
            "attentionAreas": list(self.attention_areas),
            "strategies": list(self.strategies),
        }
