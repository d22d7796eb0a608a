"""
Fallback Analyzer

Deterministic, offline substitute for the AI model. Produces the same
response shapes whenever the model is unavailable or its output cannot
be used.

This is the system's correctness backstop: every public method is
total and always returns a structurally valid result.

CLINICAL_REVIEW_REQUIRED: Response templates and scoring weights
should be validated by the therapist team.
"""

from typing import Optional, Sequence

from zentia.config.logging_config import get_logger
from zentia.domain.enums.levels import UrgencyLevel
from zentia.domain.models.chat_response import ChatMetadata, ChatResponse
from zentia.domain.models.client_context import ProgressData, TherapyNote
from zentia.domain.models.emotional_context import EmotionalContext
from zentia.domain.models.notes_analysis import (
    WELLBEING_NEUTRAL,
    NotesAnalysis,
    clamp_wellbeing,
)
from zentia.services.detection.emotion_analyzer import EmotionAnalyzer, match_categories

logger = get_logger(__name__)


# =============================================================================
# CHAT TABLES
# =============================================================================

# Emotion category -> template key
TEMPLATE_FOR_EMOTION: dict[str, str] = {
    "anxiety": "anxiety",
    "panic": "anxiety",
    "sadness": "sadness",
    "depression": "sadness",
    "stress": "stress",
    "anger": "anger",
}

CHAT_TEMPLATES: dict[str, str] = {
    "anxiety": (
        "I hear you are going through a moment of anxiety. Remember that these "
        "feelings are temporary. Try the 4-7-8 breathing technique we practiced together."
    ),
    "sadness": (
        "I understand you are feeling down. It is important to acknowledge these "
        "feelings without judgment. Have you tried any of the grounding techniques we discussed?"
    ),
    "stress": (
        "Stress can be really tough. Remember to take breaks and use the stress "
        "management strategies we are developing together."
    ),
    "anger": (
        "It sounds like something has really upset you, and that is okay to feel. "
        "Taking a few slow breaths before responding can help you regain a sense of control."
    ),
    "generic": (
        "Thank you for sharing your thoughts with me. I am here to support you. "
        "How can I best help you right now?"
    ),
}

# Emotions that warrant therapist review
MEDIUM_URGENCY_EMOTIONS: frozenset[str] = frozenset({
    "anxiety",
    "panic",
    "sadness",
    "depression",
})

FALLBACK_STRATEGIES: tuple[str, ...] = ("breathing", "mindfulness")
FALLBACK_REFERENCES: tuple[str, ...] = ("CBT techniques", "stress management")

# =============================================================================
# NOTES TABLES
# =============================================================================

THEME_KEYWORDS: dict[str, tuple[str, ...]] = {
    "anxiety": ("anxiety",),
    "depression": ("depression",),
    "stress management": ("stress",),
    "interpersonal relationships": ("relationship",),
    "work stress": ("work",),
    "family dynamics": ("family",),
    "self-esteem": ("self-esteem",),
    "sleep disturbances": ("sleep",),
}

PROGRESS_KEYWORDS: dict[str, tuple[str, ...]] = {
    "General improvements observed": ("improvement",),
    "Progress in therapeutic strategies": ("progress",),
    "Development of effective coping strategies": ("coping",),
    "Increased emotional awareness": ("awareness",),
}

STRATEGY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Breathing techniques": ("breathing",),
    "Mindfulness practices": ("mindfulness",),
    "Grounding exercises": ("grounding",),
    "Cognitive-behavioral techniques": ("cbt",),
    "Relaxation techniques": ("relaxation",),
}

# Every keyword in a rule must be present
ATTENTION_RULES: dict[str, tuple[str, ...]] = {
    "High levels of anxiety": ("anxiety", "high"),
    "Sleep disturbances": ("sleep", "problem"),
    "Tendency to social isolation": ("isolation",),
    "Excessive work stress": ("work", "stress"),
}

# Keyword -> wellbeing adjustment
WELLBEING_ADJUSTMENTS: dict[str, int] = {
    "improvement": 15,
    "progress": 10,
    "positive": 10,
    "good": 5,
    "worsening": -15,
    "crisis": -20,
    "difficulty": -10,
}

DEFAULT_THEME = "General wellbeing"
DEFAULT_PROGRESS = "Progress under evaluation"
DEFAULT_STRATEGY = "Personalized strategies in development"
DEFAULT_ATTENTION_AREA = "Regular monitoring"

FALLBACK_RECOMMENDATIONS: tuple[str, ...] = (
    "Continue with practiced coping techniques",
    "Monitor identified triggers",
    "Maintain self-observation routine",
)

MAX_THEMES = 5


class FallbackAnalyzer:
    """
    Rule-based substitute for AI-generated chat replies, notes analyses
    and progress summaries.

    Usage:
        fallback = FallbackAnalyzer()
        response = fallback.chat_response("I'm very anxious about work")
    """

    def __init__(self, emotion_analyzer: Optional[EmotionAnalyzer] = None) -> None:
        self._emotion_analyzer = emotion_analyzer or EmotionAnalyzer()

    # -------------------------------------------------------------------------
    # Chat
    # -------------------------------------------------------------------------

    def chat_response(
        self,
        message: str,
        context: Optional[EmotionalContext] = None,
    ) -> ChatResponse:
        """
        Build a supportive reply from keyword matching.

        Args:
            message: User message (any string)
            context: Pre-computed emotional context; derived from the
                message when omitted

        Returns:
            ChatResponse with a canned template and urgency low or medium
        """
        if context is None:
            context = self._emotion_analyzer.analyze(message or "")

        template_key = next(
            (TEMPLATE_FOR_EMOTION[e] for e in context.emotions if e in TEMPLATE_FOR_EMOTION),
            "generic",
        )
        urgency = (
            UrgencyLevel.MEDIUM
            if MEDIUM_URGENCY_EMOTIONS.intersection(context.emotions)
            else UrgencyLevel.LOW
        )

        logger.debug(
            "Fallback chat response selected",
            template=template_key,
            urgency=urgency.value,
            intensity=context.intensity.value,
        )

        return ChatResponse(
            content=CHAT_TEMPLATES[template_key],
            metadata=ChatMetadata(
                detected_emotions=list(context.emotions) or ["neutral"],
                identified_triggers=list(context.triggers),
                suggested_strategies=list(FALLBACK_STRATEGIES),
                urgency_level=urgency,
                therapeutic_references=list(FALLBACK_REFERENCES),
            ),
        )

    # -------------------------------------------------------------------------
    # Notes analysis
    # -------------------------------------------------------------------------

    def analyze_notes(self, notes: Sequence[TherapyNote]) -> NotesAnalysis:
        """
        Keyword-based notes analysis.

        Returns the fixed empty analysis when there are no notes. All
        output lists are non-empty.
        """
        if not notes:
            return NotesAnalysis.empty()

        text = " ".join((note.content or "").lower() for note in notes)

        themes = match_categories(text, THEME_KEYWORDS)[:MAX_THEMES] or [DEFAULT_THEME]
        progress = match_categories(text, PROGRESS_KEYWORDS) or [DEFAULT_PROGRESS]
        strategies = match_categories(text, STRATEGY_KEYWORDS) or [DEFAULT_STRATEGY]
        attention = self._attention_areas(text) or [DEFAULT_ATTENTION_AREA]

        return NotesAnalysis(
            summary=(
                f"Analyzed {len(notes)} therapy sessions. "
                f"Themes related to {' and '.join(themes[:2])} emerge."
            ),
            main_themes=themes,
            progress_notes=progress,
            recommendations=list(FALLBACK_RECOMMENDATIONS),
            wellbeing_score=self.wellbeing_score(text),
            attention_areas=attention,
            strategies=strategies,
        )

    def wellbeing_score(self, text: str) -> int:
        """Score from 50, adjusted per matched keyword, clamped to [0, 100]."""
        text_lower = (text or "").lower()
        score = WELLBEING_NEUTRAL + sum(
            delta for keyword, delta in WELLBEING_ADJUSTMENTS.items() if keyword in text_lower
        )
        return clamp_wellbeing(score)

    def _attention_areas(self, text: str) -> list[str]:
        return [
            area
            for area, keywords in ATTENTION_RULES.items()
            if all(keyword in text for keyword in keywords)
        ]

    # -------------------------------------------------------------------------
    # Progress summary
    # -------------------------------------------------------------------------

    def progress_summary(self, data: ProgressData, days: int) -> str:
        """Template progress summary built from record counts."""
        note_count = len(data.notes)
        assessment_count = len(data.assessments)
        mood_count = len(data.mood_entries)
        journal_count = len(data.journal_entries)

        commitment = "good" if note_count > 0 else "needs improvement"
        monitoring = "shows consistency" if mood_count > 10 else "needs more regularity"

        return (
            f"**Progress Summary - Last {days} days**\n\n"
            f"In the analyzed period, {note_count} therapy sessions, {assessment_count} "
            f"assessments, {mood_count} daily monitoring entries and {journal_count} "
            "journal entries were recorded.\n\n"
            "**General Observations:**\n"
            f"The client's commitment to the therapeutic process is {commitment} "
            f"considering the frequency of sessions. Daily monitoring {monitoring}.\n\n"
            "**Recommendations:**\n"
            "- Maintain regularity of therapy sessions\n"
            "- Continue daily mood monitoring\n"
            "- Implement coping strategies discussed in sessions\n\n"
            "*Summary generated automatically - for detailed analysis, consult the complete notes.*"
        )
