"""
Emotion Analyzer

Rule-based detection of emotions, triggers and intensity in a single
chat message. Runs offline and never fails, so it can steer both the
prompt and the fallback path.

Keyword tables are plain data: adding a language or keyword is a table
edit, not a code change. Matching is case-insensitive substring search,
evaluated uniformly over every table.

CLINICAL_REVIEW_REQUIRED: Keyword lists should be reviewed by the
therapist team.
"""

from typing import Mapping, Sequence

from zentia.domain.enums.levels import Intensity
from zentia.domain.models.emotional_context import EmotionalContext


# Category -> keywords (English, Italian). Table order is match order.
EMOTION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "anxiety": ("anxiety", "anxious", "ansia", "ansioso"),
    "sadness": ("sad", "sadness", "triste", "tristezza"),
    "anger": ("angry", "anger", "arrabbiato", "rabbia"),
    "stress": ("stress", "stressed", "stressato", "stressante"),
    "panic": ("panic", "panico"),
    "depression": ("depressed", "depression", "depresso", "depressione"),
}

TRIGGER_KEYWORDS: dict[str, tuple[str, ...]] = {
    "work": ("work", "office", "lavoro", "ufficio"),
    "family": ("family", "parents", "famiglia", "genitori"),
    "relationship": ("relationship", "partner", "relazione", "fidanzato"),
    "money": ("money", "financial", "soldi", "denaro"),
    "health": ("health", "illness", "salute", "malattia"),
}

# Checked from highest to lowest; first level with a marker wins
INTENSITY_MARKERS: dict[Intensity, tuple[str, ...]] = {
    Intensity.HIGH: ("very", "extremely", "molto", "estremamente"),
    Intensity.MEDIUM: ("somewhat", "fairly", "abbastanza", "piuttosto"),
}


def match_categories(
    text: str,
    table: Mapping[str, Sequence[str]],
) -> list[str]:
    """
    Return every category in table with a keyword present in text.

    Args:
        text: Text to scan (matched case-insensitively)
        table: Category -> keywords

    Returns:
        Matched categories in table order
    """
    text_lower = (text or "").lower()
    return [
        category
        for category, keywords in table.items()
        if any(keyword in text_lower for keyword in keywords)
    ]


class EmotionAnalyzer:
    """
    Keyword-based emotional context analyzer.

    Usage:
        analyzer = EmotionAnalyzer()
        context = analyzer.analyze("I'm very anxious about work")
        # emotions=["anxiety"], triggers=["work"], intensity=HIGH
    """

    def __init__(
        self,
        emotion_keywords: Mapping[str, Sequence[str]] = EMOTION_KEYWORDS,
        trigger_keywords: Mapping[str, Sequence[str]] = TRIGGER_KEYWORDS,
        intensity_markers: Mapping[Intensity, Sequence[str]] = INTENSITY_MARKERS,
    ) -> None:
        self._emotion_keywords = emotion_keywords
        self._trigger_keywords = trigger_keywords
        self._intensity_markers = intensity_markers

    def analyze(self, message: str) -> EmotionalContext:
        """
        Derive emotional context from a message.

        Total: any string (including empty) yields a context.
        """
        return EmotionalContext(
            emotions=match_categories(message, self._emotion_keywords),
            triggers=match_categories(message, self._trigger_keywords),
            intensity=self._estimate_intensity(message),
        )

    def _estimate_intensity(self, message: str) -> Intensity:
        matched = match_categories(message, self._intensity_markers)
        return matched[0] if matched else Intensity.LOW
