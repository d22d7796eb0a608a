"""Emotion detection services package."""

from zentia.services.detection.emotion_analyzer import (
    EMOTION_KEYWORDS,
    INTENSITY_MARKERS,
    TRIGGER_KEYWORDS,
    EmotionAnalyzer,
    match_categories,
)

__all__ = [
    "EMOTION_KEYWORDS",
    "INTENSITY_MARKERS",
    "TRIGGER_KEYWORDS",
    "EmotionAnalyzer",
    "match_categories",
]
