"""
Unit Tests for Emotion Analyzer

Tests keyword detection of emotions, triggers and intensity.
"""

import pytest

from zentia.domain.enums.levels import Intensity
from zentia.services.detection.emotion_analyzer import (
    EMOTION_KEYWORDS,
    EmotionAnalyzer,
    match_categories,
)


class TestEmotionAnalyzer:
    """Test suite for EmotionAnalyzer."""

    @pytest.fixture
    def analyzer(self) -> EmotionAnalyzer:
        return EmotionAnalyzer()

    def test_empty_input(self, analyzer: EmotionAnalyzer) -> None:
        """Empty input yields an empty, low-intensity context."""
        context = analyzer.analyze("")
        assert context.emotions == []
        assert context.triggers == []
        assert context.intensity == Intensity.LOW
        assert not context.has_emotions

    def test_anxious_about_work(self, analyzer: EmotionAnalyzer) -> None:
        context = analyzer.analyze("I'm very anxious about work")
        assert "anxiety" in context.emotions
        assert "work" in context.triggers
        assert context.intensity == Intensity.HIGH

    def test_case_insensitive(self, analyzer: EmotionAnalyzer) -> None:
        context = analyzer.analyze("PANIC at the OFFICE")
        assert context.emotions == ["panic"]
        assert context.triggers == ["work"]

    def test_italian_keywords(self, analyzer: EmotionAnalyzer) -> None:
        context = analyzer.analyze("Sono molto triste per la mia famiglia")
        assert context.emotions == ["sadness"]
        assert context.triggers == ["family"]
        assert context.intensity == Intensity.HIGH

    def test_medium_intensity(self, analyzer: EmotionAnalyzer) -> None:
        context = analyzer.analyze("I'm somewhat stressed about money")
        assert context.emotions == ["stress"]
        assert context.triggers == ["money"]
        assert context.intensity == Intensity.MEDIUM

    def test_high_marker_wins_over_medium(self, analyzer: EmotionAnalyzer) -> None:
        context = analyzer.analyze("fairly calm but extremely tired")
        assert context.intensity == Intensity.HIGH

    def test_multiple_emotions_in_table_order(self, analyzer: EmotionAnalyzer) -> None:
        context = analyzer.analyze("I feel depressed and sad")
        assert context.emotions == ["sadness", "depression"]

    def test_each_category_reported_once(self, analyzer: EmotionAnalyzer) -> None:
        context = analyzer.analyze("anxious, anxiety, ansia")
        assert context.emotions == ["anxiety"]

    def test_custom_tables(self) -> None:
        analyzer = EmotionAnalyzer(
            emotion_keywords={"joy": ("happy",)},
            trigger_keywords={"school": ("exam",)},
            intensity_markers={Intensity.HIGH: ("so",)},
        )
        context = analyzer.analyze("so happy after the exam")
        assert context.emotions == ["joy"]
        assert context.triggers == ["school"]
        assert context.intensity == Intensity.HIGH


class TestMatchCategories:
    """Test uniform table matching."""

    def test_returns_table_order(self) -> None:
        assert match_categories("panic and anxiety", EMOTION_KEYWORDS) == ["anxiety", "panic"]

    def test_none_text(self) -> None:
        assert match_categories(None, EMOTION_KEYWORDS) == []
