"""
Unit Tests for Response Extractor

Tests candidate extraction strategies, sanitize tiers and payload
validation of free-text model output.
"""

import json

import pytest

from zentia.domain.enums.error_kind import ErrorKind
from zentia.domain.enums.levels import UrgencyLevel
from zentia.services.parsing.response_extractor import (
    ResponseExtractor,
    aggressive_cleanup,
    basic_cleanup,
    extract_chat_response,
    extract_notes_analysis,
    fenced_block,
    first_decodable,
    first_last_brace,
    greedy_braces,
    json_line,
    strip_fences,
    validate_chat_payload,
)

CHAT_PAYLOAD = {
    "content": "It sounds like work has been weighing on you.",
    "metadata": {
        "detectedEmotions": ["anxiety"],
        "identifiedTriggers": ["work"],
        "suggestedStrategies": ["box breathing"],
        "urgencyLevel": "medium",
        "therapeuticReferences": ["CBT"],
    },
}


class TestStrategies:
    """Test candidate extraction strategies."""

    def test_greedy_braces_takes_largest_span(self) -> None:
        text = 'prefix {"a": {"b": 1}} suffix'
        assert greedy_braces(text) == '{"a": {"b": 1}}'

    def test_json_line_finds_object_line(self) -> None:
        text = 'Sure, here it is:\n  {"a": 1}  \nDone.'
        assert json_line(text) == '{"a": 1}'

    def test_fenced_block(self) -> None:
        text = 'Text\n```json\n{"a": 1}\n```\nMore'
        assert fenced_block(text) == '{"a": 1}'

    def test_first_last_brace(self) -> None:
        assert first_last_brace('x {"a": 1} y') == '{"a": 1}'

    def test_first_decodable_stops_at_object_end(self) -> None:
        text = 'Here: {"a": {"b": 1}} (see {note})'
        assert first_decodable(text) == '{"a": {"b": 1}}'

    def test_first_decodable_skips_undecodable_openings(self) -> None:
        assert first_decodable('{oops} then {"a": 1} and {x}') == '{"a": 1}'

    def test_strategies_return_none_without_braces(self) -> None:
        text = "No structured output here."
        assert greedy_braces(text) is None
        assert json_line(text) is None
        assert fenced_block(text) is None
        assert first_last_brace(text) is None
        assert first_decodable(text) is None


class TestSanitizeTiers:
    """Test sanitize tier transforms."""

    def test_strip_fences(self) -> None:
        assert strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_basic_removes_trailing_commas(self) -> None:
        cleaned = basic_cleanup('{"a": [1, 2,], "b": {"c": 3,},}')
        assert json.loads(cleaned) == {"a": [1, 2], "b": {"c": 3}}

    def test_basic_replaces_control_characters(self) -> None:
        cleaned = basic_cleanup('{"a": "line one\nline two"}')
        assert json.loads(cleaned) == {"a": "line one line two"}

    def test_aggressive_escapes_newlines_inside_strings(self) -> None:
        cleaned = aggressive_cleanup('{\n  "a": "line one\nline two\ttabbed"\n}')
        assert json.loads(cleaned) == {"a": "line one\nline two\ttabbed"}

    def test_aggressive_strips_non_printable(self) -> None:
        cleaned = aggressive_cleanup('{"a": 1,\u200b "b": 2}')
        assert json.loads(cleaned) == {"a": 1, "b": 2}


class TestResponseExtractor:
    """Test the full extraction pipeline."""

    @pytest.fixture
    def extractor(self) -> ResponseExtractor:
        return ResponseExtractor()

    def test_plain_json(self, extractor: ResponseExtractor) -> None:
        result = extractor.extract(json.dumps(CHAT_PAYLOAD), validate_chat_payload)
        assert result.ok
        assert result.value == CHAT_PAYLOAD
        assert result.tier == "direct"
        assert not result.was_repaired

    def test_fences_inside_valid_string_preserved(self, extractor: ResponseExtractor) -> None:
        payload = {"content": "Try this:\n```\nbreathe in\n```", "metadata": {}}
        result = extractor.extract(json.dumps(payload), validate_chat_payload)
        assert result.value == payload
        assert result.tier == "direct"

    def test_object_followed_by_braced_prose(self, extractor: ResponseExtractor) -> None:
        raw = 'Here you go: {"content":"ok","metadata":{}} (hope this helps {smile})'
        result = extractor.extract(raw, validate_chat_payload)
        assert result.value == {"content": "ok", "metadata": {}}
        assert result.strategy == "first_decodable"

    def test_fenced_json_with_prose(self, extractor: ResponseExtractor) -> None:
        raw = "Here is my reply:\n```json\n" + json.dumps(CHAT_PAYLOAD, indent=2) + "\n```"
        result = extractor.extract(raw, validate_chat_payload)
        assert result.ok
        assert result.value["content"] == CHAT_PAYLOAD["content"]

    @pytest.mark.parametrize(
        "payload",
        [
            CHAT_PAYLOAD,
            {"content": "Hi", "metadata": {}},
            {"summary": "Stable week", "wellbeingScore": 70, "mainThemes": ["sleep"]},
        ],
    )
    def test_idempotent_on_valid_json(self, extractor: ResponseExtractor, payload: dict) -> None:
        assert extractor.extract(json.dumps(payload)).value == payload
        assert extractor.extract(json.dumps(payload, indent=2)).value == payload

    def test_trailing_commas_repaired(self, extractor: ResponseExtractor) -> None:
        raw = '{"content": "Hi", "metadata": {"detectedEmotions": ["sadness",],},}'
        result = extractor.extract(raw, validate_chat_payload)
        assert result.ok
        assert result.tier == "basic"
        assert result.value["metadata"]["detectedEmotions"] == ["sadness"]

    def test_unescaped_newline_repaired(self, extractor: ResponseExtractor) -> None:
        raw = '{"content": "Line one\nLine two", "metadata": {}}'
        result = extractor.extract(raw, validate_chat_payload)
        assert result.ok
        assert result.was_repaired
        assert result.value["content"] == "Line one Line two"

    def test_unescaped_control_characters_repaired(self, extractor: ResponseExtractor) -> None:
        raw = '{"content": "Take\ta breath\x07", "metadata": {}}'
        result = extractor.extract(raw, validate_chat_payload)
        assert result.ok
        assert result.value["content"].startswith("Take")

    def test_non_printable_repaired_by_aggressive_tier(self, extractor: ResponseExtractor) -> None:
        raw = '{"content": "Hi",\u200b "metadata": {}}'
        result = extractor.extract(raw, validate_chat_payload)
        assert result.ok
        assert result.tier == "aggressive"

    def test_later_strategy_used_when_greedy_span_fails(
        self, extractor: ResponseExtractor
    ) -> None:
        raw = 'Remember {this}\n{"content": "Hi", "metadata": {}}'
        result = extractor.extract(raw, validate_chat_payload)
        assert result.ok
        assert result.strategy == "json_line"

    def test_fenced_block_used_when_other_strategies_fail(
        self, extractor: ResponseExtractor
    ) -> None:
        raw = 'Example: {bad}\n```json\n{"content": "Hi",\n "metadata": {}}\n```\nThanks {x}'
        result = extractor.extract(raw, validate_chat_payload)
        assert result.ok
        assert result.strategy == "fenced_block"

    def test_invalid_structure(self, extractor: ResponseExtractor) -> None:
        result = extractor.extract('{"message": "hi"}', validate_chat_payload)
        assert not result.ok
        assert result.failure_reason.startswith("invalid_structure")

    def test_metadata_must_be_mapping(self, extractor: ResponseExtractor) -> None:
        result = extractor.extract('{"content": "hi", "metadata": []}', validate_chat_payload)
        assert not result.ok
        assert result.failure_reason == "invalid_structure:missing_metadata"

    def test_no_json(self, extractor: ResponseExtractor) -> None:
        result = extractor.extract("I'm sorry, I can't help with that.")
        assert not result.ok
        assert result.failure_reason == "no_json_object"

    def test_unparseable(self, extractor: ResponseExtractor) -> None:
        result = extractor.extract("{not json at all}")
        assert not result.ok
        assert result.failure_reason == "unparseable_json"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_response(self, extractor: ResponseExtractor, raw) -> None:
        result = extractor.extract(raw)
        assert result.failure_reason == "empty_response"

    @pytest.mark.parametrize(
        "raw",
        [
            "{",
            "}",
            "{{{{",
            "```json\n```",
            "\x00\x01\x02",
            '{"content": ' * 50,
            "{" + "[" * 5000 + "}",
            '{"a": "\\',
        ],
    )
    def test_never_raises(self, extractor: ResponseExtractor, raw: str) -> None:
        result = extractor.extract(raw, validate_chat_payload)
        assert not result.ok

    def test_failure_converts_to_malformed_error(self, extractor: ResponseExtractor) -> None:
        error = extractor.extract("nothing").to_error()
        assert error.kind == ErrorKind.MALFORMED_RESPONSE
        assert error.reason == "no_json_object"


class TestTypedExtraction:
    """Test conversion to domain models."""

    def test_extract_chat_response(self) -> None:
        response = extract_chat_response("```json\n" + json.dumps(CHAT_PAYLOAD) + "\n```")
        assert response is not None
        assert response.content == CHAT_PAYLOAD["content"]
        assert response.urgency_level == UrgencyLevel.MEDIUM
        assert response.metadata.identified_triggers == ["work"]

    def test_extract_chat_response_italian_aliases(self) -> None:
        raw = json.dumps({
            "contenuto": "Ciao, sono qui per te.",
            "metadata": {
                "emozioniRilevate": ["ansia", "ansia"],
                "livelloUrgenza": "alto",
            },
        })
        response = extract_chat_response(raw)
        assert response is not None
        assert response.content == "Ciao, sono qui per te."
        assert response.metadata.detected_emotions == ["ansia"]
        assert response.urgency_level == UrgencyLevel.LOW

    def test_extract_chat_response_failure(self) -> None:
        assert extract_chat_response("no json") is None

    def test_extract_notes_analysis(self) -> None:
        raw = 'Analysis:\n{"summary": "Improving.", "wellbeingScore": 140, "mainThemes": ["sleep"],}'
        analysis = extract_notes_analysis(raw)
        assert analysis is not None
        assert analysis.summary == "Improving."
        assert analysis.wellbeing_score == 100
        assert analysis.main_themes == ["sleep"]

    def test_extract_notes_analysis_requires_summary(self) -> None:
        assert extract_notes_analysis('{"mainThemes": ["sleep"]}') is None
