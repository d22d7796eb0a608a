"""
Response Extractor

Locates and repairs the JSON object embedded in free-text model output.

The pipeline is two ordered tuples of pure functions:

1. Extraction strategies each propose a candidate `{...}` span.
2. Sanitize tiers each rewrite a candidate, escalating only when the
   previous tier's output still fails to parse. The first tier leaves the
   candidate untouched, so valid JSON comes back unchanged.

The first candidate that parses and passes the payload validator wins.
`extract` never raises: every failure path returns a failed
`ExtractionResult` that the caller hands to the fallback analyzer.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from zentia.config.logging_config import get_logger
from zentia.domain.errors import MalformedResponseError
from zentia.domain.models.chat_response import (
    CONTENT_KEYS,
    METADATA_KEYS,
    ChatResponse,
    first_present,
)
from zentia.domain.models.notes_analysis import NOTES_ANALYSIS_ALIASES, NotesAnalysis

logger = get_logger(__name__)

# Raw text -> candidate `{...}` span, or None when nothing matches
ExtractionStrategy = Callable[[str], Optional[str]]
SanitizeTier = Callable[[str], str]
# Parsed object -> failure reason, or None when valid
PayloadValidator = Callable[[Any], Optional[str]]


# =============================================================================
# EXTRACTION STRATEGIES
# =============================================================================

_GREEDY_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_FENCED_JSON_RE = re.compile(r"```json\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)


def greedy_braces(text: str) -> Optional[str]:
    """Largest `{...}` span."""
    match = _GREEDY_OBJECT_RE.search(text)
    return match.group(0) if match else None


def json_line(text: str) -> Optional[str]:
    """First line that is exactly a `{...}` object."""
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("{") and stripped.endswith("}"):
            return stripped
    return None


def fenced_block(text: str) -> Optional[str]:
    """Object inside a ```json fenced code block."""
    match = _FENCED_JSON_RE.search(text)
    return match.group(1) if match else None


def first_last_brace(text: str) -> Optional[str]:
    """Substring between the first `{` and the last `}`."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return None


_DECODER = json.JSONDecoder()


def first_decodable(text: str) -> Optional[str]:
    """
    First complete object found by decoding from each `{` offset.

    Recovers a valid object that is followed by prose containing braces,
    where the brace-span strategies over-reach.
    """
    start = text.find("{")
    while start != -1:
        try:
            _, end = _DECODER.raw_decode(text, start)
        except (ValueError, RecursionError):
            start = text.find("{", start + 1)
            continue
        return text[start:end]
    return None


EXTRACTION_STRATEGIES: tuple[tuple[str, ExtractionStrategy], ...] = (
    ("greedy_braces", greedy_braces),
    ("json_line", json_line),
    ("fenced_block", fenced_block),
    ("first_last_brace", first_last_brace),
    ("first_decodable", first_decodable),
)


# =============================================================================
# SANITIZE TIERS
# =============================================================================

_FENCE_OPEN_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1F\x7F]")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_WHITESPACE_RE = re.compile(r"\s+")

_STRING_ESCAPES: dict[str, str] = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def direct(text: str) -> str:
    """Candidate exactly as extracted."""
    return text


def strip_fences(text: str) -> str:
    """Strip code fences, trim and re-derive the object boundaries."""
    cleaned = _FENCE_OPEN_RE.sub("", text).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        cleaned = cleaned[start:end + 1]
    return cleaned


def basic_cleanup(text: str) -> str:
    """Remove control characters and trailing commas, normalise whitespace."""
    cleaned = _CONTROL_CHARS_RE.sub(" ", strip_fences(text))
    cleaned = _TRAILING_COMMA_RE.sub(r"\1", cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def _escape_controls_in_strings(text: str) -> str:
    """Escape raw control characters that appear inside string literals."""
    out: list[str] = []
    in_string = False
    escaped = False

    for ch in text:
        if not in_string:
            if ch == '"':
                in_string = True
            out.append(ch)
            continue

        if escaped:
            escaped = False
            out.append(ch)
        elif ch == "\\":
            escaped = True
            out.append(ch)
        elif ch == '"':
            in_string = False
            out.append(ch)
        elif ch in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[ch])
        elif ord(ch) < 0x20 or ch == "\x7f":
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)

    return "".join(out)


def aggressive_cleanup(text: str) -> str:
    """Escape unescaped newlines/CR/tabs and strip non-printable characters."""
    cleaned = _escape_controls_in_strings(strip_fences(text))
    cleaned = "".join(ch for ch in cleaned if ch.isprintable() or ch in " \n\r\t")
    return _TRAILING_COMMA_RE.sub(r"\1", cleaned)


SANITIZE_TIERS: tuple[tuple[str, SanitizeTier], ...] = (
    ("direct", direct),
    ("unfenced", strip_fences),
    ("basic", basic_cleanup),
    ("aggressive", aggressive_cleanup),
)


# =============================================================================
# PAYLOAD VALIDATORS
# =============================================================================

def validate_chat_payload(payload: Any) -> Optional[str]:
    """A chat payload needs non-empty content and a metadata object."""
    if not isinstance(payload, dict):
        return "not_an_object"
    content = first_present(payload, CONTENT_KEYS)
    if not isinstance(content, str) or not content.strip():
        return "missing_content"
    if not isinstance(first_present(payload, METADATA_KEYS), dict):
        return "missing_metadata"
    return None


def validate_notes_payload(payload: Any) -> Optional[str]:
    """A notes analysis payload needs a non-empty summary."""
    if not isinstance(payload, dict):
        return "not_an_object"
    summary = first_present(payload, NOTES_ANALYSIS_ALIASES["summary"])
    if not isinstance(summary, str) or not summary.strip():
        return "missing_summary"
    return None


def any_object(payload: Any) -> Optional[str]:
    return None if isinstance(payload, dict) else "not_an_object"


# =============================================================================
# EXTRACTOR
# =============================================================================

@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of an extraction attempt.

    Attributes:
        value: Parsed object when successful
        strategy: Extraction strategy that produced the candidate
        tier: Sanitize tier that made it parse
        failure_reason: Why extraction failed, when it did
    """

    value: Optional[dict] = None
    strategy: Optional[str] = None
    tier: Optional[str] = None
    failure_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    @property
    def was_repaired(self) -> bool:
        return self.ok and self.tier != SANITIZE_TIERS[0][0]

    def to_error(self) -> MalformedResponseError:
        """Error describing a failed extraction."""
        return MalformedResponseError(self.failure_reason or "unknown")


class ResponseExtractor:
    """
    Tiered JSON extraction pipeline.

    Usage:
        extractor = ResponseExtractor()
        result = extractor.extract(raw_text, validate_chat_payload)
        if result.ok:
            payload = result.value
    """

    def __init__(
        self,
        strategies: tuple[tuple[str, ExtractionStrategy], ...] = EXTRACTION_STRATEGIES,
        tiers: tuple[tuple[str, SanitizeTier], ...] = SANITIZE_TIERS,
    ) -> None:
        self._strategies = strategies
        self._tiers = tiers

    def extract(
        self,
        raw: Optional[str],
        validator: PayloadValidator = any_object,
    ) -> ExtractionResult:
        """
        Extract and validate the JSON object embedded in raw model output.

        Args:
            raw: Model output text
            validator: Shape check applied to each parsed candidate

        Returns:
            ExtractionResult; failed results carry a reason
        """
        if not raw or not raw.strip():
            return ExtractionResult(failure_reason="empty_response")

        failure_reason = "no_json_object"
        tried: set[str] = set()

        for strategy_name, strategy in self._strategies:
            candidate = strategy(raw)
            if candidate is None or candidate in tried:
                continue
            tried.add(candidate)

            parsed, tier_name = self._parse_with_tiers(candidate)
            if parsed is None:
                failure_reason = "unparseable_json"
                continue

            invalid = validator(parsed)
            if invalid:
                failure_reason = f"invalid_structure:{invalid}"
                continue

            if tier_name != self._tiers[0][0]:
                logger.debug(
                    "Model output repaired",
                    strategy=strategy_name,
                    tier=tier_name,
                )
            return ExtractionResult(value=parsed, strategy=strategy_name, tier=tier_name)

        logger.info(
            "Model output extraction failed",
            reason=failure_reason,
            response_length=len(raw),
        )
        return ExtractionResult(failure_reason=failure_reason)

    def _parse_with_tiers(self, candidate: str) -> tuple[Optional[Any], Optional[str]]:
        """Run sanitize tiers in order; first tier whose output parses wins."""
        for tier_name, tier in self._tiers:
            parsed = _try_parse(tier(candidate))
            if parsed is not None:
                return parsed, tier_name
        return None, None


def _try_parse(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def extract_chat_response(
    raw: Optional[str],
    extractor: Optional[ResponseExtractor] = None,
) -> Optional[ChatResponse]:
    """Parse model output into a ChatResponse, or None when unusable."""
    result = (extractor or ResponseExtractor()).extract(raw, validate_chat_payload)
    if not result.ok:
        return None
    return ChatResponse.from_payload(result.value)


def extract_notes_analysis(
    raw: Optional[str],
    extractor: Optional[ResponseExtractor] = None,
) -> Optional[NotesAnalysis]:
    """Parse model output into a NotesAnalysis, or None when unusable."""
    result = (extractor or ResponseExtractor()).extract(raw, validate_notes_payload)
    if not result.ok:
        return None
    return NotesAnalysis.from_payload(result.value)
