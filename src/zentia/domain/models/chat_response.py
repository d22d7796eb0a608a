"""
Chat Response Domain Model

The structured reply returned for every chat message, whether it was
produced by the AI model or by the rule-based fallback.

Wire names are camelCase because the web client consumes them as-is.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from zentia.domain.enums.levels import UrgencyLevel


# Accepted keys per field, English first. The Italian names are what
# earlier prompt versions asked the model to produce.
CONTENT_KEYS: tuple[str, ...] = ("content", "contenuto")
METADATA_KEYS: tuple[str, ...] = ("metadata",)
METADATA_ALIASES: dict[str, tuple[str, ...]] = {
    "detected_emotions": ("detectedEmotions", "detected_emotions", "emozioniRilevate"),
    "identified_triggers": ("identifiedTriggers", "identified_triggers", "triggerIndividuati"),
    "suggested_strategies": ("suggestedStrategies", "suggested_strategies", "strategieSuggerite"),
    "urgency_level": ("urgencyLevel", "urgency_level", "livelloUrgenza"),
    "therapeutic_references": (
        "therapeuticReferences",
        "therapeutic_references",
        "riferimentiTerapeutici",
    ),
}


def first_present(data: dict, keys: Iterable[str]) -> Any:
    """Return the value of the first key present in data, else None."""
    for key in keys:
        if key in data:
            return data[key]
    return None


def unique_strings(values: Any) -> list[str]:
    """
    Coerce a loosely-typed value into a de-duplicated list of strings.

    Keeps first-seen order. Scalars become one-element lists; None and
    blank entries are dropped.
    """
    if values is None:
        return []
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        values = [values]

    out: list[str] = []
    seen: set[str] = set()
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        if text and text not in seen:
            seen.add(text)
            out.append(text)
    return out


@dataclass
class ChatMetadata:
    """
    Metadata attached to a chat response.

    Attributes:
        detected_emotions: Emotion labels (set semantics)
        identified_triggers: Trigger labels (set semantics)
        suggested_strategies: Ordered coping strategies
        urgency_level: Triage signal, never None
        therapeutic_references: Ordered therapy references
    """

    detected_emotions: list[str] = field(default_factory=list)
    identified_triggers: list[str] = field(default_factory=list)
    suggested_strategies: list[str] = field(default_factory=list)
    urgency_level: UrgencyLevel = UrgencyLevel.LOW
    therapeutic_references: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.detected_emotions = unique_strings(self.detected_emotions)
        self.identified_triggers = unique_strings(self.identified_triggers)
        self.urgency_level = UrgencyLevel.parse(self.urgency_level)

    @classmethod
    def from_payload(cls, data: Optional[dict]) -> "ChatMetadata":
        """Build metadata from a parsed model payload."""
        data = data or {}
        suggested = first_present(data, METADATA_ALIASES["suggested_strategies"])
        references = first_present(data, METADATA_ALIASES["therapeutic_references"])
        return cls(
            detected_emotions=first_present(data, METADATA_ALIASES["detected_emotions"]),
            identified_triggers=first_present(data, METADATA_ALIASES["identified_triggers"]),
            suggested_strategies=unique_strings(suggested),
            urgency_level=first_present(data, METADATA_ALIASES["urgency_level"]),
            therapeutic_references=unique_strings(references),
        )

    def to_dict(self) -> dict:
        """Serialize with wire names."""
        return {
            "detectedEmotions": list(self.detected_emotions),
            "identifiedTriggers": list(self.identified_triggers),
            "suggestedStrategies": list(self.suggested_strategies),
            "urgencyLevel": self.urgency_level.value,
            "therapeuticReferences": list(self.therapeutic_references),
        }


@dataclass
class ChatResponse:
    """
    Reply to a single chat message.

    Attributes:
        content: Text shown to the user (never empty)
        metadata: Structured signals for the therapist dashboard
    """

    content: str
    metadata: ChatMetadata = field(default_factory=ChatMetadata)

    def __post_init__(self) -> None:
        if not isinstance(self.content, str) or not self.content.strip():
            raise ValueError("ChatResponse content must be a non-empty string")

    @classmethod
    def from_payload(cls, data: dict) -> "ChatResponse":
        """
        Build a response from a validated model payload.

        Raises:
            ValueError: If content is missing or empty
        """
        content = first_present(data, CONTENT_KEYS)
        metadata = first_present(data, METADATA_KEYS)
        return cls(
            content=content if isinstance(content, str) else "",
            metadata=ChatMetadata.from_payload(metadata if isinstance(metadata, dict) else None),
        )

    @property
    def urgency_level(self) -> UrgencyLevel:
        return self.metadata.urgency_level

    def to_dict(self) -> dict:
        """Serialize with wire names."""
        return {
            "content": self.content,
            "metadata": self.metadata.to_dict(),
        }
