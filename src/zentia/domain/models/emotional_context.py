"""
Emotional Context Domain Model

Transient per-message snapshot of detected emotions, triggers and
intensity. Steers prompt construction and fallback template selection.
Never persisted.
"""

from dataclasses import dataclass, field

from zentia.domain.enums.levels import Intensity


@dataclass
class EmotionalContext:
    """
    Emotional context derived from one message.

    Attributes:
        emotions: Detected emotion categories (table order, no duplicates)
        triggers: Detected trigger categories (table order, no duplicates)
        intensity: Estimated intensity
    """

    emotions: list[str] = field(default_factory=list)
    triggers: list[str] = field(default_factory=list)
    intensity: Intensity = Intensity.LOW

    @property
    def has_emotions(self) -> bool:
        return bool(self.emotions)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "emotions": list(self.emotions),
            "triggers": list(self.triggers),
            "intensity": self.intensity.value,
        }
