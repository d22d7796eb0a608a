"""
Prompt Builder

Constructs prompts for the AI model from client context, therapy notes
and the user's message.

Every optional input degrades to an explicit placeholder rather than
being omitted, so the model always receives a complete prompt.

CLINICAL_REVIEW_REQUIRED: Prompt wording should be reviewed by the
therapist team.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional, Sequence

from zentia.config.logging_config import get_logger
from zentia.domain.errors import validation_error
from zentia.domain.models.client_context import ClientContext, ProgressData, TherapyNote
from zentia.domain.models.emotional_context import EmotionalContext

logger = get_logger(__name__)


class PromptPurpose(StrEnum):
    """What a prompt asks the model to produce."""

    CHAT = "chat"
    NOTES_ANALYSIS = "notes_analysis"
    PROGRESS_SUMMARY = "progress_summary"


@dataclass
class BuiltPrompt:
    """
    Complete prompt ready for the AI model.

    Attributes:
        full_prompt: Formatted prompt text
        purpose: What the prompt asks for
        temperature: Sampling temperature
        top_p: Nucleus sampling cutoff
        top_k: Top-k sampling cutoff
        max_tokens: Max output tokens
    """

    full_prompt: str
    purpose: PromptPurpose = PromptPurpose.CHAT
    temperature: float = 0.7
    top_p: float = 0.9
    top_k: int = 40
    max_tokens: int = 2048

    @property
    def expects_json(self) -> bool:
        return self.purpose in (PromptPurpose.CHAT, PromptPurpose.NOTES_ANALYSIS)


# Placeholders for missing inputs
NO_NOTES = "No therapy notes available"
NO_TRIGGERS = "None identified"
NO_COPING = "None available"
NO_EMOTIONS = "no specific emotions detected"
NO_DETECTED_TRIGGERS = "no specific triggers identified"
DEFAULT_INTENSITY = "normal"


class PromptBuilder:
    """
    Builds AI prompts for chat, notes analysis and progress summaries.

    CLINICAL_REVIEW_REQUIRED: All prompt templates should be
    reviewed and approved by the therapist team.
    """

    PERSONA: str = (
        "You are Zentia, a compassionate therapeutic AI assistant that provides "
        "support between therapy sessions."
    )

    CHAT_OUTPUT_FORMAT: str = """Respond ONLY with a valid JSON object in this exact format (escape all quotes properly):
{
  "content": "Your therapeutic response here as a single string, use \\" for any quotes",
  "metadata": {
    "detectedEmotions": ["emotion1", "emotion2"],
    "identifiedTriggers": ["trigger1", "trigger2"],
    "suggestedStrategies": ["strategy1", "strategy2"],
    "urgencyLevel": "low",
    "therapeuticReferences": ["reference1", "reference2"]
  }
}

IMPORTANT:
- Respond ONLY with the JSON object, no additional text
- Use proper JSON escaping for quotes and special characters
- Keep the response compassionate and therapeutic
- urgencyLevel must be one of: "low", "medium", "high"
- Escape all quotes and special characters properly in the content field"""

    NOTES_OUTPUT_FORMAT: str = """Provide the analysis in the following JSON format (respond ONLY with valid JSON):
{
  "summary": "Complete summary in 2-3 sentences in English",
  "mainThemes": ["theme1", "theme2", "theme3"],
  "progressNotes": ["progress1", "progress2"],
  "recommendations": ["recommendation1", "recommendation2"],
  "wellbeingScore": 75,
  "attentionAreas": ["area1", "area2"],
  "strategies": ["strategy1", "strategy2"]
}"""

    # Characters kept per note excerpt in progress summaries
    SUMMARY_NOTE_EXCERPT = 150

    def build_chat_prompt(
        self,
        message: str,
        client_context: Optional[ClientContext] = None,
        notes: Optional[Sequence[TherapyNote]] = None,
        emotional_context: Optional[EmotionalContext] = None,
        additional_context: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> BuiltPrompt:
        """
        Build the chat prompt.

        Args:
            message: User message (required, non-empty after trim)
            client_context: Known client facts
            notes: Therapy notes, newest first
            emotional_context: Keyword-derived emotional context
            additional_context: Free text supplied by the caller
            timestamp: Prompt time (defaults to now, UTC)

        Returns:
            BuiltPrompt with chat generation defaults

        Raises:
            AppError: VALIDATION if message is empty
        """
        if message is None or not message.strip():
            raise validation_error(
                "Chat message is required",
                "Please enter a message.",
                component="PromptBuilder",
            )

        client = client_context or ClientContext()
        emotional = emotional_context or EmotionalContext()
        timestamp = timestamp or datetime.now(timezone.utc)

        sections = [
            self.PERSONA,
            f"TIMESTAMP: {timestamp.isoformat()}",
            f"CLIENT CONTEXT:\nName: {client.name or 'Unknown'}\nAge: {client.age or 'Unknown'}",
            f"THERAPY NOTES:\n{self._format_notes(notes)}",
            f"TRIGGERS: {', '.join(client.triggers) or NO_TRIGGERS}\n"
            f"COPING STRATEGIES: {', '.join(client.coping_strategy_titles) or NO_COPING}",
            f"Please address the client by name ({client.name or 'Unknown'}) and reference "
            "their therapy context when appropriate.",
            f'USER MESSAGE: "{message.strip()}"',
        ]

        if additional_context and additional_context.strip():
            sections.append(f"ADDITIONAL CONTEXT:\n{additional_context.strip()}")

        sections.append(
            self._format_emotional_context(emotional, known=emotional_context is not None)
        )
        sections.append(self.CHAT_OUTPUT_FORMAT)

        prompt = BuiltPrompt(
            full_prompt="\n\n".join(sections),
            purpose=PromptPurpose.CHAT,
        )

        logger.debug(
            "Chat prompt built",
            note_count=len(notes or []),
            has_additional_context=bool(additional_context),
            prompt_length=len(prompt.full_prompt),
        )

        return prompt

    def build_notes_analysis_prompt(self, notes: Sequence[TherapyNote]) -> BuiltPrompt:
        """Build the prompt asking for a structured notes analysis."""
        entries = []
        for note in notes:
            entries.append(
                f"Date: {note.date_label}\n"
                f"Title: {note.title or 'Note Entry'}\n"
                f"Content: {note.content}\n"
                f"Tags: {', '.join(note.tags)}"
            )

        full_prompt = (
            "You are an expert psychologist analyzing therapy notes. Analyze these "
            "sessions and provide a structured analysis in JSON format.\n\n"
            "THERAPY NOTES:\n"
            + "\n---\n".join(entries)
            + "\n\n"
            + self.NOTES_OUTPUT_FORMAT
        )

        return BuiltPrompt(full_prompt=full_prompt, purpose=PromptPurpose.NOTES_ANALYSIS)

    def build_progress_summary_prompt(self, data: ProgressData, days: int) -> BuiltPrompt:
        """Build the prompt asking for a narrative progress summary."""
        note_lines = "\n".join(
            f"- {note.title or 'Note'}: {note.content[:self.SUMMARY_NOTE_EXCERPT]}..."
            for note in data.notes
        ) or "- None"
        assessment_lines = "\n".join(
            f"- {a.instrument}: Score {a.score if a.score is not None else 'N/A'}"
            for a in data.assessments
        ) or "- None"
        average = data.average_mood()
        average_text = f"{average:.1f}" if average is not None else "N/A"

        full_prompt = f"""Generate a professional summary of therapeutic progress from the last {days} days.

AVAILABLE DATA:
Therapy Notes: {len(data.notes)} sessions
Assessments: {len(data.assessments)} evaluations
Daily Monitoring: {len(data.mood_entries)} entries
Journal Entries: {len(data.journal_entries)} entries

NOTES DETAILS:
{note_lines}

ASSESSMENT SCORES:
{assessment_lines}

MONITORING DATA:
Average mood: {average_text}

Generate a clinical summary of 3-4 paragraphs in English that includes:
1. General overview of progress
2. Significant changes in symptoms/mood
3. Effectiveness of therapeutic strategies
4. Recommendations for next steps"""

        return BuiltPrompt(full_prompt=full_prompt, purpose=PromptPurpose.PROGRESS_SUMMARY)

    def _format_notes(self, notes: Optional[Sequence[TherapyNote]]) -> str:
        """Render notes newest first, one line each."""
        if not notes:
            return NO_NOTES
        return "\n".join(
            f"- {note.date_label}: {note.title or 'Note'} - {note.content or ''}"
            for note in notes
        )

    def _format_emotional_context(self, context: EmotionalContext, known: bool = True) -> str:
        intensity = context.intensity.value if known else DEFAULT_INTENSITY
        return (
            "EMOTIONAL CONTEXT:\n"
            f"- Detected emotions: {', '.join(context.emotions) or NO_EMOTIONS}\n"
            f"- Identified triggers: {', '.join(context.triggers) or NO_DETECTED_TRIGGERS}\n"
            f"- Intensity: {intensity}"
        )
