"""
Therapy AI Service

Orchestrates every AI-backed operation:

    data fetch (with retry) -> prompt -> Gemini -> extractor -> typed result

A failure at any step after the fetch hands over to the fallback analyzer.

Callers never receive raw exceptions. Validation and unrecoverable
errors are logged and converted to safe fallback values here, and an
AI failure is never surfaced to the end user.

PRIVACY: Message text and note content are never logged; only lengths,
counts and identifiers are.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from tenacity import wait_exponential
from tenacity.wait import wait_base

from zentia.config.logging_config import get_logger, operation_context
from zentia.config.settings import RetrySettings
from zentia.domain.enums.status import ProviderStatus, ResponseSource
from zentia.domain.errors import AppError, MalformedResponseError, validation_error
from zentia.domain.models.chat_response import ChatResponse
from zentia.domain.models.client_context import (
    UNKNOWN,
    ClientContext,
    ProgressData,
    TherapyNote,
    display_name_for,
)
from zentia.domain.models.emotional_context import EmotionalContext
from zentia.domain.models.notes_analysis import NotesAnalysis
from zentia.infrastructure.database.repositories.therapy_repository import (
    DEFAULT_NOTES_LIMIT,
    TherapyRepository,
)
from zentia.infrastructure.llm.provider import LLMProvider
from zentia.infrastructure.metrics.prometheus_metrics import (
    track_extraction_repair,
    track_fallback,
    track_llm_request,
    track_response,
)
from zentia.infrastructure.monitoring.sentry_integration import start_span
from zentia.services.detection.emotion_analyzer import EmotionAnalyzer
from zentia.services.fallback.fallback_analyzer import FallbackAnalyzer
from zentia.services.parsing.response_extractor import (
    ExtractionResult,
    ResponseExtractor,
    validate_chat_payload,
    validate_notes_payload,
)
from zentia.services.prompt.prompt_builder import BuiltPrompt, PromptBuilder
from zentia.services.resilience.retry import log_error, safe_async, with_retry

logger = get_logger(__name__)

COMPONENT = "TherapyAIService"

MIN_SUMMARY_DAYS = 1
MAX_SUMMARY_DAYS = 365


def conversion_error(exc: Exception) -> MalformedResponseError:
    """Error for a validated payload that still failed model conversion."""
    return MalformedResponseError(
        "conversion_failed",
        context={"error_type": type(exc).__name__},
    )


def summary_unavailable_message(days: int) -> str:
    return (
        f"Progress summary for the last {days} days is currently unavailable. "
        "Please try again later."
    )


class TherapyAIService:
    """
    AI response orchestration with a deterministic fallback.

    Usage:
        service = TherapyAIService(provider, repository)
        response = await service.generate_chat_response("I feel anxious")
    """

    def __init__(
        self,
        provider: LLMProvider,
        repository: TherapyRepository,
        prompt_builder: Optional[PromptBuilder] = None,
        extractor: Optional[ResponseExtractor] = None,
        fallback: Optional[FallbackAnalyzer] = None,
        emotion_analyzer: Optional[EmotionAnalyzer] = None,
        retry_settings: Optional[RetrySettings] = None,
        retry_wait: Optional[wait_base] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            provider: AI model provider
            repository: Client data access
            prompt_builder: Prompt construction
            extractor: Model output parsing
            fallback: Rule-based substitute for the model
            emotion_analyzer: Keyword emotion detection
            retry_settings: Data-fetch retry policy
            retry_wait: Tenacity wait strategy override
        """
        self._provider = provider
        self._repository = repository
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._extractor = extractor or ResponseExtractor()
        self._emotion_analyzer = emotion_analyzer or EmotionAnalyzer()
        self._fallback = fallback or FallbackAnalyzer(self._emotion_analyzer)
        self._retry_settings = retry_settings or RetrySettings()
        self._retry_wait = retry_wait

    @property
    def ai_available(self) -> bool:
        return self._provider.status is ProviderStatus.AVAILABLE

    # =========================================================================
    # CHAT
    # =========================================================================

    async def generate_chat_response(
        self,
        message: str,
        client_id: Optional[str] = None,
        therapeutic_contact: bool = False,
        additional_context: Optional[str] = None,
    ) -> ChatResponse:
        """
        Generate a reply to a chat message.

        Args:
            message: User message
            client_id: Client whose profile personalizes the reply
            therapeutic_contact: Include the client's therapy notes
            additional_context: Free text supplied by the caller

        Returns:
            ChatResponse from Gemini, or from the fallback analyzer
        """
        message = message or ""
        emotional_context = self._emotion_analyzer.analyze(message)

        with operation_context("chat", client_id=client_id), start_span(
            "ai.chat_generation",
            "Generate Chat Response",
            message_length=len(message),
            has_client_id=bool(client_id),
            therapeutic_contact=therapeutic_contact,
        ) as span:
            span.set_data("emotional_intensity", emotional_context.intensity.value)

            result = await safe_async(
                lambda: self._chat(
                    message,
                    emotional_context,
                    client_id,
                    therapeutic_contact,
                    additional_context,
                ),
                action="generate_chat_response",
                component=COMPONENT,
                client_id=client_id,
            )

            if result.ok and result.data is not None:
                response, source = result.data
            else:
                response = self._fallback.chat_response(message, emotional_context)
                source = ResponseSource.FALLBACK
                track_fallback("chat", result.error.kind.value if result.error else "unknown")

            span.set_data("ai_model_used", source.value)
            span.set_data("urgency_level", response.urgency_level.value)
            span.set_data("response_length", len(response.content))

        track_response("chat", source.value)
        logger.info(
            "Chat response generated",
            source=source.value,
            urgency_level=response.urgency_level.value,
            emotions_detected=len(response.metadata.detected_emotions),
            strategies_suggested=len(response.metadata.suggested_strategies),
        )
        return response

    async def _chat(
        self,
        message: str,
        emotional_context: EmotionalContext,
        client_id: Optional[str],
        therapeutic_contact: bool,
        additional_context: Optional[str],
    ) -> tuple[ChatResponse, ResponseSource]:
        if not message.strip():
            raise validation_error(
                "Chat message is empty",
                "Please enter a message.",
                component=COMPONENT,
            )

        if not self.ai_available:
            track_fallback("chat", "unavailable")
            return self._fallback.chat_response(message, emotional_context), ResponseSource.FALLBACK

        client_context = await self._load_client_context(client_id) if client_id else None
        notes: list[TherapyNote] = []
        if client_id and therapeutic_contact:
            notes = await self._load_notes(client_id, limit=None)

        prompt = self._prompt_builder.build_chat_prompt(
            message,
            client_context=client_context,
            notes=notes,
            emotional_context=emotional_context,
            additional_context=additional_context,
        )

        raw = await self._generate(prompt, operation="chat")
        if raw is None:
            return self._fallback.chat_response(message, emotional_context), ResponseSource.FALLBACK

        extraction = self._extractor.extract(raw, validate_chat_payload)
        if not extraction.ok:
            self._record_malformed("chat", extraction.to_error())
            return self._fallback.chat_response(message, emotional_context), ResponseSource.FALLBACK

        self._record_repair(extraction)
        try:
            response = ChatResponse.from_payload(extraction.value)
        except (TypeError, ValueError, OverflowError) as e:
            self._record_malformed("chat", conversion_error(e))
            return self._fallback.chat_response(message, emotional_context), ResponseSource.FALLBACK
        return response, ResponseSource.GEMINI

    async def _load_client_context(self, client_id: str) -> ClientContext:
        """Client profile, degrading to a pseudonymous default."""
        result = await safe_async(
            lambda: self._with_retry(
                lambda: self._repository.get_client_context(client_id),
                action="fetch_client_context",
            ),
            action="fetch_client_context",
            component=COMPONENT,
            client_id=client_id,
        )
        context = result.data or ClientContext()
        if context.name == UNKNOWN:
            context.name = display_name_for(client_id)
        return context

    async def _load_notes(self, client_id: str, limit: Optional[int]) -> list[TherapyNote]:
        result = await safe_async(
            lambda: self._with_retry(
                lambda: self._repository.list_notes(client_id, limit=limit),
                action="fetch_notes",
            ),
            action="fetch_notes",
            component=COMPONENT,
            fallback=[],
            client_id=client_id,
        )
        return result.data or []

    # =========================================================================
    # NOTES ANALYSIS
    # =========================================================================

    async def analyze_therapy_notes(
        self,
        client_id: str,
        note_ids: Optional[Sequence[str]] = None,
    ) -> NotesAnalysis:
        """
        Analyze a client's therapy notes.

        Args:
            client_id: Client identifier (required)
            note_ids: Restrict to these notes; otherwise the latest 10

        Returns:
            NotesAnalysis; the fixed empty analysis when there is
            nothing to analyze or the fetch fails
        """
        if not client_id:
            log_error(
                validation_error(
                    "Client ID is required for notes analysis",
                    "Unable to analyze notes: missing client information.",
                ),
                action="analyze_therapy_notes",
                component=COMPONENT,
            )
            return NotesAnalysis.empty()

        with operation_context("notes_analysis", client_id=client_id):
            result = await safe_async(
                lambda: self._analyze_notes(client_id, note_ids),
                action="analyze_therapy_notes",
                component=COMPONENT,
                client_id=client_id,
                note_count_requested=len(note_ids or []),
            )
        if not result.ok or result.data is None:
            track_response("notes_analysis", ResponseSource.FALLBACK.value)
            return NotesAnalysis.empty()

        analysis, source = result.data
        track_response("notes_analysis", source.value)
        logger.info(
            "Notes analysis generated",
            client_id=client_id,
            source=source.value,
            wellbeing_score=analysis.wellbeing_score,
        )
        return analysis

    async def _analyze_notes(
        self,
        client_id: str,
        note_ids: Optional[Sequence[str]],
    ) -> tuple[NotesAnalysis, ResponseSource]:
        notes = await self._with_retry(
            lambda: self._repository.list_notes(
                client_id,
                note_ids=note_ids,
                limit=DEFAULT_NOTES_LIMIT,
            ),
            action="fetch_notes",
        )

        if not notes:
            logger.info("No notes found for analysis", client_id=client_id)
            return NotesAnalysis.empty(), ResponseSource.FALLBACK

        if not self.ai_available:
            track_fallback("notes_analysis", "unavailable")
            return self._fallback.analyze_notes(notes), ResponseSource.FALLBACK

        prompt = self._prompt_builder.build_notes_analysis_prompt(notes)
        raw = await self._generate(prompt, operation="notes_analysis")
        if raw is None:
            return self._fallback.analyze_notes(notes), ResponseSource.FALLBACK

        extraction = self._extractor.extract(raw, validate_notes_payload)
        if not extraction.ok:
            self._record_malformed("notes_analysis", extraction.to_error())
            return self._fallback.analyze_notes(notes), ResponseSource.FALLBACK

        self._record_repair(extraction)
        try:
            analysis = NotesAnalysis.from_payload(extraction.value)
        except (TypeError, ValueError, OverflowError) as e:
            self._record_malformed("notes_analysis", conversion_error(e))
            return self._fallback.analyze_notes(notes), ResponseSource.FALLBACK
        return analysis, ResponseSource.GEMINI

    # =========================================================================
    # PROGRESS SUMMARY
    # =========================================================================

    async def generate_progress_summary(self, client_id: str, days: int = 30) -> str:
        """
        Narrative summary of a client's progress over recent days.

        Args:
            client_id: Client identifier (required)
            days: Reporting period, 1-365

        Returns:
            Summary text; a fixed "unavailable" message on any failure
        """
        error = self._validate_summary_request(client_id, days)
        if error is not None:
            log_error(
                error,
                action="generate_progress_summary",
                component=COMPONENT,
                client_id=client_id,
                days=days,
            )
            return summary_unavailable_message(days)

        with operation_context("progress_summary", client_id=client_id):
            result = await safe_async(
                lambda: self._progress_summary(client_id, days),
                action="generate_progress_summary",
                component=COMPONENT,
                client_id=client_id,
                days=days,
            )
        if not result.ok or result.data is None:
            return summary_unavailable_message(days)

        summary, source = result.data
        track_response("progress_summary", source.value)
        return summary

    @staticmethod
    def _validate_summary_request(client_id: str, days: int) -> Optional[AppError]:
        if not client_id:
            return validation_error(
                "Client ID is required for progress summary",
                "Unable to generate progress summary: missing client information.",
            )
        if not MIN_SUMMARY_DAYS <= days <= MAX_SUMMARY_DAYS:
            return validation_error(
                "Invalid time period for progress summary",
                "Time period must be between 1 and 365 days.",
                days=days,
            )
        return None

    async def _progress_summary(self, client_id: str, days: int) -> tuple[str, ResponseSource]:
        since = datetime.now(timezone.utc) - timedelta(days=days)
        data: ProgressData = await self._with_retry(
            lambda: self._repository.fetch_progress_data(client_id, since),
            action="fetch_progress_data",
        )

        if not self.ai_available:
            track_fallback("progress_summary", "unavailable")
            return self._fallback.progress_summary(data, days), ResponseSource.FALLBACK

        prompt = self._prompt_builder.build_progress_summary_prompt(data, days)
        raw = await self._generate(prompt, operation="progress_summary")
        if raw is None or not raw.strip():
            return self._fallback.progress_summary(data, days), ResponseSource.FALLBACK

        return raw.strip(), ResponseSource.GEMINI

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _with_retry(self, operation, action: str):
        wait = self._retry_wait
        if wait is None:
            wait = wait_exponential(
                multiplier=self._retry_settings.wait_multiplier,
                max=self._retry_settings.wait_max_seconds,
            )
        return await with_retry(
            operation,
            action=action,
            max_attempts=self._retry_settings.max_attempts,
            wait=wait,
        )

    async def _generate(self, prompt: BuiltPrompt, operation: str) -> Optional[str]:
        """Raw model text, or None when the model failed (already logged)."""
        generate = track_llm_request(self._provider.provider_name)(self._provider.generate)
        try:
            response = await generate(prompt)
        except AppError as e:
            track_fallback(operation, e.kind.value)
            log_error(e, action=f"generate_{operation}", component=COMPONENT)
            return None
        return response.content

    def _record_malformed(self, operation: str, error: MalformedResponseError) -> None:
        track_fallback(operation, error.kind.value)
        log_error(error, action=f"extract_{operation}", component=COMPONENT)

    @staticmethod
    def _record_repair(extraction: ExtractionResult) -> None:
        if extraction.was_repaired and extraction.tier:
            track_extraction_repair(extraction.tier)

    async def health_check(self) -> dict:
        """Component health for readiness probes."""
        return {
            "database": await self._repository.health_check(),
            "gemini": self._provider.status.value,
        }
