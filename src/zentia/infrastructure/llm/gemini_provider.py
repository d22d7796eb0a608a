"""
Google Gemini LLM Provider

Implementation of the LLM provider interface for the Google Gemini API.

The provider is built from an explicit GeminiSettings object. A missing
or placeholder API key leaves it UNAVAILABLE rather than failing at
startup; every request then raises ServiceUnavailableError and the
caller serves a fallback response.

No retries happen here. A failed generation goes straight to the
fallback path.
"""

import time
from typing import Optional

import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from zentia.config.logging_config import get_logger
from zentia.config.settings import GeminiSettings
from zentia.domain.enums.status import ProviderStatus
from zentia.domain.errors import ExternalServiceError, ServiceUnavailableError
from zentia.infrastructure.llm.provider import LLMProvider, LLMResponse
from zentia.services.prompt.prompt_builder import BuiltPrompt

logger = get_logger(__name__)


class GeminiProvider(LLMProvider):
    """
    Google Gemini API provider.

    Usage:
        provider = GeminiProvider(get_settings().gemini)
        if provider.status is ProviderStatus.AVAILABLE:
            response = await provider.generate(prompt)
    """

    # Safety settings for mental health context
    SAFETY_SETTINGS = [
        {
            "category": "HARM_CATEGORY_HARASSMENT",
            "threshold": "BLOCK_MEDIUM_AND_ABOVE",
        },
        {
            "category": "HARM_CATEGORY_HATE_SPEECH",
            "threshold": "BLOCK_MEDIUM_AND_ABOVE",
        },
        {
            "category": "HARM_CATEGORY_SEXUALLY_EXPLICIT",
            "threshold": "BLOCK_MEDIUM_AND_ABOVE",
        },
        {
            "category": "HARM_CATEGORY_DANGEROUS_CONTENT",
            "threshold": "BLOCK_ONLY_HIGH",  # users describe distress in their own words
        },
    ]

    def __init__(self, settings: GeminiSettings) -> None:
        """
        Initialize the provider.

        Args:
            settings: Gemini configuration (key, model, sampling defaults)
        """
        self._settings = settings
        self._model: Optional[genai.GenerativeModel] = None
        self._status = ProviderStatus.UNAVAILABLE

        if not settings.has_usable_key():
            logger.warning(
                "Gemini API key not configured, AI responses will use fallback",
                model=settings.model,
            )
            return

        try:
            genai.configure(api_key=settings.api_key.get_secret_value())
            self._model = genai.GenerativeModel(
                model_name=settings.model,
                generation_config=self._generation_config(),
                safety_settings=self.SAFETY_SETTINGS,
            )
            self._status = ProviderStatus.AVAILABLE
        except Exception as e:
            logger.error(
                "Gemini model initialization failed",
                model=settings.model,
                error_type=type(e).__name__,
            )

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return self._settings.model

    @property
    def status(self) -> ProviderStatus:
        return self._status

    def _generation_config(self, prompt: Optional[BuiltPrompt] = None) -> GenerationConfig:
        """Sampling parameters: settings defaults, overridden by the prompt."""
        if prompt is None:
            return GenerationConfig(
                temperature=self._settings.temperature,
                top_p=self._settings.top_p,
                top_k=self._settings.top_k,
                max_output_tokens=self._settings.max_output_tokens,
            )
        return GenerationConfig(
            temperature=prompt.temperature,
            top_p=prompt.top_p,
            top_k=prompt.top_k,
            max_output_tokens=min(prompt.max_tokens, self._settings.max_output_tokens),
        )

    async def generate(self, prompt: BuiltPrompt) -> LLMResponse:
        """
        Generate a completion using the Gemini API.

        Args:
            prompt: Built prompt

        Returns:
            LLMResponse with the generated text

        Raises:
            ServiceUnavailableError: Provider not configured
            ExternalServiceError: API failure, empty output or blocked prompt
        """
        if self._model is None:
            raise ServiceUnavailableError(
                self.provider_name,
                context={"model": self._settings.model},
            )

        start_time = time.time()

        try:
            response = await self._model.generate_content_async(
                prompt.full_prompt,
                generation_config=self._generation_config(prompt),
            )
        except Exception as e:
            error_msg = str(e).lower()
            reason = "blocked" if "blocked" in error_msg or "safety" in error_msg else "error"
            logger.error(
                "Gemini API error",
                model=self._settings.model,
                reason=reason,
                error_type=type(e).__name__,
            )
            raise ExternalServiceError(
                self.provider_name,
                str(e),
                reason=reason,
                original_error=e,
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)

        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            logger.warning(
                "Gemini blocked prompt",
                block_reason=str(feedback.block_reason),
                purpose=prompt.purpose.value,
            )
            raise ExternalServiceError(
                self.provider_name,
                f"prompt blocked: {feedback.block_reason}",
                reason="blocked",
            )

        try:
            content = response.text or ""
        except ValueError as e:
            # .text raises when the candidate was stopped by a safety filter
            raise ExternalServiceError(
                self.provider_name,
                str(e),
                reason="blocked",
                original_error=e,
            ) from e

        if not content.strip():
            raise ExternalServiceError(self.provider_name, "empty response", reason="empty")

        logger.debug(
            "Gemini completion generated",
            model=self._settings.model,
            purpose=prompt.purpose.value,
            latency_ms=latency_ms,
        )

        return LLMResponse(
            content=content,
            finish_reason="stop",
            usage=self._usage(response),
            model=self._settings.model,
            provider=self.provider_name,
            latency_ms=latency_ms,
            raw_response=response,
        )

    @staticmethod
    def _usage(response) -> dict:
        metadata = getattr(response, "usage_metadata", None)
        if metadata is None:
            return {}
        return {
            "prompt_tokens": getattr(metadata, "prompt_token_count", 0) or 0,
            "completion_tokens": getattr(metadata, "candidates_token_count", 0) or 0,
            "total_tokens": getattr(metadata, "total_token_count", 0) or 0,
        }

    async def health_check(self) -> bool:
        """Check Gemini API availability."""
        if self._model is None:
            return False

        try:
            for _ in genai.list_models():
                break
            return True
        except Exception as e:
            logger.warning("Gemini health check failed", error_type=type(e).__name__)
            return False
