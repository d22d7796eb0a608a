"""
LLM Provider Abstract Interface

Defines the contract for AI model providers. Services depend on this
interface, so tests can substitute a fake and the hosted model can be
swapped without touching service code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from zentia.domain.enums.status import ProviderStatus
from zentia.services.prompt.prompt_builder import BuiltPrompt


@dataclass
class LLMResponse:
    """
    Response from an LLM provider.

    Attributes:
        content: Generated text
        finish_reason: Why generation stopped
        usage: Token usage statistics
        model: Model identifier used
        provider: Provider name
        latency_ms: Response time in milliseconds
        raw_response: Original API response (for debugging)
    """

    content: str
    finish_reason: str = "stop"
    usage: dict = field(default_factory=dict)
    model: str = ""
    provider: str = ""
    latency_ms: int = 0
    raw_response: Optional[Any] = None

    @property
    def total_tokens(self) -> int:
        return self.usage.get("total_tokens", 0)

    def to_dict(self) -> dict:
        """Serialize to dictionary (excluding raw_response)."""
        return {
            "content": self.content,
            "finish_reason": self.finish_reason,
            "usage": self.usage,
            "model": self.model,
            "provider": self.provider,
            "latency_ms": self.latency_ms,
        }


class LLMProvider(ABC):
    """
    Abstract LLM provider interface.

    A provider that is not configured reports UNAVAILABLE and raises
    ServiceUnavailableError from `generate`; callers switch to the
    fallback analyzer instead of failing.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider name for logging and metrics."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Default model identifier."""

    @property
    @abstractmethod
    def status(self) -> ProviderStatus:
        """Whether the provider can currently serve requests."""

    def is_configured(self) -> bool:
        return self.status is ProviderStatus.AVAILABLE

    @abstractmethod
    async def generate(self, prompt: BuiltPrompt) -> LLMResponse:
        """
        Generate a completion for a built prompt.

        Raises:
            ServiceUnavailableError: Provider is not configured
            ExternalServiceError: Model or network failure, or blocked prompt
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Check provider availability."""
