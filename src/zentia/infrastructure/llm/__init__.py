"""LLM provider infrastructure."""

from zentia.infrastructure.llm.gemini_provider import GeminiProvider
from zentia.infrastructure.llm.provider import LLMProvider, LLMResponse

__all__ = ["GeminiProvider", "LLMProvider", "LLMResponse"]
