"""Metrics infrastructure package."""

from zentia.infrastructure.metrics.prometheus_metrics import (
    AI_FALLBACKS_TOTAL,
    AI_RESPONSES_TOTAL,
    EXTRACTION_REPAIRS_TOTAL,
    LLM_LATENCY,
    LLM_REQUESTS_TOTAL,
    LLM_TOKENS_USED,
    RETRY_ATTEMPTS_TOTAL,
    metrics_router,
    track_extraction_repair,
    track_fallback,
    track_llm_request,
    track_response,
    track_retry,
    update_system_info,
)

__all__ = [
    "AI_FALLBACKS_TOTAL",
    "AI_RESPONSES_TOTAL",
    "EXTRACTION_REPAIRS_TOTAL",
    "LLM_LATENCY",
    "LLM_REQUESTS_TOTAL",
    "LLM_TOKENS_USED",
    "RETRY_ATTEMPTS_TOTAL",
    "metrics_router",
    "track_extraction_repair",
    "track_fallback",
    "track_llm_request",
    "track_response",
    "track_retry",
    "update_system_info",
]
