"""
Prometheus Metrics

Metrics for the AI response pipeline, exposed at /metrics for
Prometheus scraping.

Only increment/observe; never block on metrics operations.
"""

import time
from functools import wraps
from typing import Callable

from fastapi import APIRouter, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Histogram,
    Info,
    generate_latest,
)

from zentia import __version__

# =============================================================================
# AI PIPELINE METRICS
# =============================================================================

AI_RESPONSES_TOTAL = Counter(
    "zentia_ai_responses_total",
    "Responses served by operation and source",
    ["operation", "source"],  # source: gemini, fallback
)

AI_FALLBACKS_TOTAL = Counter(
    "zentia_ai_fallbacks_total",
    "Fallbacks by operation and reason",
    ["operation", "reason"],  # unavailable, external_service, malformed_response, ...
)

EXTRACTION_REPAIRS_TOTAL = Counter(
    "zentia_extraction_repairs_total",
    "Model outputs that needed a sanitize tier beyond as-is",
    ["tier"],
)

# =============================================================================
# LLM METRICS
# =============================================================================

LLM_REQUESTS_TOTAL = Counter(
    "zentia_llm_requests_total",
    "Total LLM requests by provider",
    ["provider", "status"],  # success, error
)

LLM_LATENCY = Histogram(
    "zentia_llm_latency_seconds",
    "LLM response latency",
    ["provider"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

LLM_TOKENS_USED = Counter(
    "zentia_llm_tokens_total",
    "Total tokens used by LLM",
    ["provider", "type"],  # input, output
)

# =============================================================================
# DATA FETCH METRICS
# =============================================================================

RETRY_ATTEMPTS_TOTAL = Counter(
    "zentia_retry_attempts_total",
    "Retried data-fetch attempts by action and error kind",
    ["action", "error_kind"],
)

# =============================================================================
# SYSTEM INFO
# =============================================================================

SYSTEM_INFO = Info(
    "zentia_system",
    "Zentia backend information",
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def track_llm_request(provider: str) -> Callable:
    """Decorator to track LLM request metrics."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
                LLM_REQUESTS_TOTAL.labels(provider=provider, status="success").inc()

                usage = getattr(result, "usage", None) or {}
                LLM_TOKENS_USED.labels(provider=provider, type="input").inc(
                    usage.get("prompt_tokens", 0)
                )
                LLM_TOKENS_USED.labels(provider=provider, type="output").inc(
                    usage.get("completion_tokens", 0)
                )

                return result
            except Exception:
                LLM_REQUESTS_TOTAL.labels(provider=provider, status="error").inc()
                raise
            finally:
                LLM_LATENCY.labels(provider=provider).observe(time.time() - start_time)
        return wrapper
    return decorator


def track_response(operation: str, source: str) -> None:
    """Record which path served a response."""
    AI_RESPONSES_TOTAL.labels(operation=operation, source=source).inc()


def track_fallback(operation: str, reason: str) -> None:
    """Record a switch to the fallback path."""
    AI_FALLBACKS_TOTAL.labels(operation=operation, reason=reason).inc()


def track_extraction_repair(tier: str) -> None:
    EXTRACTION_REPAIRS_TOTAL.labels(tier=tier).inc()


def track_retry(action: str, error_kind: str) -> None:
    RETRY_ATTEMPTS_TOTAL.labels(action=action, error_kind=error_kind).inc()


def update_system_info(environment: str, version: str = __version__) -> None:
    """Update system info metric with current environment."""
    SYSTEM_INFO.info({
        "version": version,
        "environment": environment,
    })


# =============================================================================
# METRICS ENDPOINT
# =============================================================================

metrics_router = APIRouter(tags=["metrics"])


@metrics_router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format for scraping.
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )
