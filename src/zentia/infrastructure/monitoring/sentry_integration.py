"""
Sentry Error Tracking Integration

Production error tracking with sensitive data scrubbing.

SECURITY: All sensitive fields are stripped before sending to Sentry.
PRIVACY: Chat messages and note content are never attached to events;
only their lengths and counts are.
"""

import re
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from zentia import __version__
from zentia.config.logging_config import get_logger
from zentia.domain.errors import AppError

logger = get_logger(__name__)

# Patterns for sensitive data scrubbing
SENSITIVE_PATTERNS = [
    r"password[\"']?\s*[:=]\s*[\"']?[^\"'\s,}]+",
    r"api[_-]?key[\"']?\s*[:=]\s*[\"']?[^\"'\s,}]+",
    r"key=[A-Za-z0-9\-_]{20,}",
    r"token[\"']?\s*[:=]\s*[\"']?[^\"'\s,}]+",
    r"secret[\"']?\s*[:=]\s*[\"']?[^\"'\s,}]+",
    r"bearer\s+[a-zA-Z0-9\-._~+/]+=*",
    r"postgresql(\+asyncpg)?://[^\s\"']+",
]

SENSITIVE_KEYS = frozenset({
    "password",
    "token",
    "secret",
    "api_key",
    "apikey",
    "authorization",
    "bearer",
    "credential",
    "dsn",
    "message",
    "content",
    "additional_context",
})


def _scrub_string(value: str) -> str:
    """Scrub sensitive patterns from string."""
    result = value
    for pattern in SENSITIVE_PATTERNS:
        result = re.sub(pattern, "[REDACTED]", result, flags=re.IGNORECASE)
    return result


def _scrub_dict(data: dict) -> dict:
    """Recursively scrub sensitive data from dictionary."""
    result = {}
    for key, value in data.items():
        key_lower = str(key).lower().replace("-", "_")

        if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = _scrub_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _scrub_dict(item) if isinstance(item, dict)
                else _scrub_string(item) if isinstance(item, str)
                else item
                for item in value
            ]
        elif isinstance(value, str):
            result[key] = _scrub_string(value)
        else:
            result[key] = value

    return result


def before_send(event: dict, hint: dict) -> Optional[dict]:
    """
    Process event before sending to Sentry.

    Scrubs request bodies, headers, breadcrumbs and extra context.
    """
    request = event.get("request")
    if isinstance(request, dict):
        if isinstance(request.get("data"), dict):
            request["data"] = _scrub_dict(request["data"])
        elif "data" in request:
            request["data"] = "[REDACTED]"
        if isinstance(request.get("headers"), dict):
            request["headers"] = _scrub_dict(request["headers"])

    for breadcrumb in event.get("breadcrumbs", {}).get("values", []):
        if isinstance(breadcrumb.get("data"), dict):
            breadcrumb["data"] = _scrub_dict(breadcrumb["data"])

    if isinstance(event.get("extra"), dict):
        event["extra"] = _scrub_dict(event["extra"])

    return event


def init_sentry(
    dsn: str,
    environment: str = "development",
    release: str = f"zentia@{__version__}",
    traces_sample_rate: float = 0.1,
) -> bool:
    """
    Initialize Sentry error tracking.

    Args:
        dsn: Sentry DSN (empty disables tracking)
        environment: Environment name
        release: Release version
        traces_sample_rate: Performance tracing rate

    Returns:
        True if Sentry was initialized
    """
    if not dsn:
        logger.warning("Sentry DSN not configured, error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        before_send=before_send,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            AsyncioIntegration(),
            LoggingIntegration(level=None, event_level=None),
        ],
        send_default_pii=False,
        max_breadcrumbs=50,
    )

    logger.info("Sentry initialized", environment=environment, release=release)
    return True


def capture_app_error(
    error: AppError,
    action: str,
    component: str,
    extra: Optional[dict[str, Any]] = None,
) -> Optional[str]:
    """
    Report a classified application error.

    Returns: Sentry event ID (None when Sentry is not initialized)
    """
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("error_kind", error.kind.value)
        scope.set_tag("error_severity", error.severity.value)
        scope.set_tag("action", action)
        scope.set_tag("component", component)
        for key, value in _scrub_dict({**error.context, **(extra or {})}).items():
            scope.set_extra(key, value)

        return sentry_sdk.capture_exception(error)


@contextmanager
def start_span(op: str, name: str, **data: Any) -> Iterator[Any]:
    """
    Trace a unit of work.

    Usage:
        with start_span("ai.chat_generation", "Generate Chat Response") as span:
            span.set_data("response_source", "gemini")
    """
    with sentry_sdk.start_span(op=op, name=name) as span:
        for key, value in data.items():
            span.set_data(key, value)
        yield span
