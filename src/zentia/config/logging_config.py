"""
Zentia Logging Configuration

structlog on top of the stdlib logging module. Every entry carries the
service name, version and environment, plus whatever request and
operation context is bound through contextvars:

    correlation_id   bound per HTTP request by the error middleware
    operation        bound per AI operation (chat, notes_analysis, ...)
    client_id        bound alongside the operation when known

PRIVACY: Client text must never reach a log sink. Values under the
private text keys are replaced by their length, credentials are
replaced by a marker, and both rules apply at any nesting depth.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Callable, Iterator

import structlog

from zentia import __version__
from zentia.config.settings import Settings

SERVICE_NAME = "zentia-backend"

# Key fragments whose values are credentials
CREDENTIAL_FRAGMENTS: frozenset[str] = frozenset({
    "password",
    "token",
    "secret",
    "api_key",
    "apikey",
    "authorization",
    "bearer",
    "credential",
    "dsn",
})

# Keys whose values are client-authored or model-authored text
PRIVATE_TEXT_KEYS: frozenset[str] = frozenset({
    "message",
    "content",
    "additional_context",
    "summary",
    "note_text",
    "journal_text",
    "prompt",
    "raw_response",
})

REDACTED = "[REDACTED]"

NOISY_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "sqlalchemy.engine",
    "google",
)


def _is_credential(key: str) -> bool:
    key_lower = key.lower()
    return any(fragment in key_lower for fragment in CREDENTIAL_FRAGMENTS)


def _scrub(key: str, value: Any) -> Any:
    if _is_credential(key):
        return REDACTED
    if key.lower() in PRIVATE_TEXT_KEYS and isinstance(value, str):
        return f"<{len(value)} chars>"
    if isinstance(value, dict):
        return {k: _scrub(str(k), v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_scrub(key, item) for item in value]
    return value


def scrub_private_fields(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Mask credentials and private text anywhere in the entry."""
    return {key: _scrub(key, value) for key, value in event_dict.items()}


def service_context(env: str) -> Callable[..., dict[str, Any]]:
    """Processor stamping service identity on every entry."""

    def add_service_context(
        logger: logging.Logger,
        method_name: str,
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("version", __version__)
        event_dict.setdefault("env", env)
        return event_dict

    return add_service_context


def get_processors(env: str) -> list[Any]:
    """
    Processor chain for an environment.

    Development renders coloured console lines; staging and production
    render one JSON object per line.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        scrub_private_fields,
        service_context(env),
    ]

    if env == "development":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])

    return processors


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the root logger. Call once at startup."""
    structlog.configure(
        processors=get_processors(settings.env),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_correlation_id(correlation_id: str) -> None:
    """Tag every entry logged while handling the current request."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    """Drop all bound context (end of request)."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def operation_context(operation: str, **ids: Any) -> Iterator[None]:
    """
    Bind an operation name and identifiers for the duration of a block.

    Identifiers that are None are left out. Previously bound values are
    restored on exit, so request-level context survives.

    Usage:
        with operation_context("notes_analysis", client_id=client_id):
            ...
    """
    bound = {key: value for key, value in ids.items() if value is not None}
    with structlog.contextvars.bound_contextvars(operation=operation, **bound):
        yield
