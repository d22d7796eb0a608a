"""Error tracking and tracing."""

from zentia.infrastructure.monitoring.sentry_integration import (
    capture_app_error,
    init_sentry,
    start_span,
)

__all__ = ["capture_app_error", "init_sentry", "start_span"]
