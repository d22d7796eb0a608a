"""Rule-based fallback services package."""

from zentia.services.fallback.fallback_analyzer import FallbackAnalyzer

__all__ = ["FallbackAnalyzer"]
