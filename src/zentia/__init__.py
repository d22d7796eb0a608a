"""
Zentia - AI Backend for Therapy Support

This package provides the backend services behind the Zentia web client:
AI-assisted chat between therapy sessions, therapy-notes analysis and
progress summaries for therapists.

The AI model is treated as an unreliable collaborator. Every operation has
a deterministic rule-based fallback so users always receive a response.
"""

__version__ = "0.1.0"
__author__ = "Zentia Engineering Team"
