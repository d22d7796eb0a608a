"""
API Dependencies

FastAPI dependency providers. The service instance is created during
application startup and stored on `app.state`.
"""

from fastapi import Request

from zentia.services.ai.therapy_ai_service import TherapyAIService


def get_therapy_service(request: Request) -> TherapyAIService:
    """Get the application's TherapyAIService."""
    service = getattr(request.app.state, "therapy_service", None)
    if service is None:
        raise RuntimeError("TherapyAIService not initialized")
    return service
