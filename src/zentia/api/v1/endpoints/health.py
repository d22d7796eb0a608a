"""
Health Check Endpoints

System health and readiness endpoints for load balancers and
monitoring.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from zentia import __version__
from zentia.api.dependencies import get_therapy_service
from zentia.config import get_settings
from zentia.services.ai.therapy_ai_service import TherapyAIService

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    environment: str


class ReadinessResponse(BaseModel):
    """Readiness check response with component health."""

    ready: bool
    components: dict


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Basic health check endpoint for load balancers",
)
async def health_check() -> HealthResponse:
    """Returns 200 if the application is running."""
    settings = get_settings()

    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.env,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Readiness including database and Gemini status",
)
async def readiness_check(
    service: TherapyAIService = Depends(get_therapy_service),
) -> ReadinessResponse:
    """
    Detailed readiness check.

    Ready when the database is reachable. An unavailable Gemini model
    does not block readiness; responses then come from the fallback.
    """
    components = await service.health_check()

    return ReadinessResponse(
        ready=bool(components.get("database")),
        components=components,
    )
