"""
API v1 Router

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter

from zentia.api.v1.endpoints.analysis import router as analysis_router
from zentia.api.v1.endpoints.chat import router as chat_router
from zentia.api.v1.endpoints.health import router as health_router

api_router = APIRouter()

api_router.include_router(
    health_router,
    prefix="/health",
    tags=["Health"],
)

api_router.include_router(
    chat_router,
    prefix="/chat",
    tags=["Chat"],
)

api_router.include_router(
    analysis_router,
    prefix="/clients",
    tags=["Analysis"],
)
