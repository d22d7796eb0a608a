"""
Zentia FastAPI Application Entry Point

Main application initialization with:
- Lifespan management (startup/shutdown)
- CORS configuration
- Error handling middleware
- Router registration (API v1 and Prometheus metrics)
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from zentia import __version__
from zentia.api.middleware.error_handler import ErrorHandlerMiddleware
from zentia.api.v1.router import api_router
from zentia.config import get_settings
from zentia.config.logging_config import configure_logging, get_logger
from zentia.infrastructure.database import get_db_manager
from zentia.infrastructure.database.repositories import SqlAlchemyTherapyRepository
from zentia.infrastructure.llm import GeminiProvider
from zentia.infrastructure.metrics import metrics_router, update_system_info
from zentia.infrastructure.monitoring import init_sentry
from zentia.services.ai.therapy_ai_service import TherapyAIService

settings = get_settings()
configure_logging(settings)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Connects the database and builds the TherapyAIService on startup.
    """
    logger.info(
        "Starting Zentia application",
        env=settings.env,
        version=__version__,
    )

    init_sentry(
        settings.sentry.dsn.get_secret_value(),
        environment=settings.env,
        traces_sample_rate=settings.sentry.traces_sample_rate,
    )
    update_system_info(settings.env)

    db = get_db_manager()
    try:
        await db.initialize()

        provider = GeminiProvider(settings.gemini)
        app.state.therapy_service = TherapyAIService(
            provider=provider,
            repository=SqlAlchemyTherapyRepository(db),
            retry_settings=settings.retry,
        )
        logger.info("Therapy AI service initialized", gemini_status=provider.status.value)

        yield

    finally:
        logger.info("Shutting down Zentia application")
        await db.close()
        logger.info("Zentia application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Zentia API",
        description="AI backend for therapy support between sessions",
        version=__version__,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(ErrorHandlerMiddleware)

    app.include_router(
        api_router,
        prefix=f"/api/{settings.api_version}",
    )
    app.include_router(metrics_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint - basic info."""
        return {
            "name": "Zentia API",
            "version": __version__,
            "status": "operational",
        }

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "zentia.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.env == "development",
        log_level=settings.log_level.lower(),
    )
