"""
Database Connection Management

Async PostgreSQL connection to the Supabase database with:
- Connection pooling
- Health checks
- Graceful shutdown

The schema is owned by Supabase; this service only reads from it.

SECURITY: Connection strings contain credentials and must
never be logged.
"""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from zentia.config import get_settings
from zentia.config.logging_config import get_logger
from zentia.config.settings import DatabaseSettings

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM mappings.
    """
    pass


class DatabaseManager:
    """
    Manages database connections and sessions.

    Every session is independent, so concurrent queries each take
    their own connection from the pool.

    Usage:
        db = DatabaseManager(settings.database)
        await db.initialize()
        async with db.session() as session:
            # use session
        await db.close()
    """

    def __init__(self, settings: DatabaseSettings, echo: bool = False) -> None:
        """Initialize database manager (connection not established)."""
        self._settings = settings
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._initialized = False

    async def initialize(self) -> None:
        """
        Initialize database engine and session factory.

        Should be called once during application startup.
        """
        if self._initialized:
            logger.warning("Database already initialized")
            return

        self._engine = create_async_engine(
            self._settings.async_url,
            pool_size=self._settings.pool_size,
            max_overflow=self._settings.max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
            echo=self._echo,
        )

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        self._initialized = True
        logger.info("Database connection pool initialized", host=self._settings.host)

    async def close(self) -> None:
        """
        Close database connections.

        Should be called during application shutdown.
        """
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._initialized = False
            logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a read-only database session with automatic cleanup.

        Usage:
            async with db.session() as session:
                result = await session.execute(...)

        Yields:
            AsyncSession: Database session
        """
        if not self._session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self._session_factory()
        try:
            yield session
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """
        Check database connectivity.

        Returns:
            True if database is reachable, False otherwise
        """
        if not self._engine:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error_type=type(e).__name__)
            return False

    @property
    def engine(self) -> Optional[AsyncEngine]:
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._initialized


@lru_cache()
def get_db_manager() -> DatabaseManager:
    """
    Get the process-wide database manager.

    Returns:
        DatabaseManager: Singleton database manager
    """
    settings = get_settings()
    return DatabaseManager(settings.database, echo=settings.debug)
