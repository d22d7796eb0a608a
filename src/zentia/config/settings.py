"""
Zentia Application Settings

Configuration management using Pydantic Settings.
All sensitive values are loaded from environment variables.

SECURITY: Never log or expose settings containing secrets.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


# Values shipped in .env templates that mean "not configured"
PLACEHOLDER_API_KEYS: frozenset[str] = frozenset({
    "",
    "CHANGE_ME",
    "your_gemini_api_key_here",
})


class DatabaseSettings(BaseSettings):
    """Supabase Postgres connection configuration."""

    model_config = SettingsConfigDict(env_prefix="ZENTIA_DB_")

    host: str = Field(default="localhost", description="Database host (db.<project>.supabase.co)")
    port: int = Field(default=5432, description="Database port")
    name: str = Field(default="postgres", description="Database name")
    user: str = Field(default="postgres", description="Database user")
    password: SecretStr = Field(default=SecretStr("dev_password"), description="Database password")
    pool_size: int = Field(default=5, ge=1, le=100, description="Connection pool size")
    max_overflow: int = Field(default=10, ge=0, le=100, description="Max overflow connections")

    @property
    def async_url(self) -> str:
        """Generate async database URL for SQLAlchemy."""
        password = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{password}@{self.host}:{self.port}/{self.name}"


class GeminiSettings(BaseSettings):
    """
    Google Gemini API configuration.

    Generation parameters default to the values the chat prompts were
    tuned against.
    """

    model_config = SettingsConfigDict(env_prefix="ZENTIA_GEMINI_")

    api_key: SecretStr = Field(default=SecretStr(""), description="Gemini API key")
    model: str = Field(default="gemini-2.0-flash", description="Model identifier")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_p: float = Field(default=0.9, ge=0.0, le=1.0)
    top_k: int = Field(default=40, ge=1)
    max_output_tokens: int = Field(default=2048, ge=1, le=8192)

    def has_usable_key(self) -> bool:
        """Check the API key is present and not a template placeholder."""
        return self.api_key.get_secret_value().strip() not in PLACEHOLDER_API_KEYS


class RetrySettings(BaseSettings):
    """Retry policy for data-fetch operations."""

    model_config = SettingsConfigDict(env_prefix="ZENTIA_RETRY_")

    max_attempts: int = Field(default=3, ge=1, le=10)
    wait_multiplier: float = Field(default=0.5, ge=0.0)
    wait_max_seconds: float = Field(default=5.0, ge=0.0)


class SentrySettings(BaseSettings):
    """Sentry error tracking configuration."""

    model_config = SettingsConfigDict(env_prefix="ZENTIA_SENTRY_")

    dsn: SecretStr = Field(default=SecretStr(""), description="Sentry DSN (empty disables tracking)")
    traces_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)


class Settings(BaseSettings):
    """
    Main application settings.

    All configuration is loaded from environment variables with ZENTIA_ prefix.
    Sensitive values use SecretStr to prevent accidental logging.

    Usage:
        settings = get_settings()
        db_url = settings.database.async_url
    """

    model_config = SettingsConfigDict(
        env_prefix="ZENTIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode - NEVER enable in production")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    api_version: str = Field(default="v1", description="API version prefix")
    cors_origins: list[str] = Field(
        default=["http://localhost:5173"],
        description="Allowed CORS origins"
    )

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.
    For testing, use dependency injection to override.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
