"""
Configuration Management

Uses Pydantic BaseSettings to load configuration from environment variables.
All settings can be overridden via .env file or GTM_-prefixed environment
variables.

Environment Variables:
    GTM_APP_ENV: Environment name (development/staging/production)
    GTM_DEBUG: Enable debug mode (default: False)
    GTM_SESSION_BACKEND: memory or redis (default: memory)
    GTM_REDIS_URL: Redis connection string
    GTM_SLOT_VOCABULARY: permissive or strict (default: permissive)
    GTM_RENDERER_URL: Content renderer base URL (optional)
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_name: str = "gtm-assistant"
    """Application name."""

    app_env: Literal["development", "staging", "production"] = "development"
    """Current application environment.

    Options:
    - development: Local development, verbose errors, API docs enabled
    - staging: Pre-production testing environment
    - production: Live environment, generic error bodies only
    """

    debug: bool = False
    """Enable debug mode (DEBUG log level, request timing logs)."""

    host: str = "0.0.0.0"
    """Host to bind the application server."""

    port: int = 8000
    """Port to bind the application server."""

    # CORS Configuration
    cors_origins: str = "http://localhost:3000"
    """Comma-separated list of allowed CORS origins."""

    # Session Storage
    session_backend: Literal["memory", "redis"] = "memory"
    """Where dialogue contexts live.

    memory keeps them in process with no expiry; redis stores them as
    JSON and falls back to memory when Redis is unreachable.
    """

    redis_url: str = "redis://localhost:6379/0"
    """Redis connection URL.

    Format: redis://host:port/db
    """

    redis_session_ttl: int = 0
    """Redis session TTL in seconds (0 = keys never expire)."""

    # Dialogue
    slot_vocabulary: Literal["permissive", "strict"] = "permissive"
    """Satisfying vocabulary for the generation gate.

    permissive lets generic verbs fill every slot, so clarifying
    questions are rare. strict only accepts named industries for the
    domain context.
    """

    default_domain: str = "tech_telecom"
    """Domain used when no industry keyword is present."""

    # Content Renderer
    renderer_url: Optional[str] = None
    """Base URL of the content renderer. Unset = commands are returned, not rendered."""

    renderer_timeout: float = 30.0
    """Renderer request timeout in seconds."""

    # Pydantic configuration
    model_config = SettingsConfigDict(
        env_prefix="GTM_",
        env_file=".env",  # Load from .env file if it exists
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    @property
    def cors_origins_list(self) -> list[str]:
        """Split cors_origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache so settings are loaded once and reused across the
    application.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()


# Module-level settings instance for easy imports
settings = get_settings()
