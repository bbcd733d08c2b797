"""Application settings and configuration.

This module defines all configuration options for the matchgate service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    The identity and encryption secrets are optional at load time so the
    process can start for tooling; the services that need them raise
    ``ConfigurationError`` when they are built without them.
    """

    # Application metadata
    app_name: str = Field(default="matchgate", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Session provider (bearer JWT signing key)
    secret_key: str = Field(alias="SECRET_KEY")

    # Pseudonymization and conversation encryption secrets
    identity_secret: str | None = Field(default=None, alias="IDENTITY_SECRET")
    encryption_secret: str | None = Field(default=None, alias="ENCRYPTION_SECRET")

    # Database configuration
    database_url: str = Field(default="sqlite:///./matchgate.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Identity cache (memoization only, never the source of truth)
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    identity_cache_backend: Literal["memory", "redis"] = Field(
        default="memory",
        alias="IDENTITY_CACHE_BACKEND",
    )
    identity_cache_ttl_seconds: int = Field(
        default=86_400,
        alias="IDENTITY_CACHE_TTL_SECONDS",
    )

    # Upper bound on candidates hashed by a cache-miss resolve
    identity_scan_limit: int = Field(default=500, ge=1, alias="IDENTITY_SCAN_LIMIT")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
