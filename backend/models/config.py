import os
import sys
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    For local development, load `.env` automatically so settings can be
    provided from `backend/.env` (convenience).

    Do NOT auto-load `.env` when running under pytest or in CI, so tests run
    against the defaults below plus whatever the test harness exports.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    # Environment configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'test', 'staging', or 'production'",
    )

    DATABASE_URL: str = "sqlite:///./data/forum.db"
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins (comma-separated in env var)",
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(
        default=5,
        description="Number of persistent connections in pool",
    )
    DB_MAX_OVERFLOW: int = Field(
        default=10,
        description="Extra connections when pool exhausted",
    )
    DB_POOL_TIMEOUT: int = Field(
        default=30,
        description="Seconds to wait for connection from pool",
    )
    DB_POOL_RECYCLE: int = Field(
        default=1800,
        description="Recycle connections after N seconds (30 min default)",
    )

    AUTO_CREATE_DB: bool = Field(
        default=True,
        description="Call Base.metadata.create_all and seed categories on startup",
    )
    DEFAULT_CATEGORIES: List[str] = Field(
        default=["Programming", "Games", "General"],
        description="Categories inserted on startup when missing",
    )

    # Sessions
    SESSION_COOKIE_NAME: str = Field(
        default="session_id",
        description="Cookie carrying the opaque session token",
    )
    SESSION_TTL_HOURS: int = Field(
        default=24,
        description="Absolute session lifetime in hours",
    )
    SESSION_COOKIE_SECURE: bool = Field(
        default=False,
        description="Mark the session cookie Secure (enable behind HTTPS)",
    )
    SESSION_SWEEP_INTERVAL_MINUTES: int = Field(
        default=60,
        description="Interval between expired-session sweeps",
    )

    # Login throttling
    LOGIN_MAX_FAILED_ATTEMPTS: int = Field(
        default=5,
        description="Failed logins per username tolerated within the window",
    )
    LOGIN_FAILURE_WINDOW_MINUTES: int = Field(
        default=10,
        description="Sliding window for counting failed logins",
    )

    # Per-IP limit on account creation (slowapi syntax)
    REGISTER_RATE_LIMIT: str = Field(
        default="10/minute",
        description="Registration attempts allowed per client address",
    )

    # Performance settings
    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator(
        "SESSION_TTL_HOURS",
        "SESSION_SWEEP_INTERVAL_MINUTES",
        "LOGIN_MAX_FAILED_ATTEMPTS",
        "LOGIN_FAILURE_WINDOW_MINUTES",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars (e.g., SENTRY_DSN) without validation errors
    )


settings = Settings()


def get_settings() -> Settings:
    """Get the settings instance (for dependency injection)."""
    return settings
