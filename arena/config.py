"""
Configuration module using Pydantic Settings.

Values come from ``ARENA_``-prefixed environment variables. No env file is
read implicitly; load one externally if needed.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ARENA_",
        env_file=None,
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./arena.db",
        description="SQLAlchemy database URL"
    )

    # Authentication
    secret_key: str = Field(
        default="change-me-in-production",
        description="Key used to sign session tokens"
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        description="Lifetime of the session cookie in minutes"
    )
    cookie_secure: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS"
    )
    admin_username: str = Field(
        default="admin",
        description="Username of the bootstrap admin account"
    )
    admin_password: str = Field(
        default="batch2026",
        description="Password of the bootstrap admin account"
    )

    # Piston execution API
    piston_url: str = Field(
        default="https://emkc.org/api/v2/piston",
        description="Base URL of the Piston code execution API"
    )
    piston_timeout: float = Field(
        default=15.0,
        description="Total network timeout per execution call in seconds"
    )
    compile_timeout_ms: int = Field(
        default=10000,
        description="Compile step time limit passed to Piston"
    )
    run_timeout_ms: int = Field(
        default=5000,
        description="Run step time limit passed to Piston"
    )

    # HTTP
    cors_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Origins allowed to call the API with credentials"
    )

    seed_sample_problem: bool = Field(
        default=True,
        description="Create a sample problem when the database has none"
    )

    # Sentry
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking"
    )
    sentry_environment: str = Field(
        default="development",
        description="Sentry environment name"
    )
    sentry_traces_sample_rate: float = Field(
        default=0.1,
        description="Sentry traces sample rate"
    )

    # Application
    app_name: str = Field(
        default="Contest Arena",
        description="Application name"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode flag"
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Return the process-wide settings instance.

    Settings are read from the environment on first call only.
    """
    return Settings()
