"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - All connection details come from environment variables or .env
    - get_settings() is cached (lru_cache): one Settings instance per process
    - CORS origins/headers/methods are settings, never constants in route code

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting so the service boots with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Record store
    database_url: str = (
        "postgresql+asyncpg://qbank:qbank@db:5432/qbank"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Per-call bound on record store IO; expiry surfaces as StoreTimeoutError
    store_timeout_seconds: float = 30.0

    # Compensating actions are retried this many times before giving up
    rollback_max_attempts: int = 3

    # API
    cors_origins: list[str] = ["*"]
    cors_allow_headers: list[str] = [
        "authorization", "x-client-info", "apikey", "content-type",
    ]
    cors_allow_methods: list[str] = [
        "GET", "POST", "PUT", "DELETE", "OPTIONS",
    ]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
