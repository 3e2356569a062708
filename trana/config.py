"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

PULL_LIMIT = 50


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./trana.db",
        description="Database connection URL used by SQLAlchemy for the notifications table",
        min_length=1,
    )
    notifications_table: str = Field(
        default="notifications",
        description="Name of the table the live feed events are scoped to",
        min_length=1,
    )
    notifications_pull_limit: int = Field(
        default=PULL_LIMIT,
        description="Maximum number of notifications fetched by a single pull",
        gt=0,
        le=PULL_LIMIT,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone (or UTC±HH:MM offset) used for timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Origins allowed to call the API from the dashboard",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unsupported log level: {value}")
        return normalized


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["PULL_LIMIT", "Settings", "get_settings", "reset_settings_cache"]
