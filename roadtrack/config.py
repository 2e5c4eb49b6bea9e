"""Application configuration settings."""
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Runtime toggles -----------------------------------------------------
# Execution environment: "dev" | "local" | "test" | "staging" | "prod"
ENV = os.getenv("ROADTRACK_ENV", "dev").lower()

DEFAULT_JWT_SECRET = "change-me"
INSECURE_SECRET_ENVS = {"dev", "local", "test"}


class Settings(BaseSettings):
    """Environment configuration for the road-construction tracker."""

    app_env: str = Field(default=ENV, validation_alias=AliasChoices("ROADTRACK_ENV", "APP_ENV"))
    database_url: str = "sqlite:///roadtrack.db"

    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_TTL_SECONDS: int = 60 * 60 * 24 * 7

    CORS_ALLOW_ORIGINS: list[str] = [
        "https://roads.gov.pg",
        "https://app.roads.gov.pg",
        "http://localhost:3000",
    ]
    SENTRY_DSN: str | None = None
    PROMETHEUS_ENABLED: bool = False
    ALLOW_DB_CREATE_ALL: bool = False
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    LOG_LEVEL: str = "INFO"

    # --- Reporting -------------------------------------------------------
    LOOKUP_CACHE_TTL_SECONDS: int = 300
    REPORT_DEFAULT_LIMIT: int = 50

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("SENTRY_DSN")
    @classmethod
    def _strip_empty_dsn(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("REPORT_DEFAULT_LIMIT")
    @classmethod
    def _positive_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("REPORT_DEFAULT_LIMIT must be positive")
        return value


class AppInfo(BaseModel):
    name: str = "roadtrack-backend"
    version: str = "0.1.0"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


__all__ = [
    "ENV",
    "DEFAULT_JWT_SECRET",
    "INSECURE_SECRET_ENVS",
    "Settings",
    "AppInfo",
    "get_settings",
]
