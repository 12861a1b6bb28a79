"""
Configuration settings for the LET Reviewer client.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_API_URL = "http://localhost:5000/api/cards"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Card API
    # ========================================
    base_api_url: str = Field(
        default=DEFAULT_BASE_API_URL,
        description="Card storage endpoint (GET returns the {success, data} envelope)",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        description="HTTP timeout for card fetches",
    )

    # ========================================
    # Study Sessions
    # ========================================
    default_card_limit: int = Field(
        default=20,
        description="Cards per session offered when a subject is selected",
    )
    shuffle_seed: int | None = Field(
        default=None,
        description="Seed for the session shuffle (unset = system randomness)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="Loguru level for the stderr sink",
    )

    @field_validator("base_api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/") or DEFAULT_BASE_API_URL

    @field_validator("default_card_limit")
    @classmethod
    def _positive_limit(cls, value: int) -> int:
        if value < 1:
            raise ValueError("default_card_limit must be at least 1")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
