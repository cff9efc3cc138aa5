"""Runtime configuration for the Takeoff service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///data/takeoff.db"
    upload_dir: Path = PROJECT_ROOT / "data" / "uploads"
    max_upload_size: int = Field(default=30 * 1024 * 1024, ge=1)

    # Source text longer than this is cut before it is embedded in a prompt.
    max_source_chars: int = Field(default=50_000, ge=1)

    claude_api_key: str = ""
    claude_model: str = "claude-3-5-sonnet-20241022"
    claude_max_tokens: int = 4000
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash-latest"
    llm_temperature: float = Field(default=0.1, ge=0.0, le=1.0)
    llm_timeout_s: float = 120.0
    default_provider: str = "claude"

    log_level: str = "INFO"

    @field_validator("upload_dir", mode="after")
    @classmethod
    def _resolve_upload_dir(cls, value: Path) -> Path:
        if not value.is_absolute():
            value = (PROJECT_ROOT / value).resolve()
        return value

    @field_validator("default_provider", mode="before")
    @classmethod
    def _normalise_provider(cls, value: object) -> str:
        text = str(value or "claude").strip().lower()
        if text not in {"claude", "gemini"}:
            raise ValueError("default_provider must be 'claude' or 'gemini'")
        return text


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Drop the cached settings so the next call re-reads the environment."""

    get_settings.cache_clear()


__all__ = ["PROJECT_ROOT", "Settings", "get_settings", "reset_settings_cache"]
