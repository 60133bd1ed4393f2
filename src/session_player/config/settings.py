"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages


class PlaybackSettings(BaseModel):
    """Defaults applied to new sessions and playback commands."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: int = Field(default=50, ge=0, le=100)
    volume_step: int = Field(default=10, ge=1, le=100)
    leave_on_empty: bool = True
    leave_on_stop: bool = False
    progress_bar_length: int = Field(
        default=20,
        ge=1,
        le=100,
        validation_alias=AliasChoices("progress_bar_length", "bar_length"),
    )


class PersistenceSettings(BaseModel):
    """Snapshot and history storage configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    snapshot_dir: str = Field(
        default="data/queues",
        validation_alias=AliasChoices("snapshot_dir", "queue_dir"),
    )
    history_backend: Literal["memory", "sqlite"] = "memory"
    history_database_url: str = Field(
        default="sqlite:///data/history.db",
        validation_alias=AliasChoices("history_database_url", "database_url"),
    )
    busy_timeout_ms: int = Field(default=5000, ge=1000, le=30000)
    connection_timeout_s: int = Field(default=10, ge=1, le=60)

    @field_validator("history_database_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )


class Settings(BaseSettings):
    """Application settings container.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - PLAYBACK__DEFAULT_VOLUME, PLAYBACK__LEAVE_ON_EMPTY, ... (nested)
    - PERSISTENCE__SNAPSHOT_DIR, PERSISTENCE__HISTORY_BACKEND, ... (nested)
    - DISCORD__TOKEN
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    persistence: PersistenceSettings = Field(default_factory=PersistenceSettings)
    discord: DiscordSettings = Field(default_factory=DiscordSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
