"""Configuration management for the dungeon_chat game engine.

Centralized configuration using pydantic-settings, supporting environment
variables, .env files, and runtime overrides. The narrator API key is
handled as a SecretStr.

Example:
    >>> from dungeon_chat.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.llm.model)
    'deepseek-chat'

Environment Variables:
    DUNGEON_CHAT_LLM_API_KEY: API key for the OpenAI-compatible endpoint
    DUNGEON_CHAT_LLM_BASE_URL: Endpoint base URL
    DUNGEON_CHAT_LLM_MODEL: Chat model identifier
    DUNGEON_CHAT_DATABASE_PATH: Path to the SQLite database file
    DUNGEON_CHAT_GAME_HISTORY_WINDOW: History entries sent to the model
    DUNGEON_CHAT_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dungeon_chat.core.exceptions import ConfigurationError


class LLMSettings(BaseSettings):
    """Configuration for the narrator model endpoint.

    Attributes:
        api_key: API key for the OpenAI-compatible endpoint.
        base_url: Base URL of the endpoint.
        model: Chat model identifier.
        temperature: Sampling temperature.
        timeout_seconds: Request timeout; expiry fails the turn.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CHAT_LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="Narrator API key",
    )
    base_url: str = Field(
        default="https://api.deepseek.com",
        description="OpenAI-compatible endpoint",
    )
    model: str = Field(
        default="deepseek-chat",
        description="Chat model identifier",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        le=300,
        description="Model request timeout",
    )


class StorageSettings(BaseSettings):
    """Configuration for the player database.

    Attributes:
        database_path: Path to the SQLite database file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/dungeon_chat.db"),
        description="Path to SQLite database",
    )

    @field_validator("database_path", mode="after")
    @classmethod
    def ensure_parent_exists(cls, value: Path) -> Path:
        """Create the database directory if it does not exist yet."""
        value.parent.mkdir(parents=True, exist_ok=True)
        return value


class GameSettings(BaseSettings):
    """Configuration for turn pacing and memory bounds.

    Attributes:
        history_window: History entries included in each model call.
        history_limit: History entries kept in the player record.
        notes_limit: Long-term notes kept in the player record.
        paragraph_delay_seconds: Pause between narration paragraphs.
        dice_delay_seconds: Pause while the dice animation plays.
        default_language: Language used before a player picks one.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CHAT_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    history_window: int = Field(
        default=10,
        ge=0,
        le=100,
        description="History entries sent to the model",
    )
    history_limit: int = Field(
        default=20,
        ge=2,
        le=200,
        description="History entries persisted per player",
    )
    notes_limit: int = Field(
        default=30,
        ge=1,
        le=500,
        description="Long-term notes persisted per player",
    )
    paragraph_delay_seconds: float = Field(
        default=1.5,
        ge=0,
        le=30,
        description="Pause between narration paragraphs",
    )
    dice_delay_seconds: float = Field(
        default=3.5,
        ge=0,
        le=30,
        description="Pause while the dice animation plays",
    )
    default_language: Literal["ru", "en"] = Field(
        default="ru",
        description="Language used before the player chooses one",
    )

    @model_validator(mode="after")
    def validate_history_bounds(self) -> "GameSettings":
        """Ensure the persisted history can feed the model window.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the limit is odd or smaller than the window.
        """
        if self.history_limit % 2:
            raise ConfigurationError(
                f"history_limit ({self.history_limit}) must be even",
                config_key="history_limit",
            )
        if self.history_limit < self.history_window:
            raise ConfigurationError(
                f"history_limit ({self.history_limit}) must not be smaller than "
                f"history_window ({self.history_window})",
                config_key="history_limit",
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        llm: Narrator endpoint settings.
        storage: Database settings.
        game: Turn pacing and memory settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Dungeon Chat",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    llm: LLMSettings = Field(default_factory=LLMSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    game: GameSettings = Field(default_factory=GameSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "LLMSettings",
    "StorageSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
