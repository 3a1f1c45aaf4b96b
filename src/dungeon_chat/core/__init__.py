"""Shared infrastructure: settings, logging, constants and exceptions.

Every other subpackage imports from here; nothing here imports from them.
"""

from __future__ import annotations

from dungeon_chat.core.config import (
    GameSettings,
    LLMSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from dungeon_chat.core.exceptions import (
    AIConnectionError,
    AIControlError,
    AIRateLimitError,
    AIResponseError,
    ConfigurationError,
    DungeonChatError,
    PlayerNotFoundError,
    StorageError,
    TurnError,
)
from dungeon_chat.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "DungeonChatError",
    # Configuration exceptions
    "ConfigurationError",
    # AI control exceptions
    "AIControlError",
    "AIConnectionError",
    "AIResponseError",
    "AIRateLimitError",
    # Game engine exceptions
    "TurnError",
    # Storage exceptions
    "StorageError",
    "PlayerNotFoundError",
    # Configuration
    "Settings",
    "LLMSettings",
    "StorageSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
