"""Dungeon Chat - a chat-hosted text adventure run by a language model.

The model narrates; Python owns the player record. Each reply is parsed
for a small directive grammar (dice flourish, choices, state changes)
and only the parsed, validated delta ever touches the stored stats.

Example:
    >>> from dungeon_chat import GameBot, OpenAINarrator, get_database
    >>>
    >>> db = get_database()
    >>> bot = GameBot(db, db, OpenAINarrator(), my_transport)
    >>> bot.handle_text(chat_id=1, user_id=1, text="/start")

Modules:
    core: Configuration, logging, constants and base exceptions.
    models: Pydantic V2 player record and parse results.
    dm: Prompt building, response parsing and the model client.
    engine: State mutator, transport contract, locks and the turn engine.
    storage: SQLite player and session store.
    bot: Registration wizard and chat event routing.
"""

from __future__ import annotations

# Core
from dungeon_chat.core.config import Settings, get_settings
from dungeon_chat.core.exceptions import DungeonChatError
from dungeon_chat.core.logging import configure_logging, get_logger

# Models
from dungeon_chat.models import (
    Gender,
    Language,
    ParsedTurn,
    PlayerProfile,
    PlayerStats,
    StateDelta,
    create_player,
)

# DM
from dungeon_chat.dm import OpenAINarrator, parse_response

# Engine
from dungeon_chat.engine import Button, ChatTransport, TurnEngine, TurnOutcome, TurnStatus

# Storage
from dungeon_chat.storage import Database, get_database

# Bot
from dungeon_chat.bot import GameBot


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "DungeonChatError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Gender",
    "Language",
    "ParsedTurn",
    "PlayerProfile",
    "PlayerStats",
    "StateDelta",
    "create_player",
    # DM
    "OpenAINarrator",
    "parse_response",
    # Engine
    "Button",
    "ChatTransport",
    "TurnEngine",
    "TurnOutcome",
    "TurnStatus",
    # Storage
    "Database",
    "get_database",
    # Bot
    "GameBot",
]
