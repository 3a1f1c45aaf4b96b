"""Storage module for dungeon_chat persistence.

Provides SQLite-based storage for:
- Player records (profile, stats, history, pending message handles)
- Session blobs used by the registration wizard
"""

from dungeon_chat.storage.base import PlayerStore, SessionStore
from dungeon_chat.storage.database import (
    Database,
    get_database,
    reset_database,
)

__all__ = [
    "PlayerStore",
    "SessionStore",
    "Database",
    "get_database",
    "reset_database",
]
