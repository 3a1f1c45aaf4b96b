"""SQLite persistence layer for dungeon_chat.

Provides persistent storage for:
- Player records (one JSON document per chat id, replaced whole)
- Session blobs (registration wizard progress, keyed by user and chat)

Storage location: ``settings.storage.database_path`` (default
``data/dungeon_chat.db``).
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Generator

from pydantic import ValidationError as PydanticValidationError

from dungeon_chat.core.config import get_settings
from dungeon_chat.core.exceptions import PlayerNotFoundError, StorageError
from dungeon_chat.core.logging import get_logger
from dungeon_chat.models import PlayerProfile

logger = get_logger(__name__)


class Database:
    """SQLite database for player records and session blobs.

    Every call opens its own connection, so one instance can be shared by
    worker threads. Writes are whole-record overwrites with no optimistic
    concurrency check; callers serialize turns per player.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the configured path.
        """
        if db_path is None:
            self.db_path = get_settings().storage.database_path
        else:
            self.db_path = Path(db_path)

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup.

        Raises:
            StorageError: On any SQLite failure.
        """
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise StorageError(
                f"Cannot open database: {exc}",
                details={"path": str(self.db_path)},
            ) from exc

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(
                f"Database operation failed: {exc}",
                details={"path": str(self.db_path)},
            ) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS players (
                    chat_id INTEGER PRIMARY KEY,
                    profile_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS sessions (
                    user_id INTEGER NOT NULL,
                    chat_id INTEGER NOT NULL,
                    data_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, chat_id)
                )
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Player Operations
    # =========================================================================

    def find_player(self, chat_id: int) -> PlayerProfile | None:
        """Get a player by chat id.

        Args:
            chat_id: Chat identity.

        Returns:
            The player record if found, None otherwise.

        Raises:
            StorageError: If the stored record cannot be decoded.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT profile_json FROM players WHERE chat_id = ?",
                (chat_id,),
            )
            row = cursor.fetchone()

        if row is None:
            return None

        try:
            return PlayerProfile.from_record(row["profile_json"])
        except PydanticValidationError as exc:
            raise StorageError(
                "Stored player record is corrupt",
                chat_id=chat_id,
                details={"errors": exc.error_count()},
            ) from exc

    def insert_player(self, profile: PlayerProfile) -> PlayerProfile:
        """Insert a new player record.

        Args:
            profile: The record to store.

        Returns:
            The stored record.

        Raises:
            StorageError: If a record for the chat id already exists.
        """
        now = datetime.now().isoformat()
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO players (chat_id, profile_json, created_at, updated_at)
                VALUES (?, ?, ?, ?)
            """, (profile.chat_id, profile.to_record(), now, now))

        logger.info("Inserted player", chat_id=profile.chat_id, name=profile.name)
        return profile

    def update_player(self, chat_id: int, profile: PlayerProfile) -> None:
        """Replace a player record as a whole.

        Args:
            chat_id: Key of the record to replace.
            profile: The new record.

        Raises:
            PlayerNotFoundError: If no record exists for ``chat_id``.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                UPDATE players SET profile_json = ?, updated_at = ?
                WHERE chat_id = ?
            """, (profile.to_record(), datetime.now().isoformat(), chat_id))
            updated = cursor.rowcount > 0

        if not updated:
            raise PlayerNotFoundError("Cannot update missing player", chat_id=chat_id)

        logger.debug("Updated player", chat_id=chat_id)

    def remove_player(self, chat_id: int) -> bool:
        """Delete a player record.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM players WHERE chat_id = ?", (chat_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Removed player", chat_id=chat_id)

        return deleted

    def get_player_count(self) -> int:
        """Get total number of registered players."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM players")
            return cursor.fetchone()[0]

    # =========================================================================
    # Session Operations
    # =========================================================================

    def get_session(self, user_id: int, chat_id: int) -> dict[str, Any] | None:
        """Get the session blob for a user in a chat."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT data_json FROM sessions WHERE user_id = ? AND chat_id = ?",
                (user_id, chat_id),
            )
            row = cursor.fetchone()

        if row is None:
            return None
        return json.loads(row["data_json"])

    def save_session(self, user_id: int, chat_id: int, data: dict[str, Any]) -> None:
        """Create or replace the session blob for a user in a chat."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT OR REPLACE INTO sessions (user_id, chat_id, data_json, updated_at)
                VALUES (?, ?, ?, ?)
            """, (user_id, chat_id, json.dumps(data, ensure_ascii=False), datetime.now().isoformat()))

    def delete_session(self, user_id: int, chat_id: int) -> bool:
        """Delete a session blob.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM sessions WHERE user_id = ? AND chat_id = ?",
                (user_id, chat_id),
            )
            return cursor.rowcount > 0


# =============================================================================
# Singleton Instance
# =============================================================================


_database_instance: Database | None = None


def get_database() -> Database:
    """Get the global database instance."""
    global _database_instance

    if _database_instance is None:
        _database_instance = Database()

    return _database_instance


def reset_database() -> None:
    """Forget the global instance so the next call re-reads settings."""
    global _database_instance
    _database_instance = None


__all__ = [
    "Database",
    "get_database",
    "reset_database",
]
