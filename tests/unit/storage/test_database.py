"""Tests for the SQLite player and session store."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from dungeon_chat.core.exceptions import PlayerNotFoundError, StorageError
from dungeon_chat.models import PlayerProfile, create_player
from dungeon_chat.storage.database import Database, get_database, reset_database


class TestPlayers:
    """Tests for player record operations."""

    def test_find_missing(self, database: Database) -> None:
        """Test an unknown player is not found."""
        assert database.find_player(404) is None

    def test_insert_and_find(self, database: Database, sample_profile: PlayerProfile) -> None:
        """Test an inserted player can be found."""
        database.insert_player(sample_profile)

        found = database.find_player(sample_profile.chat_id)

        assert found == sample_profile
        assert database.get_player_count() == 1

    def test_duplicate_insert(self, database: Database, stored_profile: PlayerProfile) -> None:
        """Test inserting the same player twice fails."""
        with pytest.raises(StorageError):
            database.insert_player(stored_profile)

    def test_update_replaces_whole_record(self, database: Database, stored_profile: PlayerProfile) -> None:
        """Test an update overwrites the whole record."""
        changed = stored_profile.model_copy(deep=True)
        changed.stats.hp = 40
        changed.pending_message_ids = [1, 2, 3]

        database.update_player(changed.chat_id, changed)

        found = database.find_player(changed.chat_id)
        assert found.stats.hp == 40
        assert found.pending_message_ids == [1, 2, 3]

    def test_update_missing(self, database: Database, sample_profile: PlayerProfile) -> None:
        """Test updating an unknown player fails."""
        with pytest.raises(PlayerNotFoundError) as exc_info:
            database.update_player(sample_profile.chat_id, sample_profile)

        assert exc_info.value.details["chat_id"] == sample_profile.chat_id

    def test_remove(self, database: Database, stored_profile: PlayerProfile) -> None:
        """Test a removed player is gone."""
        assert database.remove_player(stored_profile.chat_id) is True
        assert database.find_player(stored_profile.chat_id) is None
        assert database.remove_player(stored_profile.chat_id) is False

    def test_players_isolated(self, database: Database) -> None:
        """Test removing one player leaves the others."""
        database.insert_player(create_player(1, "One", 20))
        database.insert_player(create_player(2, "Two", 30))

        database.remove_player(1)

        assert database.find_player(2).name == "Two"

    def test_corrupt_record(self, database: Database, stored_profile: PlayerProfile) -> None:
        """Test a corrupt record is a storage error."""
        with sqlite3.connect(str(database.db_path)) as conn:
            conn.execute(
                "UPDATE players SET profile_json = ? WHERE chat_id = ?",
                ('{"chat_id": 1001, "name": ""}', stored_profile.chat_id),
            )

        with pytest.raises(StorageError) as exc_info:
            database.find_player(stored_profile.chat_id)

        assert "corrupt" in str(exc_info.value)

    def test_persists_across_instances(self, tmp_path: Path, sample_profile: PlayerProfile) -> None:
        """Test records survive reopening the database."""
        path = tmp_path / "shared.db"
        Database(path).insert_player(sample_profile)

        assert Database(path).find_player(sample_profile.chat_id) == sample_profile


class TestSessions:
    """Tests for session blob operations."""

    def test_missing(self, database: Database) -> None:
        """Test a missing session reads as None."""
        assert database.get_session(1, 2) is None

    def test_save_and_replace(self, database: Database) -> None:
        """Test saving a session replaces the previous one."""
        database.save_session(1, 2, {"registration": {"step": "name"}})
        database.save_session(1, 2, {"registration": {"step": "age", "name": "Ёж"}})

        assert database.get_session(1, 2) == {"registration": {"step": "age", "name": "Ёж"}}

    def test_keyed_by_user_and_chat(self, database: Database) -> None:
        """Test sessions are keyed by user and chat."""
        database.save_session(1, 2, {"a": 1})

        assert database.get_session(2, 1) is None
        assert database.get_session(1, 3) is None

    def test_delete(self, database: Database) -> None:
        """Test a deleted session is gone."""
        database.save_session(1, 2, {"a": 1})

        assert database.delete_session(1, 2) is True
        assert database.delete_session(1, 2) is False
        assert database.get_session(1, 2) is None


class TestSingleton:
    """Tests for the global database instance."""

    def test_uses_configured_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the shared database opens the configured path."""
        db_path = tmp_path / "configured" / "game.db"
        monkeypatch.setenv("DUNGEON_CHAT_DATABASE_PATH", str(db_path))

        database = get_database()

        assert database.db_path == db_path
        assert get_database() is database
        assert db_path.exists()

        reset_database()
        assert get_database() is not database

    def test_unopenable_path(self, tmp_path: Path) -> None:
        """Test an unusable path is a storage error."""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file")

        with pytest.raises((StorageError, OSError)):
            Database(blocker / "game.db")
