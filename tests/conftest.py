"""Pytest configuration and shared fixtures.

This module provides common fixtures and test doubles for all tests
in the Dungeon Chat test suite.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from dungeon_chat.core.config import GameSettings
from dungeon_chat.engine.transport import Button
from dungeon_chat.models import Gender, Language, PlayerProfile, create_player
from dungeon_chat.storage.database import Database


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache and database singleton around each test."""
    from dungeon_chat.core.config import clear_settings_cache
    from dungeon_chat.storage.database import reset_database

    clear_settings_cache()
    reset_database()
    yield
    clear_settings_cache()
    reset_database()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "DUNGEON_CHAT_LLM_API_KEY": "test-llm-key",
        "DUNGEON_CHAT_DEBUG": "true",
        "DUNGEON_CHAT_LOG_LEVEL": "DEBUG",
        "DUNGEON_CHAT_DATABASE_PATH": str(tmp_path / "env.db"),
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def game_settings() -> GameSettings:
    """Game settings with the documented defaults."""
    return GameSettings()


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def database(tmp_path: Path) -> Database:
    """A fresh SQLite database in a temporary directory."""
    return Database(tmp_path / "players.db")


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_profile() -> PlayerProfile:
    """A freshly registered English-speaking player."""
    return create_player(
        1001,
        "Mira",
        27,
        gender=Gender.FEMALE,
        background="A lighthouse keeper's daughter from the northern coast.",
        language=Language.EN,
    )


@pytest.fixture
def stored_profile(database: Database, sample_profile: PlayerProfile) -> PlayerProfile:
    """The sample player, already inserted into the database."""
    return database.insert_player(sample_profile)


# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class SentMessage:
    """One message recorded by FakeTransport."""

    message_id: int
    chat_id: int
    text: str | None
    buttons: list[Button] | None = None
    kind: str = "text"


@dataclass
class FakeTransport:
    """In-memory ChatTransport that records every call."""

    next_id: int = 500
    fail_deletes: bool = False
    fail_typing: bool = False
    fail_sends: bool = False
    fail_after_sends: int | None = None
    sent: list[SentMessage] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)
    typing: int = 0
    edits: list[tuple[int, list[Button] | None]] = field(default_factory=list)

    def _next(self) -> int:
        self.next_id += 1
        return self.next_id

    def _check_send(self) -> None:
        if self.fail_sends:
            raise RuntimeError("transport down")
        if self.fail_after_sends is not None and len(self.sent) >= self.fail_after_sends:
            raise RuntimeError("transport down")

    def send_text(self, chat_id: int, text: str, buttons: Sequence[Button] | None = None) -> int:
        self._check_send()
        message = SentMessage(
            message_id=self._next(),
            chat_id=chat_id,
            text=text,
            buttons=list(buttons) if buttons is not None else None,
        )
        self.sent.append(message)
        return message.message_id

    def send_typing(self, chat_id: int) -> None:
        if self.fail_typing:
            raise RuntimeError("typing unavailable")
        self.typing += 1

    def send_dice(self, chat_id: int) -> int:
        self._check_send()
        message = SentMessage(message_id=self._next(), chat_id=chat_id, text=None, kind="dice")
        self.sent.append(message)
        return message.message_id

    def delete_message(self, chat_id: int, message_id: int) -> None:
        if self.fail_deletes:
            raise RuntimeError("message can't be deleted")
        self.deleted.append(message_id)

    def edit_message_buttons(
        self,
        chat_id: int,
        message_id: int,
        buttons: Sequence[Button] | None,
    ) -> None:
        self.edits.append((message_id, list(buttons) if buttons is not None else None))

    @property
    def texts(self) -> list[str]:
        return [message.text for message in self.sent if message.text is not None]


class FakeNarrator:
    """Scripted Narrator returning queued responses or raising queued errors."""

    def __init__(self, *responses: str | Exception) -> None:
        self.responses: list[str | Exception] = list(responses)
        self.calls: list[list[dict[str, str]]] = []

    def generate(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        if not self.responses:
            raise RuntimeError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def transport() -> FakeTransport:
    """A recording transport."""
    return FakeTransport()


@pytest.fixture
def sleeps() -> list[float]:
    """Collects pause durations requested by the turn engine."""
    return []


@pytest.fixture
def fake_sleep(sleeps: list[float]) -> Any:
    """A sleep function that records instead of waiting."""
    return sleeps.append


@pytest.fixture
def narrator_factory() -> type[FakeNarrator]:
    """Build a FakeNarrator: ``narrator_factory("reply", RuntimeError())``."""
    return FakeNarrator
