"""Integration tests for a player's journey through the bot.

Registration, the opening scene, a few turns and a re-registration, all
against a real SQLite database with a scripted narrator.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from dungeon_chat.bot.handlers import GameBot
from dungeon_chat.core.config import GameSettings, Settings
from dungeon_chat.i18n import t
from dungeon_chat.models import Gender, Language
from dungeon_chat.storage.database import Database


CHAT_ID = 314
USER_ID = 271

OPENING = """You wake in a ditch outside Grimhollow.

Crows watch you from a gallows.
[TECH]
ACTION1: [Stand up]
ACTION2: [Play dead]
CHANGES: {"get": "Rusty key", "note": "Woke near the Grimhollow gallows"}
[/TECH]"""

AMBUSH = """A bandit leaps from the bushes!
[DICE]The bones spin and fall against you.[/DICE]
ACTION1: [Fight back]
CHANGES: {"hp": -25, "xp": 40}"""

VICTORY = """The bandit flees, dropping a pouch.
ACTION1: [Follow]
CHANGES: {"xp": 70, "learn": "Quick Step"}"""


@pytest.fixture
def bot(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, database: Database, transport, narrator_factory) -> GameBot:
    monkeypatch.chdir(tmp_path)
    settings = Settings(game=GameSettings(paragraph_delay_seconds=0, dice_delay_seconds=0))
    return GameBot(
        database,
        database,
        narrator_factory(OPENING, AMBUSH, VICTORY, OPENING),
        transport,
        settings=settings,
    )


def _register(bot: GameBot, name: str, age: str, gender: str, background: str) -> None:
    bot.handle_text(CHAT_ID, USER_ID, "/start")
    bot.handle_callback(CHAT_ID, USER_ID, "lang:en")
    bot.handle_text(CHAT_ID, USER_ID, name)
    bot.handle_text(CHAT_ID, USER_ID, age)
    bot.handle_callback(CHAT_ID, USER_ID, f"gender:{gender}")
    bot.handle_text(CHAT_ID, USER_ID, background)


class TestGameFlow:
    """End-to-end player journey."""

    def test_registration_starts_the_story(self, bot: GameBot, database: Database, transport) -> None:
        """Test finishing registration stores the hero and plays the opening scene."""
        _register(bot, "Vesna", "19", "female", "A runaway novice.")

        player = database.find_player(CHAT_ID)
        assert player is not None
        assert player.name == "Vesna"
        assert player.gender == Gender.FEMALE
        assert player.language == Language.EN
        assert player.stats.inventory == ["Rusty key"]
        assert player.stats.notes == ["Woke near the Grimhollow gallows"]

        opening_call = bot.engine.narrator.calls[0]
        assert "Vesna (female, 19)" in opening_call[0]["content"]
        assert opening_call[-1] == {"role": "user", "content": t("reg.opening_prompt", "en")}
        assert t("reg.done", "en", name="Vesna", age=19) in transport.texts

    def test_turns_accumulate(self, bot: GameBot, database: Database, transport) -> None:
        """Test stats and history build up over consecutive turns."""
        _register(bot, "Vesna", "19", "female", "A runaway novice.")

        bot.handle_text(CHAT_ID, USER_ID, "I stand up", message_id=900)
        status_id = database.find_player(CHAT_ID).pending_message_ids[-1]
        bot.handle_callback(CHAT_ID, USER_ID, "action_1", message_id=status_id, label="Fight back")

        player = database.find_player(CHAT_ID)
        assert player.stats.hp == 75
        assert player.stats.xp == 110
        assert player.stats.level == 2
        assert player.stats.spells == ["Quick Step"]
        assert len(player.history) == 6
        assert player.history[-2].content == "Player chose: Fight back"
        assert 900 in transport.deleted

        third_call = bot.engine.narrator.calls[2]
        assert [message["role"] for message in third_call] == [
            "system",
            "user",
            "assistant",
            "user",
            "assistant",
            "user",
        ]
        assert "Health: 75/100, experience: 40" in third_call[0]["content"]

    def test_reregistration_replaces_record(self, bot: GameBot, database: Database, transport) -> None:
        """Test registering again replaces the record and clears old messages."""
        _register(bot, "Vesna", "19", "female", "A runaway novice.")
        bot.handle_text(CHAT_ID, USER_ID, "I stand up")
        bot.handle_text(CHAT_ID, USER_ID, "I fight")
        old_pending = database.find_player(CHAT_ID).pending_message_ids

        _register(bot, "Bran", "44", "male", "A retired soldier.")

        player = database.find_player(CHAT_ID)
        assert player.name == "Bran"
        assert player.stats.xp == 0
        assert player.stats.spells == []
        assert player.stats.inventory == ["Rusty key"]
        assert len(player.history) == 2
        assert set(old_pending) <= set(transport.deleted)
        assert database.get_player_count() == 1

    def test_reset_then_unregistered(self, bot: GameBot, database: Database, transport) -> None:
        """Test a reset player is treated as unregistered."""
        _register(bot, "Vesna", "19", "female", "A runaway novice.")

        bot.handle_callback(CHAT_ID, USER_ID, "reset_progress")
        bot.handle_text(CHAT_ID, USER_ID, "Hello?")

        assert database.find_player(CHAT_ID) is None
        assert transport.texts[-2] == t("bot.reset_done", "en")
        assert transport.texts[-1] == t("bot.not_registered", "ru")
