"""Persistent player record.

One PlayerProfile exists per chat identity. It owns the character sheet
entered at registration, the mutable stats the narrator changes through
directives, the bounded conversation history that serves as the model's
working memory, and the handles of the messages sent during the previous
turn so the next turn can delete them.

The record is stored whole: every turn reads it, mutates a copy and writes
the copy back in one update.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dungeon_chat.core.constants import HP_MAX, HP_MIN, MAX_AGE, MIN_LEVEL
from dungeon_chat.models.enums import Gender, Language, MessageRole


class PlayerStats(BaseModel):
    """Stats changed turn by turn through narrator directives.

    ``level`` is derived from ``xp`` by the state mutator and is never set
    from a directive directly.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )

    hp: int = Field(default=HP_MAX, ge=HP_MIN, le=HP_MAX, description="Hit points")
    xp: int = Field(default=0, ge=0, description="Accumulated experience")
    level: int = Field(default=MIN_LEVEL, ge=MIN_LEVEL, description="Character level")

    spells: list[str] = Field(default_factory=list, description="Learned abilities, in order")
    inventory: list[str] = Field(default_factory=list, description="Acquired items, in order")
    notes: list[str] = Field(default_factory=list, description="Long-term memory digest")


class HistoryEntry(BaseModel):
    """One message of the conversation as sent to the model."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str

    def to_message(self) -> dict[str, str]:
        """Convert to the chat-completions message shape."""
        return {"role": self.role.value, "content": self.content}


class PlayerProfile(BaseModel):
    """The durable record of one player, keyed by chat id.

    Attributes:
        chat_id: Chat identity; unique key of the record.
        name: Character name.
        age: Character age in years.
        gender: Character gender.
        background: Free-text origin story.
        language: UI and narration language.
        stats: Mutable character stats.
        history: Most recent user/assistant messages, oldest first.
        pending_message_ids: Messages sent during the previous turn.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )

    chat_id: int
    name: str = Field(min_length=1, max_length=64)
    age: int = Field(ge=1, le=MAX_AGE)
    gender: Gender = Gender.MALE
    background: str = Field(default="", max_length=2000)
    language: Language = Language.RU

    stats: PlayerStats = Field(default_factory=PlayerStats)
    history: list[HistoryEntry] = Field(default_factory=list)
    pending_message_ids: list[int] = Field(default_factory=list)

    def append_exchange(self, user_text: str, assistant_text: str, *, limit: int) -> None:
        """Record one user/assistant exchange and trim the oldest entries.

        Args:
            user_text: What the player sent (verbatim or the chosen label).
            assistant_text: The raw narrator response, directives included.
            limit: Maximum number of entries to keep; must be even.
        """
        history = [
            *self.history,
            HistoryEntry(role=MessageRole.USER, content=user_text),
            HistoryEntry(role=MessageRole.ASSISTANT, content=assistant_text),
        ]
        self.history = history[-limit:] if limit > 0 else []

    def recent_history(self, window: int) -> list[HistoryEntry]:
        """Return the last ``window`` history entries in chronological order."""
        if window <= 0:
            return []
        return self.history[-window:]

    def to_record(self) -> str:
        """Serialize for storage."""
        return self.model_dump_json()

    @classmethod
    def from_record(cls, data: str) -> PlayerProfile:
        """Deserialize a stored record."""
        return cls.model_validate_json(data)


def create_player(
    chat_id: int,
    name: str,
    age: int,
    *,
    gender: Gender = Gender.MALE,
    background: str = "",
    language: Language = Language.RU,
) -> PlayerProfile:
    """Create a fresh player with starting stats and empty history.

    Registration and re-registration both go through this factory, so a
    re-registered player never keeps stats or history from a previous run.
    """
    return PlayerProfile(
        chat_id=chat_id,
        name=name.strip(),
        age=age,
        gender=gender,
        background=background.strip(),
        language=language,
    )


__all__ = [
    "PlayerStats",
    "HistoryEntry",
    "PlayerProfile",
    "create_player",
]
