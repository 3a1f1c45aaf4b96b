"""Pydantic V2 schemas for the dungeon_chat game engine.

Submodules:
    enums: Language, Gender, MessageRole.
    player: The persistent player record (PlayerProfile, PlayerStats).
    turn: Per-response parse results (ParsedTurn, Choice, StateDelta).

Example:
    >>> from dungeon_chat.models import create_player, Language
    >>> hero = create_player(42, "Mira", 27, language=Language.EN)
    >>> hero.stats.hp
    100
"""

from __future__ import annotations

from dungeon_chat.models.enums import Gender, Language, MessageRole
from dungeon_chat.models.player import (
    HistoryEntry,
    PlayerProfile,
    PlayerStats,
    create_player,
)
from dungeon_chat.models.turn import Choice, ParsedTurn, StateDelta


__all__ = [
    # Enums
    "Gender",
    "Language",
    "MessageRole",
    # Player record
    "HistoryEntry",
    "PlayerProfile",
    "PlayerStats",
    "create_player",
    # Turn
    "Choice",
    "ParsedTurn",
    "StateDelta",
]
