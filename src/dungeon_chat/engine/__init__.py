"""Game engine module for turn processing.

This module provides:
- State mutator: folds narrator deltas into player stats
- Chat transport contract and best-effort cleanup helpers
- Per-player locks
- Turn engine: prompt, narrator call, staged rendering, persistence
"""

from dungeon_chat.engine.locks import PlayerLocks
from dungeon_chat.engine.mutator import (
    DEFAULT_NOTES_LIMIT,
    apply_delta,
    clamp_hp,
    level_for_xp,
)
from dungeon_chat.engine.transport import (
    Button,
    ChatTransport,
    clear_buttons_quietly,
    delete_quietly,
    show_typing_quietly,
)
from dungeon_chat.engine.turn_engine import (
    TurnEngine,
    TurnOutcome,
    TurnStatus,
    build_buttons,
)


__all__ = [
    # Mutator
    "DEFAULT_NOTES_LIMIT",
    "apply_delta",
    "clamp_hp",
    "level_for_xp",
    # Transport
    "Button",
    "ChatTransport",
    "clear_buttons_quietly",
    "delete_quietly",
    "show_typing_quietly",
    # Locks
    "PlayerLocks",
    # Turn engine
    "TurnEngine",
    "TurnOutcome",
    "TurnStatus",
    "build_buttons",
]
