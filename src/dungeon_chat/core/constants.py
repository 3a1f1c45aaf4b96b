"""Game-wide constants for the dungeon_chat engine.

Rule constants (stat bounds, leveling) and the markers of the directive
sublanguage the narrator is taught to emit. Tunable limits such as history
and note capacities live in ``core.config.GameSettings`` instead.
"""

from __future__ import annotations

# =============================================================================
# Player Stats
# =============================================================================

HP_MIN = 0
"""Lowest possible hit points."""

HP_MAX = 100
"""Highest possible hit points; also the starting value."""

XP_PER_LEVEL = 100
"""Experience needed per level: level = xp // XP_PER_LEVEL + 1."""

MIN_LEVEL = 1
"""Level of a freshly registered character."""

MAX_AGE = 1000
"""Upper bound accepted by the registration wizard."""

# =============================================================================
# Directive Sublanguage
# =============================================================================

MAX_CHOICES = 3
"""Number of ACTIONn lines the parser will accept."""

ACTION_MARKER = "ACTION"
"""Prefix of a choice line: ``ACTION1: [label]``."""

CHANGES_MARKER = "CHANGES:"
"""Prefix of the state delta line: ``CHANGES: {...}``."""

TECH_OPEN = "[TECH]"
"""Opening marker of the trailing technical block."""

TECH_CLOSE = "[/TECH]"
"""Closing marker of the trailing technical block."""

DICE_OPEN = "[DICE]"
"""Opening marker of the dice flourish span."""

DICE_CLOSE = "[/DICE]"
"""Closing marker of the dice flourish span."""

# =============================================================================
# Chat Controls
# =============================================================================

CHOICE_CALLBACK_PREFIX = "action_"
"""Callback id prefix for narrator-offered choices."""

RESET_CALLBACK_ID = "reset_progress"
"""Callback id of the always-present "erase all progress" control."""

LANGUAGE_CALLBACK_PREFIX = "lang:"
"""Callback id prefix used by the registration wizard language step."""

GENDER_CALLBACK_PREFIX = "gender:"
"""Callback id prefix used by the registration wizard gender step."""

START_COMMAND = "/start"
"""Command that starts (or restarts) character registration."""


__all__ = [
    # Stats
    "HP_MIN",
    "HP_MAX",
    "XP_PER_LEVEL",
    "MIN_LEVEL",
    "MAX_AGE",
    # Directives
    "MAX_CHOICES",
    "ACTION_MARKER",
    "CHANGES_MARKER",
    "TECH_OPEN",
    "TECH_CLOSE",
    "DICE_OPEN",
    "DICE_CLOSE",
    # Controls
    "CHOICE_CALLBACK_PREFIX",
    "RESET_CALLBACK_ID",
    "LANGUAGE_CALLBACK_PREFIX",
    "GENDER_CALLBACK_PREFIX",
    "START_COMMAND",
]
