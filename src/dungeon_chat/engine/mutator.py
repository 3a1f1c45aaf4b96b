"""Apply a narrator's StateDelta to a player's stats.

The mutator enforces the rules the narrator cannot be trusted with:
hit points stay in [0, 100], experience never goes below zero, and the
level is derived from experience but never lowered.
"""

from __future__ import annotations

from dungeon_chat.core.constants import HP_MAX, HP_MIN, MIN_LEVEL, XP_PER_LEVEL
from dungeon_chat.core.logging import get_logger
from dungeon_chat.i18n import t
from dungeon_chat.models import PlayerStats, StateDelta


logger = get_logger(__name__)

DEFAULT_NOTES_LIMIT = 30


def level_for_xp(xp: int) -> int:
    """Level implied by an experience total: ``xp // 100 + 1``."""
    return max(xp, 0) // XP_PER_LEVEL + MIN_LEVEL


def clamp_hp(hp: int) -> int:
    """Clamp hit points into the legal range."""
    return max(HP_MIN, min(HP_MAX, hp))


def apply_delta(
    stats: PlayerStats,
    delta: StateDelta | None,
    language: str,
    *,
    notes_limit: int = DEFAULT_NOTES_LIMIT,
) -> list[str]:
    """Fold a delta into ``stats`` in place.

    Args:
        stats: Stats to mutate.
        delta: Parsed changes, or None for "nothing changed".
        language: Locale for the summary lines.
        notes_limit: Capacity of the notes list; oldest notes are evicted.

    Returns:
        Human-readable summary lines, empty when nothing visible changed.
    """
    if delta is None:
        return []

    summary: list[str] = []

    if delta.hp is not None:
        stats.hp = clamp_hp(stats.hp + delta.hp)
        key = "status.hp_gain" if delta.hp > 0 else "status.hp_loss"
        summary.append(t(key, language, amount=delta.hp, hp=stats.hp))

    if delta.xp is not None:
        stats.xp = max(0, stats.xp + delta.xp)
        key = "status.xp_gain" if delta.xp > 0 else "status.xp_loss"
        summary.append(t(key, language, amount=delta.xp))

        previous_level = stats.level
        new_level = level_for_xp(stats.xp)
        if new_level > previous_level:
            stats.level = new_level
            summary.append(t("status.level_up", language, level=new_level))
            logger.info("Player leveled up", level=new_level, xp=stats.xp)

    if delta.learned_spell is not None:
        stats.spells = [*stats.spells, delta.learned_spell]
        summary.append(t("status.spell", language, spell=delta.learned_spell))

    if delta.acquired_item is not None:
        stats.inventory = [*stats.inventory, delta.acquired_item]
        summary.append(t("status.item", language, item=delta.acquired_item))

    if delta.note is not None:
        stats.notes = [*stats.notes, delta.note][-notes_limit:]

    return summary


__all__ = [
    "DEFAULT_NOTES_LIMIT",
    "level_for_xp",
    "clamp_hp",
    "apply_delta",
]
