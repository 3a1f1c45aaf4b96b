"""Assemble the message list sent to the narrator for one turn."""

from __future__ import annotations

from dungeon_chat.core.constants import DICE_CLOSE, DICE_OPEN, TECH_CLOSE, TECH_OPEN
from dungeon_chat.dm.prompts import SYSTEM_PROMPTS
from dungeon_chat.i18n import t
from dungeon_chat.models import Gender, MessageRole, PlayerProfile


DEFAULT_HISTORY_WINDOW = 10


def build_system_prompt(profile: PlayerProfile) -> str:
    """Render the language-specific system instruction for a player.

    Args:
        profile: The player whose sheet and memory fill the template.

    Returns:
        The system prompt, including the directive grammar.
    """
    lang = profile.language.value
    stats = profile.stats
    none_yet = t("prompt.none_yet", lang)

    spells = ", ".join(stats.spells) if stats.spells else none_yet
    inventory = ", ".join(stats.inventory) if stats.inventory else none_yet
    if stats.notes:
        notes = "\n".join(f"- {note}" for note in stats.notes)
    else:
        notes = f"- {t('prompt.notes_empty', lang)}"

    gender_key = "prompt.gender_male" if profile.gender == Gender.MALE else "prompt.gender_female"

    return SYSTEM_PROMPTS[lang].format(
        name=profile.name,
        gender=t(gender_key, lang),
        age=profile.age,
        background=profile.background or none_yet,
        spells=spells,
        inventory=inventory,
        hp=stats.hp,
        xp=stats.xp,
        level=stats.level,
        notes=notes,
        dice_open=DICE_OPEN,
        dice_close=DICE_CLOSE,
        tech_open=TECH_OPEN,
        tech_close=TECH_CLOSE,
    )


def build_messages(
    profile: PlayerProfile,
    user_text: str,
    *,
    window: int = DEFAULT_HISTORY_WINDOW,
) -> list[dict[str, str]]:
    """Build the chat-completions payload for one turn.

    One system message, then the last ``window`` history entries in
    chronological order, then the new user utterance. Pure: the profile is
    not modified.

    Args:
        profile: Player record supplying the sheet and the history.
        user_text: The player's input for this turn.
        window: Number of history entries to include.

    Returns:
        Ordered list of ``{"role", "content"}`` messages.
    """
    messages = [{"role": "system", "content": build_system_prompt(profile)}]
    messages.extend(entry.to_message() for entry in profile.recent_history(window))
    messages.append({"role": MessageRole.USER.value, "content": user_text})
    return messages


__all__ = [
    "DEFAULT_HISTORY_WINDOW",
    "build_system_prompt",
    "build_messages",
]
