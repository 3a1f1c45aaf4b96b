"""Narrator side of the game: prompts, response parsing and the model client.

Example:
    >>> from dungeon_chat.dm import parse_response
    >>> turn = parse_response("The door creaks.\\nACTION1: [Enter]")
    >>> turn.narration, [c.label for c in turn.choices]
    ('The door creaks.', ['Enter'])
"""

from __future__ import annotations

from dungeon_chat.dm.narrator import Narrator, OpenAINarrator
from dungeon_chat.dm.parser import (
    extract_flourish,
    extract_narration,
    parse_choices,
    parse_delta,
    parse_response,
)
from dungeon_chat.dm.prompt_builder import (
    DEFAULT_HISTORY_WINDOW,
    build_messages,
    build_system_prompt,
)
from dungeon_chat.dm.prompts import SYSTEM_PROMPTS


__all__ = [
    # Narrator
    "Narrator",
    "OpenAINarrator",
    # Parser
    "extract_flourish",
    "extract_narration",
    "parse_choices",
    "parse_delta",
    "parse_response",
    # Prompt builder
    "DEFAULT_HISTORY_WINDOW",
    "build_messages",
    "build_system_prompt",
    "SYSTEM_PROMPTS",
]
