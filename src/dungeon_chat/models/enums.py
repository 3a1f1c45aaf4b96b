"""Enumeration types for the dungeon_chat game engine."""

from __future__ import annotations

from enum import StrEnum


class Language(StrEnum):
    """Locale a player chose at registration.

    Selects both the UI strings and the language the narrator writes in.
    """

    RU = "ru"
    EN = "en"

    @property
    def display_name(self) -> str:
        """Name of the language written in that language."""
        return {"ru": "Русский", "en": "English"}[self.value]


class Gender(StrEnum):
    """Gender of the player character."""

    MALE = "male"
    FEMALE = "female"


class MessageRole(StrEnum):
    """Author of a conversation history entry."""

    USER = "user"
    """The player's input."""

    ASSISTANT = "assistant"
    """The raw narrator response."""


__all__ = [
    "Language",
    "Gender",
    "MessageRole",
]
