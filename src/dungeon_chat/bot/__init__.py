"""Chat-facing glue: registration wizard and event routing."""

from dungeon_chat.bot.handlers import GameBot
from dungeon_chat.bot.registration import (
    CharacterSheet,
    RegistrationState,
    RegistrationStep,
    RegistrationWizard,
)


__all__ = [
    "GameBot",
    "CharacterSheet",
    "RegistrationState",
    "RegistrationStep",
    "RegistrationWizard",
]
