"""Ephemeral results of parsing one narrator response."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


_PARAGRAPH_BREAK = re.compile(r"\r?\n[ \t]*\r?\n")


class StateDelta(BaseModel):
    """Optional stat changes requested by the narrator.

    Built from the ``CHANGES`` JSON object. Every field is optional; a zero
    number or a blank string means "absent", same as a missing key.

    Wire keys: ``hp``, ``xp``, ``learn``, ``get``, ``note``.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    hp: int | None = Field(default=None, description="Signed hit point change")
    xp: int | None = Field(default=None, description="Signed experience change")
    learned_spell: str | None = Field(default=None, alias="learn", description="New ability")
    acquired_item: str | None = Field(default=None, alias="get", description="New item")
    note: str | None = Field(default=None, description="Long-term memory entry")

    @field_validator("hp", "xp", mode="after")
    @classmethod
    def zero_is_absent(cls, value: int | None) -> int | None:
        return value or None

    @field_validator("learned_spell", "acquired_item", "note", mode="before")
    @classmethod
    def blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @property
    def is_empty(self) -> bool:
        """True when no field carries a change."""
        return all(
            value is None
            for value in (self.hp, self.xp, self.learned_spell, self.acquired_item, self.note)
        )


@dataclass(frozen=True)
class Choice:
    """A player option offered by the narrator."""

    id: str
    """Opaque callback id, e.g. ``action_1``."""

    label: str
    """Button text shown to the player."""


@dataclass(frozen=True)
class ParsedTurn:
    """Structured view of one raw narrator response."""

    narration: str
    """Story prose with every directive and the flourish removed."""

    dice_flourish: str | None = None
    """Flavour text of a randomized outcome, sent as its own message."""

    choices: list[Choice] = field(default_factory=list)
    """Zero to three options, in presentation order."""

    delta: StateDelta | None = None
    """Requested stat changes, or None when absent or malformed."""

    @property
    def paragraphs(self) -> list[str]:
        """Narration split on blank lines, empty chunks dropped."""
        chunks = (chunk.strip() for chunk in _PARAGRAPH_BREAK.split(self.narration))
        return [chunk for chunk in chunks if chunk]


__all__ = [
    "StateDelta",
    "Choice",
    "ParsedTurn",
]
