"""Directive parser for narrator responses.

The narrator writes free prose followed by a trailing technical block::

    The guard lunges...

    [DICE]The bones clatter and settle on a lucky face.[/DICE]
    [TECH]
    ACTION1: [Flee 🏃]
    ACTION2: [Fight ⚔️]
    CHANGES: {"hp": -10, "xp": 15, "note": "Angered the guard"}
    [/TECH]

This module is the only place that reads raw narrator text. Every function
is total: malformed or missing directives degrade to "no choices" and
"no delta" instead of raising, so a sloppy response never breaks a turn.
"""

from __future__ import annotations

import json
import re

from pydantic import ValidationError as PydanticValidationError

from dungeon_chat.core.constants import (
    ACTION_MARKER,
    CHANGES_MARKER,
    CHOICE_CALLBACK_PREFIX,
    DICE_CLOSE,
    DICE_OPEN,
    MAX_CHOICES,
    TECH_CLOSE,
    TECH_OPEN,
)
from dungeon_chat.core.logging import get_logger
from dungeon_chat.models import Choice, ParsedTurn, StateDelta


logger = get_logger(__name__)

# A marker glued to a preceding word ("TRANSACTION1:") is prose.
_NOT_IN_WORD = r"(?<!\w)"
_CHOICE_LINE = re.compile(rf"{_NOT_IN_WORD}{ACTION_MARKER}([1-{MAX_CHOICES}]):[ \t]*(.*)")
_ANY_ACTION = re.compile(rf"{_NOT_IN_WORD}{ACTION_MARKER}\d+:")
_CHANGES = re.compile(rf"{_NOT_IN_WORD}{re.escape(CHANGES_MARKER)}")
_DICE_SPAN = re.compile(rf"{re.escape(DICE_OPEN)}(.*?){re.escape(DICE_CLOSE)}", re.DOTALL)
_TRAILING_RULES = re.compile(r"(?:(?:^|\n)[ \t]*-{3,}[ \t]*)+\Z")

_decoder = json.JSONDecoder()


# =============================================================================
# Choices
# =============================================================================


def _clean_label(raw: str) -> str:
    label = raw.strip()
    if label.startswith("["):
        label = label[1:].replace("]", "", 1)
    elif label.endswith("]"):
        label = label[:-1]
    return " ".join(label.split())


def parse_choices(text: str) -> list[Choice]:
    """Extract up to three ``ACTIONn`` choices in the order they appear.

    Brackets around a label are removed and whitespace collapsed. Empty
    labels are dropped, and only the first line for each number counts.
    """
    choices: list[Choice] = []
    seen: set[str] = set()
    for match in _CHOICE_LINE.finditer(text):
        number = match.group(1)
        label = _clean_label(match.group(2))
        if not label or number in seen:
            continue
        seen.add(number)
        choices.append(Choice(id=f"{CHOICE_CALLBACK_PREFIX}{number}", label=label))
        if len(choices) == MAX_CHOICES:
            break
    return choices


# =============================================================================
# Delta
# =============================================================================


def parse_delta(text: str) -> StateDelta | None:
    """Decode the JSON object following ``CHANGES:``.

    A field with the wrong type is dropped on its own, so ``{"hp": -5,
    "get": ["a", "b"]}`` still applies the damage.

    Returns:
        The delta, or None when the marker is missing, the JSON is
        malformed or not an object, or nothing valid changed.
    """
    marker = _CHANGES.search(text)
    if marker is None:
        return None

    start = marker.end()
    while start < len(text) and text[start].isspace():
        start += 1

    try:
        payload, _ = _decoder.raw_decode(text, start)
    except json.JSONDecodeError as exc:
        logger.warning(
            "Malformed CHANGES directive",
            error=str(exc),
            preview=text[start:start + 120],
        )
        return None

    if not isinstance(payload, dict):
        logger.warning("CHANGES directive is not an object", payload_type=type(payload).__name__)
        return None

    try:
        delta = StateDelta.model_validate(payload)
    except PydanticValidationError as exc:
        # Drop only the offending keys; the valid ones still apply.
        invalid = {error["loc"][0] for error in exc.errors() if error["loc"]}
        logger.warning(
            "CHANGES directive has invalid fields",
            fields=sorted(str(key) for key in invalid),
            payload=payload,
        )
        kept = {key: value for key, value in payload.items() if key not in invalid}
        try:
            delta = StateDelta.model_validate(kept)
        except PydanticValidationError:
            return None

    return None if delta.is_empty else delta


# =============================================================================
# Flourish & Narration
# =============================================================================


def extract_flourish(text: str) -> str | None:
    """Return the text of the ``[DICE]...[/DICE]`` span(s), if any."""
    spans = [span.strip() for span in _DICE_SPAN.findall(text)]
    spans = [span for span in spans if span]
    if not spans:
        return None
    return "\n\n".join(spans)


def _technical_start(text: str) -> int:
    positions = [len(text)]
    tech = text.find(TECH_OPEN)
    if tech >= 0:
        positions.append(tech)
    changes = _CHANGES.search(text)
    if changes:
        positions.append(changes.start())
    action = _ANY_ACTION.search(text)
    if action:
        positions.append(action.start())
    return min(positions)


def extract_narration(text: str) -> str:
    """Return the story prose the player reads.

    Everything from the first technical marker onward is cut, flourish
    spans are removed, and trailing ``---`` separators are dropped.
    """
    body = text[:_technical_start(text)]
    body = _DICE_SPAN.sub("", body)
    for marker in (DICE_OPEN, DICE_CLOSE, TECH_CLOSE):
        body = body.replace(marker, "")
    body = _TRAILING_RULES.sub("", body.rstrip())
    return body.strip()


def parse_response(text: str) -> ParsedTurn:
    """Split a raw narrator response into its parts.

    Args:
        text: The model output, verbatim.

    Returns:
        ParsedTurn with narration, optional flourish, choices and delta.
    """
    text = text or ""
    parsed = ParsedTurn(
        narration=extract_narration(text),
        dice_flourish=extract_flourish(text),
        choices=parse_choices(text),
        delta=parse_delta(text),
    )
    logger.debug(
        "Parsed narrator response",
        paragraphs=len(parsed.paragraphs),
        choices=len(parsed.choices),
        has_delta=parsed.delta is not None,
        has_flourish=parsed.dice_flourish is not None,
    )
    return parsed


__all__ = [
    "parse_choices",
    "parse_delta",
    "extract_flourish",
    "extract_narration",
    "parse_response",
]
