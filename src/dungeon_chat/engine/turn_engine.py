"""Turn engine: one player input in, one rendered scene out.

A turn runs as a strict sequence of blocking steps:

1. Best-effort deletion of last turn's messages and the player's input.
2. Prompt build and exactly one narrator call.
3. Parse the response into narration, flourish, choices and delta.
4. Send narration paragraph by paragraph, with typing pauses between.
5. Optional dice flourish: animated placeholder, pause, flourish text.
6. Fold the delta into the player's stats.
7. Send the status summary with the choice buttons and the reset button.
8. Append history, record the new message handles, persist the record.

The engine never mutates the profile it is given. Work happens on a deep
copy which is persisted only at step 8, so a failed turn leaves both the
caller's object and the stored record as they were. Messages already sent
by a failed turn are not rolled back; the previous handles stay pending
and the next turn deletes them.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

from dungeon_chat.core.config import GameSettings, get_settings
from dungeon_chat.core.constants import RESET_CALLBACK_ID
from dungeon_chat.core.exceptions import DungeonChatError, TurnError
from dungeon_chat.core.logging import get_logger
from dungeon_chat.dm.narrator import Narrator
from dungeon_chat.dm.parser import parse_response
from dungeon_chat.dm.prompt_builder import build_messages
from dungeon_chat.engine.mutator import apply_delta
from dungeon_chat.engine.transport import (
    Button,
    ChatTransport,
    delete_quietly,
    show_typing_quietly,
)
from dungeon_chat.i18n import t
from dungeon_chat.models import Choice, ParsedTurn, PlayerProfile
from dungeon_chat.storage.base import PlayerStore


logger = get_logger(__name__)


# =============================================================================
# Turn Status
# =============================================================================


class TurnStatus(StrEnum):
    """Outcome of one turn."""

    COMPLETED = "completed"
    """Scene rendered and player record persisted."""

    NARRATOR_FAILED = "narrator_failed"
    """The model call failed; nothing was mutated."""

    FAILED = "failed"
    """The model answered but rendering or persistence failed."""


@dataclass
class TurnOutcome:
    """Result of ``TurnEngine.play_turn``.

    Attributes:
        status: How the turn ended.
        profile: The persisted record on success, the untouched input otherwise.
        parsed: Parsed narrator response, when the model answered.
        summary: Status lines produced by the state mutator.
        message_ids: Handles of messages sent by this turn, in order.
        error: What broke a failed turn.
    """

    status: TurnStatus
    profile: PlayerProfile
    parsed: ParsedTurn | None = None
    summary: list[str] = field(default_factory=list)
    message_ids: list[int] = field(default_factory=list)
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == TurnStatus.COMPLETED


def build_buttons(choices: list[Choice], language: str) -> list[Button]:
    """Choice buttons in presentation order, reset control last."""
    buttons = [Button(id=choice.id, label=choice.label) for choice in choices]
    buttons.append(Button(id=RESET_CALLBACK_ID, label=t("button.reset", language)))
    return buttons


# =============================================================================
# Turn Engine
# =============================================================================


class TurnEngine:
    """Orchestrates one complete turn and its chat-side staging."""

    def __init__(
        self,
        store: PlayerStore,
        narrator: Narrator,
        transport: ChatTransport,
        *,
        settings: GameSettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Player record store.
            narrator: Model client.
            transport: Chat platform adapter.
            settings: Pacing and memory bounds. Defaults to global settings.
            sleep: Pause function used for presentational pacing.
        """
        self.store = store
        self.narrator = narrator
        self.transport = transport
        self.settings = settings or get_settings().game
        self._sleep = sleep

    def play_turn(
        self,
        profile: PlayerProfile,
        user_text: str,
        *,
        user_message_id: int | None = None,
    ) -> TurnOutcome:
        """Run one turn for ``profile``.

        Args:
            profile: Current player record, as loaded from the store.
            user_text: Typed text, or the prefixed label of a chosen option.
            user_message_id: The player's own message, deleted with the rest.

        Returns:
            TurnOutcome describing what happened.
        """
        chat_id = profile.chat_id
        lang = profile.language.value

        stale = list(profile.pending_message_ids)
        if user_message_id is not None:
            stale.append(user_message_id)
        delete_quietly(self.transport, chat_id, stale)

        show_typing_quietly(self.transport, chat_id)
        try:
            messages = build_messages(profile, user_text, window=self.settings.history_window)
            raw_response = self.narrator.generate(messages)
        except Exception as exc:
            logger.error(
                "Narrator call failed",
                chat_id=chat_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            self._send_error(chat_id, lang)
            return TurnOutcome(status=TurnStatus.NARRATOR_FAILED, profile=profile, error=exc)

        sent: list[int] = []
        stage = "parse"
        try:
            parsed = parse_response(raw_response)
            updated = profile.model_copy(deep=True)

            stage = "narration"
            self._send_narration(chat_id, parsed, sent)
            stage = "flourish"
            self._send_flourish(chat_id, lang, parsed, sent)

            stage = "state"
            summary = apply_delta(
                updated.stats,
                parsed.delta,
                lang,
                notes_limit=self.settings.notes_limit,
            )
            stage = "status"
            status_text = "\n".join(summary) if summary else t("status.empty", lang)
            sent.append(
                self.transport.send_text(chat_id, status_text, build_buttons(parsed.choices, lang))
            )

            stage = "persist"
            updated.append_exchange(user_text, raw_response, limit=self.settings.history_limit)
            updated.pending_message_ids = sent
            self.store.update_player(chat_id, updated)
        except Exception as exc:
            error = TurnError(
                "Turn failed after narrator response",
                chat_id=chat_id,
                stage=stage,
                details={"cause": exc.message if isinstance(exc, DungeonChatError) else str(exc)},
            )
            error.__cause__ = exc
            logger.error(error.message, chat_id=chat_id, stage=stage, sent=len(sent), exc_info=exc)
            self._send_error(chat_id, lang)
            return TurnOutcome(status=TurnStatus.FAILED, profile=profile, message_ids=sent, error=error)

        logger.info(
            "Turn completed",
            chat_id=chat_id,
            messages=len(sent),
            choices=len(parsed.choices),
            hp=updated.stats.hp,
            xp=updated.stats.xp,
            level=updated.stats.level,
        )
        return TurnOutcome(
            status=TurnStatus.COMPLETED,
            profile=updated,
            parsed=parsed,
            summary=summary,
            message_ids=sent,
        )

    def _send_narration(self, chat_id: int, parsed: ParsedTurn, sent: list[int]) -> None:
        for index, paragraph in enumerate(parsed.paragraphs):
            if index:
                show_typing_quietly(self.transport, chat_id)
                self._sleep(self.settings.paragraph_delay_seconds)
            sent.append(self.transport.send_text(chat_id, paragraph))

    def _send_flourish(self, chat_id: int, lang: str, parsed: ParsedTurn, sent: list[int]) -> None:
        if not parsed.dice_flourish:
            return
        sent.append(self.transport.send_dice(chat_id))
        self._sleep(self.settings.dice_delay_seconds)
        text = f"{t('dice.header', lang)}\n\n{parsed.dice_flourish}"
        sent.append(self.transport.send_text(chat_id, text))

    def _send_error(self, chat_id: int, lang: str) -> None:
        """Tell the player to try again; a failure here is only logged."""
        try:
            self.transport.send_text(chat_id, t("error.try_later", lang))
        except Exception as exc:
            logger.error("Could not deliver error message", chat_id=chat_id, error=str(exc))


__all__ = [
    "TurnStatus",
    "TurnOutcome",
    "TurnEngine",
    "build_buttons",
]
