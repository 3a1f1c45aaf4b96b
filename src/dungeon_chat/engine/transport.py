"""Chat transport contract used by the turn engine and the bot.

The engine never talks to a chat platform directly. Any adapter that
implements ``ChatTransport`` (a Telegram bot, a console, a test double)
can host the game.

Deletion and button edits are cosmetic: the helpers at the bottom of this
module are fire-and-forget and never raise, so a message that is already
gone or a missing permission can never fail a turn.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from dungeon_chat.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class Button:
    """An inline button under a message."""

    id: str
    """Opaque callback id returned when the button is pressed."""

    label: str
    """Text shown on the button."""


class ChatTransport(Protocol):
    """Outbound capabilities of a chat platform."""

    def send_text(
        self,
        chat_id: int,
        text: str,
        buttons: Sequence[Button] | None = None,
    ) -> int:
        """Send a message, one button per row; return its message id."""
        ...

    def send_typing(self, chat_id: int) -> None:
        """Show the "typing..." indicator."""
        ...

    def send_dice(self, chat_id: int) -> int:
        """Send an animated dice placeholder; return its message id."""
        ...

    def delete_message(self, chat_id: int, message_id: int) -> None:
        """Delete a message. May raise if it is already gone."""
        ...

    def edit_message_buttons(
        self,
        chat_id: int,
        message_id: int,
        buttons: Sequence[Button] | None,
    ) -> None:
        """Replace the buttons under a message; None removes them."""
        ...


# =============================================================================
# Best-effort helpers
# =============================================================================


def delete_quietly(transport: ChatTransport, chat_id: int, message_ids: Iterable[int]) -> int:
    """Delete messages, ignoring every failure.

    Args:
        transport: Transport to delete through.
        chat_id: Chat that owns the messages.
        message_ids: Handles to delete, in order.

    Returns:
        Number of messages actually deleted.
    """
    deleted = 0
    for message_id in message_ids:
        try:
            transport.delete_message(chat_id, message_id)
        except Exception as exc:  # cleanup is cosmetic; failures are expected
            logger.debug("Message delete skipped", message_id=message_id, error=str(exc))
        else:
            deleted += 1
    return deleted


def show_typing_quietly(transport: ChatTransport, chat_id: int) -> None:
    """Show the typing indicator, ignoring failures."""
    try:
        transport.send_typing(chat_id)
    except Exception as exc:  # indicator is cosmetic
        logger.debug("Typing indicator skipped", error=str(exc))


def clear_buttons_quietly(transport: ChatTransport, chat_id: int, message_id: int) -> bool:
    """Remove the buttons under a message, ignoring failures.

    Returns:
        True if the edit went through.
    """
    try:
        transport.edit_message_buttons(chat_id, message_id, None)
    except Exception as exc:  # cleanup is cosmetic; failures are expected
        logger.debug("Button removal skipped", message_id=message_id, error=str(exc))
        return False
    return True


__all__ = [
    "Button",
    "ChatTransport",
    "delete_quietly",
    "show_typing_quietly",
    "clear_buttons_quietly",
]
