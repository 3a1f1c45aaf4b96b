"""Exception hierarchy for the dungeon_chat game engine.

Everything raised on purpose derives from ``DungeonChatError``, so the bot
boundary can catch one type while each domain still carries its own
context in ``details``. Players never see these messages; the turn engine
answers any failure with one localized "try again later" line.

Example:
    >>> from dungeon_chat.core.exceptions import StorageError
    >>> raise StorageError("Player table unavailable", chat_id=42)
"""

from __future__ import annotations

from typing import Any


def _merge(details: dict[str, Any] | None, **context: Any) -> dict[str, Any]:
    """Fold keyword context into ``details``, skipping values that are None."""
    merged = dict(details or {})
    merged.update({key: value for key, value in context.items() if value is not None})
    return merged


class DungeonChatError(Exception):
    """Root of all dungeon_chat errors.

    Attributes:
        message: Human-readable error description.
        details: Structured context, rendered after the message.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.details:
            return self.message
        rendered = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{rendered}]"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(DungeonChatError):
    """Settings are missing or inconsistent (e.g. no narrator API key)."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_merge(details, config_key=config_key))


# =============================================================================
# Narrator (LLM)
# =============================================================================


class AIControlError(DungeonChatError):
    """The narrator model call failed.

    Raised before any player state is touched, so the turn can be aborted
    without cleanup.
    """

    def __init__(
        self,
        message: str,
        *,
        model: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_merge(details, model=model, provider=provider))


class AIConnectionError(AIControlError):
    """Endpoint unreachable, or the request timed out."""


class AIResponseError(AIControlError):
    """Error status from the endpoint, or a reply with no text."""


class AIRateLimitError(AIControlError):
    """Provider answered 429."""

    def __init__(
        self,
        message: str,
        *,
        retry_after_seconds: float | None = None,
        model: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            model=model,
            provider=provider,
            details=_merge(details, retry_after_seconds=retry_after_seconds),
        )


# =============================================================================
# Turn Engine
# =============================================================================


class TurnError(DungeonChatError):
    """A turn broke after the narrator had answered.

    Args:
        message: What went wrong.
        chat_id: Player whose turn failed.
        stage: Turn step that failed ("narration", "persist", ...).
        details: Extra context.
    """

    def __init__(
        self,
        message: str,
        *,
        chat_id: int | None = None,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_merge(details, chat_id=chat_id, stage=stage))


# =============================================================================
# Storage
# =============================================================================


class StorageError(DungeonChatError):
    """The player or session store is unavailable, or a record is corrupt."""

    def __init__(
        self,
        message: str,
        *,
        chat_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_merge(details, chat_id=chat_id))


class PlayerNotFoundError(StorageError):
    """An update targeted a chat id with no record."""


__all__ = [
    "DungeonChatError",
    "ConfigurationError",
    "AIControlError",
    "AIConnectionError",
    "AIResponseError",
    "AIRateLimitError",
    "TurnError",
    "StorageError",
    "PlayerNotFoundError",
]
