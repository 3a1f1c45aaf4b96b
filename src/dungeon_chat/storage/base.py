"""Store contracts consumed by the engine and the bot.

``Database`` implements both; tests and alternative backends only need
to satisfy the methods listed here.
"""

from __future__ import annotations

from typing import Any, Protocol

from dungeon_chat.models import PlayerProfile


class PlayerStore(Protocol):
    """Player records keyed by chat id."""

    def find_player(self, chat_id: int) -> PlayerProfile | None: ...

    def insert_player(self, profile: PlayerProfile) -> PlayerProfile: ...

    def update_player(self, chat_id: int, profile: PlayerProfile) -> None: ...

    def remove_player(self, chat_id: int) -> bool: ...


class SessionStore(Protocol):
    """Small JSON blobs keyed by (user id, chat id)."""

    def get_session(self, user_id: int, chat_id: int) -> dict[str, Any] | None: ...

    def save_session(self, user_id: int, chat_id: int, data: dict[str, Any]) -> None: ...

    def delete_session(self, user_id: int, chat_id: int) -> bool: ...


__all__ = [
    "PlayerStore",
    "SessionStore",
]
