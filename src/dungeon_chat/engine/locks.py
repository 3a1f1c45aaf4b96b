"""Per-player mutual exclusion.

Different players' turns may run on different threads; two turns for the
same player must not, because each turn rewrites the whole player record.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class _Slot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0
    """Threads holding or waiting for ``lock``."""


class PlayerLocks:
    """Keyed locks, one per chat id.

    A lock exists while some thread holds or waits for it and is dropped
    when the last one leaves, so erased players leave nothing behind.
    """

    def __init__(self) -> None:
        self._slots: dict[int, _Slot] = {}
        self._guard = threading.Lock()

    def _enter(self, chat_id: int) -> _Slot:
        with self._guard:
            slot = self._slots.get(chat_id)
            if slot is None:
                slot = _Slot()
                self._slots[chat_id] = slot
            slot.users += 1
            return slot

    def _leave(self, chat_id: int, slot: _Slot) -> None:
        with self._guard:
            slot.users -= 1
            if slot.users == 0:
                del self._slots[chat_id]

    def is_busy(self, chat_id: int) -> bool:
        """True while a turn for ``chat_id`` holds its lock."""
        with self._guard:
            slot = self._slots.get(chat_id)
            return slot is not None and slot.lock.locked()

    @contextmanager
    def hold(self, chat_id: int, *, blocking: bool = True) -> Iterator[bool]:
        """Hold the player's lock for the duration of the block.

        Yields:
            True if the lock was acquired. With ``blocking=False`` this is
            False when another turn is in flight; the block still runs and
            the caller decides what to do.
        """
        slot = self._enter(chat_id)
        try:
            acquired = slot.lock.acquire(blocking=blocking)
            try:
                yield acquired
            finally:
                if acquired:
                    slot.lock.release()
        finally:
            self._leave(chat_id, slot)


__all__ = ["PlayerLocks"]
