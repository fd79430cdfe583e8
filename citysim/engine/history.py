"""Bounded linear undo/redo history of city snapshots."""

from __future__ import annotations

import logging

from citysim.core.snapshot import Snapshot

logger = logging.getLogger(__name__)


class HistoryManager:
    """Stack of snapshots with a cursor pointing at the current state.

    ``push`` discards the redo tail, appends, and evicts the oldest entry
    once more than *limit* snapshots are held. ``undo``/``redo`` move the
    cursor and return the snapshot to restore, or None when there is
    nowhere to go.
    """

    __slots__ = ("_limit", "_entries", "_cursor")

    def __init__(self, limit: int = 20) -> None:
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self._limit = limit
        self._entries: list[Snapshot] = []
        self._cursor = -1

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, snapshot: Snapshot) -> None:
        del self._entries[self._cursor + 1:]
        self._entries.append(snapshot)
        if len(self._entries) > self._limit:
            self._entries.pop(0)
        self._cursor = len(self._entries) - 1

    def undo(self) -> Snapshot | None:
        if not self.can_undo:
            logger.debug("Undo ignored: at oldest snapshot")
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Snapshot | None:
        if not self.can_redo:
            logger.debug("Redo ignored: at newest snapshot")
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    def current(self) -> Snapshot | None:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    def reset(self, snapshot: Snapshot | None = None) -> None:
        self._entries = []
        self._cursor = -1
        if snapshot is not None:
            self.push(snapshot)
