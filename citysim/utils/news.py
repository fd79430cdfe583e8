"""City news feed: the last few things that happened, newest last.

The engine writes upgrades, emigration, completed objectives and reward
payouts here; hosts may append externally generated headlines. Presentation
threads read while the engine writes, so access goes through a lock.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NewsItem:
    day: int
    category: str
    message: str

    def to_dict(self) -> dict:
        return {"day": self.day, "category": self.category, "message": self.message}

    @classmethod
    def from_dict(cls, data: dict) -> NewsItem:
        return cls(int(data.get("day", 0)), str(data.get("category", "news")), str(data["message"]))


class NewsFeed:
    """Keeps the *limit* most recent items; older ones fall off the front."""

    __slots__ = ("_items", "_lock")

    def __init__(self, limit: int = 13) -> None:
        self._items: deque[NewsItem] = deque(maxlen=limit)
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._items.maxlen or 0

    def append(self, item: NewsItem) -> None:
        with self._lock:
            self._items.append(item)

    def append_many(self, items: list[NewsItem]) -> None:
        with self._lock:
            self._items.extend(items)

    def since_day(self, day: int) -> list[NewsItem]:
        """Items reported on *day* or later, oldest first."""
        with self._lock:
            return [n for n in self._items if n.day >= day]

    def latest(self, count: int | None = None) -> list[NewsItem]:
        with self._lock:
            items = list(self._items)
        return items if count is None else items[-count:]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
