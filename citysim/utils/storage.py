"""Save/load of a city session as JSON, plus named save slots.

The payload carries ``version == grid size``. A save written for another
grid size, or one that cannot be parsed, is never migrated: the loader
reports "no usable save" and the caller starts a fresh city.

Slots live in one directory: ``slots.json`` holds the metadata shown on a
load screen and each slot's city is stored in ``save_<id>.json``.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from citysim.config import SimulationConfig
from citysim.core.errors import IncompatibleSave, UnknownSaveSlot
from citysim.core.grid import Grid
from citysim.core.models import CityStats
from citysim.core.quests import Quest
from citysim.core.state import SimulationState
from citysim.utils.news import NewsFeed, NewsItem

logger = logging.getLogger(__name__)


def serialize_state(state: SimulationState) -> dict[str, Any]:
    return {
        "version": state.grid.size,
        "grid": state.grid.to_rows(),
        "stats": state.stats.to_dict(),
        "quests": [q.to_dict() for q in state.quests],
        "goal": state.goal.to_dict() if state.goal is not None else None,
        "news": [e.to_dict() for e in state.news.latest()],
        "goal_serial": state.goal_serial,
    }


def deserialize_state(payload: dict[str, Any], config: SimulationConfig) -> SimulationState:
    """Rebuild a state from *payload* or raise IncompatibleSave."""
    version = payload.get("version")
    if version != config.grid_size:
        raise IncompatibleSave(f"Save version {version!r} does not match grid size {config.grid_size}")
    try:
        grid = Grid.from_rows(payload["grid"])
        if grid.size != config.grid_size:
            raise IncompatibleSave(f"Save grid is {grid.size}x{grid.size}")
        news = NewsFeed(config.news_limit)
        news.append_many([NewsItem.from_dict(e) for e in payload.get("news") or []])
        goal_raw = payload.get("goal")
        state = SimulationState(
            grid=grid,
            stats=CityStats.from_dict(payload["stats"]),
            quests=[Quest.from_dict(q) for q in payload.get("quests") or []],
            goal=Quest.from_dict(goal_raw) if goal_raw else None,
            news=news,
        )
        state.goal_serial = int(payload.get("goal_serial", 0))
    # Wrong-shaped sections surface as any of these from the from_dict helpers
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise IncompatibleSave(f"Malformed save: {exc!r}") from exc
    return state


def save_game(path: str | Path, state: SimulationState) -> Path:
    """Write *state* to *path* as JSON."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(serialize_state(state)), encoding="utf-8")
    logger.info("City saved to %s (day %d)", target, state.stats.day)
    return target


def load_game(path: str | Path, config: SimulationConfig) -> SimulationState | None:
    """Load a save, or return None when there is no usable one."""
    source = Path(path)
    if not source.exists():
        return None
    try:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        payload = json.loads(source.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise IncompatibleSave("Save root is not an object")
        return deserialize_state(payload, config)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load %s: %s", source, exc)
        return None
    except IncompatibleSave as exc:
        logger.warning("Discarding save %s: %s", source, exc.message)
        return None


# ---------------------------------------------------------------------------
# Save slots
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class SaveSlot:
    """Load-screen metadata for one slot; refreshed on every save."""

    slot_id: str
    name: str
    last_played: int = 0        # Unix epoch milliseconds
    population: int = 0
    money: int = 0

    def to_dict(self) -> dict:
        return {
            "slot_id": self.slot_id,
            "name": self.name,
            "last_played": self.last_played,
            "population": self.population,
            "money": self.money,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SaveSlot:
        return cls(
            slot_id=str(data["slot_id"]),
            name=str(data["name"]),
            last_played=int(data.get("last_played", 0)),
            population=int(data.get("population", 0)),
            money=int(data.get("money", 0)),
        )


def _now_ms() -> int:
    return int(time.time() * 1000)


class SaveSlotStore:
    """Named save slots kept side by side in *directory*.

    An unreadable index is treated as "no slots" rather than an error, the
    same way a bad save is treated as "no save".
    """

    INDEX_FILE = "slots.json"

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, slot_id: str) -> Path:
        return self._dir / f"save_{slot_id}.json"

    # -- metadata --

    def list_slots(self) -> list[SaveSlot]:
        index = self._dir / self.INDEX_FILE
        if not index.exists():
            return []
        try:
            raw = json.loads(index.read_text(encoding="utf-8"))
            return [SaveSlot.from_dict(s) for s in raw]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Ignoring unreadable slot index %s: %s", index, exc)
            return []

    def get(self, slot_id: str) -> SaveSlot | None:
        for slot in self.list_slots():
            if slot.slot_id == slot_id:
                return slot
        return None

    def _write_index(self, slots: list[SaveSlot]) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([s.to_dict() for s in slots], indent=2)
        (self._dir / self.INDEX_FILE).write_text(payload, encoding="utf-8")

    def create(self, name: str) -> SaveSlot:
        slots = self.list_slots()
        taken = {s.slot_id for s in slots}
        slot_id = uuid.uuid4().hex[:12]
        while slot_id in taken:
            slot_id = uuid.uuid4().hex[:12]
        slot = SaveSlot(slot_id=slot_id, name=name, last_played=_now_ms())
        slots.append(slot)
        self._write_index(slots)
        logger.info("Created save slot %s (%r)", slot_id, name)
        return slot

    def delete(self, slot_id: str) -> None:
        slots = self.list_slots()
        remaining = [s for s in slots if s.slot_id != slot_id]
        if len(remaining) == len(slots):
            raise UnknownSaveSlot(f"No save slot {slot_id!r}")
        self._write_index(remaining)
        self.path_for(slot_id).unlink(missing_ok=True)
        logger.info("Deleted save slot %s", slot_id)

    # -- data --

    def save(self, slot_id: str, state: SimulationState) -> SaveSlot:
        slots = self.list_slots()
        slot = next((s for s in slots if s.slot_id == slot_id), None)
        if slot is None:
            raise UnknownSaveSlot(f"No save slot {slot_id!r}")
        save_game(self.path_for(slot_id), state)
        slot.population = state.stats.population
        slot.money = state.stats.money
        slot.last_played = _now_ms()
        self._write_index(slots)
        return slot

    def load(self, slot_id: str, config: SimulationConfig) -> SimulationState | None:
        if self.get(slot_id) is None:
            raise UnknownSaveSlot(f"No save slot {slot_id!r}")
        return load_game(self.path_for(slot_id), config)
