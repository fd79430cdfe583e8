"""EngineManager — owns the CityEngine and drives its tick timer on a background thread.

Every mutation (timer ticks and player commands alike) runs under one lock,
so the engine only ever sees a single writer. Readers get copies taken
under the same lock.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable, TypeVar

from citysim.core.errors import ConfigurationError
from citysim.core.grid import Grid
from citysim.core.models import CityStats
from citysim.engine.city_engine import CityEngine
from citysim.engine.tick import TickReport
from citysim.utils.storage import SaveSlot, SaveSlotStore, load_game, save_game

if TYPE_CHECKING:
    from citysim.config import SimulationConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EngineManager:
    """Manages one city session.

    Provides thread-safe access to:
      - commands (place / demolish / upgrade / undo / redo / claim ...)
      - read-only copies of the grid, stats and objectives
      - timer controls (start / pause / resume / step / reset / stop)
    """

    def __init__(
        self,
        config: SimulationConfig,
        save_path: str | Path | None = None,
        saves_dir: str | Path | None = None,
    ) -> None:
        self._config = config
        self.config = config
        self._save_path = Path(save_path) if save_path is not None else None
        self._slots = SaveSlotStore(saves_dir) if saves_dir is not None else None
        self._tick_rate: float = config.tick_interval_seconds

        self._lock = threading.RLock()
        self._engine: CityEngine | None = None
        self._last_report: TickReport | None = None

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._stop_requested = threading.Event()

        self._build(load_save=True)

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.05, min(value, 60.0))

    @property
    def last_report(self) -> TickReport | None:
        return self._last_report

    # -- serialized access --

    def execute(self, fn: Callable[[CityEngine], T]) -> T:
        """Run *fn* against the engine while holding the single-writer lock."""
        with self._lock:
            assert self._engine is not None
            return fn(self._engine)

    def get_grid(self) -> Grid:
        return self.execute(lambda e: e.state.grid.copy())

    def get_stats(self) -> CityStats:
        return self.execute(lambda e: e.state.stats.copy())

    def current_day(self) -> int:
        return self.execute(lambda e: e.state.stats.day)

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="city-ticker", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.2fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused on day %d", self.current_day())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed on day %d", self.current_day())

    def step(self) -> TickReport:
        """Execute exactly one tick synchronously."""
        report = self.execute(lambda e: e.tick())
        self._last_report = report
        return report

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        self._thread = None
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop the timer and start a fresh city, ignoring any save."""
        self.stop()
        with self._lock:
            self._build(load_save=False)
            self._last_report = None
        logger.info("EngineManager reset.")

    def save(self) -> Path | None:
        if self._save_path is None:
            return None
        return self.execute(lambda e: save_game(self._save_path, e.state))

    # -- save slots --

    def _require_slots(self) -> SaveSlotStore:
        if self._slots is None:
            raise ConfigurationError("No saves directory configured")
        return self._slots

    def list_slots(self) -> list[SaveSlot]:
        with self._lock:
            return self._require_slots().list_slots()

    def create_slot(self, name: str) -> SaveSlot:
        """Open a new slot and write the current city into it."""
        store = self._require_slots()
        with self._lock:
            slot = store.create(name)
            return self.execute(lambda e: store.save(slot.slot_id, e.state))

    def save_slot(self, slot_id: str) -> SaveSlot:
        store = self._require_slots()
        return self.execute(lambda e: store.save(slot_id, e.state))

    def load_slot(self, slot_id: str) -> bool:
        """Replace the running city with a slot's; False if its save is unusable."""
        store = self._require_slots()
        with self._lock:
            state = store.load(slot_id, self._config)
            if state is None:
                return False
            self.execute(lambda e: e.load_state(state))
            self._last_report = None
        logger.info("Loaded save slot %s", slot_id)
        return True

    def delete_slot(self, slot_id: str) -> None:
        with self._lock:
            self._require_slots().delete(slot_id)

    # -- internals --

    def _build(self, load_save: bool) -> None:
        engine = CityEngine(self._config)
        if load_save and self._save_path is not None:
            state = load_game(self._save_path, self._config)
            if state is not None:
                engine.load_state(state)
            else:
                logger.info("No usable save at %s; starting a fresh city", self._save_path)
        self._engine = engine

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Ticker thread started.")
        while not self._stop_requested.wait(self._tick_rate):
            if self._paused.is_set():
                continue
            report = self.step()
            logger.debug("Day %d ticked: +$%d", report.day, report.income)
        self._running.clear()
        logger.info("Ticker thread exited.")
