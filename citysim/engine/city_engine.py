"""CityEngine — the command surface consumed by presentation layers.

Every mutating command validates first and mutates second, so a rejection
never leaves a partial change behind. A successful command updates grid,
stats, objectives and history together.

The engine is not thread-safe; hosts serialise calls (see EngineManager).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping

from citysim.ai.pathfinding import Pathfinder
from citysim.config import SimulationConfig
from citysim.core.catalog import DEFAULT_CATALOG, BuildingSpec, validate_catalog
from citysim.core.enums import BuildingKind, DecorationKind
from citysim.core.errors import InsufficientFunds, InvalidCommand, SimulationError, TileOccupied
from citysim.core.models import DEFAULT_TILE_COLOR, CityStats, Vector2
from citysim.core.quests import Quest, evaluate_all, generate_goal
from citysim.core.snapshot import Snapshot
from citysim.core.state import SimulationState
from citysim.engine.history import HistoryManager
from citysim.engine.tick import EconomyTick, TickReport
from citysim.systems import costs
from citysim.systems.density import compute_population_density
from citysim.systems.land_value import LandValueCache, LandValueField
from citysim.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandResult:
    """Outcome of a player command: the delta, or why it was rejected."""

    command: str
    ok: bool
    stats: CityStats
    reason: str = ""
    message: str = ""
    money_delta: int = 0
    changed_tiles: list[Vector2] = field(default_factory=list)


class CityEngine:
    """Owns one SimulationState and exposes the game's commands."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        state: SimulationState | None = None,
        catalog: Mapping[BuildingKind, BuildingSpec] = DEFAULT_CATALOG,
        auto_goal: bool = True,
    ) -> None:
        self._config = config or SimulationConfig()
        self._catalog = validate_catalog(catalog)
        self._rng = DeterministicRNG(self._config.world_seed)
        self._auto_goal = auto_goal

        amenity = self._catalog[BuildingKind.PARK]
        radius = amenity.effect_radius or self._config.land_value_radius
        self._land_value = LandValueCache(radius, self._config.land_value_floor)
        self._ticker = EconomyTick(self._config, self._rng, self._catalog, self._land_value)
        self._history = HistoryManager(self._config.history_limit)

        self._state = state or SimulationState.fresh(self._config)
        self._begin_session()

    # -- properties --

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def catalog(self) -> Mapping[BuildingKind, BuildingSpec]:
        return self._catalog

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def history(self) -> HistoryManager:
        return self._history

    @property
    def rng(self) -> DeterministicRNG:
        return self._rng

    # -- session --

    def load_state(self, state: SimulationState) -> None:
        """Replace the whole city (e.g. after loading a save)."""
        if state.grid.size != self._config.grid_size:
            raise InvalidCommand("grid_size", f"Expected a {self._config.grid_size} grid, got {state.grid.size}")
        self._state = state
        self._land_value.invalidate()
        self._begin_session()
        logger.info("City loaded: day %d, $%d", state.stats.day, state.stats.money)

    def _begin_session(self) -> None:
        if self._state.goal is None and self._auto_goal:
            self._state.goal = self._next_goal()
        self._evaluate_objectives()
        self._history.reset(Snapshot.from_state(self._state))

    # -- queries --

    def land_value(self) -> LandValueField:
        return self._land_value.get(self._state.grid)

    def population_density(self) -> list[float]:
        return compute_population_density(self._state.grid)

    def cost(self, kind: BuildingKind, x: int, y: int) -> int:
        s = self._state
        return costs.building_cost(
            kind, x, y, s.grid, self.land_value(), s.stats.money, self._catalog, self._config,
        )

    def upgrade_price(self, x: int, y: int) -> int:
        s = self._state
        return costs.upgrade_cost(x, y, s.grid, self.land_value(), s.stats.money, self._catalog, self._config)

    def refund(self, x: int, y: int) -> int:
        s = self._state
        return costs.demolish_refund(x, y, s.grid, self.land_value(), s.stats.money, self._catalog, self._config)

    def find_path(self, start: Vector2, goal: Vector2) -> list[Vector2] | None:
        return Pathfinder(self._state.grid).find_path(start, goal)

    # -- commands --

    def place(self, kind: BuildingKind, x: int, y: int) -> CommandResult:
        def run() -> tuple[int, list[Vector2]]:
            if kind == BuildingKind.NONE:
                raise InvalidCommand("invalid_kind", "Use demolish to clear a tile")
            grid = self._state.grid
            tile = grid.tile(x, y)
            if tile.occupied:
                raise TileOccupied(f"({x}, {y}) already holds a {tile.kind.name.lower()}")
            price = self.cost(kind, x, y)
            self._charge(price)
            grid.set_building(x, y, kind)
            return -price, [Vector2(x, y)]

        return self._execute("place", run)

    def upgrade(self, x: int, y: int) -> CommandResult:
        def run() -> tuple[int, list[Vector2]]:
            grid = self._state.grid
            tile = grid.tile(x, y)
            if not tile.occupied:
                raise InvalidCommand("empty_tile", f"Nothing to upgrade at ({x}, {y})")
            if tile.level >= self._config.max_level:
                raise InvalidCommand("max_level", f"Already at level {tile.level}")
            price = self.upgrade_price(x, y)
            self._charge(price)
            grid.set_level(x, y, tile.level + 1)
            return -price, [Vector2(x, y)]

        return self._execute("upgrade", run)

    def demolish(self, x: int, y: int) -> CommandResult:
        def run() -> tuple[int, list[Vector2]]:
            grid = self._state.grid
            tile = grid.tile(x, y)
            if not tile.occupied:
                raise InvalidCommand("empty_tile", f"Nothing to demolish at ({x}, {y})")
            refund = self.refund(x, y)
            grid.clear(x, y)
            self._state.stats.money += refund
            return refund, [Vector2(x, y)]

        return self._execute("demolish", run)

    def decorate(
        self, x: int, y: int, decoration: DecorationKind, color: str | None = None,
    ) -> CommandResult:
        def run() -> tuple[int, list[Vector2]]:
            grid = self._state.grid
            tile = grid.tile(x, y)
            if decoration == DecorationKind.NONE:
                new_color = DEFAULT_TILE_COLOR
            else:
                new_color = color or tile.color
            if tile.decoration == decoration and tile.color == new_color:
                raise InvalidCommand("no_change", "Tile already looks like that")
            grid.decorate(x, y, decoration, new_color)
            return 0, [Vector2(x, y)]

        return self._execute("decorate", run)

    def claim_goal_reward(self) -> CommandResult:
        def run() -> tuple[int, list[Vector2]]:
            goal = self._state.goal
            if goal is None:
                raise InvalidCommand("no_goal", "There is no active goal")
            if not goal.completed:
                raise InvalidCommand("not_completed", f"Goal progress {goal.current_value}/{goal.target_value}")
            self._state.stats.money += goal.reward_money
            self._state.report("reward", f"Mission complete! You got ${goal.reward_money}!")
            self._state.goal = self._next_goal() if self._auto_goal else None
            return goal.reward_money, []

        return self._execute("claim_goal", run)

    def claim_quest_reward(self, quest_id: str) -> CommandResult:
        def run() -> tuple[int, list[Vector2]]:
            quest = self._state.find_quest(quest_id)
            if quest is None:
                raise InvalidCommand("unknown_quest", f"No quest {quest_id!r}")
            if not quest.completed:
                raise InvalidCommand("not_completed", f"Quest progress {quest.current_value}/{quest.target_value}")
            self._state.stats.money += quest.reward_money
            self._state.quests.remove(quest)
            self._state.report("reward", f"{quest.title or quest.quest_id}: +${quest.reward_money}")
            return quest.reward_money, []

        return self._execute("claim_quest", run)

    def set_goal(self, goal: Quest | None) -> None:
        """Install an externally generated goal (or clear it).

        Recorded in history like a command, so undo brings the previous
        goal back.
        """
        self._state.goal = goal
        self._evaluate_objectives()
        self._history.push(Snapshot.from_state(self._state))

    def add_news(self, text: str, category: str = "news") -> None:
        """Attach externally generated narrative text to the feed."""
        self._state.report(category, text)

    def undo(self) -> CommandResult:
        return self._travel("undo", self._history.undo())

    def redo(self) -> CommandResult:
        return self._travel("redo", self._history.redo())

    def tick(self) -> TickReport:
        return self._ticker.advance(self._state)

    # -- internals --

    def _charge(self, price: int) -> None:
        money = self._state.stats.money
        if money < price:
            raise InsufficientFunds(price, money)
        self._state.stats.money = money - price

    def _next_goal(self) -> Quest:
        s = self._state
        s.goal_serial += 1
        return generate_goal(s.grid, s.stats, self._rng, s.goal_serial * 3)

    def _evaluate_objectives(self) -> None:
        s = self._state
        if s.goal is not None and s.goal.evaluate(s.grid, s.stats):
            s.report("goal", f"Goal complete: {s.goal.title or s.goal.quest_id}! Claim ${s.goal.reward_money}.")
        for q in evaluate_all(s.quests, s.grid, s.stats):
            s.report("quest", f"Quest complete: {q.title or q.quest_id}.")

    def _execute(
        self, command: str, run: Callable[[], tuple[int, list[Vector2]]],
    ) -> CommandResult:
        try:
            delta, changed = run()
        except SimulationError as exc:
            logger.debug("%s rejected: %s", command, exc.message)
            return CommandResult(
                command=command, ok=False, stats=self._state.stats.copy(),
                reason=exc.reason, message=exc.message,
            )
        self._evaluate_objectives()
        self._history.push(Snapshot.from_state(self._state))
        logger.debug("%s ok: delta=%d money=%d", command, delta, self._state.stats.money)
        return CommandResult(
            command=command, ok=True, stats=self._state.stats.copy(),
            money_delta=delta, changed_tiles=changed,
        )

    def _travel(self, command: str, snapshot: Snapshot | None) -> CommandResult:
        if snapshot is None:
            return CommandResult(
                command=command, ok=False, stats=self._state.stats.copy(),
                reason="nothing_to_" + command, message=f"Nothing to {command}",
            )
        before = self._state.stats.money
        snapshot.restore_into(self._state)
        return CommandResult(
            command=command, ok=True, stats=self._state.stats.copy(),
            money_delta=self._state.stats.money - before,
        )
