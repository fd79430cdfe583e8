"""EconomyTick — advances the city by one simulated day.

Phase cycle:
  1. Yield: sum income and population growth over occupied tiles
  2. Land value: compute the field once, shared by every upgrade check
  3. Upgrades: desirable residential tiles may level up (taxed windfall)
  4. Population: grow toward residential capacity, or emigrate
  5. Apply: money, population, day
  6. Objectives: re-evaluate the active goal and starter quests
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping

from citysim.core.catalog import DEFAULT_CATALOG, spec_for
from citysim.core.enums import BuildingKind, Domain
from citysim.core.models import Vector2
from citysim.core.quests import evaluate_all
from citysim.systems.land_value import LandValueCache

if TYPE_CHECKING:
    from citysim.config import SimulationConfig
    from citysim.core.catalog import BuildingSpec
    from citysim.core.state import SimulationState
    from citysim.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TickReport:
    """What a single tick changed."""

    day: int
    income: int = 0
    population_growth: int = 0
    population_before: int = 0
    population_after: int = 0
    capacity: int = 0
    upgrades: list[Vector2] = field(default_factory=list)
    goal_completed: bool = False
    quests_completed: list[str] = field(default_factory=list)


class EconomyTick:
    """Applies one economic step to a SimulationState.

    Has no failure modes at runtime: a missing catalog entry is a
    configuration error and surfaces as ConfigurationError.
    """

    __slots__ = ("_config", "_catalog", "_rng", "_land_value")

    def __init__(
        self,
        config: SimulationConfig,
        rng: DeterministicRNG,
        catalog: Mapping[BuildingKind, BuildingSpec] = DEFAULT_CATALOG,
        land_value: LandValueCache | None = None,
    ) -> None:
        self._config = config
        self._catalog = catalog
        self._rng = rng
        self._land_value = land_value or LandValueCache(config.land_value_radius, config.land_value_floor)

    def advance(self, state: SimulationState) -> TickReport:
        cfg = self._config
        grid = state.grid
        stats = state.stats
        report = TickReport(day=stats.day, population_before=stats.population)

        # -- 1. yields --
        daily_income = 0
        daily_growth = 0
        residential_count = 0
        for tile in grid.occupied():
            spec = spec_for(self._catalog, tile.kind)
            daily_income += spec.income_yield
            daily_growth += spec.population_yield
            if tile.kind == BuildingKind.RESIDENTIAL:
                residential_count += 1

        # -- 2. land value, once per tick --
        field_ = self._land_value.get(grid)

        # -- 3. probabilistic upgrades --
        for tile in list(grid.occupied()):
            if tile.kind != BuildingKind.RESIDENTIAL or tile.level >= cfg.max_level:
                continue
            if field_.at(tile.x, tile.y) <= cfg.upgrade_land_value_threshold:
                continue
            key = self._rng.tile_key(tile.x, tile.y, grid.size)
            if self._rng.next_bool(Domain.UPGRADE, key, stats.day, cfg.upgrade_chance):
                grid.set_level(tile.x, tile.y, tile.level + 1)
                daily_income += cfg.upgrade_tax_bonus
                report.upgrades.append(tile.pos)
                state.report("upgrade", f"A house at ({tile.x}, {tile.y}) grew to level {tile.level}.")

        # -- 4. population toward capacity --
        capacity = residential_count * cfg.capacity_per_residence
        new_pop = min(stats.population + daily_growth, capacity)
        if residential_count == 0 and stats.population > 0:
            new_pop = max(0, stats.population - cfg.emigration_per_tick)
            state.report("emigration", f"{stats.population - new_pop} citizens left town with nowhere to live.")
        new_pop = max(0, new_pop)

        # -- 5. apply --
        stats.money += daily_income
        stats.population = new_pop
        stats.day += 1

        report.income = daily_income
        report.population_growth = daily_growth
        report.population_after = new_pop
        report.capacity = capacity

        # -- 6. objectives --
        goal = state.goal
        if goal is not None and goal.evaluate(grid, stats):
            report.goal_completed = True
            state.report("goal", f"Goal complete: {goal.title or goal.quest_id}! Claim ${goal.reward_money}.")
        for q in evaluate_all(state.quests, grid, stats):
            report.quests_completed.append(q.quest_id)
            state.report("quest", f"Quest complete: {q.title or q.quest_id}.")

        logger.debug(
            "Day %d: income=%d pop=%d->%d (cap %d) upgrades=%d",
            report.day, daily_income, report.population_before, new_pop, capacity, len(report.upgrades),
        )
        return report
