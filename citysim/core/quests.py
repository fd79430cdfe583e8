"""Quest / goal tracker — numeric objectives evaluated against the city.

Target kinds:
  - BUILD_COUNT: number of tiles holding a given building kind.
  - POPULATION: current population.
  - MONEY: current treasury.

Completion is terminal: once ``completed`` flips to True it never reverts,
and the reward is only paid when the objective is claimed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from citysim.core.enums import BuildingKind, Domain, QuestTarget

if TYPE_CHECKING:
    from citysim.core.grid import Grid
    from citysim.core.models import CityStats
    from citysim.systems.rng import DeterministicRNG


# ---------------------------------------------------------------------------
# Quest data model
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Quest:
    """A starter quest or the active goal."""

    quest_id: str
    target: QuestTarget
    target_value: int
    reward_money: int
    target_kind: BuildingKind | None = None   # BUILD_COUNT only
    # Opaque narrative text, possibly generated outside the core
    title: str = ""
    description: str = ""
    # Progress
    current_value: int = 0
    completed: bool = False

    @property
    def progress_ratio(self) -> float:
        if self.target_value <= 0:
            return 1.0
        return min(self.current_value / self.target_value, 1.0)

    def measure(self, grid: Grid, stats: CityStats) -> int:
        if self.target == QuestTarget.BUILD_COUNT:
            if self.target_kind is None:
                return 0
            return grid.count(self.target_kind)
        if self.target == QuestTarget.POPULATION:
            return stats.population
        return stats.money

    def evaluate(self, grid: Grid, stats: CityStats) -> bool:
        """Refresh progress. Returns True if the quest just completed."""
        if self.completed:
            return False
        self.current_value = self.measure(grid, stats)
        if self.current_value >= self.target_value:
            self.completed = True
            return True
        return False

    def copy(self) -> Quest:
        return Quest(
            quest_id=self.quest_id,
            target=self.target,
            target_value=self.target_value,
            reward_money=self.reward_money,
            target_kind=self.target_kind,
            title=self.title,
            description=self.description,
            current_value=self.current_value,
            completed=self.completed,
        )

    def to_dict(self) -> dict:
        return {
            "quest_id": self.quest_id,
            "target": self.target.name,
            "target_value": self.target_value,
            "reward_money": self.reward_money,
            "target_kind": self.target_kind.name if self.target_kind is not None else None,
            "title": self.title,
            "description": self.description,
            "current_value": self.current_value,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Quest:
        kind = data.get("target_kind")
        return cls(
            quest_id=str(data["quest_id"]),
            target=QuestTarget[data["target"]],
            target_value=int(data["target_value"]),
            reward_money=int(data.get("reward_money", 0)),
            target_kind=BuildingKind[kind] if kind else None,
            title=data.get("title", ""),
            description=data.get("description", ""),
            current_value=int(data.get("current_value", 0)),
            completed=bool(data.get("completed", False)),
        )


def evaluate_all(quests: list[Quest], grid: Grid, stats: CityStats) -> list[Quest]:
    """Evaluate every quest, returning those that completed on this call."""
    return [q for q in quests if q.evaluate(grid, stats)]


def starter_quests() -> list[Quest]:
    """Fresh copies of the quests every new city begins with."""
    return [
        Quest("q1", QuestTarget.BUILD_COUNT, 3, 500, BuildingKind.RESIDENTIAL,
              "Beginner Builder", "Build 3 Houses"),
        Quest("q2", QuestTarget.BUILD_COUNT, 2, 800, BuildingKind.INDUSTRIAL,
              "Industrialist", "Build 2 Factories"),
        Quest("q3", QuestTarget.POPULATION, 20, 1000, None,
              "Booming Town", "Reach a population of 20"),
        Quest("q4", QuestTarget.BUILD_COUNT, 1, 400, BuildingKind.HIGHWAY,
              "Highway To Heaven", "Build a Highway segment"),
        Quest("q5", QuestTarget.MONEY, 5000, 2000, None,
              "Money Maker", "Save $5000"),
    ]


# ---------------------------------------------------------------------------
# Goal templates: fallback when no external generator supplies a goal
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class GoalTemplate:
    """Blueprint for generating a goal relative to the current city."""

    template_id: str
    target: QuestTarget
    title_fmt: str
    desc_fmt: str
    target_kinds: tuple[BuildingKind, ...] = ()
    step_range: tuple[int, int] = (1, 3)      # Added on top of the current value
    reward_per_step: int = 100


GOAL_TEMPLATES: tuple[GoalTemplate, ...] = (
    GoalTemplate(
        "grow_homes", QuestTarget.BUILD_COUNT,
        "Room to Grow", "Have {value} {kind} buildings in the city.",
        (BuildingKind.RESIDENTIAL,), step_range=(2, 4), reward_per_step=150,
    ),
    GoalTemplate(
        "open_business", QuestTarget.BUILD_COUNT,
        "Open for Business", "Have {value} {kind} buildings in the city.",
        (BuildingKind.COMMERCIAL, BuildingKind.INDUSTRIAL), step_range=(1, 3), reward_per_step=250,
    ),
    GoalTemplate(
        "green_city", QuestTarget.BUILD_COUNT,
        "Green City", "Have {value} {kind} tiles in the city.",
        (BuildingKind.PARK,), step_range=(1, 2), reward_per_step=200,
    ),
    GoalTemplate(
        "population", QuestTarget.POPULATION,
        "Welcome Wagon", "Reach a population of {value}.",
        step_range=(10, 40), reward_per_step=20,
    ),
    GoalTemplate(
        "treasury", QuestTarget.MONEY,
        "Rainy Day Fund", "Save ${value}.",
        step_range=(500, 2000), reward_per_step=1,
    ),
)


def generate_goal(
    grid: Grid,
    stats: CityStats,
    rng: DeterministicRNG,
    serial: int,
) -> Quest:
    """Deterministically derive a goal a little beyond the city's current state.

    *serial* distinguishes successive goals generated on the same day.
    """
    key = stats.day
    template = rng.choice(Domain.GOAL, serial, key, GOAL_TEMPLATES)

    target_kind: BuildingKind | None = None
    if template.target_kinds:
        target_kind = rng.choice(Domain.GOAL, serial + 1, key, template.target_kinds)

    lo, hi = template.step_range
    step = rng.next_int(Domain.GOAL, serial + 2, key, lo, hi)

    goal = Quest(
        quest_id=f"goal_{serial}_{template.template_id}",
        target=template.target,
        target_value=0,
        reward_money=step * template.reward_per_step,
        target_kind=target_kind,
        title=template.title_fmt,
    )
    goal.target_value = goal.measure(grid, stats) + step
    kind_display = target_kind.name.lower() if target_kind is not None else ""
    goal.description = template.desc_fmt.format(value=goal.target_value, kind=kind_display)
    return goal
