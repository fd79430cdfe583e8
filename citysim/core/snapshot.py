"""Immutable snapshot of the city used for undo/redo."""

from __future__ import annotations

from dataclasses import dataclass

from citysim.core.grid import Grid
from citysim.core.models import CityStats
from citysim.core.quests import Quest
from citysim.core.state import SimulationState


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Full independent copy of grid, stats, quests and goal.

    ``goal_serial`` rides along so that undoing a goal claim and claiming
    again regenerates the same replacement goal.

    Snapshots are never handed out for mutation: ``from_state`` copies on
    the way in and ``restore_into`` copies on the way out, so a snapshot
    kept in history is never aliased by the live state.
    """

    grid: Grid
    stats: CityStats
    quests: tuple[Quest, ...]
    goal: Quest | None = None
    goal_serial: int = 0

    @classmethod
    def from_state(cls, state: SimulationState) -> Snapshot:
        return cls(
            grid=state.grid.copy(),
            stats=state.stats.copy(),
            quests=tuple(q.copy() for q in state.quests),
            goal=state.goal.copy() if state.goal is not None else None,
            goal_serial=state.goal_serial,
        )

    def restore_into(self, state: SimulationState) -> None:
        grid = self.grid.copy()
        # Bump past the live grid so memoized fields never match a stale revision
        grid.revision = max(grid.revision, state.grid.revision) + 1
        state.grid = grid
        state.stats = self.stats.copy()
        state.quests = [q.copy() for q in self.quests]
        state.goal = self.goal.copy() if self.goal is not None else None
        state.goal_serial = self.goal_serial
