"""A* pathfinding for citizens walking across the city grid.

Moves are 4-connected with unit cost and a Manhattan heuristic, so returned
paths are optimal. Only empty, road, highway, and park tiles are walkable.

Usage:
    pf = Pathfinder(grid)
    path = pf.find_path(start, goal)          # list[Vector2] or None
    next_step = pf.next_step(start, goal)     # Vector2 or None
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING

from citysim.core.models import Vector2

if TYPE_CHECKING:
    from citysim.core.grid import Grid

# Cardinal directions (no diagonals, Manhattan grid)
_DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class Pathfinder:
    """A* pathfinder operating on a city Grid.

    Re-entrant: holds no per-query state, only reads the grid. Callers must
    not mutate the grid during a query.
    *max_nodes* optionally bounds the search for very large grids.
    """

    __slots__ = ("_grid", "_max_nodes")

    def __init__(self, grid: Grid, max_nodes: int | None = None) -> None:
        self._grid = grid
        self._max_nodes = max_nodes

    def find_path(self, start: Vector2, goal: Vector2) -> list[Vector2] | None:
        """Compute an A* path from *start* to *goal*.

        Returns the positions from *start* to *goal*, both included, or None
        if the goal is out of bounds, not walkable, or unreachable.
        """
        grid = self._grid
        if not grid.in_bounds(start) or not grid.in_bounds(goal):
            return None
        if start == goal:
            return [start]
        if not grid.is_walkable_xy(goal.x, goal.y):
            return None

        gx, gy = goal.x, goal.y

        # Open set: (f_score, insertion counter, x, y); the counter makes ties FIFO
        counter = 0
        open_heap: list[tuple[int, int, int, int]] = []
        heapq.heappush(open_heap, (abs(start.x - gx) + abs(start.y - gy), counter, start.x, start.y))

        g_score: dict[tuple[int, int], int] = {(start.x, start.y): 0}
        came_from: dict[tuple[int, int], tuple[int, int]] = {}
        closed: set[tuple[int, int]] = set()
        nodes_explored = 0

        while open_heap:
            if self._max_nodes is not None and nodes_explored >= self._max_nodes:
                break
            _, _, cx, cy = heapq.heappop(open_heap)
            ckey = (cx, cy)

            if cx == gx and cy == gy:
                return self._reconstruct(came_from, ckey)

            if ckey in closed:
                continue
            closed.add(ckey)
            nodes_explored += 1

            tentative_g = g_score[ckey] + 1

            for dx, dy in _DIRS:
                nx, ny = cx + dx, cy + dy
                nkey = (nx, ny)
                if nkey in closed or not grid.is_walkable_xy(nx, ny):
                    continue

                if tentative_g < g_score.get(nkey, 1 << 30):
                    g_score[nkey] = tentative_g
                    came_from[nkey] = ckey
                    counter += 1
                    f = tentative_g + abs(nx - gx) + abs(ny - gy)
                    heapq.heappush(open_heap, (f, counter, nx, ny))

        return None

    def next_step(self, start: Vector2, goal: Vector2) -> Vector2 | None:
        """Return the first move along the path, or None if there is none."""
        path = self.find_path(start, goal)
        if path and len(path) > 1:
            return path[1]
        return None

    @staticmethod
    def _reconstruct(
        came_from: dict[tuple[int, int], tuple[int, int]],
        current: tuple[int, int],
    ) -> list[Vector2]:
        path: list[Vector2] = [Vector2(current[0], current[1])]
        while current in came_from:
            current = came_from[current]
            path.append(Vector2(current[0], current[1]))
        path.reverse()
        return path


def find_path(start: Vector2, goal: Vector2, grid: Grid) -> list[Vector2] | None:
    """Convenience wrapper for one-off queries."""
    return Pathfinder(grid).find_path(start, goal)
