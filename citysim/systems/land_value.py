"""Land value field — desirability diffused from amenity tiles.

Every park is a BFS source at distance 0. A multi-source breadth-first
search over 4-connected neighbours assigns each tile its distance to the
nearest park, up to ``radius``. Reached tiles score ``1 - d / radius``;
unreached tiles (and the no-park case) score the floor value. Scores are
clamped to ``[floor, 1.0]``.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from citysim.core.enums import AMENITY_KIND

if TYPE_CHECKING:
    from citysim.core.grid import Grid

_NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class LandValueField:
    """Per-tile desirability, indexed ``y * size + x``."""

    __slots__ = ("size", "values", "distances")

    def __init__(self, size: int, values: list[float], distances: list[int | None]) -> None:
        self.size = size
        self.values = values
        self.distances = distances

    def at(self, x: int, y: int, default: float = 0.0) -> float:
        if 0 <= x < self.size and 0 <= y < self.size:
            return self.values[y * self.size + x]
        return default

    def distance_at(self, x: int, y: int) -> int | None:
        """BFS distance to the nearest amenity, None if beyond the radius."""
        if 0 <= x < self.size and 0 <= y < self.size:
            return self.distances[y * self.size + x]
        return None


def compute_land_value(grid: Grid, radius: int = 10, floor: float = 0.1) -> LandValueField:
    """Build the land value field for *grid*."""
    n = grid.size
    total = n * n
    distances: list[int | None] = [None] * total

    queue: deque[tuple[int, int]] = deque()
    for tile in grid:
        if tile.kind == AMENITY_KIND:
            distances[tile.y * n + tile.x] = 0
            queue.append((tile.x, tile.y))

    if not queue:
        return LandValueField(n, [floor] * total, distances)

    while queue:
        x, y = queue.popleft()
        d = distances[y * n + x]
        if d >= radius:
            continue
        for dx, dy in _NEIGHBOURS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < n and 0 <= ny < n:
                idx = ny * n + nx
                if distances[idx] is None:
                    distances[idx] = d + 1
                    queue.append((nx, ny))

    values = [
        floor if d is None else max(floor, min(1.0, 1.0 - d / radius))
        for d in distances
    ]
    return LandValueField(n, values, distances)


class LandValueCache:
    """Memoizes the field on grid identity and revision."""

    __slots__ = ("_radius", "_floor", "_grid", "_revision", "_field", "computations")

    def __init__(self, radius: int = 10, floor: float = 0.1) -> None:
        self._radius = radius
        self._floor = floor
        self._grid: Grid | None = None
        self._revision = -1
        self._field: LandValueField | None = None
        self.computations = 0

    def get(self, grid: Grid) -> LandValueField:
        if self._field is None or self._grid is not grid or self._revision != grid.revision:
            self._field = compute_land_value(grid, self._radius, self._floor)
            self._grid = grid
            self._revision = grid.revision
            self.computations += 1
        return self._field

    def invalidate(self) -> None:
        self._field = None
        self._grid = None
