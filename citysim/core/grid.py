"""Grid / map system."""

from __future__ import annotations

from collections import Counter
from typing import Iterator

from citysim.core.enums import WALKABLE_KINDS, BuildingKind, DecorationKind
from citysim.core.errors import InvalidCoordinate
from citysim.core.models import DEFAULT_TILE_COLOR, Tile, Vector2


class Grid:
    """Square tile grid backed by a flat list for cache-friendly access.

    Tiles are never removed, only reset. Every mutation made through the
    grid's own setters bumps ``revision`` so derived fields (land value) can
    be memoized on ``(grid, revision)``.
    """

    __slots__ = ("size", "_tiles", "revision")

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self._tiles: list[Tile] = [Tile(i % size, i // size) for i in range(size * size)]
        self.revision = 0

    # -- access --

    def _idx(self, x: int, y: int) -> int:
        return y * self.size + x

    def in_bounds(self, pos: Vector2) -> bool:
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    def in_bounds_xy(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def tile(self, x: int, y: int) -> Tile:
        """Return the tile at (x, y) or raise InvalidCoordinate."""
        if not self.in_bounds_xy(x, y):
            raise InvalidCoordinate(f"({x}, {y}) is outside the {self.size}x{self.size} grid")
        return self._tiles[self._idx(x, y)]

    def get_xy(self, x: int, y: int) -> Tile | None:
        if 0 <= x < self.size and 0 <= y < self.size:
            return self._tiles[y * self.size + x]
        return None

    def kind_at(self, x: int, y: int) -> BuildingKind:
        t = self.get_xy(x, y)
        return t.kind if t is not None else BuildingKind.NONE

    def is_walkable_xy(self, x: int, y: int) -> bool:
        t = self.get_xy(x, y)
        return t is not None and t.kind in WALKABLE_KINDS

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    # -- aggregates --

    def count(self, kind: BuildingKind) -> int:
        return sum(1 for t in self._tiles if t.kind == kind)

    def counts(self) -> Counter[BuildingKind]:
        """Number of tiles per building kind, NONE excluded."""
        return Counter(t.kind for t in self._tiles if t.kind != BuildingKind.NONE)

    def occupied(self) -> Iterator[Tile]:
        return (t for t in self._tiles if t.kind != BuildingKind.NONE)

    # -- mutation --

    def set_building(self, x: int, y: int, kind: BuildingKind, level: int = 1) -> Tile:
        t = self.tile(x, y)
        t.kind = kind
        t.level = level
        if kind != BuildingKind.NONE:
            t.decoration = DecorationKind.NONE
        self.revision += 1
        return t

    def set_level(self, x: int, y: int, level: int) -> Tile:
        t = self.tile(x, y)
        t.level = level
        self.revision += 1
        return t

    def clear(self, x: int, y: int) -> Tile:
        t = self.tile(x, y)
        t.clear_building()
        self.revision += 1
        return t

    def decorate(self, x: int, y: int, decoration: DecorationKind, color: str | None = None) -> Tile:
        t = self.tile(x, y)
        t.decoration = decoration
        t.color = color if color is not None else DEFAULT_TILE_COLOR
        self.revision += 1
        return t

    # -- copy / equality --

    def copy(self) -> Grid:
        new = Grid.__new__(Grid)
        new.size = self.size
        new._tiles = [t.copy() for t in self._tiles]
        new.revision = self.revision
        return new

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and self._tiles == other._tiles

    __hash__ = None  # type: ignore[assignment]

    # -- serialization --

    def to_rows(self) -> list[list[dict]]:
        n = self.size
        return [[self._tiles[y * n + x].to_dict() for x in range(n)] for y in range(n)]

    @classmethod
    def from_rows(cls, rows: list[list[dict]]) -> Grid:
        size = len(rows)
        grid = cls(size)
        for y, row in enumerate(rows):
            if len(row) != size:
                raise ValueError(f"Row {y} has {len(row)} tiles, expected {size}")
            for x, raw in enumerate(row):
                tile = Tile.from_dict(raw)
                if (tile.x, tile.y) != (x, y):
                    raise ValueError(f"Tile at ({x}, {y}) claims coordinate ({tile.x}, {tile.y})")
                grid._tiles[grid._idx(x, y)] = tile
        return grid
