"""Core data models: Vector2, Tile, CityStats."""

from __future__ import annotations

from dataclasses import dataclass

from citysim.core.enums import BuildingKind, DecorationKind

DEFAULT_TILE_COLOR = "#f8fafc"


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def manhattan(self, other: Vector2) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(slots=True)
class Tile:
    """A single grid cell. Identity is its (x, y) coordinate."""

    x: int
    y: int
    kind: BuildingKind = BuildingKind.NONE
    level: int = 1
    decoration: DecorationKind = DecorationKind.NONE
    color: str = DEFAULT_TILE_COLOR

    @property
    def pos(self) -> Vector2:
        return Vector2(self.x, self.y)

    @property
    def occupied(self) -> bool:
        return self.kind != BuildingKind.NONE

    def clear_building(self) -> None:
        self.kind = BuildingKind.NONE
        self.level = 1

    def copy(self) -> Tile:
        return Tile(self.x, self.y, self.kind, self.level, self.decoration, self.color)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "kind": self.kind.name,
            "level": self.level,
            "decoration": self.decoration.name,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Tile:
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            kind=BuildingKind[data.get("kind", "NONE")],
            level=max(1, int(data.get("level", 1))),
            decoration=DecorationKind[data.get("decoration", "NONE")],
            color=data.get("color", DEFAULT_TILE_COLOR),
        )


@dataclass(slots=True)
class CityStats:
    """Mutable city-wide statistics, advanced by ticks and commands."""

    money: int = 1000
    population: int = 0
    day: int = 1
    happiness: int = 100

    def copy(self) -> CityStats:
        return CityStats(self.money, self.population, self.day, self.happiness)

    def to_dict(self) -> dict:
        return {
            "money": self.money,
            "population": self.population,
            "day": self.day,
            "happiness": self.happiness,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CityStats:
        return cls(
            money=int(data.get("money", 0)),
            population=int(data.get("population", 0)),
            day=int(data.get("day", 1)),
            happiness=int(data.get("happiness", 100)),
        )
