"""Core data models and world representation."""

from citysim.core.enums import BuildingKind, DecorationKind, Domain, QuestTarget
from citysim.core.models import CityStats, Tile, Vector2
from citysim.core.grid import Grid
from citysim.core.catalog import BuildingSpec, DEFAULT_CATALOG
from citysim.core.quests import Quest
from citysim.core.state import SimulationState
from citysim.core.snapshot import Snapshot

__all__ = [
    "BuildingKind",
    "BuildingSpec",
    "CityStats",
    "DEFAULT_CATALOG",
    "DecorationKind",
    "Domain",
    "Grid",
    "Quest",
    "QuestTarget",
    "SimulationState",
    "Snapshot",
    "Tile",
    "Vector2",
]
