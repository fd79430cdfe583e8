"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class BuildingKind(IntEnum):
    """Building placed on a tile. NONE doubles as the bulldozer tool."""

    NONE = 0
    RESIDENTIAL = 1
    COMMERCIAL = 2
    INDUSTRIAL = 3
    ROAD = 4
    HIGHWAY = 5
    PARK = 6
    POLICE = 7
    SCHOOL = 8


@unique
class DecorationKind(IntEnum):
    """Cosmetic decoration painted on a tile."""

    NONE = 0
    FLOWER = 1
    TREE = 2
    HOUSE = 3
    POND = 4
    BUTTERFLY = 5
    CLOUD = 6


@unique
class QuestTarget(IntEnum):
    """What a quest or goal measures."""

    BUILD_COUNT = 0
    POPULATION = 1
    MONEY = 2


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    UPGRADE = 0
    GOAL = 1


# Tiles agents may walk across
WALKABLE_KINDS: frozenset[BuildingKind] = frozenset({
    BuildingKind.NONE,
    BuildingKind.ROAD,
    BuildingKind.HIGHWAY,
    BuildingKind.PARK,
})

# Building that acts as a land-value source
AMENITY_KIND = BuildingKind.PARK
