"""Cost engine — price of placing, upgrading, and demolishing buildings.

Multipliers are applied in a fixed order because each intermediate value is
a float and only the final price is rounded:

  1. catalog base cost (0 for the bulldozer)
  2. scaling_factor ** (existing buildings of this kind)
  3. 1 + land_value * surcharge
  4. wealth tax when the treasury exceeds the threshold
  5. round half up
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Mapping

from citysim.config import SimulationConfig
from citysim.core.catalog import DEFAULT_CATALOG, spec_for
from citysim.core.enums import BuildingKind

if TYPE_CHECKING:
    from citysim.core.catalog import BuildingSpec
    from citysim.core.grid import Grid
    from citysim.systems.land_value import LandValueField

_DEFAULT_CONFIG = SimulationConfig()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for prices >= 0."""
    return int(math.floor(value + 0.5))


def building_cost(
    kind: BuildingKind,
    x: int,
    y: int,
    grid: Grid,
    land_value: LandValueField | None,
    treasury: float,
    catalog: Mapping[BuildingKind, BuildingSpec] = DEFAULT_CATALOG,
    config: SimulationConfig = _DEFAULT_CONFIG,
) -> int:
    """Price to place *kind* at (x, y). Pure; never mutates its inputs."""
    if kind == BuildingKind.NONE:
        return 0
    spec = spec_for(catalog, kind)

    cost = float(spec.base_cost)
    cost *= spec.scaling_factor ** grid.count(kind)

    lv = land_value.at(x, y) if land_value is not None else 0.0
    cost *= 1 + lv * config.land_value_surcharge

    if treasury > config.wealth_tax_threshold:
        cost *= config.wealth_tax_multiplier

    return round_half_up(cost)


def upgrade_cost(
    x: int,
    y: int,
    grid: Grid,
    land_value: LandValueField | None,
    treasury: float,
    catalog: Mapping[BuildingKind, BuildingSpec] = DEFAULT_CATALOG,
    config: SimulationConfig = _DEFAULT_CONFIG,
) -> int:
    """Price to raise the building at (x, y) one level (0 on an empty tile)."""
    tile = grid.tile(x, y)
    if not tile.occupied:
        return 0
    base = building_cost(tile.kind, x, y, grid, land_value, treasury, catalog, config)
    return round_half_up(base * (1 + tile.level * config.upgrade_cost_factor))


def demolish_refund(
    x: int,
    y: int,
    grid: Grid,
    land_value: LandValueField | None,
    treasury: float,
    catalog: Mapping[BuildingKind, BuildingSpec] = DEFAULT_CATALOG,
    config: SimulationConfig = _DEFAULT_CONFIG,
) -> int:
    """Money returned for bulldozing the building at (x, y)."""
    tile = grid.tile(x, y)
    if not tile.occupied:
        return 0
    cost = building_cost(tile.kind, x, y, grid, land_value, treasury, catalog, config)
    return math.floor(cost * config.demolish_refund_ratio)
