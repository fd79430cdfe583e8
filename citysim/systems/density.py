"""Population density lens: where people live and where they work."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from citysim.core.enums import BuildingKind

if TYPE_CHECKING:
    from citysim.core.grid import Grid

# Homes count fully, shops as half (jobs); everything else is empty
DENSITY_WEIGHTS: Mapping[BuildingKind, float] = MappingProxyType({
    BuildingKind.RESIDENTIAL: 1.0,
    BuildingKind.COMMERCIAL: 0.5,
})


def compute_population_density(
    grid: Grid, weights: Mapping[BuildingKind, float] = DENSITY_WEIGHTS,
) -> list[float]:
    """Row-major per-tile density in [0, 1]; tile level is ignored."""
    return [weights.get(tile.kind, 0.0) for tile in grid]
