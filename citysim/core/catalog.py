"""Building catalog — static economic parameters per building kind.

Every ``BuildingKind`` must have exactly one entry. The catalog is read-only
at runtime; ``validate_catalog`` is called once at startup and fails fast
when an entry is missing or malformed.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from citysim.core.enums import BuildingKind
from citysim.core.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class BuildingSpec:
    """Immutable economic blueprint for a building kind."""

    kind: BuildingKind
    name: str
    base_cost: int
    scaling_factor: float      # Cost multiplier per existing building of this kind
    population_yield: int = 0  # Population growth per tick
    income_yield: int = 0      # Money per tick (negative = upkeep)
    effect_radius: int | None = None
    color: str = "#f1f5f9"
    description: str = ""


# ---------------------------------------------------------------------------
# Default catalog
# ---------------------------------------------------------------------------

_DEFAULT: dict[BuildingKind, BuildingSpec] = {}


def _reg(spec: BuildingSpec) -> BuildingSpec:
    _DEFAULT[spec.kind] = spec
    return spec


_reg(BuildingSpec(BuildingKind.NONE,        "Bulldoze", 0,   0.0,  color="#f1f5f9", description="Clear land."))
_reg(BuildingSpec(BuildingKind.RESIDENTIAL, "House",    100, 1.1,  population_yield=4, color="#60a5fa", description="Families live here."))
_reg(BuildingSpec(BuildingKind.COMMERCIAL,  "Shop",     200, 1.2,  income_yield=15, color="#fbbf24", description="Shops earn money."))
_reg(BuildingSpec(BuildingKind.INDUSTRIAL,  "Factory",  300, 1.25, income_yield=25, color="#94a3b8", description="Big money, bit messy."))
_reg(BuildingSpec(BuildingKind.ROAD,        "Road",     50,  1.05, color="#334155", description="Connects buildings."))
_reg(BuildingSpec(BuildingKind.HIGHWAY,     "Highway",  150, 1.1,  color="#1e293b", description="Fast travel road."))
_reg(BuildingSpec(BuildingKind.PARK,        "Park",     150, 1.15, effect_radius=10, color="#4ade80", description="Makes people happy."))
_reg(BuildingSpec(BuildingKind.POLICE,      "Police",   500, 1.5,  color="#1e40af", description="Keeps city safe."))
_reg(BuildingSpec(BuildingKind.SCHOOL,      "School",   400, 1.4,  color="#f87171", description="For learning."))

DEFAULT_CATALOG: Mapping[BuildingKind, BuildingSpec] = MappingProxyType(_DEFAULT)


def validate_catalog(catalog: Mapping[BuildingKind, BuildingSpec]) -> Mapping[BuildingKind, BuildingSpec]:
    """Check that *catalog* covers every building kind with sane numbers.

    Returns a read-only view of the catalog.
    """
    missing = [k.name for k in BuildingKind if k not in catalog]
    if missing:
        raise ConfigurationError(f"Catalog is missing entries for: {', '.join(missing)}")
    for kind, spec in catalog.items():
        if spec.kind != kind:
            raise ConfigurationError(f"Catalog entry {kind.name} describes {spec.kind.name}")
        if spec.base_cost < 0:
            raise ConfigurationError(f"{kind.name}: base_cost must be >= 0")
        if kind != BuildingKind.NONE and spec.scaling_factor <= 0:
            raise ConfigurationError(f"{kind.name}: scaling_factor must be > 0")
        if spec.effect_radius is not None and spec.effect_radius <= 0:
            raise ConfigurationError(f"{kind.name}: effect_radius must be > 0")
    return MappingProxyType(dict(catalog))


def spec_for(catalog: Mapping[BuildingKind, BuildingSpec], kind: BuildingKind) -> BuildingSpec:
    try:
        return catalog[kind]
    except KeyError:
        raise ConfigurationError(f"No catalog entry for {kind.name}") from None
