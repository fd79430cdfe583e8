"""Simulation systems: pricing, land value, density, deterministic RNG."""

from citysim.systems.density import compute_population_density
from citysim.systems.land_value import LandValueCache, LandValueField, compute_land_value
from citysim.systems.rng import DeterministicRNG

__all__ = [
    "DeterministicRNG",
    "LandValueCache",
    "LandValueField",
    "compute_land_value",
    "compute_population_density",
]
