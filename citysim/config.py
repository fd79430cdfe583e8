"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for a city session."""

    # World
    world_seed: int = 42
    grid_size: int = 20

    # Timing
    tick_interval_seconds: float = 3.0

    # Starting stats
    initial_money: int = 1000
    initial_happiness: int = 100

    # Land value field
    land_value_radius: int = 10
    land_value_floor: float = 0.1

    # Pricing
    land_value_surcharge: float = 0.5      # Up to +50% on fully desirable tiles
    wealth_tax_threshold: int = 10000
    wealth_tax_multiplier: float = 1.25
    upgrade_cost_factor: float = 0.8       # upgrade = cost * (1 + level * factor)
    demolish_refund_ratio: float = 0.3
    max_level: int = 5

    # Automatic upgrades during a tick
    upgrade_chance: float = 0.05
    upgrade_land_value_threshold: float = 0.8
    upgrade_tax_bonus: int = 50

    # Population
    capacity_per_residence: int = 50
    emigration_per_tick: int = 5

    # History & feed
    history_limit: int = 20
    news_limit: int = 13

    # Logging / persistence
    log_level: str = "INFO"
    log_file: str | None = None
    save_file: str = "city_save.json"
    saves_dir: str = "saves"
