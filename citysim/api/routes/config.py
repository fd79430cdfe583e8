"""GET /api/v1/config and /catalog — configuration and building definitions."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from citysim.api.dependencies import get_engine_manager
from citysim.api.engine_manager import EngineManager
from citysim.api.schemas import BuildingSpecSchema, SimulationConfigResponse
from citysim.core.enums import WALKABLE_KINDS

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationConfigResponse:
    cfg = manager.config
    return SimulationConfigResponse(
        world_seed=cfg.world_seed,
        grid_size=cfg.grid_size,
        tick_rate=manager.tick_rate,
        initial_money=cfg.initial_money,
        max_level=cfg.max_level,
        upgrade_chance=cfg.upgrade_chance,
        upgrade_land_value_threshold=cfg.upgrade_land_value_threshold,
        capacity_per_residence=cfg.capacity_per_residence,
        history_limit=cfg.history_limit,
    )


@router.get("/catalog", response_model=list[BuildingSpecSchema])
def get_catalog(
    manager: EngineManager = Depends(get_engine_manager),
) -> list[BuildingSpecSchema]:
    catalog = manager.execute(lambda e: e.catalog)
    return [
        BuildingSpecSchema(
            kind=spec.kind.name,
            id=int(spec.kind),
            name=spec.name,
            base_cost=spec.base_cost,
            scaling_factor=spec.scaling_factor,
            population_yield=spec.population_yield,
            income_yield=spec.income_yield,
            effect_radius=spec.effect_radius,
            color=spec.color,
            description=spec.description,
            walkable=spec.kind in WALKABLE_KINDS,
        )
        for spec in catalog.values()
    ]
