"""GET /api/v1/map, /land-value and /population-density: grid data and lenses."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from citysim.api.dependencies import get_engine_manager
from citysim.api.engine_manager import EngineManager
from citysim.api.schemas import LensResponse, MapResponse, TileSchema
from citysim.core.enums import BuildingKind, DecorationKind
from citysim.core.grid import Grid
from citysim.core.models import DEFAULT_TILE_COLOR

router = APIRouter()


def encode_kinds(grid: Grid) -> list[int]:
    """RLE encode building kinds: [value, count, value, count, ...]."""
    rle: list[int] = []
    cur_val = -1
    cur_count = 0
    for tile in grid:
        v = int(tile.kind)
        if v == cur_val:
            cur_count += 1
        else:
            if cur_count:
                rle.append(cur_val)
                rle.append(cur_count)
            cur_val = v
            cur_count = 1
    if cur_count:
        rle.append(cur_val)
        rle.append(cur_count)
    return rle


@router.get("/map", response_model=MapResponse)
def get_map(manager: EngineManager = Depends(get_engine_manager)) -> MapResponse:
    grid = manager.get_grid()
    tiles = [
        TileSchema(**t.to_dict())
        for t in grid
        if t.kind != BuildingKind.NONE or t.decoration != DecorationKind.NONE or t.color != DEFAULT_TILE_COLOR
    ]
    return MapResponse(size=grid.size, kinds=encode_kinds(grid), tiles=tiles)


@router.get("/land-value", response_model=LensResponse)
def get_land_value(manager: EngineManager = Depends(get_engine_manager)) -> LensResponse:
    field = manager.execute(lambda e: e.land_value())
    return LensResponse(size=field.size, values=list(field.values))


@router.get("/population-density", response_model=LensResponse)
def get_population_density(manager: EngineManager = Depends(get_engine_manager)) -> LensResponse:
    values = manager.execute(lambda e: e.population_density())
    return LensResponse(size=manager.config.grid_size, values=values)
