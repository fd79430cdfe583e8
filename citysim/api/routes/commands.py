"""POST /api/v1/commands/* — player actions, cost previews and path queries."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from citysim.api.dependencies import get_engine_manager
from citysim.api.engine_manager import EngineManager
from citysim.api.schemas import (
    ClaimQuestRequest,
    CommandResponse,
    CostResponse,
    DecorateRequest,
    PathRequest,
    PathResponse,
    PlaceRequest,
    TickResponse,
    TileRequest,
)
from citysim.api.serialize import (
    command_response,
    parse_decoration,
    parse_kind,
    tick_response,
    tile_ref,
)
from citysim.core.models import Vector2

router = APIRouter()


@router.post("/commands/place", response_model=CommandResponse)
def place(req: PlaceRequest, manager: EngineManager = Depends(get_engine_manager)) -> CommandResponse:
    kind = parse_kind(req.kind)
    return command_response(manager.execute(lambda e: e.place(kind, req.x, req.y)))


@router.post("/commands/demolish", response_model=CommandResponse)
def demolish(req: TileRequest, manager: EngineManager = Depends(get_engine_manager)) -> CommandResponse:
    return command_response(manager.execute(lambda e: e.demolish(req.x, req.y)))


@router.post("/commands/upgrade", response_model=CommandResponse)
def upgrade(req: TileRequest, manager: EngineManager = Depends(get_engine_manager)) -> CommandResponse:
    return command_response(manager.execute(lambda e: e.upgrade(req.x, req.y)))


@router.post("/commands/decorate", response_model=CommandResponse)
def decorate(req: DecorateRequest, manager: EngineManager = Depends(get_engine_manager)) -> CommandResponse:
    decoration = parse_decoration(req.decoration)
    return command_response(manager.execute(lambda e: e.decorate(req.x, req.y, decoration, req.color)))


@router.post("/commands/undo", response_model=CommandResponse)
def undo(manager: EngineManager = Depends(get_engine_manager)) -> CommandResponse:
    return command_response(manager.execute(lambda e: e.undo()))


@router.post("/commands/redo", response_model=CommandResponse)
def redo(manager: EngineManager = Depends(get_engine_manager)) -> CommandResponse:
    return command_response(manager.execute(lambda e: e.redo()))


@router.post("/commands/tick", response_model=TickResponse)
def tick(manager: EngineManager = Depends(get_engine_manager)) -> TickResponse:
    return tick_response(manager.step())


@router.post("/commands/claim-goal", response_model=CommandResponse)
def claim_goal(manager: EngineManager = Depends(get_engine_manager)) -> CommandResponse:
    return command_response(manager.execute(lambda e: e.claim_goal_reward()))


@router.post("/commands/claim-quest", response_model=CommandResponse)
def claim_quest(req: ClaimQuestRequest, manager: EngineManager = Depends(get_engine_manager)) -> CommandResponse:
    return command_response(manager.execute(lambda e: e.claim_quest_reward(req.quest_id)))


@router.get("/cost", response_model=CostResponse)
def get_cost(
    kind: str = Query(..., description="Building kind name, e.g. RESIDENTIAL"),
    x: int = Query(..., ge=0),
    y: int = Query(..., ge=0),
    manager: EngineManager = Depends(get_engine_manager),
) -> CostResponse:
    building = parse_kind(kind)
    cost = manager.execute(lambda e: e.cost(building, x, y))
    return CostResponse(kind=building.name, x=x, y=y, cost=cost)


@router.post("/path", response_model=PathResponse)
def find_path(req: PathRequest, manager: EngineManager = Depends(get_engine_manager)) -> PathResponse:
    start = Vector2(req.start.x, req.start.y)
    goal = Vector2(req.goal.x, req.goal.y)
    path = manager.execute(lambda e: e.find_path(start, goal))
    if path is None:
        return PathResponse(found=False)
    return PathResponse(found=True, path=[tile_ref(p) for p in path])
