"""Conversions from engine objects to API schemas."""

from __future__ import annotations

from fastapi import HTTPException

from citysim.core.enums import BuildingKind, DecorationKind
from citysim.core.models import CityStats, Vector2
from citysim.core.quests import Quest
from citysim.engine.city_engine import CommandResult
from citysim.engine.tick import TickReport
from citysim.api.schemas import (
    CommandResponse,
    QuestSchema,
    StatsSchema,
    TickResponse,
    TileRequest,
)


def stats_schema(stats: CityStats) -> StatsSchema:
    return StatsSchema(**stats.to_dict())


def quest_schema(q: Quest) -> QuestSchema:
    return QuestSchema(**q.to_dict())


def tile_ref(pos: Vector2) -> TileRequest:
    return TileRequest(x=pos.x, y=pos.y)


def command_response(result: CommandResult) -> CommandResponse:
    return CommandResponse(
        command=result.command,
        ok=result.ok,
        reason=result.reason,
        message=result.message,
        money_delta=result.money_delta,
        changed_tiles=[tile_ref(p) for p in result.changed_tiles],
        stats=stats_schema(result.stats),
    )


def tick_response(report: TickReport) -> TickResponse:
    return TickResponse(
        day=report.day,
        income=report.income,
        population=report.population_after,
        capacity=report.capacity,
        upgrades=[tile_ref(p) for p in report.upgrades],
        goal_completed=report.goal_completed,
        quests_completed=list(report.quests_completed),
    )


def parse_kind(name: str) -> BuildingKind:
    try:
        return BuildingKind[name.upper()]
    except KeyError:
        raise HTTPException(status_code=422, detail=f"Unknown building kind {name!r}") from None


def parse_decoration(name: str) -> DecorationKind:
    try:
        return DecorationKind[name.upper()]
    except KeyError:
        raise HTTPException(status_code=422, detail=f"Unknown decoration {name!r}") from None
