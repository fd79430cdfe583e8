"""GET /api/v1/state: stats, objectives and news (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from citysim.api.dependencies import get_engine_manager
from citysim.api.engine_manager import EngineManager
from citysim.api.schemas import CityStateResponse, EventSchema
from citysim.api.serialize import quest_schema, stats_schema, tick_response
from citysim.engine.city_engine import CityEngine

router = APIRouter()


@router.get("/state", response_model=CityStateResponse)
def get_state(
    news_since: int | None = Query(None, ge=0, description="Only news from this day onward"),
    manager: EngineManager = Depends(get_engine_manager),
) -> CityStateResponse:
    def build(engine: CityEngine) -> CityStateResponse:
        s = engine.state
        news = s.news.latest() if news_since is None else s.news.since_day(news_since)
        return CityStateResponse(
            stats=stats_schema(s.stats),
            quests=[quest_schema(q) for q in s.quests],
            goal=quest_schema(s.goal) if s.goal is not None else None,
            news=[EventSchema(**n.to_dict()) for n in news],
            can_undo=engine.history.can_undo,
            can_redo=engine.history.can_redo,
        )

    resp = manager.execute(build)
    report = manager.last_report
    resp.last_tick = tick_response(report) if report is not None else None
    resp.running = manager.running
    resp.paused = manager.paused
    return resp
