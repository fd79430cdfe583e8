"""POST /api/v1/control/{action} — tick timer lifecycle controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from citysim.api.dependencies import get_engine_manager
from citysim.api.engine_manager import EngineManager
from citysim.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"
    save = "save"


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    day = manager.current_day()

    match action:
        case ControlAction.start:
            if manager.running:
                return ControlResponse(status="noop", message="Already running.", day=day)
            manager.start()
            return ControlResponse(status="ok", message="Ticker started.", day=day)

        case ControlAction.pause:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", day=day)
            manager.pause()
            return ControlResponse(status="ok", message="Ticker paused.", day=day)

        case ControlAction.resume:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", day=day)
            manager.resume()
            return ControlResponse(status="ok", message="Ticker resumed.", day=day)

        case ControlAction.step:
            manager.step()
            return ControlResponse(status="ok", message="Single tick executed.", day=manager.current_day())

        case ControlAction.reset:
            manager.reset()
            return ControlResponse(status="ok", message="City reset.", day=manager.current_day())

        case ControlAction.save:
            path = manager.save()
            if path is None:
                return ControlResponse(status="error", message="No save file configured.", day=day)
            return ControlResponse(status="ok", message=f"Saved to {path}.", day=day)


@router.post("/speed")
def set_speed(
    seconds: float = Query(3.0, ge=0.05, le=60.0, description="Seconds between ticks"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.tick_rate = seconds
    return ControlResponse(status="ok", message=f"Tick interval set to {seconds:.2f}s.", day=manager.current_day())
