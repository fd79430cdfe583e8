"""/api/v1/saves: named save slots (list, create, save into, load, delete)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from citysim.api.dependencies import get_engine_manager
from citysim.api.engine_manager import EngineManager
from citysim.api.schemas import ControlResponse, CreateSlotRequest, SaveSlotSchema
from citysim.core.errors import ConfigurationError, UnknownSaveSlot
from citysim.utils.storage import SaveSlot

router = APIRouter()


def _slot_schema(slot: SaveSlot) -> SaveSlotSchema:
    return SaveSlotSchema(**slot.to_dict())


def _guard(fn):
    """Map slot errors onto HTTP statuses."""
    try:
        return fn()
    except UnknownSaveSlot as exc:
        raise HTTPException(status_code=404, detail=exc.message) from None
    except ConfigurationError as exc:
        raise HTTPException(status_code=503, detail=exc.message) from None


@router.get("/saves", response_model=list[SaveSlotSchema])
def list_saves(manager: EngineManager = Depends(get_engine_manager)) -> list[SaveSlotSchema]:
    return [_slot_schema(s) for s in _guard(manager.list_slots)]


@router.post("/saves", response_model=SaveSlotSchema)
def create_save(req: CreateSlotRequest, manager: EngineManager = Depends(get_engine_manager)) -> SaveSlotSchema:
    return _slot_schema(_guard(lambda: manager.create_slot(req.name)))


@router.post("/saves/{slot_id}/save", response_model=SaveSlotSchema)
def save_into(slot_id: str, manager: EngineManager = Depends(get_engine_manager)) -> SaveSlotSchema:
    return _slot_schema(_guard(lambda: manager.save_slot(slot_id)))


@router.post("/saves/{slot_id}/load", response_model=ControlResponse)
def load_save(slot_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ControlResponse:
    if not _guard(lambda: manager.load_slot(slot_id)):
        return ControlResponse(status="error", message="Save is unusable; city unchanged.", day=manager.current_day())
    return ControlResponse(status="ok", message=f"Loaded slot {slot_id}.", day=manager.current_day())


@router.delete("/saves/{slot_id}", response_model=ControlResponse)
def delete_save(slot_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ControlResponse:
    _guard(lambda: manager.delete_slot(slot_id))
    return ControlResponse(status="ok", message=f"Deleted slot {slot_id}.", day=manager.current_day())
