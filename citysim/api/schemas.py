"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- City ---

class StatsSchema(BaseModel):
    money: int
    population: int
    day: int
    happiness: int


class QuestSchema(BaseModel):
    quest_id: str
    target: str
    target_value: int
    reward_money: int
    target_kind: str | None = None
    title: str = ""
    description: str = ""
    current_value: int = 0
    completed: bool = False


class EventSchema(BaseModel):
    day: int
    category: str
    message: str


class TileRequest(BaseModel):
    x: int
    y: int


class TickResponse(BaseModel):
    day: int
    income: int
    population: int
    capacity: int
    upgrades: list[TileRequest] = Field(default_factory=list)
    goal_completed: bool = False
    quests_completed: list[str] = Field(default_factory=list)


class CityStateResponse(BaseModel):
    stats: StatsSchema
    quests: list[QuestSchema] = Field(default_factory=list)
    goal: QuestSchema | None = None
    news: list[EventSchema] = Field(default_factory=list)
    can_undo: bool = False
    can_redo: bool = False
    last_tick: TickResponse | None = None
    running: bool = False
    paused: bool = False


# --- Map ---

class TileSchema(BaseModel):
    x: int
    y: int
    kind: str
    level: int = 1
    decoration: str = "NONE"
    color: str = "#f8fafc"


class MapResponse(BaseModel):
    size: int
    kinds: list[int] = Field(description="RLE [value, count, ...] of BuildingKind values, row-major")
    tiles: list[TileSchema] = Field(default_factory=list, description="Occupied or decorated tiles only")


class LensResponse(BaseModel):
    """Row-major per-tile overlay (land value, population density)."""

    size: int
    values: list[float]


# --- Commands ---

class PlaceRequest(BaseModel):
    kind: str
    x: int
    y: int


class DecorateRequest(BaseModel):
    x: int
    y: int
    decoration: str
    color: str | None = None


class ClaimQuestRequest(BaseModel):
    quest_id: str


class CommandResponse(BaseModel):
    command: str
    ok: bool
    reason: str = ""
    message: str = ""
    money_delta: int = 0
    changed_tiles: list[TileRequest] = Field(default_factory=list)
    stats: StatsSchema


class CostResponse(BaseModel):
    kind: str
    x: int
    y: int
    cost: int


class PathRequest(BaseModel):
    start: TileRequest
    goal: TileRequest


class PathResponse(BaseModel):
    found: bool
    path: list[TileRequest] = Field(default_factory=list)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    day: int = 0


# --- Config / catalog ---

class SimulationConfigResponse(BaseModel):
    world_seed: int
    grid_size: int
    tick_rate: float
    initial_money: int
    max_level: int
    upgrade_chance: float
    upgrade_land_value_threshold: float
    capacity_per_residence: int
    history_limit: int


class BuildingSpecSchema(BaseModel):
    kind: str
    id: int
    name: str
    base_cost: int
    scaling_factor: float
    population_yield: int
    income_yield: int
    effect_radius: int | None = None
    color: str
    description: str
    walkable: bool


# --- Save slots ---

class SaveSlotSchema(BaseModel):
    slot_id: str
    name: str
    last_played: int = Field(description="Unix epoch milliseconds")
    population: int = 0
    money: int = 0


class CreateSlotRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
