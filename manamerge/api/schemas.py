"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# --- Board ---

class EntitySchema(BaseModel):
    id: int
    kind: str
    tier: int
    origin_region: str
    variant: Optional[str] = None


class CellSchema(BaseModel):
    x: int
    y: int
    locked: bool = False
    entity: Optional[EntitySchema] = None


class BoardSchema(BaseModel):
    region_id: str
    width: int
    height: int
    cells: list[CellSchema] = Field(default_factory=list)


# --- Regions ---

class RegionSchema(BaseModel):
    region_id: str
    name: str
    unlocked: bool
    unlock_cost: float
    defeats_required: int
    multiplier: float
    time_of_day: bool = False
    hostile_risk: float = 1.0
    production_rate: float = 0.0
    occupied: int = 0


# --- Feed ---

class LogEntrySchema(BaseModel):
    id: int
    timestamp: float
    text: str
    severity: str


class RewardSchema(BaseModel):
    id: int
    x: int
    y: int
    amount: float
    label: str


class CueSchema(BaseModel):
    cue: str
    intensity: float = 1.0


# --- Economy ---

class PricesSchema(BaseModel):
    summon: float
    purge: float
    shuffle: float
    spawn_chance: float


class UpgradeSchema(BaseModel):
    kind: str
    level: int
    value: float
    next_cost: Optional[float] = None


class ShopItemSchema(BaseModel):
    item_id: str
    name: str
    description: str
    price: float
    owned: int = 0
    gated: bool = False
    available: bool = True


# --- State ---

class GameStateResponse(BaseModel):
    tick: int
    mana: float
    production_rate: float
    active_region: str
    defeats: int
    boost_expires_at: Optional[float] = None
    barrier_expires_at: Optional[float] = None
    dragging: bool = False
    busy: bool = False
    prices: PricesSchema
    inventory: dict[str, int] = Field(default_factory=dict)
    board: BoardSchema
    regions: list[RegionSchema] = Field(default_factory=list)
    log: list[LogEntrySchema] = Field(default_factory=list)
    rewards: list[RewardSchema] = Field(default_factory=list)


# --- Requests ---

class MoveRequest(BaseModel):
    from_x: int
    from_y: int
    to_x: int
    to_y: int


class CellRequest(BaseModel):
    x: int
    y: int
    drop: bool = False        # dragged onto the bin rather than tapped in purge mode


class ActionResponse(BaseModel):
    ok: bool
    reason: Optional[str] = None
    message: str = ""
    combo: int = 0
    mana: float = 0.0


# --- Control / config ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int


class GameConfigResponse(BaseModel):
    seed: int
    board_width: int
    board_height: int
    max_tier: int
    hostile_tick_seconds: float
    accrual_seconds: float
    save_debounce_seconds: float
    save_max_wait_seconds: float
    combo_step_delay: float
    base_rate: float
    rate_growth: float
    boost_multiplier: float
    boost_seconds: float
    barrier_seconds: float
    save_path: str
