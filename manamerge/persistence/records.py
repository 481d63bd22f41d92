"""Pydantic models for persisted records.

Each record is validated on its own; a record that fails validation is
replaced by its default without affecting the others.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, model_validator

from manamerge.core.enums import ConsumableId, HostileVariant, RegionId

# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

BOARD_KEY_PREFIX = "mmt_board_"
REGIONS_KEY = "mmt_regions"
ACTIVE_REGION_KEY = "mmt_active_region"
MANA_KEY = "mmt_mana"
UPGRADES_KEY = "mmt_upgrades"
INVENTORY_KEY = "mmt_inventory"
OFFLINE_KEY = "mmt_offline"
BUFFS_KEY = "mmt_buffs"
STATS_KEY = "mmt_stats"
TIME_KEY = "mmt_time"
LEGACY_GRID_KEY = "mmt_grid"


def board_key(region_id: RegionId) -> str:
    return f"{BOARD_KEY_PREFIX}{region_id.value}"


# ---------------------------------------------------------------------------
# Current format
# ---------------------------------------------------------------------------

class EntityRecord(BaseModel):
    kind: Literal["creature", "hostile"]
    tier: int = Field(ge=1)
    region: RegionId = RegionId.PLAINS
    variant: Optional[Literal["drainer", "sealer", "phantom"]] = None

    @model_validator(mode="after")
    def _hostiles_need_variant(self) -> EntityRecord:
        if self.kind == "hostile" and self.variant is None:
            raise ValueError("hostile entity without a variant")
        return self

    @property
    def hostile_variant(self) -> HostileVariant | None:
        return HostileVariant[self.variant.upper()] if self.variant else None


class CellRecord(BaseModel):
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    entity: Optional[EntityRecord] = None
    locked: bool = False


class BoardRecord(BaseModel):
    """Sparse board: only occupied or locked cells are listed."""

    width: int = Field(ge=1)
    height: int = Field(ge=1)
    cells: list[CellRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _cells_in_bounds(self) -> BoardRecord:
        seen: set[tuple[int, int]] = set()
        for c in self.cells:
            if c.x >= self.width or c.y >= self.height:
                raise ValueError(f"cell ({c.x}, {c.y}) outside {self.width}x{self.height} board")
            if (c.x, c.y) in seen:
                raise ValueError(f"cell ({c.x}, {c.y}) listed twice")
            seen.add((c.x, c.y))
        return self


class UpgradesRecord(BaseModel):
    summon_luck: int = Field(1, ge=1)


class OfflineRecord(BaseModel):
    efficiency: float = Field(0.25, ge=0.0, le=1.0)
    max_seconds: float = Field(7200.0, gt=0.0)


class BuffsRecord(BaseModel):
    boost_expires_at: Optional[float] = None
    barrier_expires_at: Optional[float] = None


class StatsRecord(BaseModel):
    defeats: int = Field(0, ge=0)
    # RNG counters, so a reload continues the random sequence instead of replaying it
    tick: int = Field(0, ge=0)
    action_seq: int = Field(0, ge=0)


NonNegative = Annotated[float, Field(ge=0.0)]

board_adapter = TypeAdapter(BoardRecord)
regions_adapter = TypeAdapter(list[RegionId])
active_region_adapter = TypeAdapter(RegionId)
mana_adapter = TypeAdapter(NonNegative)
upgrades_adapter = TypeAdapter(UpgradesRecord)
inventory_adapter = TypeAdapter(dict[ConsumableId, Annotated[int, Field(ge=0)]])
offline_adapter = TypeAdapter(OfflineRecord)
buffs_adapter = TypeAdapter(BuffsRecord)
stats_adapter = TypeAdapter(StatsRecord)
time_adapter = TypeAdapter(NonNegative)


# ---------------------------------------------------------------------------
# Legacy single-board format (``mmt_grid``): rows of cells with camelCase flags
# ---------------------------------------------------------------------------

class LegacyItem(BaseModel):
    id: Union[str, int, float, None] = None
    tier: int = Field(ge=1)
    type: Literal["creature", "plant", "rock", "chest", "enemy"]
    isLocked: bool = False


class LegacyCell(BaseModel):
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    item: Optional[LegacyItem] = None
    isLocked: bool = False


legacy_grid_adapter = TypeAdapter(list[list[LegacyCell]])
