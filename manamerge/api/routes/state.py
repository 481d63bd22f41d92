"""GET /api/v1/state — live game data (polled by the UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from manamerge.actions.upgrade import current_level, next_upgrade_cost
from manamerge.api.dependencies import get_engine_manager
from manamerge.api.engine_manager import EngineManager
from manamerge.api.schemas import (
    BoardSchema,
    CellSchema,
    CueSchema,
    EntitySchema,
    GameStateResponse,
    LogEntrySchema,
    PricesSchema,
    RegionSchema,
    RewardSchema,
    ShopItemSchema,
    UpgradeSchema,
)
from manamerge.core.enums import RegionId, UpgradeKind
from manamerge.core.regions import region_def, region_multiplier
from manamerge.core.shop import CONSUMABLE_DEFS
from manamerge.systems.economy import (
    consumable_price,
    gated_shop_open,
    hostile_spawn_chance,
    production_rate,
    purge_cost,
    shuffle_cost,
    summon_cost,
)

router = APIRouter()


def _snapshot(manager: EngineManager):
    snap = manager.get_snapshot()
    if snap is None:
        raise HTTPException(status_code=503, detail="Game not loaded yet.")
    return snap


def _serialize_board(region_id: RegionId, board) -> BoardSchema:
    cells = []
    for cell in board.cells():
        entity = None
        if cell.entity is not None:
            e = cell.entity
            entity = EntitySchema(
                id=e.id,
                kind=e.kind.name.lower(),
                tier=e.tier,
                origin_region=e.origin_region.value,
                variant=e.variant.name.lower() if e.variant is not None else None,
            )
        cells.append(CellSchema(x=cell.x, y=cell.y, locked=cell.locked, entity=entity))
    return BoardSchema(region_id=region_id.value, width=board.width, height=board.height, cells=cells)


def _serialize_regions(snap, cfg, now: float) -> list[RegionSchema]:
    result = []
    for r in snap.regions:
        rdef = region_def(r.region_id)
        mult = region_multiplier(rdef, now)
        result.append(RegionSchema(
            region_id=r.region_id.value,
            name=rdef.name,
            unlocked=r.unlocked,
            unlock_cost=rdef.unlock_cost,
            defeats_required=rdef.defeats_required,
            multiplier=mult,
            time_of_day=rdef.time_of_day,
            hostile_risk=rdef.hostile_risk,
            production_rate=production_rate(r.board, cfg) * mult if r.unlocked else 0.0,
            occupied=r.board.occupied_count,
        ))
    return result


@router.get("/state", response_model=GameStateResponse)
def get_state(
    log_limit: int = Query(20, ge=0, le=50, description="Log entries to return, newest first"),
    manager: EngineManager = Depends(get_engine_manager),
) -> GameStateResponse:
    snap = _snapshot(manager)
    cfg = manager.config
    rate = snap.production_rate
    return GameStateResponse(
        tick=snap.tick,
        mana=snap.mana,
        production_rate=rate,
        active_region=snap.active_region.value,
        defeats=snap.defeats,
        boost_expires_at=snap.boost_expires_at,
        barrier_expires_at=snap.barrier_expires_at,
        dragging=snap.dragging,
        busy=snap.busy,
        prices=PricesSchema(
            summon=summon_cost(snap.mana, rate, cfg),
            purge=purge_cost(rate, cfg),
            shuffle=shuffle_cost(rate, cfg),
            spawn_chance=hostile_spawn_chance(snap.mana, rate, region_def(snap.active_region), cfg),
        ),
        inventory={cid.value: n for cid, n in snap.inventory.items()},
        board=_serialize_board(snap.active_region, snap.board),
        regions=_serialize_regions(snap, cfg, manager.clock()),
        log=[
            LogEntrySchema(id=e.id, timestamp=e.timestamp, text=e.text, severity=e.severity.value)
            for e in snap.log[:log_limit]
        ],
        rewards=[
            RewardSchema(id=r.id, x=r.x, y=r.y, amount=r.amount, label=r.label)
            for r in snap.rewards
        ],
    )


@router.get("/regions/{region_id}/board", response_model=BoardSchema)
def get_region_board(
    region_id: str,
    manager: EngineManager = Depends(get_engine_manager),
) -> BoardSchema:
    try:
        rid = RegionId(region_id)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown region {region_id!r}")
    snap = _snapshot(manager)
    return _serialize_board(rid, snap.region(rid).board)


@router.get("/shop", response_model=list[ShopItemSchema])
def get_shop(manager: EngineManager = Depends(get_engine_manager)) -> list[ShopItemSchema]:
    snap = _snapshot(manager)
    open_ = gated_shop_open(snap.upgrades.summon_luck)
    return [
        ShopItemSchema(
            item_id=item.item_id.value,
            name=item.name,
            description=item.description,
            price=consumable_price(item, snap.production_rate),
            owned=snap.inventory.get(item.item_id, 0),
            gated=item.gated,
            available=open_ or not item.gated,
        )
        for item in CONSUMABLE_DEFS.values()
    ]


@router.get("/upgrades", response_model=list[UpgradeSchema])
def get_upgrades(manager: EngineManager = Depends(get_engine_manager)) -> list[UpgradeSchema]:
    snap = _snapshot(manager)
    cfg = manager.config
    up = snap.upgrades
    values = {
        UpgradeKind.SUMMON_LUCK: float(up.summon_luck),
        UpgradeKind.OFFLINE_EFFICIENCY: up.offline_efficiency,
        UpgradeKind.OFFLINE_TIME: up.offline_max_seconds,
    }
    return [
        UpgradeSchema(
            kind=kind.value,
            level=current_level(kind, up, cfg),
            value=values[kind],
            next_cost=next_upgrade_cost(kind, up, cfg),
        )
        for kind in UpgradeKind
    ]


@router.get("/cues", response_model=list[CueSchema])
def drain_cues(manager: EngineManager = Depends(get_engine_manager)) -> list[CueSchema]:
    """Cue requests since the last call, oldest first. Playback is the client's job."""
    return [CueSchema(cue=c.value, intensity=i) for c, i in manager.feedback.drain()]
