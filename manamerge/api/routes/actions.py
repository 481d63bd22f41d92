"""POST /api/v1/actions/* — player intents.

Every route turns its request into an ActionIntent and waits for the
engine thread to resolve it. Rejections come back as 409 with the reason.
"""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException

from manamerge.actions.base import ActionIntent, ActionResult
from manamerge.api.dependencies import get_engine_manager
from manamerge.api.engine_manager import EngineManager
from manamerge.api.schemas import ActionResponse, CellRequest, MoveRequest
from manamerge.core.enums import ActionType, ConsumableId, RegionId, UpgradeKind
from manamerge.core.models import Vector2

router = APIRouter(prefix="/actions")


def _parse(enum_cls: type[Enum], value: str, what: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown {what} {value!r}")


def _respond(manager: EngineManager, result: ActionResult) -> ActionResponse:
    if not result.ok:
        raise HTTPException(
            status_code=409,
            detail={"reason": result.reason.value if result.reason else None, "message": result.message},
        )
    snap = manager.get_snapshot()
    return ActionResponse(
        ok=True,
        message=result.message,
        combo=result.combo,
        mana=snap.mana if snap else 0.0,
    )


def _submit(manager: EngineManager, verb: ActionType, target=None, payload=None) -> ActionResponse:
    return _respond(manager, manager.submit(ActionIntent(verb, target, payload)))


@router.post("/move", response_model=ActionResponse)
def move(body: MoveRequest, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    return _submit(
        manager, ActionType.MOVE,
        Vector2(body.from_x, body.from_y), Vector2(body.to_x, body.to_y),
    )


@router.post("/summon", response_model=ActionResponse)
def summon(manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    return _submit(manager, ActionType.SUMMON)


@router.post("/purge", response_model=ActionResponse)
def purge(body: CellRequest, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    verb = ActionType.PURGE_DROP if body.drop else ActionType.PURGE
    return _submit(manager, verb, Vector2(body.x, body.y))


@router.post("/shuffle", response_model=ActionResponse)
def shuffle(manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    return _submit(manager, ActionType.SHUFFLE)


@router.post("/items/{item_id}/buy", response_model=ActionResponse)
def buy_item(item_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    return _submit(manager, ActionType.BUY_ITEM, _parse(ConsumableId, item_id, "item"))


@router.post("/items/{item_id}/use", response_model=ActionResponse)
def use_item(item_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    return _submit(manager, ActionType.USE_ITEM, _parse(ConsumableId, item_id, "item"))


@router.post("/regions/{region_id}/unlock", response_model=ActionResponse)
def unlock_region(region_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    return _submit(manager, ActionType.UNLOCK_REGION, _parse(RegionId, region_id, "region"))


@router.post("/regions/{region_id}/activate", response_model=ActionResponse)
def activate_region(region_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    return _submit(manager, ActionType.ACTIVATE_REGION, _parse(RegionId, region_id, "region"))


@router.post("/upgrades/{kind}", response_model=ActionResponse)
def upgrade(kind: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    return _submit(manager, ActionType.UPGRADE, _parse(UpgradeKind, kind, "upgrade"))


@router.post("/drag/{phase}", response_model=ActionResponse)
def drag(phase: str, manager: EngineManager = Depends(get_engine_manager)) -> ActionResponse:
    match phase:
        case "begin":
            return _submit(manager, ActionType.BEGIN_DRAG)
        case "end":
            return _submit(manager, ActionType.END_DRAG)
    raise HTTPException(status_code=404, detail=f"Unknown drag phase {phase!r}")
