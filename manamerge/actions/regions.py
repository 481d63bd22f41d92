"""Region unlocking and switching."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from manamerge.actions.base import ActionIntent, ActionResult
from manamerge.core.enums import Cue, Rejection, RegionId, Severity
from manamerge.core.regions import region_def, unlock_rejection

if TYPE_CHECKING:
    from manamerge.engine.game_loop import GameLoop

logger = logging.getLogger(__name__)


def _region_id(intent: ActionIntent) -> RegionId | None:
    try:
        return RegionId(intent.target)
    except ValueError:
        return None


class UnlockRegionAction:
    """Pay a region's unlock cost once its defeat prerequisite is met."""

    @staticmethod
    def validate(intent: ActionIntent, loop: GameLoop, now: float) -> Rejection | None:
        rid = _region_id(intent)
        if rid is None:
            return Rejection.INVALID_TARGET
        state = loop.state
        if state.regions[rid].unlocked:
            return Rejection.ALREADY_UNLOCKED
        return unlock_rejection(region_def(rid), state.economy.mana, state.defeats)

    @staticmethod
    def apply(intent: ActionIntent, loop: GameLoop, now: float) -> ActionResult:
        state = loop.state
        rid = _region_id(intent)
        rdef = region_def(rid)
        if not state.economy.consume(rdef.unlock_cost):
            return ActionResult.reject(Rejection.INSUFFICIENT_MANA)
        state.regions[rid].unlocked = True
        loop.cue(Cue.BUTTON)
        loop.log(f"{rdef.name} unlocked!", Severity.SUCCESS, now)
        loop.mutated(now)
        logger.info("Region %s unlocked for %.0f mana", rid.value, rdef.unlock_cost)
        return ActionResult.accept(f"unlocked {rid.value}")


class ActivateRegionAction:
    """Switch the visible, interactive region."""

    @staticmethod
    def validate(intent: ActionIntent, loop: GameLoop, now: float) -> Rejection | None:
        rid = _region_id(intent)
        if rid is None:
            return Rejection.INVALID_TARGET
        state = loop.state
        if state.busy:
            return Rejection.BUSY
        if not state.regions[rid].unlocked:
            return Rejection.NOT_UNLOCKED
        return None

    @staticmethod
    def apply(intent: ActionIntent, loop: GameLoop, now: float) -> ActionResult:
        state = loop.state
        rid = _region_id(intent)
        if state.active_region != rid:
            state.active_region = rid
            state.dragging = False
            loop.cue(Cue.BUTTON)
            loop.mutated(now)
        return ActionResult.accept(f"active region {rid.value}")
