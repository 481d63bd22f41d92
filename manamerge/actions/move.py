"""MoveAction — relocate a creature, then resolve the chain it triggers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from manamerge.actions.base import ActionIntent, ActionResult
from manamerge.core.enums import Cue, Rejection, Severity
from manamerge.core.models import Vector2
from manamerge.systems.chain import combo_intensity, iter_chain
from manamerge.systems.economy import entity_rate
from manamerge.systems.match import move_entity

if TYPE_CHECKING:
    from manamerge.engine.game_loop import GameLoop

logger = logging.getLogger(__name__)


class MoveAction:
    """Stateless handler for MOVE intents (``target`` = source, ``payload`` = destination)."""

    @staticmethod
    def validate(intent: ActionIntent, loop: GameLoop, now: float) -> Rejection | None:
        state = loop.state
        if state.busy:
            return Rejection.BUSY
        src, dst = intent.target, intent.payload
        if not isinstance(src, Vector2) or not isinstance(dst, Vector2):
            return Rejection.INVALID_TARGET
        board = state.board
        if not board.in_bounds(src) or not board.in_bounds(dst) or src == dst:
            return Rejection.INVALID_TARGET
        entity = board.get(src)
        if entity is None:
            return Rejection.EMPTY
        if board.is_locked(src) or board.is_locked(dst):
            return Rejection.LOCKED
        if entity.is_hostile or board.get(dst) is not None:
            return Rejection.INVALID_TARGET
        return None

    @staticmethod
    def apply(intent: ActionIntent, loop: GameLoop, now: float) -> ActionResult:
        state, config = loop.state, loop.config
        region_id = state.active_region
        src, dst = intent.target, intent.payload

        board = move_entity(state.board, src, dst)
        if board is state.board:
            return ActionResult.reject(Rejection.INVALID_TARGET)
        loop.commit_board(region_id, board, now)

        combo = 0
        state.busy = True
        try:
            for step in iter_chain(board, dst, config):
                if step.combo > 1:
                    loop.pause(config.combo_step_delay)
                combo = step.combo
                # Board, defeats and rewards of one step become visible together.
                loop.commit_board(region_id, step.board, now, publish=False)
                for pos, entity in step.merge.placements:
                    loop.reward(pos, entity_rate(entity.tier, config), f"Tier {entity.tier}")
                if step.defeated:
                    MoveAction._credit_defeats(loop, dst, len(step.defeated), step.defeat_reward, now)
                loop.mutated(now)
                loop.cue(Cue.MERGE, combo_intensity(combo, config.combo_pitch_step))
                if combo > 1:
                    loop.log(f"Combo x{combo}!", Severity.SUCCESS, now)
        finally:
            state.busy = False

        if combo:
            logger.info("Move %s -> %s resolved a %d-step chain", src, dst, combo)
            return ActionResult.accept(f"merged x{combo}", combo=combo)
        return ActionResult.accept("moved")

    @staticmethod
    def _credit_defeats(loop: GameLoop, pos: Vector2, count: int, reward: float, now: float) -> None:
        state = loop.state
        state.defeats += count
        state.economy.add(reward)
        loop.reward(pos, reward, "Defeat")
        loop.cue(Cue.DEFEAT)
        loop.log(f"Defeated {count} hostile(s) for {reward:.0f} mana", Severity.SUCCESS, now)
