"""Shop purchases and consumable use."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from manamerge.actions.base import ActionIntent, ActionResult
from manamerge.actions.summon import movable_count, shuffle_board
from manamerge.core.enums import ConsumableId, Cue, Rejection, Severity
from manamerge.core.models import Vector2
from manamerge.core.shop import consumable_def
from manamerge.systems.combat import defeat_hostiles
from manamerge.systems.economy import consumable_price, gated_shop_open

if TYPE_CHECKING:
    from manamerge.core.board import Board
    from manamerge.engine.game_loop import GameLoop

logger = logging.getLogger(__name__)


def _item_id(intent: ActionIntent) -> ConsumableId | None:
    try:
        return ConsumableId(intent.target)
    except ValueError:
        return None


def _hostile_cells(board: Board) -> list[Vector2]:
    return [pos for pos, e in board.occupied() if e.is_hostile]


class BuyItemAction:
    """Buy one consumable at its production-scaled price."""

    @staticmethod
    def validate(intent: ActionIntent, loop: GameLoop, now: float) -> Rejection | None:
        item_id = _item_id(intent)
        if item_id is None:
            return Rejection.INVALID_TARGET
        econ = loop.state.economy
        item = consumable_def(item_id)
        if item.gated and not gated_shop_open(econ.upgrades.summon_luck):
            return Rejection.GATED
        if econ.mana < consumable_price(item, econ.production_rate):
            return Rejection.INSUFFICIENT_MANA
        return None

    @staticmethod
    def apply(intent: ActionIntent, loop: GameLoop, now: float) -> ActionResult:
        econ = loop.state.economy
        item = consumable_def(_item_id(intent))
        price = consumable_price(item, econ.production_rate)
        if not econ.consume(price):
            return ActionResult.reject(Rejection.INSUFFICIENT_MANA)
        econ.add_item(item.item_id)
        loop.cue(Cue.BUTTON)
        loop.log(f"Bought {item.name} for {price:.0f} mana", Severity.INFO, now)
        loop.mutated(now)
        return ActionResult.accept(f"bought {item.item_id.value}")


class UseItemAction:
    """Consume one inventory item and apply its effect."""

    @staticmethod
    def validate(intent: ActionIntent, loop: GameLoop, now: float) -> Rejection | None:
        item_id = _item_id(intent)
        if item_id is None:
            return Rejection.INVALID_TARGET
        state = loop.state
        if state.economy.inventory.get(item_id, 0) <= 0:
            return Rejection.OUT_OF_STOCK
        if item_id == ConsumableId.SHUFFLE and movable_count(state.board) == 0:
            return Rejection.EMPTY
        return None

    @staticmethod
    def apply(intent: ActionIntent, loop: GameLoop, now: float) -> ActionResult:
        state, config = loop.state, loop.config
        item_id = _item_id(intent)
        if not state.economy.take_item(item_id):
            return ActionResult.reject(Rejection.OUT_OF_STOCK)

        econ = state.economy
        match item_id:
            case ConsumableId.SHUFFLE:
                board = shuffle_board(state.board, loop.rng, state.next_seq(), state.tick)
                loop.commit_board(state.active_region, board, now, publish=False)
                loop.log("The board was shuffled.", Severity.INFO, now)
            case ConsumableId.BOMB:
                UseItemAction._bomb(loop, [state.active_region], now)
            case ConsumableId.BARRIER:
                econ.barrier_expires_at = max(now, econ.barrier_expires_at or 0.0) + config.barrier_seconds
                loop.log(f"A barrier holds the hostiles for {config.barrier_seconds:.0f}s", Severity.SUCCESS, now)
            case ConsumableId.BOOST:
                econ.boost_expires_at = max(now, econ.boost_expires_at or 0.0) + config.boost_seconds
                loop.log(
                    f"Mana x{config.boost_multiplier:g} for {config.boost_seconds:.0f}s",
                    Severity.SUCCESS, now,
                )
            case ConsumableId.ELIXIR:
                board = state.board.copy()
                for pos, entity in state.board.occupied():
                    if not entity.is_hostile:
                        board.set(pos, entity.with_tier(entity.tier + 1, config.max_tier))
                loop.commit_board(state.active_region, board, now, publish=False)
                loop.log("Every creature ascends one tier!", Severity.SUCCESS, now)
            case ConsumableId.ARMAGEDDON:
                UseItemAction._bomb(loop, list(state.regions), now, clear_locks=True)

        loop.cue(Cue.BUTTON)
        loop.mutated(now)
        logger.info("Used %s", item_id.value)
        return ActionResult.accept(f"used {item_id.value}")

    @staticmethod
    def _bomb(loop: GameLoop, region_ids, now: float, clear_locks: bool = False) -> None:
        """Defeat every hostile in the given regions; each counts as a tier-1 defeat."""
        state, config = loop.state, loop.config
        total, reward = 0, 0.0
        for rid in region_ids:
            board = state.regions[rid].board
            hit = defeat_hostiles(board, _hostile_cells(board), 1, config.defeat_reward_per_tier)
            new_board = hit.board
            if clear_locks and new_board.locked_count:
                new_board = new_board.copy()
                for pos in new_board.positions():
                    new_board.set_locked(pos, False)
            if new_board is not board:
                loop.commit_board(rid, new_board, now, publish=False)
            total += len(hit.defeated)
            reward += hit.reward

        if total:
            state.defeats += total
            state.economy.add(reward)
            loop.cue(Cue.DEFEAT)
        loop.log(f"Purifying blast: {total} hostile(s) defeated, +{reward:.0f} mana", Severity.SUCCESS, now)
