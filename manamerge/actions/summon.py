"""Paid board tools: summon a piece, purge a piece, shuffle the board."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from manamerge.actions.base import ActionIntent, ActionResult
from manamerge.core.enums import Cue, Domain, Rejection, Severity
from manamerge.core.models import Vector2, make_creature, make_hostile
from manamerge.systems.economy import (
    hostile_spawn_chance,
    purge_cost,
    roll_summon_tier,
    shuffle_cost,
    summon_cost,
)

if TYPE_CHECKING:
    from manamerge.core.board import Board
    from manamerge.engine.game_loop import GameLoop
    from manamerge.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


def shuffle_board(board: Board, rng: DeterministicRNG, key: int, tick: int) -> Board:
    """Permute the contents of every unlocked cell; locked cells keep theirs."""
    open_cells = [p for p in board.positions() if not board.is_locked(p)]
    contents = rng.shuffled(Domain.SHUFFLE, key, tick, [board.get(p) for p in open_cells])
    new_board = board.copy()
    for pos, entity in zip(open_cells, contents):
        new_board.set(pos, entity)
    return new_board


def movable_count(board: Board) -> int:
    """Pieces a shuffle could move (everything not sealed)."""
    return sum(1 for p, _ in board.occupied() if not board.is_locked(p))


class SummonAction:
    """Spend mana to place a random piece on a random empty cell."""

    @staticmethod
    def validate(intent: ActionIntent, loop: GameLoop, now: float) -> Rejection | None:
        state = loop.state
        if not state.board.empty_cells():
            return Rejection.BOARD_FULL
        econ = state.economy
        if econ.mana < summon_cost(econ.mana, econ.production_rate, loop.config):
            return Rejection.INSUFFICIENT_MANA
        return None

    @staticmethod
    def apply(intent: ActionIntent, loop: GameLoop, now: float) -> ActionResult:
        state, config, rng = loop.state, loop.config, loop.rng
        econ = state.economy
        region = state.active
        rdef = region.definition

        # Spawn odds use the balance before paying.
        chance = hostile_spawn_chance(econ.mana, econ.production_rate, rdef, config)
        cost = summon_cost(econ.mana, econ.production_rate, config)
        if not econ.consume(cost):
            return ActionResult.reject(Rejection.INSUFFICIENT_MANA)

        seq = state.next_seq()
        cell = rng.choice(Domain.SUMMON_CELL, seq, state.tick, region.board.empty_cells())
        tier = roll_summon_tier(econ.upgrades.summon_luck, rng, seq, state.tick)

        if rng.next_bool(Domain.SUMMON_HOSTILE, seq, state.tick, chance):
            variant = rng.choice(Domain.SUMMON_VARIANT, seq, state.tick, rdef.variants)
            entity = make_hostile(tier, variant, config.max_tier, region.region_id)
            loop.log(
                f"A tier {tier} {variant.name.title()} answered the summon at {cell}!",
                Severity.DANGER, now,
            )
            loop.cue(Cue.STEAL)
        else:
            entity = make_creature(tier, config.max_tier, region.region_id)
            loop.cue(Cue.SUMMON)

        board = region.board.copy()
        board.set(cell, entity)
        loop.commit_board(region.region_id, board, now)
        loop.reward(cell, -cost, "Summon")
        logger.debug("Summoned %r at %s for %.1f", entity, cell, cost)
        return ActionResult.accept(f"summoned tier {tier}")


class PurgeAction:
    """Spend mana to remove the piece at ``target`` (tap in purge mode or drop on the bin)."""

    @staticmethod
    def validate(intent: ActionIntent, loop: GameLoop, now: float) -> Rejection | None:
        state = loop.state
        pos = intent.target
        if not isinstance(pos, Vector2) or not state.board.in_bounds(pos):
            return Rejection.INVALID_TARGET
        if state.board.get(pos) is None:
            return Rejection.EMPTY
        if state.board.is_locked(pos):
            return Rejection.LOCKED
        if state.economy.mana < purge_cost(state.economy.production_rate, loop.config):
            return Rejection.INSUFFICIENT_MANA
        return None

    @staticmethod
    def apply(intent: ActionIntent, loop: GameLoop, now: float) -> ActionResult:
        state = loop.state
        pos: Vector2 = intent.target
        cost = purge_cost(state.economy.production_rate, loop.config)
        if not state.economy.consume(cost):
            return ActionResult.reject(Rejection.INSUFFICIENT_MANA)

        removed = state.board.get(pos)
        board = state.board.copy()
        board.set(pos, None)
        loop.commit_board(state.active_region, board, now)
        loop.cue(Cue.PURGE)
        loop.log(f"Purged a tier {removed.tier} piece at {pos}", Severity.INFO, now)
        return ActionResult.accept("purged")


class ShuffleAction:
    """Spend mana to rearrange every movable piece on the active board."""

    @staticmethod
    def validate(intent: ActionIntent, loop: GameLoop, now: float) -> Rejection | None:
        state = loop.state
        if movable_count(state.board) == 0:
            return Rejection.EMPTY
        if state.economy.mana < shuffle_cost(state.economy.production_rate, loop.config):
            return Rejection.INSUFFICIENT_MANA
        return None

    @staticmethod
    def apply(intent: ActionIntent, loop: GameLoop, now: float) -> ActionResult:
        state = loop.state
        cost = shuffle_cost(state.economy.production_rate, loop.config)
        if not state.economy.consume(cost):
            return ActionResult.reject(Rejection.INSUFFICIENT_MANA)
        board = shuffle_board(state.board, loop.rng, state.next_seq(), state.tick)
        loop.commit_board(state.active_region, board, now)
        loop.cue(Cue.BUTTON)
        loop.log("The board was shuffled.", Severity.INFO, now)
        return ActionResult.accept("shuffled")
