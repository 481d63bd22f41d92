"""Per-tick hostile behaviour.

``hostile_tick`` is pure: given the same board, balance, seed and tick it
always produces the same result, and the input board is never touched.
Hostiles are read from the input board in row-major order; their actions
are applied to a copy, so entities created or moved this tick do not act
again until the next tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from manamerge.core.enums import Domain, HostileVariant
from manamerge.core.models import Entity, Vector2, make_hostile

if TYPE_CHECKING:
    from manamerge.config import GameConfig
    from manamerge.core.board import Board
    from manamerge.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HostileTickResult:
    board: Board
    resource_lost: float = 0.0
    events: list[str] = field(default_factory=list)
    steals: list[tuple[Vector2, float]] = field(default_factory=list)


class _TickContext:
    """Mutable working state for one tick."""

    __slots__ = ("board", "available", "lost", "events", "steals", "spread_done")

    def __init__(self, board: Board, available: float) -> None:
        self.board = board
        self.available = max(available, 0.0)
        self.lost = 0.0
        self.events: list[str] = []
        self.steals: list[tuple[Vector2, float]] = []
        self.spread_done = False

    def steal(self, pos: Vector2, amount: float, who: str) -> None:
        """Take up to *amount*, clamped to what is still available."""
        taken = min(amount, self.available - self.lost)
        if taken <= 0:
            return
        self.lost += taken
        self.steals.append((pos, taken))
        self.events.append(f"{who} at {pos} stole {taken:.0f} mana")


def hostile_tick(
    board: Board,
    current_resource: float,
    rng: DeterministicRNG,
    tick: int,
    config: GameConfig,
    salt: int = 0,
) -> HostileTickResult:
    """Run one behaviour step for every hostile on *board*."""
    ctx = _TickContext(board.copy(), current_resource)
    base_key = salt * board.width * board.height

    for pos, entity in list(board.occupied()):
        if not entity.is_hostile:
            continue
        key = base_key + pos.y * board.width + pos.x
        match entity.variant:
            case HostileVariant.DRAINER:
                _act_drainer(ctx, pos, entity, rng, key, tick, config)
            case HostileVariant.SEALER:
                _act_sealer(ctx, pos, rng, key, tick, config)
            case HostileVariant.PHANTOM:
                _act_phantom(ctx, pos, entity, rng, key, tick, config)
            case None:
                logger.warning("Hostile #%d at %s has no variant; skipped", entity.id, pos)

    return HostileTickResult(
        board=ctx.board,
        resource_lost=ctx.lost,
        events=ctx.events,
        steals=ctx.steals,
    )


def _act_drainer(
    ctx: _TickContext, pos: Vector2, entity: Entity,
    rng: DeterministicRNG, key: int, tick: int, config: GameConfig,
) -> None:
    if rng.next_bool(Domain.HOSTILE_STEAL, key, tick, config.drainer_steal_chance):
        ctx.steal(pos, entity.tier * config.drainer_steal_per_tier, "Drainer")

    if ctx.spread_done:
        return
    if not rng.next_bool(Domain.HOSTILE_SPREAD, key, tick, config.drainer_spread_chance):
        return
    targets = [n for n in ctx.board.neighbors(pos) if ctx.board.is_open(n)]
    if not targets:
        return
    target = rng.choice(Domain.HOSTILE_SPREAD_TARGET, key, tick, targets)
    clone = make_hostile(entity.tier, HostileVariant.DRAINER, config.max_tier, entity.origin_region)
    ctx.board.set(target, clone)
    ctx.spread_done = True
    ctx.events.append(f"Drainer at {pos} split into {target}")


def _act_sealer(
    ctx: _TickContext, pos: Vector2,
    rng: DeterministicRNG, key: int, tick: int, config: GameConfig,
) -> None:
    if not rng.next_bool(Domain.HOSTILE_LOCK, key, tick, config.sealer_lock_chance):
        return
    board = ctx.board
    targets = [n for n in board.neighbors(pos) if board.get(n) is not None and not board.is_locked(n)]
    if not targets:
        return
    target = rng.choice(Domain.HOSTILE_LOCK_TARGET, key, tick, targets)
    board.set_locked(target, True)
    ctx.events.append(f"Sealer at {pos} locked {target}")


def _act_phantom(
    ctx: _TickContext, pos: Vector2, entity: Entity,
    rng: DeterministicRNG, key: int, tick: int, config: GameConfig,
) -> None:
    if rng.next_bool(Domain.HOSTILE_STEAL, key, tick, config.phantom_steal_chance):
        ctx.steal(pos, entity.tier * config.phantom_steal_per_tier, "Phantom")

    if not rng.next_bool(Domain.HOSTILE_WARP, key, tick, config.phantom_warp_chance):
        return
    board = ctx.board
    if board.is_locked(pos):
        return
    targets = board.empty_cells()
    if not targets:
        return
    target = rng.choice(Domain.HOSTILE_WARP_TARGET, key, tick, targets)
    board.set(pos, None)
    board.set(target, entity)
    ctx.events.append(f"Phantom warped from {pos} to {target}")
