"""Immutable snapshot of the game state for reader threads."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from manamerge.core.board import Board
from manamerge.core.economy import Upgrades
from manamerge.core.enums import ConsumableId, RegionId
from manamerge.utils.event_log import LogEntry

if TYPE_CHECKING:
    from manamerge.actions.base import RewardEvent
    from manamerge.core.game_state import GameState


@dataclass(frozen=True, slots=True)
class RegionSnapshot:
    region_id: RegionId
    unlocked: bool
    board: Board


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of the game, safe to share across threads.

    Boards are copied; entities are frozen so the copies may share them.
    """

    tick: int
    mana: float
    production_rate: float
    active_region: RegionId
    regions: tuple[RegionSnapshot, ...]
    defeats: int
    upgrades: Upgrades
    inventory: Mapping[ConsumableId, int]
    boost_expires_at: float | None
    barrier_expires_at: float | None
    log: tuple[LogEntry, ...]
    rewards: tuple[RewardEvent, ...]
    dragging: bool
    busy: bool

    @classmethod
    def from_state(cls, state: GameState) -> Snapshot:
        econ = state.economy
        return cls(
            tick=state.tick,
            mana=econ.mana,
            production_rate=econ.production_rate,
            active_region=state.active_region,
            regions=tuple(
                RegionSnapshot(r.region_id, r.unlocked, r.board.copy())
                for r in state.regions.values()
            ),
            defeats=state.defeats,
            upgrades=econ.upgrades.copy(),
            inventory=MappingProxyType(dict(econ.inventory)),
            boost_expires_at=econ.boost_expires_at,
            barrier_expires_at=econ.barrier_expires_at,
            log=tuple(state.log.entries()),
            rewards=tuple(state.rewards),
            dragging=state.dragging,
            busy=state.busy,
        )

    def region(self, region_id: RegionId) -> RegionSnapshot:
        for r in self.regions:
            if r.region_id == region_id:
                return r
        raise KeyError(f"Unknown region: {region_id!r}")

    @property
    def board(self) -> Board:
        return self.region(self.active_region).board
