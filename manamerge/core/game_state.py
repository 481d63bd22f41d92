"""Mutable authoritative game state — only mutated by the GameLoop."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from manamerge.core.economy import EconomyState, Upgrades
from manamerge.core.enums import ConsumableId, RegionId
from manamerge.core.regions import DEFAULT_REGION, RegionState, fresh_regions
from manamerge.utils.event_log import GameLog

if TYPE_CHECKING:
    from manamerge.actions.base import RewardEvent
    from manamerge.config import GameConfig
    from manamerge.core.board import Board


class GameState:
    """The single source of truth for one save.

    The starting balance is passed in explicitly (``initial_mana``) so a
    load with an offline reward is one assignment, never an addition on
    top of whatever the state happened to start with.
    """

    __slots__ = (
        "regions", "active_region", "economy", "defeats", "log",
        "rewards", "tick", "action_seq", "dragging", "busy",
    )

    def __init__(
        self,
        config: GameConfig,
        *,
        initial_mana: float = 0.0,
        regions: dict[RegionId, RegionState] | None = None,
        active_region: RegionId = DEFAULT_REGION,
        upgrades: Upgrades | None = None,
        inventory: dict[ConsumableId, int] | None = None,
        boost_expires_at: float | None = None,
        barrier_expires_at: float | None = None,
        defeats: int = 0,
        tick: int = 0,
        action_seq: int = 0,
    ) -> None:
        self.regions: dict[RegionId, RegionState] = fresh_regions(
            config.board_width, config.board_height,
        )
        if regions:
            self.regions.update(regions)
        self.regions[DEFAULT_REGION].unlocked = True
        if not self.regions[active_region].unlocked:
            active_region = DEFAULT_REGION
        self.active_region: RegionId = active_region

        self.economy = EconomyState(
            mana=max(initial_mana, 0.0),
            upgrades=upgrades or Upgrades(
                offline_efficiency=config.offline_efficiency_base,
                offline_max_seconds=config.offline_time_base,
            ),
            inventory=dict(inventory) if inventory else {cid: 0 for cid in ConsumableId},
            boost_multiplier=config.boost_multiplier,
            boost_expires_at=boost_expires_at,
            barrier_expires_at=barrier_expires_at,
        )
        self.defeats: int = defeats
        self.log = GameLog(config.log_capacity)
        self.rewards: deque[RewardEvent] = deque(maxlen=config.reward_capacity)
        self.tick: int = tick
        self.action_seq: int = action_seq
        self.dragging: bool = False
        self.busy: bool = False

    @property
    def active(self) -> RegionState:
        return self.regions[self.active_region]

    @property
    def board(self) -> Board:
        """Board of the active region."""
        return self.regions[self.active_region].board

    def set_board(self, region_id: RegionId, board: Board) -> None:
        self.regions[region_id].board = board

    def unlocked_regions(self) -> list[RegionState]:
        return [r for r in self.regions.values() if r.unlocked]

    def next_seq(self) -> int:
        self.action_seq += 1
        return self.action_seq
