"""GameLoop — the single writer of GameState.

Three entry points, all driven by the caller's clock:
  * ``submit``       — resolve one player intent (including chain merges)
  * ``hostile_tick`` — one behaviour step for the active region's hostiles
  * ``accrue``       — add production for elapsed accrual periods

Every board mutation is followed by a production recompute and the
``on_mutation`` hook, which the engine manager uses to debounce saves.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from manamerge.actions.base import ActionResult, RewardEvent
from manamerge.actions.items import BuyItemAction, UseItemAction
from manamerge.actions.move import MoveAction
from manamerge.actions.regions import ActivateRegionAction, UnlockRegionAction
from manamerge.actions.summon import PurgeAction, ShuffleAction, SummonAction
from manamerge.actions.upgrade import UpgradeAction
from manamerge.core.enums import ActionType, Cue, Severity
from manamerge.core.snapshot import Snapshot
from manamerge.engine.feedback import NullFeedback
from manamerge.systems.economy import aggregate_production
from manamerge.systems.hostile import HostileTickResult, hostile_tick

if TYPE_CHECKING:
    from manamerge.actions.base import ActionIntent
    from manamerge.config import GameConfig
    from manamerge.core.board import Board
    from manamerge.core.enums import RegionId
    from manamerge.core.game_state import GameState
    from manamerge.core.models import Vector2
    from manamerge.engine.feedback import FeedbackSink
    from manamerge.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


class GameLoop:
    """Applies intents and timers to a GameState."""

    __slots__ = (
        "_config", "_state", "_rng", "_feedback", "_sleep",
        "_reward_ids", "on_mutation",
    )

    def __init__(
        self,
        config: GameConfig,
        state: GameState,
        rng: DeterministicRNG,
        feedback: FeedbackSink | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._state = state
        self._rng = rng
        self._feedback: FeedbackSink = feedback or NullFeedback()
        self._sleep = sleep
        self._reward_ids = 0
        self.on_mutation: Callable[[float], None] | None = None

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def rng(self) -> DeterministicRNG:
        return self._rng

    def create_snapshot(self) -> Snapshot:
        return Snapshot.from_state(self._state)

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def submit(self, intent: ActionIntent, now: float) -> ActionResult:
        """Validate and apply one intent. Rejections are returned, never raised."""
        handler = self._handler_for(intent.verb)
        if handler is None:
            return self._drag(intent, now)
        if intent.verb in (ActionType.MOVE, ActionType.PURGE_DROP):
            # A drop always ends the drag, whether or not it lands.
            self._state.dragging = False

        rejection = handler.validate(intent, self, now)
        if rejection is not None:
            result = ActionResult.reject(rejection)
        else:
            result = handler.apply(intent, self, now)

        if result.ok:
            logger.debug("Applied %r: %s", intent, result.message)
        else:
            logger.debug("Rejected %r: %s", intent, result.reason)
            self.cue(Cue.ERROR)
        return result

    @staticmethod
    def _handler_for(verb: ActionType):
        match verb:
            case ActionType.MOVE:
                return MoveAction
            case ActionType.SUMMON:
                return SummonAction
            case ActionType.PURGE | ActionType.PURGE_DROP:
                return PurgeAction
            case ActionType.SHUFFLE:
                return ShuffleAction
            case ActionType.USE_ITEM:
                return UseItemAction
            case ActionType.BUY_ITEM:
                return BuyItemAction
            case ActionType.UNLOCK_REGION:
                return UnlockRegionAction
            case ActionType.ACTIVATE_REGION:
                return ActivateRegionAction
            case ActionType.UPGRADE:
                return UpgradeAction
            case ActionType.BEGIN_DRAG | ActionType.END_DRAG:
                return None
        raise ValueError(f"Unhandled action type: {verb!r}")

    def _drag(self, intent: ActionIntent, now: float) -> ActionResult:
        self._state.dragging = intent.verb == ActionType.BEGIN_DRAG
        return ActionResult.accept("dragging" if self._state.dragging else "released")

    # ------------------------------------------------------------------
    # Helpers shared by action handlers
    # ------------------------------------------------------------------

    def commit_board(self, region_id: RegionId, board: Board, now: float, publish: bool = True) -> None:
        """Install *board* for *region_id* and recompute production.

        With ``publish=False`` the caller finishes the rest of the step
        (defeats, rewards) and then calls ``mutated`` itself.
        """
        self._state.set_board(region_id, board)
        if publish:
            self.mutated(now)

    def mutated(self, now: float) -> None:
        self.recompute(now)
        if self.on_mutation is not None:
            self.on_mutation(now)

    def recompute(self, now: float) -> float:
        rate = aggregate_production(self._state.regions.values(), now, self._config)
        self._state.economy.recompute_production(rate)
        return rate

    def log(self, text: str, severity: Severity, now: float) -> None:
        self._state.log.add(text, severity, now)

    def reward(self, pos: Vector2, amount: float, label: str) -> RewardEvent:
        self._reward_ids += 1
        event = RewardEvent(id=self._reward_ids, x=pos.x, y=pos.y, amount=amount, label=label)
        self._state.rewards.append(event)
        return event

    def cue(self, cue: Cue, intensity: float = 1.0) -> None:
        self._feedback.play_cue(cue, intensity)

    def pause(self, seconds: float) -> None:
        if seconds > 0:
            self._sleep(seconds)

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def hostile_tick(self, now: float) -> HostileTickResult | None:
        """Run hostile behaviour on the active region.

        Skipped (returns None) while a chain is resolving, while the player
        is dragging, or while a barrier is up.
        """
        state = self._state
        if state.busy or state.dragging:
            logger.debug("Hostile tick %d deferred (busy=%s dragging=%s)", state.tick, state.busy, state.dragging)
            return None
        if state.economy.barrier_active(now):
            return None

        state.tick += 1
        region = state.active
        result = hostile_tick(
            region.board, state.economy.mana, self._rng, state.tick, self._config,
            salt=list(state.regions).index(region.region_id),
        )
        for text in result.events:
            self.log(text, Severity.WARNING, now)
        for pos, amount in result.steals:
            self.reward(pos, -amount, "stolen")
        if result.resource_lost > 0:
            state.economy.drain(result.resource_lost)
            self.cue(Cue.STEAL)
            logger.info("Tick %d: hostiles stole %.0f mana", state.tick, result.resource_lost)
        if result.events:
            self.commit_board(region.region_id, result.board, now)
        return result

    def accrue(self, now: float, periods: int = 1) -> float:
        """Add ``periods`` accrual periods of production. Returns the amount added."""
        self.expire_buffs(now)
        if periods <= 0:
            return 0.0
        econ = self._state.economy
        rate = self.recompute(now)
        gained = rate * econ.temporary_multiplier(now) * self._config.accrual_seconds * periods
        econ.add(gained)
        if gained > 0 and self.on_mutation is not None:
            self.on_mutation(now)
        return gained

    def expire_buffs(self, now: float) -> list[str]:
        """Clear buffs whose expiry has passed; each expiry is reported once."""
        econ = self._state.economy
        expired: list[str] = []
        if econ.boost_expires_at is not None and now >= econ.boost_expires_at:
            econ.boost_expires_at = None
            expired.append("boost")
            self.log("Mana boost has worn off.", Severity.INFO, now)
        if econ.barrier_expires_at is not None and now >= econ.barrier_expires_at:
            econ.barrier_expires_at = None
            expired.append("barrier")
            self.log("The barrier fades. Hostiles stir again.", Severity.WARNING, now)
        if expired and self.on_mutation is not None:
            self.on_mutation(now)
        return expired
