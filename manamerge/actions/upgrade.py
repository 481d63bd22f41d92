"""UpgradeAction — permanent upgrades bought with mana."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from manamerge.actions.base import ActionIntent, ActionResult
from manamerge.core.enums import Cue, Rejection, Severity, UpgradeKind
from manamerge.core.shop import MAX_LUCK_LEVEL
from manamerge.systems.economy import (
    gated_shop_open,
    offline_efficiency_level,
    offline_time_level,
    upgrade_cost,
)

if TYPE_CHECKING:
    from manamerge.config import GameConfig
    from manamerge.core.economy import Upgrades
    from manamerge.engine.game_loop import GameLoop

logger = logging.getLogger(__name__)


def current_level(kind: UpgradeKind, upgrades: Upgrades, config: GameConfig) -> int:
    match kind:
        case UpgradeKind.SUMMON_LUCK:
            return upgrades.summon_luck
        case UpgradeKind.OFFLINE_EFFICIENCY:
            return offline_efficiency_level(upgrades.offline_efficiency, config)
        case UpgradeKind.OFFLINE_TIME:
            return offline_time_level(upgrades.offline_max_seconds, config)
    raise KeyError(f"Unknown upgrade: {kind!r}")


def is_maxed(kind: UpgradeKind, upgrades: Upgrades, config: GameConfig) -> bool:
    match kind:
        case UpgradeKind.SUMMON_LUCK:
            return upgrades.summon_luck >= MAX_LUCK_LEVEL
        case UpgradeKind.OFFLINE_EFFICIENCY:
            return upgrades.offline_efficiency >= config.offline_efficiency_max - 1e-9
        case UpgradeKind.OFFLINE_TIME:
            return upgrades.offline_max_seconds >= config.offline_time_max
    raise KeyError(f"Unknown upgrade: {kind!r}")


def next_upgrade_cost(kind: UpgradeKind, upgrades: Upgrades, config: GameConfig) -> float | None:
    """Price of the next level, or None when maxed."""
    if is_maxed(kind, upgrades, config):
        return None
    return upgrade_cost(kind, current_level(kind, upgrades, config), config)


def _kind(intent: ActionIntent) -> UpgradeKind | None:
    try:
        return UpgradeKind(intent.target)
    except ValueError:
        return None


class UpgradeAction:
    """Stateless handler for UPGRADE intents (``target`` = UpgradeKind)."""

    @staticmethod
    def validate(intent: ActionIntent, loop: GameLoop, now: float) -> Rejection | None:
        kind = _kind(intent)
        if kind is None:
            return Rejection.INVALID_TARGET
        econ = loop.state.economy
        cost = next_upgrade_cost(kind, econ.upgrades, loop.config)
        if cost is None:
            return Rejection.MAX_LEVEL
        if econ.mana < cost:
            return Rejection.INSUFFICIENT_MANA
        return None

    @staticmethod
    def apply(intent: ActionIntent, loop: GameLoop, now: float) -> ActionResult:
        config = loop.config
        econ = loop.state.economy
        kind = _kind(intent)
        cost = next_upgrade_cost(kind, econ.upgrades, config)
        if cost is None:
            return ActionResult.reject(Rejection.MAX_LEVEL)
        if not econ.consume(cost):
            return ActionResult.reject(Rejection.INSUFFICIENT_MANA)

        up = econ.upgrades
        match kind:
            case UpgradeKind.SUMMON_LUCK:
                up.summon_luck = min(up.summon_luck + 1, MAX_LUCK_LEVEL)
                if gated_shop_open(up.summon_luck):
                    loop.log("Maximum luck! The secret shop is open.", Severity.SUCCESS, now)
            case UpgradeKind.OFFLINE_EFFICIENCY:
                up.offline_efficiency = min(
                    round(up.offline_efficiency + config.offline_efficiency_step, 4),
                    config.offline_efficiency_max,
                )
            case UpgradeKind.OFFLINE_TIME:
                up.offline_max_seconds = min(
                    up.offline_max_seconds + config.offline_time_step,
                    config.offline_time_max,
                )

        level = current_level(kind, up, config)
        loop.cue(Cue.BUTTON)
        loop.log(f"Upgraded {kind.value.replace('_', ' ')} to level {level}", Severity.SUCCESS, now)
        loop.mutated(now)
        logger.info("Upgrade %s -> level %d for %.0f", kind.value, level, cost)
        return ActionResult.accept(f"{kind.value} level {level}")
