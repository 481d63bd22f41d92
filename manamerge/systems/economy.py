"""Production rates, cost curves and summon probabilities.

All functions here are pure: they read state and return numbers, and every
cost is clamped to a floor so early-game prices stay meaningful.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from manamerge.core.enums import Domain, UpgradeKind
from manamerge.core.regions import region_multiplier
from manamerge.core.shop import MAX_LUCK_LEVEL, MIN_LUCK_LEVEL, SUMMON_LUCK_TABLE

if TYPE_CHECKING:
    from manamerge.config import GameConfig
    from manamerge.core.board import Board
    from manamerge.core.regions import RegionDef, RegionState
    from manamerge.core.shop import ConsumableDef
    from manamerge.systems.rng import DeterministicRNG


# ---------------------------------------------------------------------------
# Production
# ---------------------------------------------------------------------------

def entity_rate(tier: int, config: GameConfig) -> float:
    """Mana per second produced by one entity of *tier*."""
    return config.base_rate * config.rate_growth ** (tier - 1)


def production_rate(board: Board, config: GameConfig) -> float:
    """Sum of entity rates over every occupied cell, hostiles included."""
    return sum(entity_rate(e.tier, config) for e in board.entities())


def aggregate_production(
    regions: Iterable[RegionState],
    now: float,
    config: GameConfig,
) -> float:
    """Production across all unlocked regions, each scaled by its multiplier."""
    total = 0.0
    for region in regions:
        if not region.unlocked:
            continue
        total += production_rate(region.board, config) * region_multiplier(region.definition, now)
    return total


# ---------------------------------------------------------------------------
# Cost curves
# ---------------------------------------------------------------------------

def summon_cost(mana: float, rate: float, config: GameConfig) -> float:
    return max(
        config.summon_floor,
        config.summon_balance_fraction * mana,
        config.summon_seconds * rate,
    )


def purge_cost(rate: float, config: GameConfig) -> float:
    # Balance-independent: spending down does not make purging cheaper.
    return max(config.purge_floor, config.purge_seconds * rate)


def shuffle_cost(rate: float, config: GameConfig) -> float:
    return max(config.shuffle_floor, config.shuffle_seconds * rate)


def consumable_price(item: ConsumableDef, rate: float) -> float:
    return max(item.min_price, item.seconds * rate)


def upgrade_base_cost(kind: UpgradeKind, config: GameConfig) -> float:
    match kind:
        case UpgradeKind.SUMMON_LUCK:
            return config.summon_luck_base_cost
        case UpgradeKind.OFFLINE_EFFICIENCY:
            return config.offline_efficiency_base_cost
        case UpgradeKind.OFFLINE_TIME:
            return config.offline_time_base_cost
    raise KeyError(f"Unknown upgrade: {kind!r}")


def upgrade_cost(kind: UpgradeKind, level: int, config: GameConfig) -> float:
    """Price of buying the next level when currently at *level* (1-based)."""
    return upgrade_base_cost(kind, config) * 2 ** (max(level, 1) - 1)


def _level_from_stat(stat: float, base: float, step: float) -> int:
    return max(1, round((stat - base) / step) + 1)


def offline_efficiency_level(stat: float, config: GameConfig) -> int:
    return _level_from_stat(stat, config.offline_efficiency_base, config.offline_efficiency_step)


def offline_time_level(stat: float, config: GameConfig) -> int:
    return _level_from_stat(stat, config.offline_time_base, config.offline_time_step)


def hostile_spawn_chance(
    mana: float,
    rate: float,
    region: RegionDef,
    config: GameConfig,
) -> float:
    """Chance that a summon produces a hostile instead of a creature.

    Every balance or production milestone reached adds one step; the sum is
    scaled by the region's risk and capped.
    """
    reached = sum(1 for m in config.spawn_balance_milestones if mana >= m)
    reached += sum(1 for m in config.spawn_rate_milestones if rate >= m)
    chance = (config.spawn_chance_base + reached * config.spawn_chance_step) * region.hostile_risk
    return min(config.spawn_chance_cap, chance)


# ---------------------------------------------------------------------------
# Summon outcomes
# ---------------------------------------------------------------------------

def summon_probabilities(level: int) -> tuple[tuple[int, float], ...]:
    """Tier distribution for a luck level; out-of-range levels are clamped."""
    return SUMMON_LUCK_TABLE[min(max(level, MIN_LUCK_LEVEL), MAX_LUCK_LEVEL)]


def roll_summon_tier(level: int, rng: DeterministicRNG, key: int, tick: int) -> int:
    roll = rng.next_float(Domain.SUMMON_TIER, key, tick)
    cumulative = 0.0
    table = summon_probabilities(level)
    for tier, probability in table:
        cumulative += probability
        if roll < cumulative:
            return tier
    return table[-1][0]


def gated_shop_open(luck_level: int) -> bool:
    return luck_level >= MAX_LUCK_LEVEL
