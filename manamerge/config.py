"""Game configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """Immutable configuration for a game session."""

    # Board
    seed: int = 42
    board_width: int = 5
    board_height: int = 5
    max_tier: int = 10
    min_match: int = 3
    bonus_match: int = 5                 # merges this large produce a second output

    # Timing (seconds)
    hostile_tick_seconds: float = 5.0
    accrual_seconds: float = 1.0
    save_debounce_seconds: float = 1.0
    save_max_wait_seconds: float = 10.0  # continuous idle income still saves this often
    combo_step_delay: float = 0.0        # pacing between combo steps, feedback only
    poll_interval: float = 0.05          # engine thread idle sleep
    intent_timeout_seconds: float = 5.0

    # Production: rate = base * growth ** (tier - 1)
    base_rate: float = 10.0
    rate_growth: float = 1.6

    # Summon: max(floor, fraction * balance, seconds * rate)
    summon_floor: float = 10.0
    summon_balance_fraction: float = 0.1
    summon_seconds: float = 5.0

    # Purge / shuffle: max(floor, seconds * rate), independent of balance
    purge_floor: float = 100.0
    purge_seconds: float = 30.0
    shuffle_floor: float = 500.0
    shuffle_seconds: float = 60.0

    # Hostile spawn chance on summon
    spawn_chance_base: float = 0.05
    spawn_chance_step: float = 0.05
    spawn_balance_milestones: tuple = (1_000, 10_000, 100_000, 1_000_000)
    spawn_rate_milestones: tuple = (100, 1_000, 10_000)
    spawn_chance_cap: float = 0.8

    # Hostile behaviour (independent Bernoulli draws per entity per tick)
    drainer_steal_chance: float = 0.10
    drainer_steal_per_tier: float = 10.0
    drainer_spread_chance: float = 0.05
    sealer_lock_chance: float = 0.08
    phantom_steal_chance: float = 0.25
    phantom_steal_per_tier: float = 25.0
    phantom_warp_chance: float = 0.15

    # Combat
    defeat_reward_per_tier: float = 50.0
    combo_pitch_step: float = 0.1

    # Buffs
    boost_multiplier: float = 2.0
    boost_seconds: float = 60.0
    barrier_seconds: float = 120.0

    # Upgrades
    summon_luck_base_cost: float = 1000.0
    offline_efficiency_base: float = 0.25
    offline_efficiency_step: float = 0.05
    offline_efficiency_max: float = 1.0
    offline_efficiency_base_cost: float = 2000.0
    offline_time_base: float = 7200.0
    offline_time_step: float = 3600.0
    offline_time_max: float = 43200.0
    offline_time_base_cost: float = 1500.0

    # Log
    log_capacity: int = 50
    reward_capacity: int = 20

    # Persistence
    save_path: str = "savegame.json"

    # Logging
    log_level: str = "INFO"
