"""Tests for production, cost curves, spawn odds and summon luck."""

import pytest

from manamerge.config import GameConfig
from manamerge.core.board import Board
from manamerge.core.economy import EconomyState
from manamerge.core.enums import ConsumableId, HostileVariant, RegionId, UpgradeKind
from manamerge.core.models import Vector2, make_creature, make_hostile
from manamerge.core.regions import fresh_regions, region_def
from manamerge.core.shop import CONSUMABLE_DEFS, MAX_LUCK_LEVEL, SUMMON_LUCK_TABLE
from manamerge.systems.economy import (
    aggregate_production,
    consumable_price,
    entity_rate,
    gated_shop_open,
    hostile_spawn_chance,
    offline_efficiency_level,
    offline_time_level,
    production_rate,
    purge_cost,
    roll_summon_tier,
    shuffle_cost,
    summon_cost,
    summon_probabilities,
    upgrade_cost,
)
from manamerge.systems.rng import DeterministicRNG

CFG = GameConfig()


class TestProduction:

    def test_entity_rate_grows_geometrically(self):
        assert entity_rate(1, CFG) == pytest.approx(10.0)
        assert entity_rate(2, CFG) == pytest.approx(16.0)
        assert entity_rate(3, CFG) == pytest.approx(25.6)

    def test_board_rate_counts_hostiles(self):
        board = Board(5, 5)
        board.set(Vector2(0, 0), make_creature(1, 10))
        board.set(Vector2(1, 0), make_hostile(2, HostileVariant.DRAINER, 10))
        assert production_rate(board, CFG) == pytest.approx(26.0)

    def test_empty_board_is_zero(self):
        assert production_rate(Board(5, 5), CFG) == 0.0

    def test_aggregate_skips_locked_regions(self):
        regions = fresh_regions(5, 5)
        regions[RegionId.PLAINS].board.set(Vector2(0, 0), make_creature(1, 10))
        regions[RegionId.MINE].board.set(Vector2(0, 0), make_creature(1, 10))
        assert aggregate_production(regions.values(), 0.0, CFG) == pytest.approx(10.0)

        regions[RegionId.MINE].unlocked = True
        assert aggregate_production(regions.values(), 0.0, CFG) == pytest.approx(25.0)


class TestCosts:

    def test_summon_floor(self):
        assert summon_cost(0.0, 0.0, CFG) == CFG.summon_floor

    def test_summon_scales_with_balance_and_rate(self):
        assert summon_cost(1_000.0, 0.0, CFG) == pytest.approx(100.0)
        assert summon_cost(0.0, 100.0, CFG) == pytest.approx(500.0)

    def test_purge_ignores_balance(self):
        assert purge_cost(0.0, CFG) == CFG.purge_floor
        assert purge_cost(10.0, CFG) == pytest.approx(300.0)

    def test_shuffle_floor(self):
        assert shuffle_cost(1.0, CFG) == CFG.shuffle_floor

    def test_consumable_price(self):
        bomb = CONSUMABLE_DEFS[ConsumableId.BOMB]
        assert consumable_price(bomb, 0.0) == bomb.min_price
        assert consumable_price(bomb, 100.0) == pytest.approx(6_000.0)

    def test_upgrade_cost_doubles(self):
        costs = [upgrade_cost(UpgradeKind.SUMMON_LUCK, lvl, CFG) for lvl in (1, 2, 3)]
        assert costs == [1_000.0, 2_000.0, 4_000.0]

    def test_offline_levels_from_stats(self):
        assert offline_efficiency_level(0.25, CFG) == 1
        assert offline_efficiency_level(0.30, CFG) == 2
        assert offline_efficiency_level(1.0, CFG) == 16
        assert offline_time_level(7_200.0, CFG) == 1
        assert offline_time_level(10_800.0, CFG) == 2
        assert offline_time_level(43_200.0, CFG) == 11


class TestSpawnChance:

    def test_base_chance_in_plains(self):
        plains = region_def(RegionId.PLAINS)
        assert hostile_spawn_chance(0.0, 0.0, plains, CFG) == pytest.approx(0.05)

    def test_milestones_add_steps(self):
        plains = region_def(RegionId.PLAINS)
        assert hostile_spawn_chance(1_000.0, 0.0, plains, CFG) == pytest.approx(0.10)
        assert hostile_spawn_chance(1_000.0, 100.0, plains, CFG) == pytest.approx(0.15)

    def test_riskier_regions(self):
        plains = hostile_spawn_chance(0.0, 0.0, region_def(RegionId.PLAINS), CFG)
        mine = hostile_spawn_chance(0.0, 0.0, region_def(RegionId.MINE), CFG)
        sky = hostile_spawn_chance(0.0, 0.0, region_def(RegionId.SKY), CFG)
        assert plains < mine < sky

    def test_capped(self):
        cfg = GameConfig(spawn_chance_step=0.2)
        sky = region_def(RegionId.SKY)
        assert hostile_spawn_chance(1e9, 1e9, sky, cfg) == cfg.spawn_chance_cap


class TestSummonLuck:

    @pytest.mark.parametrize("level", sorted(SUMMON_LUCK_TABLE))
    def test_rows_sum_to_one(self, level):
        assert sum(p for _, p in SUMMON_LUCK_TABLE[level]) == pytest.approx(1.0)

    def test_expected_tier_rises_with_level(self):
        expected = [sum(t * p for t, p in summon_probabilities(lvl)) for lvl in sorted(SUMMON_LUCK_TABLE)]
        assert all(a < b for a, b in zip(expected, expected[1:]))

    def test_out_of_range_levels_clamped(self):
        assert summon_probabilities(0) == SUMMON_LUCK_TABLE[1]
        assert summon_probabilities(99) == SUMMON_LUCK_TABLE[MAX_LUCK_LEVEL]

    def test_rolls_stay_in_table(self):
        rng = DeterministicRNG(3)
        tiers = {roll_summon_tier(1, rng, key, 0) for key in range(200)}
        assert tiers <= {1, 2, 3}
        assert 1 in tiers

    def test_gated_shop(self):
        assert not gated_shop_open(MAX_LUCK_LEVEL - 1)
        assert gated_shop_open(MAX_LUCK_LEVEL)


class TestEconomyState:

    def test_negative_start_rejected(self):
        with pytest.raises(ValueError):
            EconomyState(mana=-1.0)

    def test_consume_is_all_or_nothing(self):
        econ = EconomyState(mana=50.0)
        assert not econ.consume(60.0)
        assert econ.mana == 50.0
        assert econ.consume(50.0)
        assert econ.mana == 0.0

    def test_drain_clamps(self):
        econ = EconomyState(mana=15.0)
        assert econ.drain(20.0) == 15.0
        assert econ.mana == 0.0

    def test_boost_window(self):
        econ = EconomyState(boost_multiplier=2.0, boost_expires_at=100.0)
        assert econ.temporary_multiplier(99.0) == 2.0
        assert econ.temporary_multiplier(100.0) == 1.0

    def test_inventory_defaults(self):
        econ = EconomyState(inventory={ConsumableId.BOMB: 2})
        assert econ.inventory[ConsumableId.SHUFFLE] == 0
        assert econ.take_item(ConsumableId.BOMB)
        assert econ.inventory[ConsumableId.BOMB] == 1
        assert not econ.take_item(ConsumableId.ELIXIR)
