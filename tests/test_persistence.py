"""Tests for save/load, legacy migration, offline reward and storage backends.

Covers:
- Round trip of every record through a MemoryStore
- Legacy single-board migration happens exactly once
- A corrupt record falls back to its default without affecting the others
- Offline reward: zero cases, monotonic in elapsed time, flat past the cap
- JsonFileStore persistence, corrupt file handling, batched writes
- SaveDebouncer coalescing and max wait under a steady stream
- RNG counters survive a reload
"""

import json

import pytest

from manamerge.config import GameConfig
from manamerge.core.enums import ConsumableId, HostileVariant, RegionId
from manamerge.core.game_state import GameState
from manamerge.core.models import Vector2, make_creature, make_hostile
from manamerge.persistence import records as rec
from manamerge.persistence.debounce import SaveDebouncer
from manamerge.persistence.offline import offline_reward
from manamerge.persistence.save import load, restore, save
from manamerge.persistence.store import JsonFileStore, MemoryStore

CFG = GameConfig()
NOW = 1_000_000.0


def _make_state(mana: float = 250.0) -> GameState:
    state = GameState(CFG, initial_mana=mana)
    board = state.board.copy()
    board.set(Vector2(0, 0), make_creature(1, CFG.max_tier))
    board.set(Vector2(4, 4), make_hostile(2, HostileVariant.SEALER, CFG.max_tier))
    board.set_locked(Vector2(2, 2), True)
    state.set_board(RegionId.PLAINS, board)
    return state


def _legacy_grid() -> str:
    rows = [
        [
            {"x": 0, "y": 0, "item": {"id": "a", "tier": 2, "type": "creature"}},
            {"x": 1, "y": 0, "item": None, "isLocked": True},
        ],
        [
            {"x": 0, "y": 1, "item": {"id": "b", "tier": 1, "type": "enemy"}},
            {"x": 9, "y": 9, "item": {"id": "c", "tier": 1, "type": "plant"}},
        ],
    ]
    return json.dumps(rows)


# ---------------------------------------------------------------------------
# Save / load
# ---------------------------------------------------------------------------

class TestRoundTrip:

    def test_empty_store_loads_nothing(self):
        assert load(MemoryStore(), CFG) is None

    def test_fresh_game_when_nothing_saved(self):
        state, reward = restore(None, CFG, NOW)
        assert reward == 0
        assert state.economy.mana == 0.0
        assert len(state.log) == 1

    def test_round_trip(self):
        state = _make_state()
        state.economy.inventory[ConsumableId.BOMB] = 3
        state.economy.upgrades.summon_luck = 4
        state.economy.boost_expires_at = NOW + 30
        state.defeats = 7
        store = MemoryStore()
        save(state, store, NOW)

        loaded = load(store, CFG)
        assert loaded is not None
        assert not loaded.migrated
        assert loaded.mana == 250.0
        assert loaded.defeats == 7
        assert loaded.last_saved == NOW
        assert loaded.upgrades.summon_luck == 4
        assert loaded.inventory[ConsumableId.BOMB] == 3
        assert loaded.boost_expires_at == NOW + 30

        board = loaded.regions[RegionId.PLAINS].board
        assert board.get(Vector2(0, 0)).tier == 1
        hostile = board.get(Vector2(4, 4))
        assert hostile.is_hostile and hostile.variant == HostileVariant.SEALER
        assert board.is_locked(Vector2(2, 2))
        assert not loaded.regions[RegionId.MINE].unlocked

    def test_rng_counters_continue_after_reload(self):
        state = _make_state()
        state.tick = 40
        state.next_seq()
        state.next_seq()
        store = MemoryStore()
        save(state, store, NOW)

        restored, _ = restore(load(store, CFG), CFG, NOW)
        assert restored.tick == 40
        assert restored.action_seq == 2
        assert restored.next_seq() == 3

    def test_offline_reward_paid_once(self):
        store = MemoryStore()
        save(_make_state(mana=0.0), store, NOW)

        # Plains holds 10 + 16 mana/s; 100 s at 25% efficiency.
        state, reward = restore(load(store, CFG), CFG, NOW + 100)
        assert reward == 650
        assert state.economy.mana == 650.0

        save(state, store, NOW + 100)
        again, second = restore(load(store, CFG), CFG, NOW + 100)
        assert second == 0
        assert again.economy.mana == 650.0

    def test_offline_reward_capped(self):
        store = MemoryStore()
        save(_make_state(mana=0.0), store, NOW)
        _, capped = restore(load(store, CFG), CFG, NOW + CFG.offline_time_base)
        _, later = restore(load(store, CFG), CFG, NOW + 10 * CFG.offline_time_base)
        assert capped == later > 0

    def test_locked_active_region_falls_back(self):
        store = MemoryStore()
        save(_make_state(), store, NOW)
        store.set(rec.ACTIVE_REGION_KEY, json.dumps("sky"))
        assert load(store, CFG).active_region == RegionId.PLAINS


class TestCorruption:

    def test_bad_record_uses_default(self):
        store = MemoryStore()
        save(_make_state(), store, NOW)
        store.set(rec.MANA_KEY, "not json")
        store.set(rec.STATS_KEY, json.dumps({"defeats": -3}))

        loaded = load(store, CFG)
        assert loaded.mana == 0.0
        assert loaded.defeats == 0
        assert loaded.regions[RegionId.PLAINS].board.occupied_count == 2

    def test_bad_board_becomes_empty(self):
        store = MemoryStore()
        save(_make_state(), store, NOW)
        store.set(rec.board_key(RegionId.PLAINS), json.dumps({"width": 5, "height": 5, "cells": [
            {"x": 7, "y": 0},
        ]}))
        loaded = load(store, CFG)
        assert loaded.regions[RegionId.PLAINS].board.occupied_count == 0
        assert loaded.mana == 250.0

    def test_hostile_without_variant_rejected(self):
        with pytest.raises(ValueError):
            rec.EntityRecord(kind="hostile", tier=1)

    def test_millisecond_timestamp(self):
        store = MemoryStore()
        save(_make_state(), store, NOW)
        store.set(rec.TIME_KEY, json.dumps(1_700_000_000_000))
        assert load(store, CFG).last_saved == pytest.approx(1_700_000_000.0)


class TestLegacyMigration:

    def test_migrates_into_default_region(self):
        store = MemoryStore({rec.LEGACY_GRID_KEY: _legacy_grid(), rec.MANA_KEY: "250"})
        loaded = load(store, CFG)

        assert loaded.migrated
        assert loaded.mana == 250.0
        plains = loaded.regions[RegionId.PLAINS].board
        assert plains.get(Vector2(0, 0)).tier == 2
        assert plains.get(Vector2(0, 1)).variant == HostileVariant.DRAINER
        assert plains.is_locked(Vector2(1, 0))
        assert plains.occupied_count == 2
        for rid in (RegionId.MINE, RegionId.SKY):
            assert loaded.regions[rid].board.occupied_count == 0

    def test_migration_happens_once(self):
        store = MemoryStore({rec.LEGACY_GRID_KEY: _legacy_grid()})
        state, _ = restore(load(store, CFG), CFG, NOW)
        save(state, store, NOW)

        assert store.get(rec.LEGACY_GRID_KEY) is None
        assert not load(store, CFG).migrated

    def test_current_format_wins_over_legacy(self):
        store = MemoryStore()
        save(_make_state(), store, NOW)
        store.set(rec.LEGACY_GRID_KEY, _legacy_grid())
        loaded = load(store, CFG)
        assert not loaded.migrated
        assert loaded.regions[RegionId.PLAINS].board.get(Vector2(0, 1)) is None


# ---------------------------------------------------------------------------
# Offline reward
# ---------------------------------------------------------------------------

class TestOfflineReward:

    def test_zero_cases(self):
        assert offline_reward(0.0, 100.0, 0.5, 7200.0) == 0
        assert offline_reward(10.0, 0.0, 0.5, 7200.0) == 0
        assert offline_reward(10.0, -50.0, 0.5, 7200.0) == 0
        assert offline_reward(10.0, 100.0, 0.0, 7200.0) == 0

    def test_floor(self):
        assert offline_reward(3.0, 1.0, 0.25, 7200.0) == 0
        assert offline_reward(10.0, 100.0, 0.25, 7200.0) == 250

    def test_monotonic_and_flat_past_cap(self):
        values = [offline_reward(7.0, t, 0.3, 600.0) for t in range(0, 1200, 37)]
        assert values == sorted(values)
        assert offline_reward(7.0, 600.0, 0.3, 600.0) == offline_reward(7.0, 5_000.0, 0.3, 600.0)


# ---------------------------------------------------------------------------
# Storage backends
# ---------------------------------------------------------------------------

class TestJsonFileStore:

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "save.json"
        store = JsonFileStore(path)
        store.set("mmt_mana", "12.5")
        assert JsonFileStore(path).get("mmt_mana") == "12.5"

    def test_delete(self, tmp_path):
        path = tmp_path / "save.json"
        store = JsonFileStore(path)
        store.set("a", "1")
        store.delete("a")
        assert JsonFileStore(path).keys() == []

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "save.json"
        path.write_text("{ not json", encoding="utf-8")
        assert JsonFileStore(path).keys() == []

    def test_batch_defers_write(self, tmp_path):
        path = tmp_path / "save.json"
        store = JsonFileStore(path)
        with store.batch():
            store.set("a", "1")
            store.set("b", "2")
            assert not path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "2"}

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileStore(tmp_path / "save.json")
        for i in range(5):
            store.set("k", str(i))
        assert [p.name for p in tmp_path.iterdir()] == ["save.json"]

    def test_full_game_round_trip(self, tmp_path):
        store = JsonFileStore(tmp_path / "save.json")
        save(_make_state(), store, NOW)
        loaded = load(JsonFileStore(tmp_path / "save.json"), CFG)
        assert loaded.regions[RegionId.PLAINS].board.occupied_count == 2


class TestSaveDebouncer:

    def test_burst_coalesces_to_one_save(self):
        deb = SaveDebouncer(1.0)
        for t in (0.0, 0.1, 0.5, 0.9):
            deb.touch(t)
        assert not deb.due(1.5)
        assert deb.due(2.0)
        assert not deb.due(2.5)

    def test_steady_stream_saves_after_max_wait(self):
        deb = SaveDebouncer(1.0, max_wait_seconds=5.0)
        t = 0.0
        saves = []
        while t <= 12.0:
            deb.touch(t)
            if deb.due(t + 0.5):
                saves.append(t)
            t += 1.0
        # Touched every second, never quiet for 1 s; max wait still forces a save.
        assert saves == [5.0, 11.0]

    def test_max_wait_never_shorter_than_quiet(self):
        deb = SaveDebouncer(2.0, max_wait_seconds=0.5)
        deb.touch(0.0)
        assert not deb.due(1.0)
        assert deb.due(2.0)

    def test_clean_never_due(self):
        assert not SaveDebouncer(1.0).due(100.0)

    def test_flush(self):
        deb = SaveDebouncer(1.0)
        deb.touch(0.0)
        assert deb.flush()
        assert not deb.dirty
        assert not deb.flush()
