"""Tests for the EngineManager and the REST route functions.

Route functions are called directly with an explicit manager, the same
way FastAPI would after dependency injection.
"""

import time
import unittest

from fastapi import HTTPException

from manamerge.actions.base import ActionIntent
from manamerge.api.app import create_app
from manamerge.api.dependencies import get_engine_manager, set_engine_manager
from manamerge.api.engine_manager import EngineManager
from manamerge.api.routes import actions, state
from manamerge.api.routes.config import get_config
from manamerge.api.routes.control import ControlAction, control
from manamerge.api.schemas import CellRequest, MoveRequest
from manamerge.config import GameConfig
from manamerge.core.enums import ActionType, RegionId
from manamerge.core.models import Vector2, make_creature
from manamerge.persistence import records as rec
from manamerge.persistence.store import MemoryStore

T0 = 1_000_000.0


class FakeClock:
    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _build_manager(store=None, clock=None, **overrides):
    cfg = GameConfig(**overrides)
    return EngineManager(cfg, store=store or MemoryStore(), clock=clock or FakeClock())


def _give_mana(mgr: EngineManager, amount: float) -> None:
    mgr.loop.state.economy.add(amount)


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def _place_creature(mgr: EngineManager, x: int, y: int, tier: int = 1) -> None:
    board = mgr.loop.state.board.copy()
    board.set(Vector2(x, y), make_creature(tier, mgr.config.max_tier))
    mgr.loop.commit_board(RegionId.PLAINS, board, mgr.clock())


class TestEngineManager(unittest.TestCase):

    def test_new_game(self):
        store = MemoryStore()
        mgr = _build_manager(store=store)
        snap = mgr.get_snapshot()
        self.assertIsNotNone(snap)
        self.assertEqual(snap.mana, 0.0)
        self.assertEqual(len(snap.log), 1)
        self.assertEqual(mgr.offline_reward, 0)
        self.assertIsNotNone(store.get(rec.TIME_KEY))

    def test_inline_submit_when_stopped(self):
        mgr = _build_manager(spawn_chance_base=0.0)
        _give_mana(mgr, 100.0)
        result = mgr.submit(ActionIntent(ActionType.SUMMON))
        self.assertTrue(result.ok)
        self.assertEqual(mgr.get_snapshot().mana, 90.0)
        self.assertEqual(mgr.get_snapshot().board.occupied_count, 1)

    def test_offline_reward_on_reload(self):
        store = MemoryStore()
        clock = FakeClock()
        first = _build_manager(store=store, clock=clock)
        _place_creature(first, 0, 0)
        first.save_now()

        clock.now = T0 + 100
        second = _build_manager(store=store, clock=clock)
        self.assertEqual(second.offline_reward, 250)
        self.assertEqual(second.get_snapshot().mana, 250.0)

        # The reload already saved; a third load pays nothing more.
        third = _build_manager(store=store, clock=clock)
        self.assertEqual(third.offline_reward, 0)
        self.assertEqual(third.get_snapshot().mana, 250.0)

    def test_reset_wipes_save(self):
        store = MemoryStore()
        mgr = _build_manager(store=store)
        _give_mana(mgr, 500.0)
        _place_creature(mgr, 1, 1)
        mgr.reset()
        snap = mgr.get_snapshot()
        self.assertEqual(snap.mana, 0.0)
        self.assertEqual(snap.board.occupied_count, 0)
        self.assertFalse(mgr.running)

    def test_background_thread(self):
        mgr = EngineManager(
            GameConfig(poll_interval=0.01, spawn_chance_base=0.0),
            store=MemoryStore(),
            clock=time.time,
        )
        _give_mana(mgr, 100.0)
        mgr.start()
        try:
            self.assertTrue(mgr.running)
            result = mgr.submit(ActionIntent(ActionType.SUMMON), timeout=5.0)
            self.assertTrue(result.ok)
        finally:
            mgr.stop()
        self.assertFalse(mgr.running)
        self.assertEqual(mgr.get_snapshot().board.occupied_count, 1)

    def test_idle_income_saved_without_stop(self):
        store = MemoryStore()
        clock = FakeClock()
        first = _build_manager(store=store, clock=clock)
        _place_creature(first, 0, 0)
        first.save_now()

        # Reloaded at the same instant: clean debouncer, 10 mana/s of income.
        mgr = _build_manager(
            store=store, clock=clock, poll_interval=0.01,
            save_max_wait_seconds=3.0, hostile_tick_seconds=1e6,
        )
        mgr.start()
        try:
            clock.now = T0 + 5
            self.assertTrue(_wait_for(lambda: mgr.get_snapshot().mana >= 50.0))
            # Income every period keeps the save from going quiet; max wait forces it.
            clock.now = T0 + 9
            self.assertTrue(_wait_for(lambda: rec.mana_adapter.validate_json(store.get(rec.MANA_KEY)) >= 90.0))
        finally:
            mgr.stop()

    def test_dependency_registry(self):
        mgr = _build_manager()
        set_engine_manager(mgr)
        try:
            self.assertIs(get_engine_manager(), mgr)
        finally:
            set_engine_manager(None)
        with self.assertRaises(RuntimeError):
            get_engine_manager()


class TestStateRoutes:

    def setup_method(self):
        self.mgr = _build_manager()

    def test_state_payload(self):
        resp = state.get_state(log_limit=20, manager=self.mgr)
        assert resp.mana == 0.0
        assert resp.active_region == "plains"
        assert resp.prices.summon == 10.0
        assert len(resp.board.cells) == 25
        assert [r.region_id for r in resp.regions] == ["plains", "mine", "sky"]
        assert len(resp.log) == 1
        assert set(resp.inventory) == {"shuffle", "bomb", "barrier", "boost", "elixir", "armageddon"}

    def test_log_limit(self):
        assert state.get_state(log_limit=0, manager=self.mgr).log == []

    def test_region_board(self):
        board = state.get_region_board("mine", manager=self.mgr)
        assert board.region_id == "mine"
        try:
            state.get_region_board("atlantis", manager=self.mgr)
        except HTTPException as exc:
            assert exc.status_code == 404
        else:
            raise AssertionError("expected 404")

    def test_shop_and_upgrades(self):
        shop = {item.item_id: item for item in state.get_shop(manager=self.mgr)}
        assert len(shop) == 6
        assert shop["bomb"].available
        assert not shop["elixir"].available

        upgrades = {u.kind: u for u in state.get_upgrades(manager=self.mgr)}
        assert upgrades["summon_luck"].level == 1
        assert upgrades["summon_luck"].next_cost == 1000.0
        assert upgrades["offline_time"].value == 7200.0

    def test_cue_feed_drains(self):
        try:
            actions.summon(manager=self.mgr)
        except HTTPException:
            pass
        cues = state.drain_cues(manager=self.mgr)
        assert [c.cue for c in cues] == ["error"]
        assert state.drain_cues(manager=self.mgr) == []


class TestActionRoutes:

    def setup_method(self):
        self.mgr = _build_manager(spawn_chance_base=0.0)

    def _expect_status(self, status, fn, *args, **kwargs):
        try:
            fn(*args, manager=self.mgr, **kwargs)
        except HTTPException as exc:
            assert exc.status_code == status
            return exc
        raise AssertionError(f"expected HTTP {status}")

    def test_rejection_is_409_with_reason(self):
        exc = self._expect_status(409, actions.summon)
        assert exc.detail["reason"] == "insufficient_mana"

    def test_unknown_ids_are_404(self):
        self._expect_status(404, actions.buy_item, "nope")
        self._expect_status(404, actions.use_item, "nope")
        self._expect_status(404, actions.unlock_region, "atlantis")
        self._expect_status(404, actions.upgrade, "speed")
        self._expect_status(404, actions.drag, "sideways")

    def test_summon_then_move(self):
        _give_mana(self.mgr, 100.0)
        resp = actions.summon(manager=self.mgr)
        assert resp.ok and resp.mana == 90.0

        (pos, _), = list(self.mgr.loop.state.board.occupied())
        dest = Vector2(4, 4) if pos != Vector2(4, 4) else Vector2(0, 0)
        resp = actions.move(
            MoveRequest(from_x=pos.x, from_y=pos.y, to_x=dest.x, to_y=dest.y), manager=self.mgr,
        )
        assert resp.ok
        assert self.mgr.get_snapshot().board.get(dest) is not None

    def test_purge_drop(self):
        _give_mana(self.mgr, 500.0)
        _place_creature(self.mgr, 2, 2)
        actions.drag("begin", manager=self.mgr)
        assert self.mgr.get_snapshot().dragging
        resp = actions.purge(CellRequest(x=2, y=2, drop=True), manager=self.mgr)
        assert resp.ok
        snap = self.mgr.get_snapshot()
        assert not snap.dragging
        assert snap.board.occupied_count == 0

    def test_buy_and_use(self):
        _give_mana(self.mgr, 1_000.0)
        actions.buy_item("boost", manager=self.mgr)
        resp = actions.use_item("boost", manager=self.mgr)
        assert resp.ok
        assert self.mgr.get_snapshot().boost_expires_at == T0 + self.mgr.config.boost_seconds

    def test_unlock_prerequisite(self):
        exc = self._expect_status(409, actions.unlock_region, "mine")
        assert exc.detail["reason"] == "prerequisite"


class TestControlAndConfig:

    def setup_method(self):
        self.mgr = _build_manager()

    def test_pause_requires_running(self):
        assert control(ControlAction.pause, manager=self.mgr).status == "error"

    def test_save_and_reset(self):
        assert control(ControlAction.save, manager=self.mgr).status == "ok"
        _give_mana(self.mgr, 50.0)
        resp = control(ControlAction.reset, manager=self.mgr)
        assert resp.status == "ok"
        assert self.mgr.get_snapshot().mana == 0.0

    def test_config(self):
        cfg = get_config(manager=self.mgr)
        assert cfg.seed == 42
        assert cfg.board_width == 5
        assert cfg.hostile_tick_seconds == 5.0

    def test_app_routes(self):
        app = create_app(GameConfig())
        assert app.url_path_for("get_state") == "/api/v1/state"
        assert app.url_path_for("move") == "/api/v1/actions/move"
        assert app.url_path_for("control", action="pause") == "/api/v1/control/pause"
