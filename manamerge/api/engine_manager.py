"""EngineManager — runs the GameLoop on a background thread.

The API reads from an atomically-swapped immutable Snapshot and submits
intents through an ActionQueue; the GameLoop mutates GameState exclusively
on the engine thread (Single-Writer preserved).
"""

from __future__ import annotations

import concurrent.futures
import logging
import threading
import time
from typing import TYPE_CHECKING, Callable

from manamerge.actions.base import ActionResult
from manamerge.core.enums import Rejection
from manamerge.core.snapshot import Snapshot
from manamerge.engine.action_queue import ActionQueue
from manamerge.engine.feedback import RecordingFeedback
from manamerge.engine.game_loop import GameLoop
from manamerge.engine.scheduler import TickScheduler
from manamerge.persistence.debounce import SaveDebouncer
from manamerge.persistence.save import load, restore, save
from manamerge.persistence.store import JsonFileStore
from manamerge.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    from manamerge.actions.base import ActionIntent
    from manamerge.config import GameConfig
    from manamerge.persistence.store import KeyValueStore

logger = logging.getLogger(__name__)

HOSTILE_TIMER = "hostile"
ACCRUAL_TIMER = "accrual"


class EngineManager:
    """Manages the game lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - intent submission (queue + Future per intent)
      - control commands (start / pause / resume / stop / reset)

    While the thread is not running, ``submit`` applies intents inline
    under the same write lock, so there is still exactly one writer at a
    time.
    """

    def __init__(
        self,
        config: GameConfig,
        store: KeyValueStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self.config = config
        self._store: KeyValueStore = store if store is not None else JsonFileStore(config.save_path)
        self._clock = clock

        # Game components (built in _build)
        self._loop: GameLoop | None = None
        self._scheduler = TickScheduler()
        self._debouncer = SaveDebouncer(config.save_debounce_seconds, config.save_max_wait_seconds)
        self._queue = ActionQueue()
        self.feedback = RecordingFeedback()
        self.offline_reward: int = 0

        # Thread-safe shared state
        self._write_lock = threading.RLock()
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: Snapshot | None = None

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def loop(self) -> GameLoop:
        assert self._loop is not None
        return self._loop

    def clock(self) -> float:
        return self._clock()

    # -- snapshot access --

    def get_snapshot(self) -> Snapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- intents --

    def submit(self, intent: ActionIntent, timeout: float | None = None) -> ActionResult:
        """Apply *intent* on the engine thread and wait for its result."""
        if not self._running.is_set():
            with self._write_lock:
                result = self.loop.submit(intent, self._clock())
                self._publish_snapshot()
            return result

        future = self._queue.push(intent)
        try:
            return future.result(timeout=timeout or self._config.intent_timeout_seconds)
        except concurrent.futures.TimeoutError:
            logger.warning("Intent %r timed out", intent)
            return ActionResult.reject(Rejection.BUSY, "engine did not answer in time")

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        now = self._clock()
        self._scheduler.add(HOSTILE_TIMER, self._config.hostile_tick_seconds, now)
        self._scheduler.add(ACCRUAL_TIMER, self._config.accrual_seconds, now)
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="engine-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (poll=%.3fs)", self._config.poll_interval)

    def pause(self) -> None:
        """Freeze the timers; intents are still applied."""
        self._paused.set()
        logger.info("EngineManager paused")

    def resume(self) -> None:
        now = self._clock()
        with self._write_lock:
            for name in self._scheduler.names:
                self._scheduler.reset(name, now)
        self._paused.clear()
        logger.info("EngineManager resumed")

    def stop(self) -> None:
        """Tear down the thread and timers, then write a final save."""
        self._stop_requested.set()
        self._paused.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        self._thread = None
        self._running.clear()
        with self._write_lock:
            self._scheduler.clear()
            self._fail_pending("engine stopped")
            self._debouncer.flush()
            self.save_now()
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, wipe the save, and rebuild a fresh game (not started)."""
        was_running = self.running
        self.stop()
        with self._write_lock:
            with self._store.batch():
                for key in self._store.keys():
                    if key.startswith("mmt_"):
                        self._store.delete(key)
            self._build()
        logger.info("EngineManager reset.")
        if was_running:
            self.start()

    def save_now(self) -> None:
        with self._write_lock:
            save(self.loop.state, self._store, self._clock())

    # -- internals --

    def _build(self) -> None:
        """Load (or create) the game and wire the loop to the save debouncer."""
        cfg = self._config
        now = self._clock()
        state, self.offline_reward = restore(load(self._store, cfg), cfg, now)
        self._loop = GameLoop(cfg, state, DeterministicRNG(cfg.seed), feedback=self.feedback)
        self._loop.on_mutation = self._on_mutation
        self._loop.recompute(now)
        # Persist right away so an offline reward is never paid twice.
        save(state, self._store, now)
        self._publish_snapshot()

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Engine thread started.")
        loop = self.loop

        while not self._stop_requested.is_set():
            now = self._clock()
            with self._write_lock:
                changed = self._drain_intents(now)

                if not self._paused.is_set():
                    fired = self._scheduler.poll(now)
                    for _ in range(fired.get(HOSTILE_TIMER, 0)):
                        changed |= loop.hostile_tick(now) is not None
                    if fired.get(ACCRUAL_TIMER, 0):
                        loop.accrue(now, fired[ACCRUAL_TIMER])
                        changed = True

                if self._debouncer.due(now):
                    save(loop.state, self._store, now)

                if changed:
                    self._publish_snapshot()

            time.sleep(self._config.poll_interval)

        self._running.clear()
        logger.info("Engine thread exited.")

    def _drain_intents(self, now: float) -> bool:
        items = self._queue.drain()
        for intent, future in items:
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = self.loop.submit(intent, now)
            except Exception as exc:
                logger.exception("Intent %r failed", intent)
                future.set_exception(exc)
            else:
                future.set_result(result)
            # Each intent is its own atomic step for readers.
            self._publish_snapshot()
        return bool(items)

    def _on_mutation(self, now: float) -> None:
        self._debouncer.touch(now)
        # Publish mid-chain too, so paced combo steps are visible one by one.
        self._publish_snapshot()

    def _fail_pending(self, reason: str) -> None:
        for _, future in self._queue.drain():
            if future.set_running_or_notify_cancel():
                future.set_result(ActionResult.reject(Rejection.BUSY, reason))

    def _publish_snapshot(self) -> None:
        snap = self.loop.create_snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap
