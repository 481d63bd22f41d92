"""Thread-safe intent queue connecting API threads to the engine thread."""

from __future__ import annotations

import queue
from concurrent.futures import Future
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from manamerge.actions.base import ActionIntent, ActionResult


class ActionQueue:
    """MPSC (multiple-producer, single-consumer) queue for ActionIntents.

    Request threads push intents and wait on the returned Future; the
    engine thread drains and resolves them in arrival order.
    """

    __slots__ = ("_queue",)

    def __init__(self) -> None:
        self._queue: queue.Queue[tuple[ActionIntent, Future[ActionResult]]] = queue.Queue()

    def push(self, intent: ActionIntent) -> Future[ActionResult]:
        """Thread-safe enqueue."""
        future: Future[ActionResult] = Future()
        self._queue.put_nowait((intent, future))
        return future

    def drain(self) -> list[tuple[ActionIntent, Future[ActionResult]]]:
        """Drain all pending intents (called on the engine thread)."""
        items: list[tuple[ActionIntent, Future[ActionResult]]] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return items

    @property
    def empty(self) -> bool:
        return self._queue.empty()
