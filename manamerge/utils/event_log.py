"""Thread-safe, bounded game log (the in-game battle report)."""

from __future__ import annotations

import itertools
import threading
from collections import deque
from dataclasses import dataclass

from manamerge.core.enums import Severity


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One line of the player-facing log."""

    id: int
    timestamp: float
    text: str
    severity: Severity = Severity.INFO


class GameLog:
    """Append-only ring buffer; the oldest entries fall off past ``capacity``.

    Reads return newest-first copies, so the API thread never sees a
    buffer that the engine thread is still appending to.
    """

    __slots__ = ("_buffer", "_lock", "_ids")

    def __init__(self, capacity: int = 50) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._buffer: deque[LogEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    @property
    def capacity(self) -> int:
        return self._buffer.maxlen or 0

    def add(self, text: str, severity: Severity, now: float) -> LogEntry:
        with self._lock:
            entry = LogEntry(id=next(self._ids), timestamp=now, text=text, severity=severity)
            self._buffer.append(entry)
        return entry

    def entries(self) -> list[LogEntry]:
        """All retained entries, newest first."""
        with self._lock:
            items = list(self._buffer)
        items.reverse()
        return items

    def latest(self, count: int = 10) -> list[LogEntry]:
        return self.entries()[:count]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
