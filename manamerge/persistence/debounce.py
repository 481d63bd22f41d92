"""Save debouncing: coalesce bursts of mutations into one write."""

from __future__ import annotations


class SaveDebouncer:
    """Tracks the last mutation; a save is due after a quiet period.

    ``touch`` restarts the quiet period, so ten mutations 100 ms apart
    produce a single save one quiet period after the last of them. A
    steady stream of mutations (idle income every second) never goes
    quiet, so a save is also due once ``max_wait`` has passed since the
    first unsaved mutation.
    """

    __slots__ = ("_quiet", "_max_wait", "_last_touch", "_first_dirty", "_dirty")

    def __init__(self, quiet_seconds: float = 1.0, max_wait_seconds: float = 10.0) -> None:
        self._quiet = quiet_seconds
        self._max_wait = max(max_wait_seconds, quiet_seconds)
        self._last_touch = 0.0
        self._first_dirty = 0.0
        self._dirty = False

    @property
    def dirty(self) -> bool:
        return self._dirty

    def touch(self, now: float) -> None:
        if not self._dirty:
            self._first_dirty = now
        self._dirty = True
        self._last_touch = now

    def due(self, now: float) -> bool:
        """True exactly once per burst, after the quiet period or the max wait."""
        if not self._dirty:
            return False
        if now - self._last_touch >= self._quiet or now - self._first_dirty >= self._max_wait:
            self._dirty = False
            return True
        return False

    def flush(self) -> bool:
        """Claim any pending save regardless of timing (teardown)."""
        pending, self._dirty = self._dirty, False
        return pending
