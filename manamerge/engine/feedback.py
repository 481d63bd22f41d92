"""Feedback sink: where the loop sends audio/haptic cue requests.

Playback is someone else's job; the loop only decides which cue fires and
how intense it is.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from manamerge.core.enums import Cue

logger = logging.getLogger(__name__)


class FeedbackSink(Protocol):
    def play_cue(self, cue: Cue, intensity: float = 1.0) -> None: ...


class NullFeedback:
    """Discards every cue."""

    __slots__ = ()

    def play_cue(self, cue: Cue, intensity: float = 1.0) -> None:
        logger.debug("cue %s (%.2f)", cue.value, intensity)


class RecordingFeedback:
    """Keeps every cue in order; used by tests and the HTTP cue feed."""

    __slots__ = ("_cues", "_lock", "_limit")

    def __init__(self, limit: int = 200) -> None:
        self._cues: list[tuple[Cue, float]] = []
        self._lock = threading.Lock()
        self._limit = limit

    def play_cue(self, cue: Cue, intensity: float = 1.0) -> None:
        with self._lock:
            self._cues.append((cue, intensity))
            if len(self._cues) > self._limit:
                del self._cues[: len(self._cues) - self._limit]

    @property
    def cues(self) -> list[tuple[Cue, float]]:
        with self._lock:
            return list(self._cues)

    def drain(self) -> list[tuple[Cue, float]]:
        with self._lock:
            cues, self._cues = self._cues, []
        return cues
