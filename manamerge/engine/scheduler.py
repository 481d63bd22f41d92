"""Explicit tick scheduler: named periodic timers polled with a caller-supplied clock."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Timer:
    period: float
    next_due: float


class TickScheduler:
    """Periodic timers that never fire by themselves.

    ``poll(now)`` reports how many whole periods of each timer elapsed
    since the previous poll, so a stalled caller catches up instead of
    silently losing ticks. Nothing here sleeps or spawns threads.
    """

    __slots__ = ("_timers",)

    def __init__(self) -> None:
        self._timers: dict[str, _Timer] = {}

    def add(self, name: str, period: float, now: float) -> None:
        if period <= 0:
            raise ValueError(f"Timer {name!r} needs a positive period, got {period}")
        self._timers[name] = _Timer(period=period, next_due=now + period)

    def remove(self, name: str) -> None:
        self._timers.pop(name, None)

    def clear(self) -> None:
        self._timers.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._timers

    @property
    def names(self) -> list[str]:
        return list(self._timers)

    def poll(self, now: float) -> dict[str, int]:
        """Elapsed period count per timer; timers with nothing due report 0."""
        fired: dict[str, int] = {}
        for name, timer in self._timers.items():
            if now < timer.next_due:
                fired[name] = 0
                continue
            count = int(math.floor((now - timer.next_due) / timer.period)) + 1
            timer.next_due += count * timer.period
            fired[name] = count
        return fired

    def reset(self, name: str, now: float) -> None:
        timer = self._timers.get(name)
        if timer is not None:
            timer.next_due = now + timer.period
