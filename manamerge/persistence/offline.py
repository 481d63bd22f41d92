"""Offline catch-up reward."""

from __future__ import annotations

import math


def offline_reward(rate: float, elapsed: float, efficiency: float, max_seconds: float) -> int:
    """Mana earned while the game was closed.

    ``floor(rate * min(elapsed, max_seconds) * efficiency)``. Negative
    elapsed time (clock moved backwards) counts as zero, so the reward is
    non-decreasing in elapsed time and flat past the cap.
    """
    seconds = min(max(elapsed, 0.0), max(max_seconds, 0.0))
    if seconds <= 0 or rate <= 0 or efficiency <= 0:
        return 0
    return math.floor(rate * seconds * min(efficiency, 1.0))
