"""Region catalogue and per-region board state.

Regions are independently simulated boards. Each has an unlock cost, an
unlock prerequisite (cumulative hostile defeats) and a production
multiplier that is either static or follows the local time of day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from manamerge.core.board import Board
from manamerge.core.enums import HostileVariant, Rejection, RegionId


# ---------------------------------------------------------------------------
# Time-of-day bands: (start_hour inclusive, end_hour exclusive, multiplier)
# ---------------------------------------------------------------------------

TIME_OF_DAY_BANDS: tuple[tuple[int, int, float], ...] = (
    (5, 9, 1.2),     # morning
    (9, 17, 1.5),    # daytime
    (17, 21, 2.0),   # evening
)
NIGHT_MULTIPLIER = 0.8   # 21:00 - 05:00


def time_of_day_multiplier(hour: int) -> float:
    """Production multiplier for a wall-clock hour (0-23)."""
    for start, end, mult in TIME_OF_DAY_BANDS:
        if start <= hour < end:
            return mult
    return NIGHT_MULTIPLIER


# ---------------------------------------------------------------------------
# Region definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RegionDef:
    """Static description of a region."""

    region_id: RegionId
    name: str
    unlock_cost: float
    defeats_required: int
    multiplier: float = 1.0
    time_of_day: bool = False          # multiplier follows the clock instead
    hostile_risk: float = 1.0          # scales hostile spawn chance on summon
    variants: tuple[HostileVariant, ...] = (HostileVariant.DRAINER,)


REGION_DEFS: dict[RegionId, RegionDef] = {
    RegionId.PLAINS: RegionDef(
        region_id=RegionId.PLAINS, name="Verdant Plains",
        unlock_cost=0.0, defeats_required=0,
        multiplier=1.0, hostile_risk=1.0,
        variants=(HostileVariant.DRAINER,),
    ),
    RegionId.MINE: RegionDef(
        region_id=RegionId.MINE, name="Crystal Mine",
        unlock_cost=5_000.0, defeats_required=5,
        multiplier=1.5, hostile_risk=1.3,
        variants=(HostileVariant.DRAINER, HostileVariant.SEALER),
    ),
    RegionId.SKY: RegionDef(
        region_id=RegionId.SKY, name="Sky Garden",
        unlock_cost=50_000.0, defeats_required=20,
        time_of_day=True, hostile_risk=1.6,
        variants=(HostileVariant.DRAINER, HostileVariant.SEALER, HostileVariant.PHANTOM),
    ),
}

DEFAULT_REGION = RegionId.PLAINS


def region_def(region_id: RegionId) -> RegionDef:
    match region_id:
        case RegionId.PLAINS | RegionId.MINE | RegionId.SKY:
            return REGION_DEFS[region_id]
    raise KeyError(f"Unknown region: {region_id!r}")


def region_multiplier(rdef: RegionDef, now: float) -> float:
    """Static multiplier, or the time-of-day band for *now* (epoch seconds, local time)."""
    if rdef.time_of_day:
        return time_of_day_multiplier(datetime.fromtimestamp(now).hour)
    return rdef.multiplier


def unlock_rejection(rdef: RegionDef, mana: float, defeats: int) -> Rejection | None:
    """Why *rdef* cannot be unlocked right now, or None if it can."""
    if defeats < rdef.defeats_required:
        return Rejection.PREREQUISITE
    if mana < rdef.unlock_cost:
        return Rejection.INSUFFICIENT_MANA
    return None


# ---------------------------------------------------------------------------
# Region state
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class RegionState:
    """A region's live board and unlock flag. Never destroyed."""

    region_id: RegionId
    board: Board
    unlocked: bool = False

    @property
    def definition(self) -> RegionDef:
        return region_def(self.region_id)

    def copy(self) -> RegionState:
        return RegionState(
            region_id=self.region_id,
            board=self.board.copy(),
            unlocked=self.unlocked,
        )


def fresh_regions(width: int, height: int) -> dict[RegionId, RegionState]:
    """Empty boards for every region; only the default region starts unlocked."""
    return {
        rid: RegionState(region_id=rid, board=Board(width, height), unlocked=(rid == DEFAULT_REGION))
        for rid in RegionId
    }
