"""Post-merge attack geometry and hostile defeat."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique
from typing import Iterable

from manamerge.core.board import Board
from manamerge.core.models import Vector2


@unique
class AttackShape(IntEnum):
    """Area-of-effect shapes, smallest first."""

    CROSS = 0     # orthogonal arms of length `radius`
    BLOCK = 1     # (2*radius+1) square


@dataclass(frozen=True, slots=True)
class AttackBand:
    """Tiers up to and including ``max_tier`` use this shape."""

    max_tier: int
    shape: AttackShape
    radius: int


# Tunable cut-points. The last band catches everything above.
ATTACK_BANDS: tuple[AttackBand, ...] = (
    AttackBand(max_tier=2, shape=AttackShape.CROSS, radius=1),
    AttackBand(max_tier=4, shape=AttackShape.BLOCK, radius=1),
    AttackBand(max_tier=6, shape=AttackShape.CROSS, radius=2),
    AttackBand(max_tier=8, shape=AttackShape.BLOCK, radius=2),
    AttackBand(max_tier=99, shape=AttackShape.BLOCK, radius=3),
)


def band_for_tier(tier: int, bands: tuple[AttackBand, ...] = ATTACK_BANDS) -> AttackBand:
    for band in bands:
        if tier <= band.max_tier:
            return band
    return bands[-1]


def _offsets(band: AttackBand) -> Iterable[tuple[int, int]]:
    r = band.radius
    match band.shape:
        case AttackShape.CROSS:
            for i in range(1, r + 1):
                yield from ((0, i), (0, -i), (i, 0), (-i, 0))
        case AttackShape.BLOCK:
            for dy in range(-r, r + 1):
                for dx in range(-r, r + 1):
                    yield dx, dy


def attack_range(
    center: Vector2,
    tier: int,
    width: int,
    height: int,
    bands: tuple[AttackBand, ...] = ATTACK_BANDS,
) -> list[Vector2]:
    """Cells hit by a merge at *center* producing *tier*.

    Excludes the center itself and anything outside the board.
    """
    result: list[Vector2] = []
    for dx, dy in _offsets(band_for_tier(tier, bands)):
        x, y = center.x + dx, center.y + dy
        if (dx or dy) and 0 <= x < width and 0 <= y < height:
            result.append(Vector2(x, y))
    return result


@dataclass(frozen=True, slots=True)
class DefeatResult:
    board: Board
    defeated: tuple[Vector2, ...]
    reward: float


def defeat_hostiles(
    board: Board,
    targets: Iterable[Vector2],
    merging_tier: int,
    reward_per_tier: float,
) -> DefeatResult:
    """Remove every hostile found in *targets*; reward scales with the merging tier."""
    hits = [p for p in targets if (e := board.get(p)) is not None and e.is_hostile]
    if not hits:
        return DefeatResult(board=board, defeated=(), reward=0.0)

    new_board = board.copy()
    for pos in hits:
        new_board.set(pos, None)
    return DefeatResult(
        board=new_board,
        defeated=tuple(hits),
        reward=merging_tier * reward_per_tier * len(hits),
    )
