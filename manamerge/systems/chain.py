"""Chain-reaction resolution after a player move."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from manamerge.systems.combat import ATTACK_BANDS, AttackBand, attack_range, defeat_hostiles
from manamerge.systems.match import MergeResult, execute_merge, find_match

if TYPE_CHECKING:
    from manamerge.config import GameConfig
    from manamerge.core.board import Board
    from manamerge.core.models import Vector2


@dataclass(frozen=True, slots=True)
class ComboStep:
    """One merge within a chain, plus the hostiles its attack removed."""

    combo: int
    board: Board
    merge: MergeResult
    defeated: tuple[Vector2, ...]
    defeat_reward: float


def iter_chain(
    board: Board,
    origin: Vector2,
    config: GameConfig,
    bands: tuple[AttackBand, ...] = ATTACK_BANDS,
) -> Iterator[ComboStep]:
    """Yield combo steps until the group at *origin* is too small to merge.

    Each step merges with *origin* as focus, so the produced entity sits on
    *origin* and is re-checked on the next iteration. Every step removes at
    least two entities, so the loop ends within board size.
    """
    combo = 0
    while True:
        matched = find_match(board, origin)
        if len(matched) < config.min_match:
            return
        merge = execute_merge(
            board, matched, origin, config.max_tier,
            min_match=config.min_match, bonus_match=config.bonus_match,
        )
        if merge is None:
            return
        combo += 1
        tier = merge.output_tier
        hit = defeat_hostiles(
            merge.board,
            attack_range(origin, tier, board.width, board.height, bands),
            tier,
            config.defeat_reward_per_tier,
        )
        board = hit.board
        yield ComboStep(
            combo=combo,
            board=board,
            merge=merge,
            defeated=hit.defeated,
            defeat_reward=hit.reward,
        )


def combo_intensity(combo: int, step: float) -> float:
    """Feedback pitch/intensity scalar; strictly increasing with combo count."""
    return 1.0 + step * max(combo - 1, 0)
