"""Tests for post-merge attack geometry and hostile defeat."""

from manamerge.core.board import Board
from manamerge.core.enums import HostileVariant
from manamerge.core.models import Vector2, make_creature, make_hostile
from manamerge.systems.combat import (
    ATTACK_BANDS,
    AttackShape,
    attack_range,
    band_for_tier,
    defeat_hostiles,
)

CENTER = Vector2(3, 3)


class TestAttackRange:

    def test_band_sizes_on_open_board(self):
        sizes = {tier: len(attack_range(CENTER, tier, 7, 7)) for tier in (1, 3, 5, 7, 9)}
        assert sizes == {1: 4, 3: 8, 5: 8, 7: 24, 9: 48}

    def test_bands_grow_with_tier(self):
        """Each band reaches further or covers more cells than the one below."""
        def footprint(tier):
            cells = attack_range(CENTER, tier, 7, 7)
            reach = max(max(abs(p.x - CENTER.x), abs(p.y - CENTER.y)) for p in cells)
            return reach, len(cells)

        prints = [footprint(tier) for tier in (1, 3, 5, 7, 9)]
        assert all(a < b for a, b in zip(prints, prints[1:]))

    def test_center_excluded(self):
        for tier in range(1, 11):
            assert CENTER not in attack_range(CENTER, tier, 7, 7)

    def test_clipped_at_corner(self):
        cells = attack_range(Vector2(0, 0), 9, 5, 5)
        assert len(cells) == 15
        assert all(0 <= p.x < 5 and 0 <= p.y < 5 for p in cells)

    def test_cross_shape_stays_on_axes(self):
        for p in attack_range(CENTER, 1, 7, 7):
            assert p.x == CENTER.x or p.y == CENTER.y

    def test_band_lookup(self):
        assert band_for_tier(1).shape == AttackShape.CROSS
        assert band_for_tier(4).shape == AttackShape.BLOCK
        assert band_for_tier(50) == ATTACK_BANDS[-1]


class TestDefeatHostiles:

    def test_only_hostiles_removed(self):
        board = Board(5, 5)
        board.set(Vector2(1, 0), make_hostile(1, HostileVariant.DRAINER, 10))
        board.set(Vector2(0, 1), make_creature(1, 10))
        result = defeat_hostiles(board, [Vector2(1, 0), Vector2(0, 1)], merging_tier=3, reward_per_tier=50)

        assert result.defeated == (Vector2(1, 0),)
        assert result.reward == 150
        assert result.board.get(Vector2(1, 0)) is None
        assert result.board.get(Vector2(0, 1)) is not None
        assert board.get(Vector2(1, 0)) is not None

    def test_reward_per_hostile(self):
        board = Board(5, 5)
        for x in range(3):
            board.set(Vector2(x, 0), make_hostile(2, HostileVariant.SEALER, 10))
        result = defeat_hostiles(board, [Vector2(x, 0) for x in range(5)], merging_tier=2, reward_per_tier=50)
        assert len(result.defeated) == 3
        assert result.reward == 300

    def test_no_hostiles_returns_same_board(self):
        board = Board(5, 5)
        result = defeat_hostiles(board, [Vector2(0, 0)], 1, 50)
        assert result.board is board
        assert result.reward == 0
