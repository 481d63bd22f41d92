"""Tests for chain resolution after a move."""

import unittest

from manamerge.config import GameConfig
from manamerge.core.board import Board
from manamerge.core.enums import HostileVariant
from manamerge.core.models import Vector2, make_creature, make_hostile
from manamerge.systems.chain import combo_intensity, iter_chain


def _chain_board() -> Board:
    """Three tier-1s around (2, 2) and a tier-2 pair above it: a two-step chain."""
    board = Board(5, 5)
    for x, y in [(1, 2), (2, 2), (3, 2)]:
        board.set(Vector2(x, y), make_creature(1, 10))
    for x, y in [(2, 1), (2, 0)]:
        board.set(Vector2(x, y), make_creature(2, 10))
    return board


class TestIterChain(unittest.TestCase):

    def setUp(self):
        self.config = GameConfig()

    def test_two_step_chain(self):
        steps = list(iter_chain(_chain_board(), Vector2(2, 2), self.config))
        self.assertEqual([s.combo for s in steps], [1, 2])
        self.assertEqual([s.merge.output_tier for s in steps], [2, 3])
        final = steps[-1].board
        self.assertEqual(final.occupied_count, 1)
        self.assertEqual(final.get(Vector2(2, 2)).tier, 3)

    def test_no_match_yields_nothing(self):
        board = Board(5, 5)
        board.set(Vector2(0, 0), make_creature(1, 10))
        self.assertEqual(list(iter_chain(board, Vector2(0, 0), self.config)), [])

    def test_attack_defeats_adjacent_hostile(self):
        board = _chain_board()
        board.set(Vector2(2, 3), make_hostile(1, HostileVariant.DRAINER, 10))
        first = next(iter_chain(board, Vector2(2, 2), self.config))
        self.assertEqual(first.defeated, (Vector2(2, 3),))
        self.assertEqual(first.defeat_reward, 2 * self.config.defeat_reward_per_tier)
        self.assertIsNone(first.board.get(Vector2(2, 3)))

    def test_terminates_on_full_board(self):
        board = Board(4, 4)
        for pos in board.positions():
            board.set(pos, make_creature(1, 3))
        steps = list(iter_chain(board, Vector2(0, 0), GameConfig(max_tier=3)))
        self.assertLessEqual(len(steps), 16)
        self.assertGreaterEqual(len(steps), 1)

    def test_input_board_untouched(self):
        board = _chain_board()
        list(iter_chain(board, Vector2(2, 2), self.config))
        self.assertEqual(board.occupied_count, 5)


class TestComboIntensity:

    def test_strictly_increasing(self):
        values = [combo_intensity(c, 0.1) for c in range(1, 8)]
        assert values[0] == 1.0
        assert all(a < b for a, b in zip(values, values[1:]))
