# Area: Engine Tests
"""Tests for piece movement, rotation and dice."""

from collections import Counter

import pytest

from marrakech._engine.board import (
    DICE_FACES,
    Piece,
    centered_piece,
    roll_dice,
    rotate,
    step_forward,
)
from marrakech._engine.enums import Direction, Turn
from marrakech._engine.randomness import RandomSource
from marrakech.errors import InvalidMoveError


class TestRotate:
    """Tests for rotate()."""

    @pytest.mark.parametrize("start,expected", [
        (Direction.N, Direction.E),
        (Direction.E, Direction.S),
        (Direction.S, Direction.W),
        (Direction.W, Direction.N),
    ])
    def test_right_steps_forward(self, start, expected):
        assert rotate(start, Turn.RIGHT) == expected

    @pytest.mark.parametrize("start,expected", [
        (Direction.N, Direction.W),
        (Direction.W, Direction.S),
        (Direction.S, Direction.E),
        (Direction.E, Direction.N),
    ])
    def test_left_steps_backward(self, start, expected):
        assert rotate(start, Turn.LEFT) == expected

    def test_accepts_strings(self):
        assert rotate(Direction.N, "left") == Direction.W
        assert rotate(Direction.N, "right") == Direction.E

    def test_unknown_turn_rejected(self):
        with pytest.raises(InvalidMoveError):
            rotate(Direction.N, "around")


class TestStepForward:
    """Tests for step_forward() including edge reflection."""

    def test_moves_one_cell_north(self):
        assert step_forward(Piece(3, 3, Direction.N), 7) == Piece(3, 2, Direction.N)

    def test_moves_one_cell_each_direction(self):
        assert step_forward(Piece(3, 3, Direction.E), 7) == Piece(4, 3, Direction.E)
        assert step_forward(Piece(3, 3, Direction.S), 7) == Piece(3, 4, Direction.S)
        assert step_forward(Piece(3, 3, Direction.W), 7) == Piece(2, 3, Direction.W)

    def test_reflects_at_top_edge(self):
        """Facing N on row 0 moves one column right and faces S."""
        assert step_forward(Piece(0, 0, Direction.N), 7) == Piece(1, 0, Direction.S)

    def test_reflects_at_right_edge(self):
        assert step_forward(Piece(6, 2, Direction.E), 7) == Piece(6, 3, Direction.W)

    def test_reflects_at_left_edge(self):
        assert step_forward(Piece(0, 4, Direction.W), 7) == Piece(0, 5, Direction.E)

    def test_reflects_at_bottom_edge(self):
        assert step_forward(Piece(2, 6, Direction.S), 7) == Piece(3, 6, Direction.N)

    def test_reflection_clamps_in_corner(self):
        assert step_forward(Piece(6, 6, Direction.E), 7) == Piece(6, 6, Direction.W)
        assert step_forward(Piece(6, 6, Direction.S), 7) == Piece(6, 6, Direction.N)
        assert step_forward(Piece(6, 0, Direction.N), 7) == Piece(6, 0, Direction.S)

    def test_does_not_mutate_input(self):
        piece = Piece(3, 3, Direction.N)
        step_forward(piece, 7)
        assert piece == Piece(3, 3, Direction.N)

    @pytest.mark.parametrize("size", [3, 7, 9])
    def test_always_stays_on_board(self, size):
        for direction in Direction:
            for x in range(size):
                for y in range(size):
                    piece = Piece(x, y, direction)
                    for _ in range(4 * size):
                        piece = step_forward(piece, size)
                        assert 0 <= piece.x < size
                        assert 0 <= piece.y < size


class TestDice:
    """Tests for roll_dice() and the starting piece."""

    def test_faces(self):
        assert sorted(DICE_FACES) == [1, 2, 2, 3, 3, 4]

    def test_rolls_are_weighted(self):
        rng = RandomSource(seed=1234)
        counts = Counter(roll_dice(rng) for _ in range(6000))
        assert set(counts) == {1, 2, 3, 4}
        assert counts[2] > 1.5 * counts[1]
        assert counts[3] > 1.5 * counts[4]

    def test_seeded_rolls_repeat(self):
        a, b = RandomSource(seed=9), RandomSource(seed=9)
        assert [roll_dice(a) for _ in range(20)] == [roll_dice(b) for _ in range(20)]

    def test_centered_piece(self):
        assert centered_piece(7) == Piece(3, 3, Direction.N)
        assert centered_piece(8).cell == (4, 4)
