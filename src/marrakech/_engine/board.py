# Area: Engine
"""
marrakech._engine.board — Piece movement and rotation
=====================================================

Moves Assam one cell at a time. At a board edge the piece does not
leave the board: it shifts one cell along the perpendicular axis
(clamped to the last row/column) and turns around, which produces the
zig-zag traversal of the board.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Union

from .enums import Direction, Turn
from .randomness import RandomSource
from ..errors import InvalidMoveError

DEFAULT_BOARD_SIZE = 7
DICE_FACES = (1, 2, 2, 3, 3, 4)
DIRECTION_CYCLE = (Direction.N, Direction.E, Direction.S, Direction.W)


@dataclass
class Piece:
    """Assam: position (x = column, y = row) and facing."""
    x: int
    y: int
    direction: Direction = Direction.N

    @property
    def cell(self) -> Tuple[int, int]:
        return self.x, self.y


def centered_piece(board_size: int = DEFAULT_BOARD_SIZE) -> Piece:
    middle = board_size // 2
    return Piece(x=middle, y=middle, direction=Direction.N)


def rotate(direction: Direction, turn: Union[Turn, str]) -> Direction:
    """
    Rotate a facing one step in the cyclic order N -> E -> S -> W.

    Args:
        direction: Current facing
        turn: Turn.LEFT / Turn.RIGHT or the strings "left" / "right"

    Returns:
        The new facing

    Raises:
        InvalidMoveError: If turn is not a known rotation
    """
    try:
        turn = Turn(turn)
    except ValueError:
        raise InvalidMoveError(f"Unknown rotation: {turn!r}") from None
    step = 1 if turn is Turn.RIGHT else -1
    index = DIRECTION_CYCLE.index(direction)
    return DIRECTION_CYCLE[(index + step) % len(DIRECTION_CYCLE)]


def step_forward(piece: Piece, board_size: int = DEFAULT_BOARD_SIZE) -> Piece:
    """Return the piece after a single forward step, reflecting at edges."""
    x, y, direction = piece.x, piece.y, piece.direction
    last = board_size - 1

    if direction is Direction.E:
        if x == last:
            y, direction = min(last, y + 1), Direction.W
        else:
            x += 1
    elif direction is Direction.W:
        if x == 0:
            y, direction = min(last, y + 1), Direction.E
        else:
            x -= 1
    elif direction is Direction.N:
        if y == 0:
            x, direction = min(last, x + 1), Direction.S
        else:
            y -= 1
    else:
        if y == last:
            x, direction = min(last, x + 1), Direction.N
        else:
            y += 1

    return Piece(x=x, y=y, direction=direction)


def roll_dice(rng: RandomSource) -> int:
    """Roll the Marrakech die: faces 1 and 4 once, faces 2 and 3 twice."""
    return rng.choice(DICE_FACES)
