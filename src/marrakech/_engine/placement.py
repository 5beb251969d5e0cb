# Area: Engine
"""
marrakech._engine.placement — Rug placement rules and final scoring
===================================================================

A rug covers two orthogonally adjacent cells and must touch Assam
without covering him. Rules are checked in a fixed order and the first
violation is reported:

1. Both cells on the board
2. Neither cell is the piece cell
3. At least one cell is orthogonally adjacent to the piece
4. Neither cell is topped by one of the placer's own rugs
5. The two cells are not both topped by the same rug
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .board import Piece
from .enums import Orientation
from .rugs import Cell, RugGrid
from ..errors import InvalidMoveError

Placement = Tuple[int, int, Orientation]


def as_orientation(value: Union[Orientation, str]) -> Orientation:
    try:
        return Orientation(value)
    except ValueError:
        raise InvalidMoveError(f"Unknown orientation: {value!r}") from None


def rug_cells(x: int, y: int, orientation: Union[Orientation, str]) -> Tuple[Cell, Cell]:
    if as_orientation(orientation) is Orientation.H:
        return (x, y), (x + 1, y)
    return (x, y), (x, y + 1)


def validate_placement(
    grid: RugGrid,
    piece: Piece,
    player_id: str,
    x: int,
    y: int,
    orientation: Union[Orientation, str],
) -> Tuple[Cell, Cell]:
    """
    Check a placement against the rules, in order.

    Returns:
        The two covered cells

    Raises:
        InvalidMoveError: On the first violated rule
    """
    cells = rug_cells(x, y, orientation)

    for cx, cy in cells:
        if not grid.in_bounds(cx, cy):
            raise InvalidMoveError(f"Cell ({cx}, {cy}) is outside the board")
    for cell in cells:
        if cell == piece.cell:
            raise InvalidMoveError("Rug cannot cover Assam's cell")
    if not any(abs(cx - piece.x) + abs(cy - piece.y) == 1 for cx, cy in cells):
        raise InvalidMoveError("Rug must touch Assam")

    top_a, top_b = grid.top(*cells[0]), grid.top(*cells[1])
    if (top_a and top_a.owner_id == player_id) or (top_b and top_b.owner_id == player_id):
        raise InvalidMoveError("Rug cannot cover your own rug")
    if top_a and top_b and top_a.rug_id == top_b.rug_id:
        raise InvalidMoveError("Rug cannot fully cover an existing rug")

    return cells


def _candidates(grid: RugGrid, piece: Piece) -> Iterator[Placement]:
    # A rug touching the piece has its base cell at most two columns left
    # or two rows above the piece and at most one past it.
    for y in range(max(0, piece.y - 2), min(grid.size, piece.y + 2)):
        for x in range(max(0, piece.x - 2), min(grid.size, piece.x + 2)):
            for orientation in Orientation:
                yield x, y, orientation


def _is_legal(grid: RugGrid, piece: Piece, player_id: str, placement: Placement) -> bool:
    try:
        validate_placement(grid, piece, player_id, *placement)
    except InvalidMoveError:
        return False
    return True


def legal_placements(grid: RugGrid, piece: Piece, player_id: str) -> List[Placement]:
    """Every (x, y, orientation) the player could place right now, row by row."""
    return [p for p in _candidates(grid, piece) if _is_legal(grid, piece, player_id, p)]


def has_legal_placement(grid: RugGrid, piece: Piece, player_id: str) -> bool:
    return any(_is_legal(grid, piece, player_id, p) for p in _candidates(grid, piece))


def final_scores(grid: RugGrid, balances: Dict[str, int]) -> Dict[str, int]:
    """Score = coins + cells where the player's rug is on top."""
    visible = grid.visible_counts()
    return {pid: coins + visible.get(pid, 0) for pid, coins in balances.items()}


def pick_winner(scores: Dict[str, int], turn_order: Sequence[str]) -> Optional[str]:
    """
    Highest score wins; ties go to the earliest player in turn order.

    Players missing from turn_order rank after those in it.
    """
    if not scores:
        return None
    rank = {pid: i for i, pid in enumerate(turn_order)}
    return min(scores, key=lambda pid: (-scores[pid], rank.get(pid, len(rank)), pid))
