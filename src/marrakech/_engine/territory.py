# Area: Engine
"""
marrakech._engine.territory — Region flood fill and rent
========================================================

After every single step of the piece, the owner of the visible rug
under it collects rent from the mover: one coin per cell of the
4-connected region of cells sharing that top owner, capped at what the
mover can pay.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Dict, Optional, Set, Tuple
import logging

from .rugs import Cell, RugGrid

logger = logging.getLogger("marrakech.engine.territory")

NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


@dataclass(frozen=True)
class RentPayment:
    """One rent transfer triggered by a single movement step."""
    payer_id: str
    owner_id: str
    amount: int
    region_size: int
    cell: Cell


def connected_region(grid: RugGrid, x: int, y: int) -> Tuple[Optional[str], Set[Cell]]:
    """
    Flood-fill the region of cells whose top owner matches (x, y).

    Returns:
        (owner, cells); (None, empty set) if the cell has no rug
    """
    owner = grid.top_owner(x, y)
    if owner is None:
        return None, set()

    seen: Set[Cell] = {(x, y)}
    queue = deque([(x, y)])
    while queue:
        cx, cy = queue.popleft()
        for dx, dy in NEIGHBOURS:
            nx, ny = cx + dx, cy + dy
            if (nx, ny) in seen or not grid.in_bounds(nx, ny):
                continue
            if grid.top_owner(nx, ny) == owner:
                seen.add((nx, ny))
                queue.append((nx, ny))
    return owner, seen


def resolve_rent(
    grid: RugGrid,
    balances: Dict[str, int],
    mover_id: str,
    x: int,
    y: int,
) -> Optional[RentPayment]:
    """
    Charge the mover for landing on (x, y), updating balances in place.

    Args:
        grid: Rug grid
        balances: player_id -> coins, mutated on payment
        mover_id: Player whose turn moved the piece
        x, y: Cell the piece just entered

    Returns:
        The RentPayment applied, or None if nothing was owed
    """
    owner, region = connected_region(grid, x, y)
    if owner is None or owner == mover_id:
        return None

    amount = min(balances.get(mover_id, 0), len(region))
    balances[mover_id] = balances.get(mover_id, 0) - amount
    balances[owner] = balances.get(owner, 0) + amount
    logger.info(f"Rent at ({x}, {y}): {mover_id} pays {amount} to {owner} (region {len(region)})")
    return RentPayment(
        payer_id=mover_id,
        owner_id=owner,
        amount=amount,
        region_size=len(region),
        cell=(x, y),
    )
