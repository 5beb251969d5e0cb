"""
marrakech.types — TypedDict schemas for snapshots and payloads
==============================================================

This module documents the exact structure of the dictionaries returned
by GameOrchestrator and of the action payloads it accepts. Snapshots are
detached copies: mutating them never changes the game.

    from marrakech import GameStateSnapshot, SessionSnapshot

Use __annotations__ to inspect fields:

    >>> PieceSnapshot.__annotations__
    {'x': int, 'y': int, 'direction': str}
"""

from typing import Dict, List, Literal, Optional, TypedDict


# ============================================
# Sessions
# ============================================

class PlayerSnapshot(TypedDict):
    """A roster entry."""
    id: str                 # opaque id from the identity provider
    name: str               # display name


class SessionSnapshot(TypedDict):
    """Returned by create_session(), join_session(), auto_order(), ...

    Fields
    ------
    status : str
        "waiting" until the turn order is fixed, then "active",
        then "finished".
    turn_order : List[str]
        Player ids in playing order.
    created_at : str
        UTC ISO-8601, e.g. "2026-10-19T08:53:00.123Z".
    """
    id: str
    name: str
    players: List[PlayerSnapshot]
    turn_order: List[str]
    status: Literal["waiting", "active", "finished"]
    active_player_id: Optional[str]
    created_at: str


# ============================================
# Game state
# ============================================

class PieceSnapshot(TypedDict):
    """Assam. x is the column, y the row; "N" faces row 0."""
    x: int
    y: int
    direction: Literal["N", "E", "S", "W"]


class RugLayerSnapshot(TypedDict):
    owner_id: str
    rug_id: str


class RentPaymentSnapshot(TypedDict):
    """One rent transfer made during the last roll."""
    payer_id: str
    owner_id: str
    amount: int
    region_size: int
    cell: List[int]         # [x, y]


class GameStateSnapshot(TypedDict):
    """Returned by get_game_state(), rotate(), roll_dice(), place_rug().

    Fields
    ------
    rugs_grid : List[List[List[RugLayerSnapshot]]]
        rugs_grid[y][x] is the cell's stack, bottom to top. The last
        layer is the visible owner.
    phase : str
        "idle" before the active player rolls, "rolled" until they
        place their rug.
    scores : Dict[str, int] or None
        coins + visible cells per player, set when the game finishes.
    """
    game_id: str
    session_id: str
    status: Literal["active", "finished"]
    phase: Literal["idle", "rolled"]
    active_player_id: Optional[str]
    winner_id: Optional[str]
    board_size: int
    piece: PieceSnapshot
    rugs_grid: List[List[List[RugLayerSnapshot]]]
    balances: Dict[str, int]
    rugs_left: Dict[str, int]
    last_roll: Optional[int]
    last_payments: List[RentPaymentSnapshot]
    scores: Optional[Dict[str, int]]
    disconnected_player_ids: List[str]


# ============================================
# Action payloads
# ============================================

class RugPlacementPayload(TypedDict):
    """Accepted by place_rug(). H covers (x, y)+(x+1, y); V covers (x, y)+(x, y+1)."""
    x: int
    y: int
    orientation: Literal["H", "V"]
