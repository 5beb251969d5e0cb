# Area: Engine
"""
marrakech._engine.state — Game state aggregate
==============================================

Holds the board, Assam, rug stacks, coins and rug supplies of one
session's game, and applies movement and placement to them. The
session layer owns locking and turn authorization; this module only
enforces the game rules.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from .board import DEFAULT_BOARD_SIZE, Piece, centered_piece, step_forward
from .enums import GameStatus, Orientation, TurnPhase
from .placement import final_scores, pick_winner, validate_placement
from .rugs import Cell, RugGrid, RugLayer
from .territory import RentPayment, resolve_rent
from ..errors import ExhaustedError

logger = logging.getLogger("marrakech.engine.state")

# Starting allotments by player count; any other count uses the defaults
STARTING_COINS = {2: 60, 3: 40}
STARTING_RUGS = {2: 24, 3: 15}
DEFAULT_COINS = 30
DEFAULT_RUGS = 12


def starting_coins(player_count: int) -> int:
    return STARTING_COINS.get(player_count, DEFAULT_COINS)


def starting_rugs(player_count: int) -> int:
    return STARTING_RUGS.get(player_count, DEFAULT_RUGS)


@dataclass
class GameState:
    """
    Full state of one game.

    Attributes:
        game_id: Unique game identifier
        session_id: Owning session
        board_size: Side length of the square board
        piece: Assam's position and facing
        rugs: Layered rug grid
        balances: player_id -> coins
        rugs_left: player_id -> rugs still in hand
        active_player_id: Player whose turn it is (None once finished)
        last_roll: Value of the most recent dice roll
        status: ACTIVE until the last rug is placed
        winner_id: Set exactly once, when the game finishes
        scores: Final scores, set with winner_id
        phase: Progress of the current turn
        last_payments: Rent transfers caused by the most recent roll
    """
    game_id: str
    session_id: str
    board_size: int = DEFAULT_BOARD_SIZE
    piece: Optional[Piece] = None
    rugs: Optional[RugGrid] = None
    balances: Dict[str, int] = field(default_factory=dict)
    rugs_left: Dict[str, int] = field(default_factory=dict)
    active_player_id: Optional[str] = None
    last_roll: Optional[int] = None
    status: GameStatus = GameStatus.ACTIVE
    winner_id: Optional[str] = None
    scores: Optional[Dict[str, int]] = None
    phase: TurnPhase = TurnPhase.IDLE
    last_payments: List[RentPayment] = field(default_factory=list)
    disconnected_player_ids: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.piece is None:
            self.piece = centered_piece(self.board_size)
        if self.rugs is None:
            self.rugs = RugGrid(self.board_size)

    @classmethod
    def new(
        cls,
        game_id: str,
        session_id: str,
        player_ids: Sequence[str],
        board_size: int = DEFAULT_BOARD_SIZE,
        active_player_id: Optional[str] = None,
    ) -> "GameState":
        """Create a fresh game with allotments for len(player_ids) players."""
        count = len(player_ids)
        state = cls(
            game_id=game_id,
            session_id=session_id,
            board_size=board_size,
            balances={pid: starting_coins(count) for pid in player_ids},
            rugs_left={pid: starting_rugs(count) for pid in player_ids},
            active_player_id=active_player_id,
        )
        logger.info(f"[{session_id}] New game {game_id} for {count} players on {board_size}x{board_size}")
        return state

    @property
    def is_finished(self) -> bool:
        return self.status is GameStatus.FINISHED

    # ── Roster reconciliation ─────────────────────────────────

    def needs_reconcile(self, player_ids: Iterable[str]) -> bool:
        roster = set(player_ids)
        return roster != set(self.balances) or roster != set(self.rugs_left)

    def reconcile_roster(self, player_ids: Sequence[str]) -> bool:
        """
        Seed newcomers with allotments for the current player count and
        drop entries of players who left.

        Returns:
            True if anything changed
        """
        roster = set(player_ids)
        count = len(roster)
        changed = False
        for table in (self.balances, self.rugs_left):
            for pid in [p for p in table if p not in roster]:
                del table[pid]
                changed = True
        for pid in player_ids:
            if pid not in self.balances:
                self.balances[pid] = starting_coins(count)
                changed = True
            if pid not in self.rugs_left:
                self.rugs_left[pid] = starting_rugs(count)
                changed = True
        if changed:
            logger.info(f"[{self.session_id}] Roster reconciled: {sorted(roster)}")
        return changed

    # ── Turn actions ──────────────────────────────────────────

    def advance_phase(self, new_phase: TurnPhase) -> None:
        logger.debug(f"[{self.session_id}] Phase: {self.phase.value} → {new_phase.value}")
        self.phase = new_phase

    def move(self, roll: int, mover_id: str) -> List[RentPayment]:
        """Step the piece roll times, charging rent after every step."""
        payments: List[RentPayment] = []
        for _ in range(roll):
            self.piece = step_forward(self.piece, self.board_size)
            payment = resolve_rent(self.rugs, self.balances, mover_id, self.piece.x, self.piece.y)
            if payment is not None:
                payments.append(payment)
        self.last_roll = roll
        self.last_payments = payments
        return payments

    def place_rug(
        self,
        player_id: str,
        x: int,
        y: int,
        orientation: Orientation,
        rug_id: str,
    ) -> Tuple[Cell, Cell]:
        """
        Validate and lay one rug for player_id.

        Raises:
            ExhaustedError: If the player has no rugs left
            InvalidMoveError: If the placement breaks a rule
        """
        if self.rugs_left.get(player_id, 0) <= 0:
            raise ExhaustedError(player_id, session_id=self.session_id)
        cells = validate_placement(self.rugs, self.piece, player_id, x, y, orientation)

        layer = RugLayer(owner_id=player_id, rug_id=rug_id)
        for cx, cy in cells:
            self.rugs.push(cx, cy, layer)
        self.rugs_left[player_id] -= 1
        return cells

    def all_rugs_placed(self) -> bool:
        return all(left <= 0 for left in self.rugs_left.values())

    def finish(self, turn_order: Sequence[str]) -> Optional[str]:
        """Score the board, record the winner and close the game."""
        self.scores = final_scores(self.rugs, self.balances)
        self.winner_id = pick_winner(self.scores, turn_order)
        self.status = GameStatus.FINISHED
        self.active_player_id = None
        logger.info(f"[{self.session_id}] Game finished, winner {self.winner_id}, scores {self.scores}")
        return self.winner_id

    def snapshot(self) -> dict:
        """Detached, JSON-ready copy of the state (see GameStateSnapshot)."""
        return {
            "game_id": self.game_id,
            "session_id": self.session_id,
            "status": self.status.value,
            "phase": self.phase.value,
            "active_player_id": self.active_player_id,
            "winner_id": self.winner_id,
            "board_size": self.board_size,
            "piece": {"x": self.piece.x, "y": self.piece.y, "direction": self.piece.direction.value},
            "rugs_grid": self.rugs.rows(),
            "balances": dict(self.balances),
            "rugs_left": dict(self.rugs_left),
            "last_roll": self.last_roll,
            "last_payments": [
                {
                    "payer_id": p.payer_id,
                    "owner_id": p.owner_id,
                    "amount": p.amount,
                    "region_size": p.region_size,
                    "cell": list(p.cell),
                }
                for p in self.last_payments
            ],
            "scores": dict(self.scores) if self.scores is not None else None,
            "disconnected_player_ids": list(self.disconnected_player_ids),
        }
