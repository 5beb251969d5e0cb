# Area: Engine
"""
Rule engine for Marrakech.

This package handles:
- Assam movement, rotation and edge reflection
- Layered rug stacks
- Region flood fill and rent
- Rug placement rules and final scoring
"""

from .enums import Direction, Turn, Orientation, GameStatus, TurnPhase
from .board import Piece, rotate, step_forward, roll_dice, DICE_FACES, DEFAULT_BOARD_SIZE
from .rugs import RugGrid, RugLayer
from .territory import RentPayment, connected_region, resolve_rent
from .placement import validate_placement, legal_placements, has_legal_placement, final_scores, pick_winner
from .randomness import RandomSource
from .state import GameState, starting_coins, starting_rugs

__all__ = [
    "Direction",
    "Turn",
    "Orientation",
    "GameStatus",
    "TurnPhase",
    "Piece",
    "rotate",
    "step_forward",
    "roll_dice",
    "DICE_FACES",
    "DEFAULT_BOARD_SIZE",
    "RugGrid",
    "RugLayer",
    "RentPayment",
    "connected_region",
    "resolve_rent",
    "validate_placement",
    "legal_placements",
    "has_legal_placement",
    "final_scores",
    "pick_winner",
    "RandomSource",
    "GameState",
    "starting_coins",
    "starting_rugs",
]
