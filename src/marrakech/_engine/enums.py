# Area: Engine
"""
marrakech._engine.enums — Rule engine enums
===========================================

Directions, turns, rug orientations and the game/turn status values
shared by the engine and the session layer.
"""

from enum import Enum


class Direction(Enum):
    """Facing of the piece. Cyclic order is N -> E -> S -> W -> N."""
    N = "N"
    E = "E"
    S = "S"
    W = "W"


class Turn(Enum):
    """Rotation requested by the active player before rolling."""
    LEFT = "left"
    RIGHT = "right"


class Orientation(Enum):
    """H covers (x, y) and (x+1, y); V covers (x, y) and (x, y+1)."""
    H = "H"
    V = "V"


class GameStatus(Enum):
    ACTIVE = "active"
    FINISHED = "finished"


class TurnPhase(Enum):
    """
    Progress of the active player's turn.

    IDLE -> IDLE (on ROTATE)
    IDLE -> ROLLED (on ROLL)
    ROLLED -> IDLE (on PLACE, active player advances)
    """
    IDLE = "idle"
    ROLLED = "rolled"
