# Area: Session
"""
marrakech._session.enums — Session and turn state machine enums
===============================================================
"""

from enum import Enum


class SessionStatus(Enum):
    """
    Lifecycle of a session.

    State transitions:
    WAITING -> ACTIVE (on ORDER_FIXED)
    ACTIVE -> FINISHED (on GAME_FINISHED)
    """
    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class SessionEvent(Enum):
    """
    Events that move a session forward.

    - ORDER_FIXED: auto_order or start_session fixed the turn order
    - GAME_FINISHED: the last rug was placed
    """
    ORDER_FIXED = "ORDER_FIXED"
    GAME_FINISHED = "GAME_FINISHED"


class TurnEvent(Enum):
    """Actions of the active player within a turn."""
    ROTATE = "ROTATE"
    ROLL = "ROLL"
    PLACE = "PLACE"
