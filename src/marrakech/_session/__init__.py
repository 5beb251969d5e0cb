# Area: Session
"""
Session layer for Marrakech.

This package handles:
- Session roster and lifecycle
- Turn order and authorization
- Per-session locking
- Session and game state repositories
- Identity resolution

The orchestrator lives in marrakech._session.orchestrator.
"""

from .enums import SessionStatus, SessionEvent, TurnEvent
from .session import Session, PlayerInfo, MAX_PLAYERS, MIN_PLAYERS
from .state_machine import SessionStateMachine, TurnStateMachine
from .turn_manager import TurnManager
from .locks import SessionLocks
from .stores import SessionStore, GameStateStore, InMemorySessionStore, InMemoryGameStateStore
from .identity import IdentityProvider, InMemoryIdentityProvider, AuthResult

__all__ = [
    "SessionStatus",
    "SessionEvent",
    "TurnEvent",
    "Session",
    "PlayerInfo",
    "MAX_PLAYERS",
    "MIN_PLAYERS",
    "SessionStateMachine",
    "TurnStateMachine",
    "TurnManager",
    "SessionLocks",
    "SessionStore",
    "GameStateStore",
    "InMemorySessionStore",
    "InMemoryGameStateStore",
    "IdentityProvider",
    "InMemoryIdentityProvider",
    "AuthResult",
]
