"""
marrakech — Marrakech rule engine and session orchestrator
==========================================================

Quick Start:
    from marrakech import GameOrchestrator, PlayerInfo

    game = GameOrchestrator()
    alice, bob = PlayerInfo("alice", "Alice"), PlayerInfo("bob", "Bob")
    session = game.create_session("Friday game", alice)
    game.join_session(session["id"], bob)
    game.auto_order(session["id"])

    state = game.get_game_state(session["id"])
    me = state["active_player_id"]
    game.rotate(session["id"], "left", me)
    state = game.roll_dice(session["id"], me)
    spot = game.legal_placements(session["id"], me)[0]
    game.place_rug(session["id"], spot, me)

Every action returns a detached snapshot; see marrakech.types for
their structure and marrakech.errors for the rejections.
"""

from ._session.orchestrator import GameOrchestrator
from ._session.session import PlayerInfo
from ._session.identity import InMemoryIdentityProvider, AuthResult
from ._session.stores import InMemorySessionStore, InMemoryGameStateStore
from ._session.validator import RugPlacement
from ._engine.randomness import RandomSource
from ._engine.enums import Direction, Turn, Orientation
from ._config import EngineConfig, load_config
from ._shared.logging_config import setup_logging
from .demo_player import DemoPlayer, play_demo_game
from .errors import (
    MarrakechError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    InvalidMoveError,
    ExhaustedError,
    GameOverError,
    SessionBusyError,
)
from .types import (
    PlayerSnapshot,
    SessionSnapshot,
    PieceSnapshot,
    RugLayerSnapshot,
    RentPaymentSnapshot,
    GameStateSnapshot,
    RugPlacementPayload,
)

__all__ = [
    # Main classes
    "GameOrchestrator",
    "PlayerInfo",
    "InMemoryIdentityProvider",
    "AuthResult",
    "InMemorySessionStore",
    "InMemoryGameStateStore",
    "RugPlacement",
    "RandomSource",
    "Direction",
    "Turn",
    "Orientation",
    "EngineConfig",
    "load_config",
    "setup_logging",
    "DemoPlayer",
    "play_demo_game",
    # Errors
    "MarrakechError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "InvalidMoveError",
    "ExhaustedError",
    "GameOverError",
    "SessionBusyError",
    # Snapshot types
    "PlayerSnapshot",
    "SessionSnapshot",
    "PieceSnapshot",
    "RugLayerSnapshot",
    "RentPaymentSnapshot",
    "GameStateSnapshot",
    "RugPlacementPayload",
]
__version__ = "1.0.0"
