"""
marrakech.errors — Custom exception classes
===========================================

Defines the exception hierarchy raised by the rule engine and the
session orchestrator. Every rejection is synchronous and carries a
human-readable reason plus a stable error code for transports.
"""

from __future__ import annotations
from typing import Any, Dict, Optional


class MarrakechError(Exception):
    """Base exception for all Marrakech engine errors."""

    code = "ERROR"

    def __init__(self, reason: str, *, session_id: Optional[str] = None):
        self.reason = reason
        self.session_id = session_id
        super().__init__(reason)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"error": self.code, "reason": self.reason}
        if self.session_id is not None:
            data["session_id"] = self.session_id
        return data


class NotFoundError(MarrakechError):
    """Raised when a session, game state or active player cannot be resolved."""

    code = "NOT_FOUND"


class UnauthorizedError(MarrakechError):
    """Raised when a credential is missing or invalid."""

    code = "UNAUTHORIZED"


class ForbiddenError(MarrakechError):
    """Raised when a valid player is not allowed to perform the action."""

    code = "FORBIDDEN"


class InvalidMoveError(MarrakechError):
    """Raised when a movement or placement rule is violated."""

    code = "INVALID_MOVE"


class ExhaustedError(MarrakechError):
    """Raised when a player has no rugs left to place."""

    code = "EXHAUSTED"

    def __init__(self, player_id: str, *, session_id: Optional[str] = None):
        self.player_id = player_id
        super().__init__(f"Player {player_id} has no rugs left", session_id=session_id)


class GameOverError(MarrakechError):
    """Raised when a mutating action is attempted on a finished game."""

    code = "GAME_OVER"


class SessionBusyError(MarrakechError):
    """Raised when the session lock cannot be acquired in time."""

    code = "SESSION_BUSY"

    def __init__(self, session_id: str, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Session {session_id} is busy, lock not acquired within {timeout_seconds} seconds",
            session_id=session_id,
        )
