# Area: Session
"""
marrakech._session.session — Session aggregate
==============================================

A session is the roster of players around one board, their turn order
and the lifecycle status of the game they play.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from .enums import SessionStatus

MAX_PLAYERS = 4
MIN_PLAYERS = 2
DEFAULT_SESSION_NAME = "New game"


def current_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


@dataclass(frozen=True)
class PlayerInfo:
    """Identity of a player as resolved by the identity provider."""
    id: str
    name: str


@dataclass
class Session:
    """
    Attributes:
        id: Unique session identifier
        name: Display name
        players: Roster in join order
        turn_order: Player ids in playing order
        status: WAITING until the order is fixed, then ACTIVE, then FINISHED
        active_player_id: Player whose turn it is
        created_at: UTC ISO-8601 creation time
    """
    id: str
    name: str
    players: List[PlayerInfo] = field(default_factory=list)
    turn_order: List[str] = field(default_factory=list)
    status: SessionStatus = SessionStatus.WAITING
    active_player_id: Optional[str] = None
    created_at: str = field(default_factory=current_timestamp)

    @property
    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def is_member(self, player_id: Optional[str]) -> bool:
        return any(p.id == player_id for p in self.players)

    def add_player(self, player: PlayerInfo) -> bool:
        """Append player to roster and turn order; False if already a member."""
        if self.is_member(player.id):
            return False
        self.players.append(player)
        if player.id not in self.turn_order:
            self.turn_order.append(player.id)
        if self.active_player_id is None:
            self.active_player_id = self.turn_order[0]
        return True

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "players": [{"id": p.id, "name": p.name} for p in self.players],
            "turn_order": list(self.turn_order),
            "status": self.status.value,
            "active_player_id": self.active_player_id,
            "created_at": self.created_at,
        }
