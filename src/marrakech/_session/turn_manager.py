# Area: Session
"""
marrakech._session.turn_manager — Turn order and authorization
==============================================================

Decides whose move it is. The active player only changes after a
successful rug placement; players who have run out of rugs are skipped
while anybody else still holds some.
"""

from typing import Dict, List, Optional, Sequence
import logging

from .._engine.randomness import RandomSource
from ..errors import ForbiddenError, NotFoundError

logger = logging.getLogger("marrakech.session.turn_manager")


class TurnManager:
    """
    Attributes:
        turn_order: Player ids in playing order
        active_player_id: Player whose turn it is, if any
    """

    def __init__(self, turn_order: Sequence[str], active_player_id: Optional[str] = None):
        self.turn_order: List[str] = list(turn_order)
        self.active_player_id = active_player_id

    @staticmethod
    def shuffled_order(player_ids: Sequence[str], rng: RandomSource) -> List[str]:
        return rng.shuffle(player_ids)

    def resolve_active(self) -> Optional[str]:
        if self.active_player_id in self.turn_order:
            return self.active_player_id
        return self.turn_order[0] if self.turn_order else None

    def authorize(self, requester_id: str, session_id: Optional[str] = None) -> str:
        """
        Check that requester_id is the active player.

        Returns:
            The active player id

        Raises:
            NotFoundError: If no active player can be resolved
            ForbiddenError: If the requester is someone else
        """
        active = self.resolve_active()
        if active is None:
            raise NotFoundError("No active player", session_id=session_id)
        if requester_id != active:
            raise ForbiddenError(f"It is {active}'s turn", session_id=session_id)
        return active

    def advance(self, rugs_left: Optional[Dict[str, int]] = None) -> Optional[str]:
        """
        Move the turn to the next player in order.

        Args:
            rugs_left: If given, players with no rugs are skipped unless
                nobody has any left

        Returns:
            The new active player id
        """
        if not self.turn_order:
            self.active_player_id = None
            return None
        current = self.resolve_active()
        start = self.turn_order.index(current) if current in self.turn_order else -1
        size = len(self.turn_order)
        candidates = [self.turn_order[(start + i) % size] for i in range(1, size + 1)]
        if rugs_left is not None:
            holding = [pid for pid in candidates if rugs_left.get(pid, 0) > 0]
            if holding:
                candidates = holding
        self.active_player_id = candidates[0]
        logger.debug(f"Turn passes {current} → {self.active_player_id}")
        return self.active_player_id
