# Area: Shared
"""
marrakech.demo_player — Demo bot and self-play driver
=====================================================

A ready-to-use bot that plays legal moves through a GameOrchestrator,
and a driver that plays a whole session with bots in every seat.

Usage:
    from marrakech import GameOrchestrator, play_demo_game

    final_state = play_demo_game(GameOrchestrator(), player_count=3)
"""

import logging
from typing import Dict, List, Optional, Tuple

from ._engine.board import DICE_FACES, Piece, rotate, step_forward
from ._engine.enums import Direction
from ._engine.placement import has_legal_placement, legal_placements, rug_cells
from ._engine.randomness import RandomSource
from ._engine.rugs import Cell, RugGrid, RugLayer
from ._session.orchestrator import GameOrchestrator
from ._session.session import PlayerInfo

logger = logging.getLogger("marrakech.demo")

# Turn sequences the bot considers before rolling; two lefts make a U-turn
ROTATIONS: Tuple[Tuple[str, ...], ...] = ((), ("left",), ("right",), ("left", "left"))


class DemoPlayer:
    """
    Bot that turns Assam towards the cells where it is most likely to
    have a legal placement, rolls, then lays the rug that leaves it the
    most room to place next time.
    """

    def __init__(self, player: PlayerInfo, rng: Optional[RandomSource] = None):
        self.player = player
        self._rng = rng or RandomSource()

    def choose_rotation(self, state: dict) -> Tuple[str, ...]:
        """
        Pick the turns to make before rolling.

        Every candidate facing is played out over all die faces; the bot
        keeps the one with the most faces that leave a legal placement,
        then the most placements overall.
        """
        grid = RugGrid.from_rows(state["rugs_grid"])
        start = state["piece"]
        piece = Piece(x=start["x"], y=start["y"], direction=Direction(start["direction"]))

        outlook = {turns: self._outlook(grid, piece, turns) for turns in ROTATIONS}
        best = max(outlook.values())
        return self._rng.choice([turns for turns in ROTATIONS if outlook[turns] == best])

    def _outlook(self, grid: RugGrid, piece: Piece, turns: Tuple[str, ...]) -> Tuple[int, int]:
        direction = piece.direction
        for turn in turns:
            direction = rotate(direction, turn)
        playable_faces = options = 0
        for face in DICE_FACES:
            landing = Piece(x=piece.x, y=piece.y, direction=direction)
            for _ in range(face):
                landing = step_forward(landing, grid.size)
            legal = len(legal_placements(grid, landing, self.player.id))
            if legal:
                playable_faces += 1
            options += legal
        return playable_faces, options

    def choose_placement(self, state: dict, legal: List[dict]) -> Optional[dict]:
        """
        Prefer the placement that walls the bot in the least, then the one
        covering the most rugs.
        """
        if not legal:
            return None
        rows = state["rugs_grid"]
        board = RugGrid.from_rows(rows)
        live: Dict[Cell, bool] = {}

        def covered_rugs(placement: dict) -> int:
            cells = rug_cells(placement["x"], placement["y"], placement["orientation"])
            return sum(1 for cx, cy in cells if rows[cy][cx])

        scores = [(-self._new_dead_cells(board, rows, p, live), covered_rugs(p)) for p in legal]
        best = max(scores)
        return self._rng.choice([p for p, score in zip(legal, scores) if score == best])

    def _new_dead_cells(self, board: RugGrid, rows: List[list], placement: dict, live: Dict[Cell, bool]) -> int:
        """
        How many cells near the rug stop offering the bot a legal
        placement once the rug is laid. live caches the answer for the
        current board.
        """
        pid = self.player.id
        cells = rug_cells(placement["x"], placement["y"], placement["orientation"])
        after = RugGrid.from_rows(rows)
        layer = RugLayer(owner_id=pid, rug_id="planned")
        for cx, cy in cells:
            after.push(cx, cy, layer)

        nearby = {
            (nx, ny)
            for cx, cy in cells
            for nx in range(cx - 2, cx + 3)
            for ny in range(cy - 2, cy + 3)
            if abs(nx - cx) + abs(ny - cy) <= 2 and board.in_bounds(nx, ny)
        }
        dead = 0
        for cell in nearby:
            spot = Piece(x=cell[0], y=cell[1])
            if cell not in live:
                live[cell] = has_legal_placement(board, spot, pid)
            if live[cell] and not has_legal_placement(after, spot, pid):
                dead += 1
        return dead

    def take_turn(self, orchestrator: GameOrchestrator, session_id: str) -> Optional[dict]:
        """Play one full turn; None if no legal placement was left."""
        pid = self.player.id
        state = orchestrator.get_game_state(session_id)
        for turn in self.choose_rotation(state):
            orchestrator.rotate(session_id, turn, pid)
        state = orchestrator.roll_dice(session_id, pid)
        placement = self.choose_placement(state, orchestrator.legal_placements(session_id, pid))
        if placement is None:
            logger.warning(f"[{session_id}] {pid} has no legal placement")
            return None
        return orchestrator.place_rug(session_id, placement, pid)


def play_demo_game(
    orchestrator: GameOrchestrator,
    player_count: int = 2,
    shuffle: bool = True,
    max_turns: int = 500,
) -> dict:
    """
    Play a complete session with demo bots.

    Returns:
        The final game state snapshot
    """
    bots = {
        f"bot-{i + 1}": DemoPlayer(PlayerInfo(id=f"bot-{i + 1}", name=f"Bot {i + 1}"), orchestrator.rng)
        for i in range(player_count)
    }
    seats = list(bots.values())
    session = orchestrator.create_session("Demo game", seats[0].player)
    session_id = session["id"]
    for bot in seats[1:]:
        orchestrator.join_session(session_id, bot.player)
    if shuffle:
        orchestrator.auto_order(session_id)
    else:
        orchestrator.start_session(session_id)

    state = orchestrator.get_game_state(session_id)
    for _ in range(max_turns):
        if state["status"] == "finished":
            break
        result = bots[state["active_player_id"]].take_turn(orchestrator, session_id)
        if result is None:
            break
        state = result
    return orchestrator.get_game_state(session_id)
