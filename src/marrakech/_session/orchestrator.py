# Area: Session
"""Orchestrator — owns sessions and game states and sequences every action."""
import copy
import logging
from functools import wraps
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .enums import SessionEvent, SessionStatus, TurnEvent
from .identity import IdentityProvider, InMemoryIdentityProvider
from .locks import SessionLocks
from .session import DEFAULT_SESSION_NAME, MAX_PLAYERS, MIN_PLAYERS, PlayerInfo, Session
from .state_machine import SessionStateMachine, TurnStateMachine
from .stores import GameStateStore, InMemoryGameStateStore, InMemorySessionStore, SessionStore
from .turn_manager import TurnManager
from .validator import RugPlacement, parse_placement, parse_turn
from .._config import EngineConfig
from .._engine.board import Piece, roll_dice, rotate as rotate_direction
from .._engine.enums import Turn
from .._engine.placement import legal_placements
from .._engine.randomness import RandomSource
from .._engine.state import GameState
from ..errors import (
    ExhaustedError,
    ForbiddenError,
    GameOverError,
    InvalidMoveError,
    MarrakechError,
    NotFoundError,
)

logger = logging.getLogger("marrakech.session.orchestrator")


def _logs_rejections(func):
    """Log rejected actions at WARNING and re-raise them unchanged."""
    @wraps(func)
    def wrapper(self, session_id, *args, **kwargs):
        try:
            return func(self, session_id, *args, **kwargs)
        except MarrakechError as e:
            logger.warning(f"[{session_id}] {func.__name__} rejected: {e.reason}")
            raise
    return wrapper


class GameOrchestrator:
    def __init__(
        self,
        session_store: Optional[SessionStore] = None,
        state_store: Optional[GameStateStore] = None,
        rng: Optional[RandomSource] = None,
        config: Optional[EngineConfig] = None,
        identity: Optional[IdentityProvider] = None,
        locks: Optional[SessionLocks] = None,
    ):
        self.config = config or EngineConfig()
        self.sessions = session_store if session_store is not None else InMemorySessionStore()
        self.states = state_store if state_store is not None else InMemoryGameStateStore()
        self.rng = rng or RandomSource(self.config.seed)
        self.identity = identity or InMemoryIdentityProvider()
        self.locks = locks or SessionLocks(self.config.lock_timeout_seconds)
        self._published: Dict[str, dict] = {}
        self._published_sessions: Dict[str, dict] = {}

    def authenticate(self, token: Optional[str]) -> PlayerInfo:
        return self.identity.resolve(token)

    # ── Sessions ──────────────────────────────────────────────

    def create_session(self, name: Optional[str], creator: PlayerInfo) -> dict:
        session_id = self.rng.token_hex()
        while self.sessions.get(session_id) is not None:
            logger.warning(f"Session id collision detected, regenerating: {session_id}")
            session_id = self.rng.token_hex()
        session = Session(
            id=session_id,
            name=name or DEFAULT_SESSION_NAME,
            players=[creator],
            turn_order=[creator.id],
            active_player_id=creator.id,
        )
        self._store_session(session)
        logger.info(f"[{session_id}] Session '{session.name}' created by {creator.id}")
        return session.snapshot()

    def get_session(self, session_id: str) -> dict:
        """Latest committed view of the session."""
        return self._session_snapshot(self._require_session(session_id))

    def list_sessions(self) -> List[dict]:
        return [self._session_snapshot(s) for s in self.sessions.list()]

    @_logs_rejections
    def join_session(self, session_id: str, player: PlayerInfo) -> dict:
        with self.locks.hold(session_id):
            session = self._require_session(session_id)
            if session.is_member(player.id):
                return session.snapshot()
            if session.status is SessionStatus.FINISHED:
                raise GameOverError("Game is over", session_id=session_id)
            if len(session.players) >= MAX_PLAYERS:
                raise ForbiddenError(f"Session is full ({MAX_PLAYERS} players)", session_id=session_id)
            session.add_player(player)
            self._store_session(session)
            logger.info(f"[{session_id}] {player.id} joined ({len(session.players)} players)")
            return session.snapshot()

    @_logs_rejections
    def auto_order(self, session_id: str, requester_id: Optional[str] = None) -> dict:
        """Shuffle the turn order and start play."""
        with self.locks.hold(session_id):
            session = self._require_session(session_id)
            order = TurnManager.shuffled_order(session.player_ids, self.rng)
            return self._fix_order(session, order, requester_id)

    @_logs_rejections
    def start_session(self, session_id: str, requester_id: Optional[str] = None) -> dict:
        """Start play with the join order as turn order."""
        with self.locks.hold(session_id):
            session = self._require_session(session_id)
            return self._fix_order(session, session.player_ids, requester_id)

    @_logs_rejections
    def delete_session(self, session_id: str, requester_id: str) -> None:
        with self.locks.hold(session_id):
            session = self._require_session(session_id)
            if not session.is_member(requester_id):
                raise ForbiddenError("Only players of the session can delete it", session_id=session_id)
            self.sessions.delete(session_id)
            self.states.delete(session_id)
            self._published.pop(session_id, None)
            self._published_sessions.pop(session_id, None)
        self.locks.discard(session_id)
        logger.info(f"[{session_id}] Session deleted by {requester_id}")

    # ── Game state ────────────────────────────────────────────

    def get_game_state(self, session_id: str) -> dict:
        """Latest committed state; created or reconciled on demand."""
        session = self._require_session(session_id)
        published = self._published.get(session_id)
        if published is not None and set(published["balances"]) == set(session.player_ids):
            return copy.deepcopy(published)
        with self.locks.hold(session_id):
            session = self._require_session(session_id)
            self._ensure_state(session)
            return copy.deepcopy(self._published[session_id])

    def legal_placements(self, session_id: str, player_id: str) -> List[dict]:
        """Placements player_id could make on the current board."""
        with self.locks.hold(session_id):
            session = self._require_session(session_id)
            state = self._ensure_state(session)
            return [
                {"x": x, "y": y, "orientation": o.value}
                for x, y, o in legal_placements(state.rugs, state.piece, player_id)
            ]

    # ── Turn actions ──────────────────────────────────────────

    @_logs_rejections
    def rotate(self, session_id: str, turn: Union[Turn, str], requester_id: str) -> dict:
        turn = parse_turn(turn)
        with self.locks.hold(session_id):
            session, state = self._begin_action(session_id, requester_id)
            machine = TurnStateMachine(state.phase)
            if not machine.can_transition(TurnEvent.ROTATE):
                raise InvalidMoveError("Assam can only be turned before rolling", session_id=session_id)
            piece = state.piece
            state.piece = Piece(x=piece.x, y=piece.y, direction=rotate_direction(piece.direction, turn))
            logger.info(f"[{session_id}] {requester_id} turns {turn.value}: facing {state.piece.direction.value}")
            return self._commit(session, state)

    @_logs_rejections
    def roll_dice(self, session_id: str, requester_id: str) -> dict:
        with self.locks.hold(session_id):
            session, state = self._begin_action(session_id, requester_id)
            machine = TurnStateMachine(state.phase)
            if not machine.can_transition(TurnEvent.ROLL):
                raise InvalidMoveError("Dice already rolled, place a rug", session_id=session_id)
            roll = roll_dice(self.rng)
            payments = state.move(roll, requester_id)
            state.advance_phase(machine.transition(TurnEvent.ROLL))
            logger.info(
                f"[{session_id}] {requester_id} rolls {roll}: Assam at {state.piece.cell} "
                f"facing {state.piece.direction.value}, {len(payments)} payment(s)"
            )
            return self._commit(session, state)

    @_logs_rejections
    def place_rug(
        self,
        session_id: str,
        placement: Union[RugPlacement, Mapping[str, Any]],
        requester_id: str,
    ) -> dict:
        placement = parse_placement(placement)
        with self.locks.hold(session_id):
            session, state = self._begin_action(session_id, requester_id)
            if state.rugs_left.get(requester_id, 0) <= 0:
                raise ExhaustedError(requester_id, session_id=session_id)
            machine = TurnStateMachine(state.phase)
            if not machine.can_transition(TurnEvent.PLACE):
                raise InvalidMoveError("Roll the dice before placing a rug", session_id=session_id)

            rug_id = self.rng.token_hex()
            try:
                cells = state.place_rug(
                    requester_id, placement.x, placement.y, placement.orientation, rug_id
                )
            except MarrakechError as e:
                e.session_id = session_id
                raise
            state.advance_phase(machine.transition(TurnEvent.PLACE))
            logger.info(f"[{session_id}] {requester_id} places rug {rug_id} on {cells}")

            if state.all_rugs_placed():
                state.finish(session.turn_order)
                session.status = SessionStateMachine(session.status).transition(SessionEvent.GAME_FINISHED)
                session.active_player_id = None
            else:
                turns = TurnManager(session.turn_order, state.active_player_id)
                state.active_player_id = session.active_player_id = turns.advance(state.rugs_left)
                logger.info(f"[{session_id}] Turn passes to {state.active_player_id}")
            return self._commit(session, state)

    # ── Internals ─────────────────────────────────────────────

    def _require_session(self, session_id: str) -> Session:
        session = self.sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found", session_id=session_id)
        return session

    def _fix_order(self, session: Session, order: List[str], requester_id: Optional[str]) -> dict:
        if requester_id is not None and not session.is_member(requester_id):
            raise ForbiddenError("Only players of the session can start it", session_id=session.id)
        machine = SessionStateMachine(session.status)
        if not machine.can_transition(SessionEvent.ORDER_FIXED):
            raise ForbiddenError(
                f"Turn order is already fixed (session {session.status.value})", session_id=session.id
            )
        if len(session.players) < MIN_PLAYERS:
            raise ForbiddenError(f"At least {MIN_PLAYERS} players are needed", session_id=session.id)

        session.turn_order = list(order)
        session.active_player_id = session.turn_order[0]
        session.status = machine.transition(SessionEvent.ORDER_FIXED)
        logger.info(f"[{session.id}] Turn order fixed: {session.turn_order}")

        state = self.states.get(session.id)
        if state is not None:
            state.reconcile_roster(session.player_ids)
            state.active_player_id = session.active_player_id
            self._commit(session, state)
        else:
            self._store_session(session)
        return session.snapshot()

    def _ensure_state(self, session: Session) -> GameState:
        """Create the game lazily, or reconcile it with the current roster."""
        state = self.states.get(session.id)
        if state is None:
            state = GameState.new(
                game_id=self.rng.token_hex(),
                session_id=session.id,
                player_ids=session.player_ids,
                board_size=self.config.board_size,
                active_player_id=TurnManager(session.turn_order, session.active_player_id).resolve_active(),
            )
            self._commit(session, state)
        elif state.needs_reconcile(session.player_ids):
            state.reconcile_roster(session.player_ids)
            self._commit(session, state)
        elif session.id not in self._published:
            self._published[session.id] = state.snapshot()
        return state

    def _begin_action(self, session_id: str, requester_id: str) -> Tuple[Session, GameState]:
        session = self._require_session(session_id)
        state = self._ensure_state(session)
        if state.is_finished or session.status is SessionStatus.FINISHED:
            raise GameOverError("Game is over", session_id=session_id)
        if session.status is SessionStatus.WAITING:
            raise ForbiddenError("Game has not started yet", session_id=session_id)
        TurnManager(session.turn_order, state.active_player_id).authorize(requester_id, session_id)
        return session, state

    def _store_session(self, session: Session) -> None:
        self.sessions.put(session)
        self._published_sessions[session.id] = session.snapshot()

    def _session_snapshot(self, session: Session) -> dict:
        published = self._published_sessions.get(session.id)
        if published is None:
            # Stored without going through this orchestrator
            with self.locks.hold(session.id):
                published = self._published_sessions.setdefault(session.id, session.snapshot())
        return copy.deepcopy(published)

    def _commit(self, session: Session, state: GameState) -> dict:
        self._store_session(session)
        self.states.put(state)
        snapshot = state.snapshot()
        self._published[session.id] = snapshot
        return copy.deepcopy(snapshot)
