# Area: Session
"""
marrakech._session.stores — Session and game state repositories
===============================================================

Repository interfaces the orchestrator is given at construction time,
plus in-memory implementations. Any store offering read-your-writes
get/put/delete keyed by session id can stand in for them.
"""

import threading
from typing import Dict, Generic, List, Optional, Protocol, TypeVar

from .session import Session
from .._engine.state import GameState

T = TypeVar("T")


class SessionStore(Protocol):
    def get(self, session_id: str) -> Optional[Session]: ...
    def put(self, session: Session) -> None: ...
    def delete(self, session_id: str) -> None: ...
    def list(self) -> List[Session]: ...


class GameStateStore(Protocol):
    def get(self, session_id: str) -> Optional[GameState]: ...
    def put(self, state: GameState) -> None: ...
    def delete(self, session_id: str) -> None: ...


class _InMemoryRepository(Generic[T]):
    """Dict-backed repository keyed by session id."""

    def __init__(self):
        self._items: Dict[str, T] = {}
        self._guard = threading.Lock()

    def get(self, session_id: str) -> Optional[T]:
        with self._guard:
            return self._items.get(session_id)

    def delete(self, session_id: str) -> None:
        with self._guard:
            self._items.pop(session_id, None)

    def _put(self, session_id: str, item: T) -> None:
        with self._guard:
            self._items[session_id] = item

    def __len__(self) -> int:
        with self._guard:
            return len(self._items)


class InMemorySessionStore(_InMemoryRepository[Session]):
    def put(self, session: Session) -> None:
        self._put(session.id, session)

    def list(self) -> List[Session]:
        """All sessions, newest first."""
        with self._guard:
            sessions = list(self._items.values())
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)


class InMemoryGameStateStore(_InMemoryRepository[GameState]):
    def put(self, state: GameState) -> None:
        self._put(state.session_id, state)
