# Area: Session
"""
marrakech._session.locks — Per-session mutual exclusion
=======================================================

Mutating operations on a session are serialized with one lock per
session id. Acquisition waits at most timeout_seconds, then gives up
with SessionBusyError so the caller can retry.
"""

from contextlib import contextmanager
from typing import Dict, Iterator
import logging
import threading

from ..errors import SessionBusyError

logger = logging.getLogger("marrakech.session.locks")

DEFAULT_LOCK_TIMEOUT = 5.0


class SessionLocks:
    """Registry of per-session locks."""

    def __init__(self, timeout_seconds: float = DEFAULT_LOCK_TIMEOUT):
        self.timeout_seconds = timeout_seconds
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, session_id: str) -> Iterator[None]:
        """
        Hold the lock of session_id for the duration of the block.

        Raises:
            SessionBusyError: If the lock is not acquired in time
        """
        lock = self._lock_for(session_id)
        if not lock.acquire(timeout=self.timeout_seconds):
            logger.warning(f"[{session_id}] Lock wait exceeded {self.timeout_seconds}s")
            raise SessionBusyError(session_id, self.timeout_seconds)
        try:
            yield
        finally:
            lock.release()

    def discard(self, session_id: str) -> None:
        with self._registry_lock:
            self._locks.pop(session_id, None)
