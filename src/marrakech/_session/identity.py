# Area: Session
"""
marrakech._session.identity — Identity provider
===============================================

Resolves a request credential to the player behind it. The engine only
needs resolve(); the in-memory provider also offers register/login so
a session can be played without an external identity service.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Protocol
import hashlib
import hmac
import logging
import secrets
import threading

from .session import PlayerInfo
from ..errors import ForbiddenError, UnauthorizedError

logger = logging.getLogger("marrakech.session.identity")

PBKDF2_ITERATIONS = 100_000
DEFAULT_PLAYER_NAME = "Player"


class IdentityProvider(Protocol):
    def resolve(self, token: Optional[str]) -> PlayerInfo: ...


@dataclass(frozen=True)
class AuthResult:
    token: str
    player: PlayerInfo


@dataclass
class _Account:
    player: PlayerInfo
    email: str
    salt: bytes
    password_hash: bytes


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)


class InMemoryIdentityProvider:
    """Accounts and bearer tokens kept in process memory."""

    def __init__(self):
        self._accounts: Dict[str, _Account] = {}  # lower-cased email -> account
        self._tokens: Dict[str, PlayerInfo] = {}
        self._guard = threading.Lock()

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """
        Create an account and log it in.

        Raises:
            ForbiddenError: If the email is already registered
        """
        key = email.strip().lower()
        salt = secrets.token_bytes(16)
        player = PlayerInfo(id=secrets.token_hex(12), name=name or DEFAULT_PLAYER_NAME)
        with self._guard:
            if key in self._accounts:
                raise ForbiddenError(f"An account for {email} already exists")
            self._accounts[key] = _Account(player, email, salt, _hash_password(password, salt))
        logger.info(f"Registered player {player.id}")
        return self._issue_token(player)

    def login(self, email: str, password: str) -> AuthResult:
        """
        Raises:
            UnauthorizedError: If the email/password pair is wrong
        """
        with self._guard:
            account = self._accounts.get(email.strip().lower())
        if account is None or not hmac.compare_digest(
            account.password_hash, _hash_password(password, account.salt)
        ):
            raise UnauthorizedError("Wrong email or password")
        return self._issue_token(account.player)

    def resolve(self, token: Optional[str]) -> PlayerInfo:
        """
        Raises:
            UnauthorizedError: If the token is missing or unknown
        """
        if not token:
            raise UnauthorizedError("Login required")
        with self._guard:
            player = self._tokens.get(token)
        if player is None:
            raise UnauthorizedError("Invalid or expired credential")
        return player

    def _issue_token(self, player: PlayerInfo) -> AuthResult:
        token = secrets.token_hex(16)
        with self._guard:
            self._tokens[token] = player
        return AuthResult(token=token, player=player)
