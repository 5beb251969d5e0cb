# Area: Test Fixtures
"""Shared fixtures: scripted dice and a two-player session."""

import pytest

from marrakech._engine.board import DICE_FACES
from marrakech._engine.randomness import RandomSource
from marrakech._session.orchestrator import GameOrchestrator
from marrakech._session.session import PlayerInfo


class ScriptedRandom(RandomSource):
    """RandomSource whose dice rolls are taken from a script."""

    def __init__(self, rolls=(), seed=0):
        super().__init__(seed)
        self.rolls = list(rolls)

    def choice(self, items):
        if tuple(items) == DICE_FACES and self.rolls:
            return self.rolls.pop(0)
        return super().choice(items)


ALICE = PlayerInfo(id="alice", name="Alice")
BOB = PlayerInfo(id="bob", name="Bob")
CAROL = PlayerInfo(id="carol", name="Carol")


@pytest.fixture
def rng():
    return ScriptedRandom(rolls=[1] * 50)


@pytest.fixture
def orchestrator(rng):
    return GameOrchestrator(rng=rng)


@pytest.fixture
def session_id(orchestrator):
    """Waiting session created by Alice with Bob joined."""
    session = orchestrator.create_session("Test game", ALICE)
    orchestrator.join_session(session["id"], BOB)
    return session["id"]


@pytest.fixture
def started(orchestrator, session_id):
    """Active session with turn order [alice, bob]."""
    orchestrator.start_session(session_id)
    return session_id
