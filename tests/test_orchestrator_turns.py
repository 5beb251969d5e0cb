# Area: Session Tests
"""Tests for turn actions: rotate, roll, place, rent and game end."""

import threading

import pytest

from marrakech._session.orchestrator import GameOrchestrator
from marrakech._session.validator import RugPlacement
from marrakech._engine.enums import Orientation
from marrakech.errors import (
    ExhaustedError,
    ForbiddenError,
    GameOverError,
    InvalidMoveError,
    MarrakechError,
    NotFoundError,
)

from conftest import ALICE, BOB, CAROL, ScriptedRandom


def set_state(orchestrator, session_id, **changes):
    """Edit the stored game state directly, as a test shortcut."""
    orchestrator.get_game_state(session_id)
    state = orchestrator.states.get(session_id)
    for table, values in changes.items():
        getattr(state, table).update(values)
    return state


class TestFirstTurn:
    """A full first turn for Alice."""

    def test_roll_moves_assam(self, orchestrator, started):
        state = orchestrator.roll_dice(started, "alice")

        assert state["last_roll"] == 1
        assert state["piece"] == {"x": 3, "y": 2, "direction": "N"}
        assert state["phase"] == "rolled"
        assert state["active_player_id"] == "alice"

    def test_place_then_turn_passes(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")

        state = orchestrator.place_rug(started, {"x": 1, "y": 2, "orientation": "H"}, "alice")

        assert state["rugs_left"]["alice"] == 23
        assert state["active_player_id"] == "bob"
        assert state["phase"] == "idle"
        top = state["rugs_grid"][2][1][-1]
        assert top["owner_id"] == "alice"
        assert state["rugs_grid"][2][2][-1] == top
        assert orchestrator.get_session(started)["active_player_id"] == "bob"

    def test_cannot_cover_assam(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")

        with pytest.raises(InvalidMoveError, match="Assam's cell"):
            orchestrator.place_rug(started, {"x": 2, "y": 2, "orientation": "H"}, "alice")

        state = orchestrator.get_game_state(started)
        assert state["rugs_left"]["alice"] == 24
        assert state["phase"] == "rolled"
        assert state["active_player_id"] == "alice"

    def test_accepts_model_payload(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        placement = RugPlacement(x=4, y=1, orientation=Orientation.V)

        state = orchestrator.place_rug(started, placement, "alice")

        assert state["rugs_grid"][1][4][-1]["owner_id"] == "alice"
        assert state["rugs_grid"][2][4][-1]["owner_id"] == "alice"

    def test_rotate_before_roll(self, orchestrator, started):
        state = orchestrator.rotate(started, "right", "alice")
        assert state["piece"]["direction"] == "E"

        state = orchestrator.roll_dice(started, "alice")
        assert state["piece"] == {"x": 4, "y": 3, "direction": "E"}


class TestTurnEnforcement:
    """Only the active player may act, in the right order."""

    def test_other_player_forbidden(self, orchestrator, started):
        with pytest.raises(ForbiddenError):
            orchestrator.roll_dice(started, "bob")
        with pytest.raises(ForbiddenError):
            orchestrator.rotate(started, "left", "bob")

    def test_player_cannot_act_after_placing(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        orchestrator.place_rug(started, {"x": 1, "y": 2, "orientation": "H"}, "alice")

        with pytest.raises(ForbiddenError):
            orchestrator.rotate(started, "left", "alice")
        with pytest.raises(ForbiddenError):
            orchestrator.roll_dice(started, "alice")
        with pytest.raises(ForbiddenError):
            orchestrator.place_rug(started, {"x": 4, "y": 2, "orientation": "H"}, "alice")
        assert orchestrator.get_game_state(started)["active_player_id"] == "bob"

    def test_outsider_forbidden(self, orchestrator, started):
        with pytest.raises(ForbiddenError):
            orchestrator.roll_dice(started, "carol")

    def test_waiting_session_forbidden(self, orchestrator, session_id):
        with pytest.raises(ForbiddenError, match="not started"):
            orchestrator.roll_dice(session_id, "alice")

    def test_unknown_session(self, orchestrator):
        with pytest.raises(NotFoundError):
            orchestrator.roll_dice("missing", "alice")

    def test_place_before_roll(self, orchestrator, started):
        with pytest.raises(InvalidMoveError, match="Roll the dice"):
            orchestrator.place_rug(started, {"x": 3, "y": 2, "orientation": "H"}, "alice")

    def test_roll_twice(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        with pytest.raises(InvalidMoveError, match="already rolled"):
            orchestrator.roll_dice(started, "alice")

    def test_rotate_after_roll(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        with pytest.raises(InvalidMoveError, match="before rolling"):
            orchestrator.rotate(started, "left", "alice")

    def test_unknown_rotation(self, orchestrator, started):
        with pytest.raises(InvalidMoveError):
            orchestrator.rotate(started, "backwards", "alice")

    def test_malformed_placement(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        with pytest.raises(InvalidMoveError, match="Malformed"):
            orchestrator.place_rug(started, {"x": "three", "y": 2, "orientation": "H"}, "alice")

    def test_no_active_player(self, orchestrator, started):
        orchestrator.get_game_state(started)
        orchestrator.sessions.get(started).turn_order = []

        with pytest.raises(NotFoundError):
            orchestrator.roll_dice(started, "alice")

    def test_rejection_carries_session_id(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        with pytest.raises(MarrakechError) as exc_info:
            orchestrator.place_rug(started, {"x": 0, "y": 0, "orientation": "H"}, "alice")

        assert exc_info.value.to_dict() == {
            "error": "INVALID_MOVE",
            "reason": "Rug must touch Assam",
            "session_id": started,
        }


class TestRent:
    """Rent is paid when Assam lands on an opponent's region."""

    def test_rent_paid_to_region_owner(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        orchestrator.place_rug(started, {"x": 2, "y": 2, "orientation": "V"}, "alice")

        orchestrator.rotate(started, "left", "bob")
        state = orchestrator.roll_dice(started, "bob")

        assert state["piece"] == {"x": 2, "y": 2, "direction": "W"}
        assert state["balances"] == {"alice": 62, "bob": 58}
        assert state["last_payments"] == [{
            "payer_id": "bob",
            "owner_id": "alice",
            "amount": 2,
            "region_size": 2,
            "cell": [2, 2],
        }]

    def test_rent_capped_by_balance(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        orchestrator.place_rug(started, {"x": 2, "y": 2, "orientation": "V"}, "alice")
        set_state(orchestrator, started, balances={"bob": 1})

        orchestrator.rotate(started, "left", "bob")
        state = orchestrator.roll_dice(started, "bob")

        assert state["balances"] == {"alice": 61, "bob": 0}

    def test_own_rug_is_free(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        orchestrator.place_rug(started, {"x": 2, "y": 1, "orientation": "H"}, "alice")
        orchestrator.rotate(started, "left", "bob")
        orchestrator.roll_dice(started, "bob")
        orchestrator.place_rug(started, {"x": 2, "y": 3, "orientation": "H"}, "bob")

        orchestrator.rotate(started, "right", "alice")
        state = orchestrator.roll_dice(started, "alice")

        assert state["piece"] == {"x": 2, "y": 1, "direction": "N"}
        assert state["last_payments"] == []
        assert state["balances"] == {"alice": 60, "bob": 60}


class TestExhaustion:
    """Players without rugs."""

    def test_exhausted_player_cannot_place(self, orchestrator, started):
        set_state(orchestrator, started, rugs_left={"alice": 0})

        with pytest.raises(ExhaustedError) as exc_info:
            orchestrator.place_rug(started, {"x": 3, "y": 2, "orientation": "H"}, "alice")
        assert exc_info.value.player_id == "alice"

    def test_exhausted_player_skipped(self, rng):
        orchestrator = GameOrchestrator(rng=rng)
        session_id = orchestrator.create_session("Three", ALICE)["id"]
        orchestrator.join_session(session_id, BOB)
        orchestrator.join_session(session_id, CAROL)
        orchestrator.start_session(session_id)
        set_state(orchestrator, session_id, rugs_left={"bob": 0})

        orchestrator.roll_dice(session_id, "alice")
        state = orchestrator.place_rug(session_id, {"x": 3, "y": 1, "orientation": "H"}, "alice")

        assert state["active_player_id"] == "carol"


class TestGameEnd:
    """The game ends when every rug has been placed."""

    def test_last_rug_finishes_game(self, orchestrator, started):
        set_state(orchestrator, started, rugs_left={"alice": 1, "bob": 0})

        orchestrator.roll_dice(started, "alice")
        state = orchestrator.place_rug(started, {"x": 1, "y": 2, "orientation": "H"}, "alice")

        assert state["status"] == "finished"
        assert state["winner_id"] == "alice"
        assert state["scores"] == {"alice": 62, "bob": 60}
        assert state["active_player_id"] is None
        session = orchestrator.get_session(started)
        assert session["status"] == "finished"
        assert session["active_player_id"] is None

    def test_finished_game_rejects_actions(self, orchestrator, started):
        set_state(orchestrator, started, rugs_left={"alice": 1, "bob": 0})
        orchestrator.roll_dice(started, "alice")
        orchestrator.place_rug(started, {"x": 1, "y": 2, "orientation": "H"}, "alice")

        with pytest.raises(GameOverError):
            orchestrator.roll_dice(started, "alice")
        with pytest.raises(GameOverError):
            orchestrator.rotate(started, "left", "bob")
        with pytest.raises(GameOverError):
            orchestrator.join_session(started, CAROL)

    def test_winner_fixed_after_finish(self, orchestrator, started):
        set_state(orchestrator, started, rugs_left={"alice": 1, "bob": 0})
        orchestrator.roll_dice(started, "alice")
        orchestrator.place_rug(started, {"x": 1, "y": 2, "orientation": "H"}, "alice")

        state = orchestrator.get_game_state(started)
        assert state["winner_id"] == "alice"

    def test_tie_goes_to_earlier_player(self, orchestrator, started):
        set_state(orchestrator, started, rugs_left={"alice": 1, "bob": 0}, balances={"alice": 58})

        orchestrator.roll_dice(started, "alice")
        state = orchestrator.place_rug(started, {"x": 1, "y": 2, "orientation": "H"}, "alice")

        assert state["scores"] == {"alice": 60, "bob": 60}
        assert state["winner_id"] == "alice"

    def test_higher_score_wins(self, orchestrator, started):
        set_state(orchestrator, started, rugs_left={"alice": 1, "bob": 0}, balances={"alice": 50})

        orchestrator.roll_dice(started, "alice")
        state = orchestrator.place_rug(started, {"x": 1, "y": 2, "orientation": "H"}, "alice")

        assert state["winner_id"] == "bob"


class TestConcurrency:
    """Concurrent actions on one session are serialized."""

    def test_only_one_roll_succeeds(self):
        orchestrator = GameOrchestrator(rng=ScriptedRandom(rolls=[1] * 50))
        session_id = orchestrator.create_session("Race", ALICE)["id"]
        orchestrator.join_session(session_id, BOB)
        orchestrator.start_session(session_id)

        results, errors = [], []
        barrier = threading.Barrier(8)

        def roll():
            barrier.wait()
            try:
                results.append(orchestrator.roll_dice(session_id, "alice"))
            except InvalidMoveError as e:
                errors.append(e)

        threads = [threading.Thread(target=roll) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 1
        assert len(errors) == 7
        assert orchestrator.get_game_state(session_id)["piece"]["y"] == 2

    def test_reads_during_play(self, orchestrator, started):
        orchestrator.roll_dice(started, "alice")
        snapshots = []

        def read():
            snapshots.append(orchestrator.get_game_state(started))

        threads = [threading.Thread(target=read) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(s["phase"] == "rolled" for s in snapshots)
