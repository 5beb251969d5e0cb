# Area: Session
"""
marrakech._session.state_machine — Session and turn state machines
==================================================================

Transition tables for the session lifecycle and for the actions of a
single turn. Neither machine has backward transitions.
"""

from typing import Dict, Generic, TypeVar

from .enums import SessionStatus, SessionEvent, TurnEvent
from .._engine.enums import TurnPhase

S = TypeVar("S")
E = TypeVar("E")

# Valid transitions: {current_state: {event: next_state}}
SESSION_TRANSITIONS = {
    SessionStatus.WAITING: {
        SessionEvent.ORDER_FIXED: SessionStatus.ACTIVE,
    },
    SessionStatus.ACTIVE: {
        SessionEvent.GAME_FINISHED: SessionStatus.FINISHED,
    },
    SessionStatus.FINISHED: {},
}

TURN_TRANSITIONS = {
    TurnPhase.IDLE: {
        TurnEvent.ROTATE: TurnPhase.IDLE,
        TurnEvent.ROLL: TurnPhase.ROLLED,
    },
    TurnPhase.ROLLED: {
        TurnEvent.PLACE: TurnPhase.IDLE,
    },
}


class StateMachine(Generic[S, E]):
    """
    Table-driven state machine.

    Attributes:
        current_state: The current state
    """

    def __init__(self, transitions: Dict[S, Dict[E, S]], initial: S):
        self.transitions = transitions
        self.current_state = initial

    def can_transition(self, event: E) -> bool:
        return event in self.transitions.get(self.current_state, {})

    def transition(self, event: E) -> S:
        """
        Execute a state transition.

        Raises:
            ValueError: If the event is not valid from the current state
        """
        if not self.can_transition(event):
            raise ValueError(
                f"Invalid transition: {event.value} from {self.current_state.value}"
            )
        self.current_state = self.transitions[self.current_state][event]
        return self.current_state


class SessionStateMachine(StateMachine[SessionStatus, SessionEvent]):
    def __init__(self, initial: SessionStatus = SessionStatus.WAITING):
        super().__init__(SESSION_TRANSITIONS, initial)


class TurnStateMachine(StateMachine[TurnPhase, TurnEvent]):
    def __init__(self, initial: TurnPhase = TurnPhase.IDLE):
        super().__init__(TURN_TRANSITIONS, initial)
