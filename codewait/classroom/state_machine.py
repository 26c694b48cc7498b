"""
Application state machine.

Transitions are a pure function of (state, event). The controller owns the
current state value; nothing else decides which view is active.
"""

from enum import Enum

from codewait.schemas import AppState


class SessionEvent(str, Enum):
    START = "start"         # also "start again" from the summary view
    SUCCESS = "success"
    FAILURE = "failure"
    COMPLETE = "complete"
    RESET = "reset"


class InvalidTransition(Exception):
    """Event is not allowed in the current state."""

    def __init__(self, state: AppState, event: SessionEvent):
        super().__init__(f"Event '{event.value}' not allowed in state '{state.value}'")
        self.state = state
        self.event = event


TRANSITIONS: dict[tuple[AppState, SessionEvent], AppState] = {
    (AppState.IDLE, SessionEvent.START): AppState.GENERATING,
    (AppState.SUMMARY, SessionEvent.START): AppState.GENERATING,
    (AppState.GENERATING, SessionEvent.SUCCESS): AppState.LEARNING,
    (AppState.GENERATING, SessionEvent.FAILURE): AppState.ERROR,
    (AppState.LEARNING, SessionEvent.COMPLETE): AppState.SUMMARY,
    # No cancellation: the in-flight response is dropped when it arrives
    (AppState.GENERATING, SessionEvent.RESET): AppState.IDLE,
    (AppState.LEARNING, SessionEvent.RESET): AppState.IDLE,
    (AppState.SUMMARY, SessionEvent.RESET): AppState.IDLE,
    (AppState.ERROR, SessionEvent.RESET): AppState.IDLE,
}


def can_transition(state: AppState, event: SessionEvent) -> bool:
    return (state, event) in TRANSITIONS


def transition(state: AppState, event: SessionEvent) -> AppState:
    """
    Next state for an event.

    Raises:
        InvalidTransition: If the event is not allowed in this state
    """
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransition(state, event) from None
