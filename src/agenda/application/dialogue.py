"""Dialogue state tracker: Idle <-> AwaitingName.

Transitions are pure functions over DialogueState values; the caller keeps the
value between turns.
"""

from agenda.application.dto import IDLE, DialogueState, PendingAction


def begin_turn(state: DialogueState) -> tuple[PendingAction | None, DialogueState]:
    """Consume the pending marker for this turn.

    Returns (pending marker the turn must honour, state to use if the turn sets
    nothing). Any pending marker lasts exactly one turn.
    """
    return state.pending, IDLE


def await_name() -> DialogueState:
    """State after a create_ask_name turn. Overwrites any pending marker."""
    return DialogueState(pending=PendingAction.AWAITING_NAME)


def reset() -> DialogueState:
    return IDLE
