"""Triage state machine.

Two states, two triggers. A hash collision moves an operation into triage,
an edit of its details resolves it. Everything that writes
``Operation.state`` asks this module for the target state.
"""

import enum

from opstrack.domain.entities import OperationState
from opstrack.domain.errors import ConflictError


class Trigger(enum.Enum):
    """Events that may change an operation's state."""

    COLLISION = "collision"
    EDIT = "edit"


TRANSITIONS: dict[tuple[OperationState, Trigger], OperationState] = {
    (OperationState.OK, Trigger.COLLISION): OperationState.PENDING_TRIAGE,
    # Re-flagging an operation already in triage is a no-op.
    (OperationState.PENDING_TRIAGE, Trigger.COLLISION): OperationState.PENDING_TRIAGE,
    (OperationState.PENDING_TRIAGE, Trigger.EDIT): OperationState.OK,
    (OperationState.OK, Trigger.EDIT): OperationState.OK,
}


def next_state(state: OperationState, trigger: Trigger) -> OperationState:
    """Return the state reached from ``state`` when ``trigger`` fires.

    Raises:
        ConflictError: If the transition is not defined
    """
    try:
        return TRANSITIONS[(state, trigger)]
    except KeyError:
        raise ConflictError(
            f"No transition from {state.name} on {trigger.name}"
        ) from None


def is_transition(state: OperationState, trigger: Trigger) -> bool:
    """Return True if ``trigger`` actually changes ``state``."""
    return next_state(state, trigger) is not state
