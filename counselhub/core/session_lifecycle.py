"""
Session lifecycle rules.

Transition table for the counseling session state machine:

    pending -> waiting -> active -> completed
    pending/waiting -> cancelled

Operations whose target status the session already has are replays and
return the record unchanged. completed and cancelled are terminal.

Dependencies: counselhub.boundary.db.models.session_model, counselhub.core.exceptions
System role: Pure state machine consulted by the session and assignment services
"""

import enum
from typing import Any

from counselhub.boundary.db.models.session_model import SessionStatus
from counselhub.core.exceptions import InvalidTransitionError


class SessionAction(str, enum.Enum):
    """Operations that move a session between statuses."""

    ENQUEUE = "enqueue"
    ASSIGN = "auto-assign"
    ACTIVATE = "activate"
    END = "end"
    CANCEL = "cancel"


class TransitionOutcome(str, enum.Enum):
    """
    Result of checking an action against the current status.

    APPLY: the transition must be written to the store
    REPLAY: the session already is in the target status; nothing to write
    """

    APPLY = "apply"
    REPLAY = "replay"


TERMINAL_STATUSES: frozenset[SessionStatus] = frozenset(
    {SessionStatus.COMPLETED, SessionStatus.CANCELLED}
)
OPEN_STATUSES: frozenset[SessionStatus] = frozenset(
    {SessionStatus.PENDING, SessionStatus.WAITING}
)
ASSIGNED_STATUSES: frozenset[SessionStatus] = frozenset(
    {SessionStatus.ACTIVE, SessionStatus.COMPLETED}
)

_TRANSITIONS: dict[SessionAction, tuple[frozenset[SessionStatus], SessionStatus]] = {
    SessionAction.ENQUEUE: (frozenset({SessionStatus.PENDING}), SessionStatus.WAITING),
    SessionAction.ASSIGN: (OPEN_STATUSES, SessionStatus.ACTIVE),
    SessionAction.ACTIVATE: (OPEN_STATUSES, SessionStatus.ACTIVE),
    SessionAction.END: (frozenset({SessionStatus.ACTIVE}), SessionStatus.COMPLETED),
    SessionAction.CANCEL: (OPEN_STATUSES, SessionStatus.CANCELLED),
}


def source_statuses(action: SessionAction) -> frozenset[SessionStatus]:
    """Statuses from which the action may be applied."""
    return _TRANSITIONS[action][0]


def target_status(action: SessionAction) -> SessionStatus:
    """Status a session ends up in after the action."""
    return _TRANSITIONS[action][1]


def is_terminal(status: SessionStatus) -> bool:
    return status in TERMINAL_STATUSES


def plan_transition(
    session_id: Any,
    current: SessionStatus,
    action: SessionAction,
) -> TransitionOutcome:
    """
    Decide how an action applies to a session in the given status.

    Args:
        session_id: Session identifier (for error context)
        current: Current session status
        action: Requested operation

    Returns:
        TransitionOutcome: APPLY when a write is needed, REPLAY when the
        session already is in the action's target status

    Raises:
        InvalidTransitionError: If the action is not allowed from current
    """
    sources, target = _TRANSITIONS[action]
    if current == target:
        return TransitionOutcome.REPLAY
    if current in sources:
        return TransitionOutcome.APPLY
    raise InvalidTransitionError(session_id, current.value, action.value)
