"""
Test suite for the session state machine.

System role: Verification of transition rules, replays and terminal states
"""

import uuid

import pytest

from counselhub.boundary.db.models import SessionStatus
from counselhub.core.exceptions import ConflictError, InvalidTransitionError
from counselhub.core.session_lifecycle import (
    OPEN_STATUSES,
    TERMINAL_STATUSES,
    SessionAction,
    TransitionOutcome,
    is_terminal,
    plan_transition,
    source_statuses,
    target_status,
)


class TestTransitionTable:
    """Test suite for source/target lookups."""

    def test_enqueue_moves_pending_to_waiting(self) -> None:
        assert source_statuses(SessionAction.ENQUEUE) == {SessionStatus.PENDING}
        assert target_status(SessionAction.ENQUEUE) == SessionStatus.WAITING

    @pytest.mark.parametrize("action", [SessionAction.ASSIGN, SessionAction.ACTIVATE])
    def test_assignment_accepts_pending_and_waiting(self, action: SessionAction) -> None:
        assert source_statuses(action) == OPEN_STATUSES
        assert target_status(action) == SessionStatus.ACTIVE

    def test_end_only_from_active(self) -> None:
        assert source_statuses(SessionAction.END) == {SessionStatus.ACTIVE}
        assert target_status(SessionAction.END) == SessionStatus.COMPLETED

    def test_cancel_only_before_assignment(self) -> None:
        assert source_statuses(SessionAction.CANCEL) == OPEN_STATUSES
        assert target_status(SessionAction.CANCEL) == SessionStatus.CANCELLED

    def test_terminal_statuses(self) -> None:
        assert TERMINAL_STATUSES == {SessionStatus.COMPLETED, SessionStatus.CANCELLED}
        assert is_terminal(SessionStatus.COMPLETED)
        assert not is_terminal(SessionStatus.ACTIVE)


class TestPlanTransition:
    """Test suite for plan_transition()."""

    @pytest.mark.parametrize(
        ("current", "action"),
        [
            (SessionStatus.PENDING, SessionAction.ENQUEUE),
            (SessionStatus.PENDING, SessionAction.ASSIGN),
            (SessionStatus.WAITING, SessionAction.ASSIGN),
            (SessionStatus.WAITING, SessionAction.ACTIVATE),
            (SessionStatus.ACTIVE, SessionAction.END),
            (SessionStatus.WAITING, SessionAction.CANCEL),
        ],
    )
    def test_allowed_transition_should_apply(
        self, current: SessionStatus, action: SessionAction
    ) -> None:
        assert plan_transition(uuid.uuid4(), current, action) is TransitionOutcome.APPLY

    @pytest.mark.parametrize(
        ("current", "action"),
        [
            (SessionStatus.WAITING, SessionAction.ENQUEUE),
            (SessionStatus.ACTIVE, SessionAction.ASSIGN),
            (SessionStatus.ACTIVE, SessionAction.ACTIVATE),
            (SessionStatus.COMPLETED, SessionAction.END),
            (SessionStatus.CANCELLED, SessionAction.CANCEL),
        ],
    )
    def test_repeated_operation_should_replay(
        self, current: SessionStatus, action: SessionAction
    ) -> None:
        assert plan_transition(uuid.uuid4(), current, action) is TransitionOutcome.REPLAY

    @pytest.mark.parametrize(
        ("current", "action"),
        [
            (SessionStatus.COMPLETED, SessionAction.ENQUEUE),
            (SessionStatus.COMPLETED, SessionAction.ASSIGN),
            (SessionStatus.COMPLETED, SessionAction.CANCEL),
            (SessionStatus.CANCELLED, SessionAction.END),
            (SessionStatus.CANCELLED, SessionAction.ACTIVATE),
            (SessionStatus.PENDING, SessionAction.END),
            (SessionStatus.ACTIVE, SessionAction.CANCEL),
            (SessionStatus.ACTIVE, SessionAction.ENQUEUE),
        ],
    )
    def test_disallowed_transition_should_raise(
        self, current: SessionStatus, action: SessionAction
    ) -> None:
        # Arrange
        session_id = uuid.uuid4()

        # Act / Assert
        with pytest.raises(InvalidTransitionError) as exc_info:
            plan_transition(session_id, current, action)

        assert exc_info.value.details["status"] == current.value
        assert exc_info.value.details["operation"] == action.value
        assert exc_info.value.details["session_id"] == str(session_id)

    def test_invalid_transition_is_a_conflict(self) -> None:
        with pytest.raises(ConflictError):
            plan_transition(uuid.uuid4(), SessionStatus.CANCELLED, SessionAction.ASSIGN)
