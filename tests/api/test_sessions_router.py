import pytest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

from fastapi import FastAPI
from fastapi.testclient import TestClient

from counselhub.api.deps import get_assignment_service, get_current_user, get_session_service
from counselhub.api.routers.sessions import router as sessions_router
from counselhub.application.services.assignment_service import (
    NO_COUNSELOR_ADVISORY,
    AssignmentResult,
)
from counselhub.boundary.db.models import UserRole
from counselhub.core.exceptions import (
    ConflictError,
    CounselorAtCapacityError,
    InvalidTransitionError,
    PermissionDeniedError,
    SessionNotFoundError,
)


def make_session_row(**overrides):
    now = datetime.now(timezone.utc)
    row = dict(
        id=uuid4(),
        user_id=uuid4(),
        counselor_id=None,
        status="pending",
        pulse_level=None,
        notes=None,
        created_at=now,
        updated_at=now,
        scheduled_at=None,
        assigned_at=None,
        completed_at=None,
        cancelled_at=None,
    )
    row.update(overrides)
    return SimpleNamespace(**row)


@pytest.fixture
def current_user():
    return SimpleNamespace(id=uuid4(), role=UserRole.USER, username="member")


@pytest.fixture
def mock_session_service():
    return AsyncMock()


@pytest.fixture
def mock_assignment_service():
    return AsyncMock()


@pytest.fixture
def client(current_user, mock_session_service, mock_assignment_service):
    app = FastAPI()
    app.include_router(sessions_router)
    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_session_service] = lambda: mock_session_service
    app.dependency_overrides[get_assignment_service] = lambda: mock_assignment_service
    return TestClient(app)


def test_create_session(client, current_user, mock_session_service):
    row = make_session_row(user_id=current_user.id, pulse_level=3)
    mock_session_service.create_session.return_value = row

    response = client.post("/sessions", json={"initial_pulse": 3})

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == str(row.id)
    assert data["status"] == "pending"
    assert data["counselor_id"] is None
    mock_session_service.create_session.assert_awaited_once_with(
        current_user, user_id=None, pulse_level=3, scheduled_at=None
    )


def test_create_session_rejects_out_of_range_pulse(client, mock_session_service):
    response = client.post("/sessions", json={"pulse_level": 7})

    assert response.status_code == 422
    mock_session_service.create_session.assert_not_called()


def test_list_sessions_passes_status_filter(client, current_user, mock_session_service):
    mock_session_service.list_sessions.return_value = [make_session_row(status="waiting")]

    response = client.get("/sessions", params={"status": "waiting"})

    assert response.status_code == 200
    assert [s["status"] for s in response.json()] == ["waiting"]
    kwargs = mock_session_service.list_sessions.await_args.kwargs
    assert kwargs["status"].value == "waiting"


def test_auto_assign_success(client, mock_assignment_service):
    counselor_id = uuid4()
    row = make_session_row(status="active", counselor_id=counselor_id)
    mock_assignment_service.auto_assign.return_value = AssignmentResult(session=row, assigned=True)

    response = client.post(f"/sessions/auto-assign/{row.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["assigned"] is True
    assert data["counselor_id"] == str(counselor_id)
    assert data["advisory"] is None


def test_auto_assign_without_counselor_is_not_an_error(client, mock_assignment_service):
    row = make_session_row(status="waiting")
    mock_assignment_service.auto_assign.return_value = AssignmentResult(
        session=row, assigned=False, advisory=NO_COUNSELOR_ADVISORY
    )

    response = client.post(f"/sessions/auto-assign/{row.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["assigned"] is False
    assert data["status"] == "waiting"
    assert data["advisory"] == NO_COUNSELOR_ADVISORY


@pytest.mark.parametrize(
    ("error", "expected_status"),
    [
        (SessionNotFoundError("abc"), 404),
        (PermissionDeniedError("Only participants or an admin can end a session"), 403),
        (InvalidTransitionError("abc", "pending", "end"), 409),
        (ConflictError("Session was modified concurrently; re-fetch and retry"), 409),
    ],
)
def test_end_session_error_mapping(client, mock_session_service, error, expected_status):
    mock_session_service.end_session.side_effect = error

    response = client.post(f"/sessions/{uuid4()}/end")

    assert response.status_code == expected_status
    assert response.json()["detail"] == error.message


def test_activate_at_capacity_conflicts(client, mock_assignment_service):
    mock_assignment_service.activate.side_effect = CounselorAtCapacityError(uuid4(), 5)

    response = client.post(f"/sessions/{uuid4()}/activate")

    assert response.status_code == 409
    assert "5 active sessions" in response.json()["detail"]


def test_unexpected_failure_becomes_500(client, mock_session_service):
    mock_session_service.get_session.side_effect = RuntimeError("boom")

    response = client.get(f"/sessions/{uuid4()}")

    assert response.status_code == 500
    assert response.json()["detail"] == "An internal error occurred"


def test_update_notes(client, mock_session_service, current_user):
    session_id = uuid4()
    mock_session_service.update_notes.return_value = make_session_row(id=session_id)

    response = client.post(f"/sessions/{session_id}/notes", json={"notes": "Check in Friday"})

    assert response.status_code == 200
    assert response.json()["ok"] is True
    mock_session_service.update_notes.assert_awaited_once_with(
        current_user, session_id, "Check in Friday"
    )
