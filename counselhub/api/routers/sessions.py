"""
Session API endpoints.

Routes:
- POST /sessions - Create session (pending)
- GET /sessions - List sessions visible to the caller
- GET /sessions/queue - Unassigned open sessions in triage order
- POST /sessions/auto-assign/{id} - Assign the best available counselor
- GET /sessions/{id} - Get session
- POST /sessions/{id}/queue - Move onto the waiting list
- POST /sessions/{id}/activate - Counselor claims the session
- POST /sessions/{id}/end - Complete the session
- POST /sessions/{id}/cancel - Withdraw before assignment
- POST /sessions/{id}/notes - Counselor annotation

Dependencies: counselhub.application.services, counselhub.models
System role: Session lifecycle HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from counselhub.api.deps import (
    get_assignment_service,
    get_current_user,
    get_session_service,
)
from counselhub.api.routers.router_utils import handle_service_errors
from counselhub.application.services.assignment_service import AssignmentService
from counselhub.application.services.session_service import SessionService
from counselhub.boundary.db.models import SessionStatus, UserModel
from counselhub.models.common import OkResponse
from counselhub.models.session import (
    AutoAssignResponse,
    CreateSessionRequest,
    SessionResponse,
    UpdateNotesRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def create_session(
    request: CreateSessionRequest,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Create a pending session.

    Args:
        request: CreateSessionRequest (user_id defaults to the caller)
        user: Authenticated account
        session_service: Injected SessionService

    Returns:
        SessionResponse: Created session

    Raises:
        HTTPException(403): Creating for someone else without being admin
        HTTPException(404): Target user not found
    """
    session = await session_service.create_session(
        user,
        user_id=request.user_id,
        pulse_level=request.pulse_level,
        scheduled_at=request.scheduled_at,
    )
    return SessionResponse.model_validate(session)


@router.get("", response_model=list[SessionResponse])
@handle_service_errors
async def list_sessions(
    user_id: UUID | None = None,
    counselor_id: UUID | None = None,
    status_filter: SessionStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> list[SessionResponse]:
    """List sessions the caller may see, newest first."""
    sessions = await session_service.list_sessions(
        user,
        user_id=user_id,
        counselor_id=counselor_id,
        status=status_filter,
        limit=limit,
        offset=offset,
    )
    return [SessionResponse.model_validate(s) for s in sessions]


@router.get("/queue", response_model=list[SessionResponse])
@handle_service_errors
async def list_queue(
    limit: int = Query(default=100, ge=1, le=500),
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> list[SessionResponse]:
    """Unassigned open sessions, highest pulse level first."""
    sessions = await session_service.list_queue(user, limit=limit)
    return [SessionResponse.model_validate(s) for s in sessions]


@router.post("/auto-assign/{session_id}", response_model=AutoAssignResponse)
@handle_service_errors
async def auto_assign_session(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    assignment_service: AssignmentService = Depends(get_assignment_service),
) -> AutoAssignResponse:
    """
    Assign the best available counselor.

    With no counselor free the session comes back unchanged with
    assigned=false and an advisory, not an error.

    Raises:
        HTTPException(404): Session not found
        HTTPException(409): Session is terminal or changed concurrently
    """
    result = await assignment_service.auto_assign(user, session_id)
    session = SessionResponse.model_validate(result.session)
    return AutoAssignResponse(
        **session.model_dump(),
        assigned=result.assigned,
        advisory=result.advisory,
    )


@router.get("/{session_id}", response_model=SessionResponse)
@handle_service_errors
async def get_session(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    session = await session_service.get_session(user, session_id)
    return SessionResponse.model_validate(session)


@router.post("/{session_id}/queue", response_model=SessionResponse)
@handle_service_errors
async def enqueue_session(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    session = await session_service.enqueue_session(user, session_id)
    return SessionResponse.model_validate(session)


@router.post("/{session_id}/activate", response_model=SessionResponse)
@handle_service_errors
async def activate_session(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    assignment_service: AssignmentService = Depends(get_assignment_service),
) -> SessionResponse:
    """
    Claim an open session for the calling counselor.

    Raises:
        HTTPException(403): Caller is not a counselor
        HTTPException(409): Claimed by someone else, or counselor at capacity
    """
    session = await assignment_service.activate(user, session_id)
    return SessionResponse.model_validate(session)


@router.post("/{session_id}/end", response_model=SessionResponse)
@handle_service_errors
async def end_session(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """Complete an active session. Repeating it returns the same record."""
    session = await session_service.end_session(user, session_id)
    return SessionResponse.model_validate(session)


@router.post("/{session_id}/cancel", response_model=SessionResponse)
@handle_service_errors
async def cancel_session(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    session = await session_service.cancel_session(user, session_id)
    return SessionResponse.model_validate(session)


@router.post("/{session_id}/notes", response_model=OkResponse)
@handle_service_errors
async def update_notes(
    session_id: UUID,
    request: UpdateNotesRequest,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> OkResponse:
    await session_service.update_notes(user, session_id, request.notes)
    return OkResponse(message="Notes saved")
