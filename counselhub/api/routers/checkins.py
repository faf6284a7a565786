"""
Check-in API endpoints.

Routes:
- POST /checkins - Record a mood check-in
- GET /checkins?user_id= - List check-ins, newest first
- GET /checkins/{id} - Get a check-in

Dependencies: counselhub.application.services.checkin_service, counselhub.models
System role: Mood tracking HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from counselhub.api.deps import get_checkin_service, get_current_user
from counselhub.api.routers.router_utils import handle_service_errors
from counselhub.application.services.checkin_service import CheckInService
from counselhub.boundary.db.models import UserModel
from counselhub.models.checkin import CheckInResponse, CreateCheckInRequest

router = APIRouter(prefix="/checkins", tags=["checkins"])


@router.post("", response_model=CheckInResponse, status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def create_checkin(
    request: CreateCheckInRequest,
    user: UserModel = Depends(get_current_user),
    checkin_service: CheckInService = Depends(get_checkin_service),
) -> CheckInResponse:
    checkin = await checkin_service.create_checkin(user, request.mood, request.note)
    return CheckInResponse.model_validate(checkin)


@router.get("", response_model=list[CheckInResponse])
@handle_service_errors
async def list_checkins(
    user_id: UUID | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: UserModel = Depends(get_current_user),
    checkin_service: CheckInService = Depends(get_checkin_service),
) -> list[CheckInResponse]:
    checkins = await checkin_service.list_checkins(user, user_id, limit=limit, offset=offset)
    return [CheckInResponse.model_validate(c) for c in checkins]


@router.get("/{checkin_id}", response_model=CheckInResponse)
@handle_service_errors
async def get_checkin(
    checkin_id: UUID,
    user: UserModel = Depends(get_current_user),
    checkin_service: CheckInService = Depends(get_checkin_service),
) -> CheckInResponse:
    checkin = await checkin_service.get_checkin(user, checkin_id)
    return CheckInResponse.model_validate(checkin)
