"""
Dashboard statistics API endpoints.

Routes: GET /stats/user, GET /stats/counselor, GET /stats/admin

Dependencies: counselhub.application.services.stats_service, counselhub.models
System role: Dashboard HTTP API
"""

from fastapi import APIRouter, Depends

from counselhub.api.deps import get_current_user, get_stats_service
from counselhub.api.routers.router_utils import handle_service_errors
from counselhub.application.services.stats_service import StatsService
from counselhub.boundary.db.models import UserModel
from counselhub.models.stats import AdminStats, CounselorStats, UserStats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/user", response_model=UserStats)
@handle_service_errors
async def user_stats(
    user: UserModel = Depends(get_current_user),
    stats_service: StatsService = Depends(get_stats_service),
) -> UserStats:
    return await stats_service.user_stats(user)


@router.get("/counselor", response_model=CounselorStats)
@handle_service_errors
async def counselor_stats(
    user: UserModel = Depends(get_current_user),
    stats_service: StatsService = Depends(get_stats_service),
) -> CounselorStats:
    return await stats_service.counselor_stats(user)


@router.get("/admin", response_model=AdminStats)
@handle_service_errors
async def admin_stats(
    user: UserModel = Depends(get_current_user),
    stats_service: StatsService = Depends(get_stats_service),
) -> AdminStats:
    return await stats_service.admin_stats(user)
