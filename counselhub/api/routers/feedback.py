"""
Feedback API endpoints.

Routes:
- POST /feedback - Rate a completed session (re-submission revises)
- GET /feedback?user_id= - List feedback

Dependencies: counselhub.application.services.feedback_service, counselhub.models
System role: Session rating HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from counselhub.api.deps import get_current_user, get_feedback_service
from counselhub.api.routers.router_utils import handle_service_errors
from counselhub.application.services.feedback_service import FeedbackService
from counselhub.boundary.db.models import UserModel
from counselhub.models.feedback import CreateFeedbackRequest, FeedbackResponse

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackResponse)
@handle_service_errors
async def submit_feedback(
    request: CreateFeedbackRequest,
    user: UserModel = Depends(get_current_user),
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackResponse:
    """
    Rate a completed session.

    Raises:
        HTTPException(403): Caller does not own the session
        HTTPException(409): Session is not completed
    """
    feedback = await feedback_service.submit_feedback(
        user, request.session_id, request.rating, request.comment
    )
    return FeedbackResponse.model_validate(feedback)


@router.get("", response_model=list[FeedbackResponse])
@handle_service_errors
async def list_feedback(
    user_id: UUID | None = None,
    user: UserModel = Depends(get_current_user),
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> list[FeedbackResponse]:
    feedback = await feedback_service.list_feedback(user, user_id)
    return [FeedbackResponse.model_validate(f) for f in feedback]
