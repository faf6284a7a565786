"""
AI companion API endpoint.

Routes: POST /ai/chat

Dependencies: counselhub.application.services.companion_service, counselhub.models
System role: AI chat HTTP API
"""

from fastapi import APIRouter, Depends

from counselhub.api.deps import get_companion_service, get_current_user
from counselhub.api.routers.router_utils import handle_service_errors
from counselhub.application.services.companion_service import CompanionService
from counselhub.boundary.db.models import UserModel
from counselhub.models.ai import AIChatRequest, AIChatResponse

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/chat", response_model=AIChatResponse)
@handle_service_errors
async def chat(
    request: AIChatRequest,
    user: UserModel = Depends(get_current_user),
    companion_service: CompanionService = Depends(get_companion_service),
) -> AIChatResponse:
    """
    Talk to the AI companion.

    Raises:
        HTTPException(503): Model not configured or failing
    """
    reply = await companion_service.chat(user, request.message, request.history)
    return AIChatResponse(response=reply)
