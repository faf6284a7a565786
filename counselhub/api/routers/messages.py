"""
Session message API endpoints.

Routes:
- GET /sessions/{id}/messages - Full ordered history (marks counterpart messages read)
- POST /sessions/{id}/messages - Append a message

Dependencies: counselhub.application.services.message_service, counselhub.models
System role: Messaging HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from counselhub.api.deps import get_current_user, get_message_service
from counselhub.api.routers.router_utils import handle_service_errors
from counselhub.application.services.message_service import MessageService
from counselhub.boundary.db.models import UserModel
from counselhub.models.message import CreateMessageRequest, MessageResponse

router = APIRouter(prefix="/sessions", tags=["messages"])


@router.get("/{session_id}/messages", response_model=list[MessageResponse])
@handle_service_errors
async def list_messages(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service),
) -> list[MessageResponse]:
    messages = await message_service.list_messages(user, session_id)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post(
    "/{session_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def send_message(
    session_id: UUID,
    request: CreateMessageRequest,
    user: UserModel = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    """
    Append a message to the session.

    Raises:
        HTTPException(400): Empty content after trimming
        HTTPException(403): Caller is not a participant
        HTTPException(409): Session already completed or cancelled
    """
    message = await message_service.append_message(user, session_id, request.content)
    return MessageResponse.model_validate(message)
