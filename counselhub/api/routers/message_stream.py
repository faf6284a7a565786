"""
WebSocket message feed.

Pushes new session messages to a connected participant instead of making
the client poll the history endpoint.

Routes: WS /ws/sessions/{session_id}/messages?token=<access token>[&after=<position>]

Server sends:
    {"event": "connected", "data": {"session_id": "...", "after": 3}}
    {"event": "message", "data": {...Message...}}
    {"event": "session_ended", "data": {"status": "completed"}}
    {"event": "pong"}

Client may send:
    {"event": "ping"}

Dependencies: counselhub.application.services, counselhub.configs
System role: WebSocket push HTTP API
"""

import asyncio
import json
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import async_sessionmaker

from counselhub.api.deps import get_db_session_factory, get_settings_dependency
from counselhub.application.services.auth_service import AuthService
from counselhub.application.services.message_service import MessageService
from counselhub.application.services.session_service import can_view, is_participant
from counselhub.boundary.db.CRUD.session_crud import session_crud
from counselhub.boundary.db.models import UserRole
from counselhub.configs import Settings
from counselhub.core.exceptions import AuthenticationError
from counselhub.core.session_lifecycle import is_terminal
from counselhub.models.message import MessageResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["streaming"])


async def _authorize(
    factory: async_sessionmaker,
    settings: Settings,
    session_id: UUID,
    token: str | None,
) -> bool:
    """True when the token belongs to a participant (or admin) of the session."""
    if not token:
        return False
    async with factory() as db:
        try:
            user = await AuthService(db, settings.auth).resolve_token(token)
        except AuthenticationError:
            return False
        session = await session_crud.get_by_id(db, session_id)
        if session is None or not can_view(session, user):
            return False
        return is_participant(session, user) or user.role == UserRole.ADMIN


async def _poll(
    factory: async_sessionmaker,
    session_id: UUID,
    after: int | None,
) -> tuple[list[dict], int | None, str | None]:
    """
    Fetch messages past a position with a fresh database session.

    Returns:
        (serialized messages, new last position, terminal status or None)
    """
    async with factory() as db:
        messages = await MessageService(db).list_since(session_id, after)
        session = await session_crud.get_by_id(db, session_id)
    payload = [MessageResponse.model_validate(m).model_dump(mode="json") for m in messages]
    if messages:
        after = max(m.position for m in messages)
    ended = session.status.value if session is not None and is_terminal(session.status) else None
    return payload, after, ended


@router.websocket("/ws/sessions/{session_id}/messages")
async def message_feed(
    websocket: WebSocket,
    session_id: UUID,
    token: str | None = None,
    after: int | None = None,
    factory: async_sessionmaker = Depends(get_db_session_factory),
    settings: Settings = Depends(get_settings_dependency),
) -> None:
    """
    Stream new messages of a session to a participant.

    Without `after` only messages appended after the connection are sent.

    Args:
        websocket: WebSocket connection
        session_id: Session UUID from path
        token: Access token (browsers cannot set headers on WebSocket)
        after: Position to resume from
    """
    if not await _authorize(factory, settings, session_id, token):
        logger.info("WebSocket feed rejected", extra={"session_id": str(session_id)})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    if after is None:
        _, after, _ = await _poll(factory, session_id, None)
    await websocket.send_json({
        "event": "connected",
        "data": {"session_id": str(session_id), "after": after},
    })
    logger.info("WebSocket feed connected", extra={"session_id": str(session_id)})

    poll_seconds = settings.assignment.stream_poll_seconds
    try:
        while True:
            messages, after, ended = await _poll(factory, session_id, after)
            for message in messages:
                await websocket.send_json({"event": "message", "data": message})
            if ended:
                await websocket.send_json({"event": "session_ended", "data": {"status": ended}})
                await websocket.close()
                return

            try:
                raw = await asyncio.wait_for(websocket.receive_text(), timeout=poll_seconds)
            except asyncio.TimeoutError:
                continue
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json({
                    "event": "error",
                    "data": {"code": "INVALID_JSON", "message": "Invalid JSON format"},
                })
                continue
            if isinstance(data, dict) and data.get("event") == "ping":
                await websocket.send_json({"event": "pong"})

    except WebSocketDisconnect:
        logger.info("WebSocket feed disconnected", extra={"session_id": str(session_id)})
