"""
Real-time WebSocket Endpoint.

Clients connect to ``/api/v1/ws`` with their access token (``token`` query
parameter or the ``jwt`` cookie) and exchange JSON frames of the form
``{"event": ..., "data": {...}}``.

Client events:
- ``swipe {target_user_id, direction: right|left}``, answered with ``swipeResult``
- ``message {conversation_id, content}``, relayed to the other participants
- ``typing {conversation_id, is_typing}``, relayed to the other participants

Server events: ``swipeResult``, ``match``, ``message``, ``typing``,
``presence`` and ``error``.
"""

import json
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import async_sessionmaker

from travel_buddy.core.database import async_session_maker
from travel_buddy.core.database.entities.users import User
from travel_buddy.core.database.repositories import RepositoryBundle, build_repositories
from travel_buddy.core.database.repositories.users import UserRepository
from travel_buddy.core.exceptions import AuthenticationFailed, TravelBuddyError, ValidationFailed
from travel_buddy.core.logging_config import get_logger
from travel_buddy.matching import MatchService
from travel_buddy.server.core.config import settings
from travel_buddy.server.services.auth import authenticate_token, extract_token
from travel_buddy.server.services.connections import ConnectionManager, get_connection_manager
from travel_buddy.server.services.conversations import ConversationService, message_payload
from travel_buddy.server.services.deps import get_score_cache
from travel_buddy.server.services.rate_limit import swipe_limiter

logger = get_logger(__name__)
router = APIRouter()

SWIPE_DIRECTIONS = {"right": "like", "left": "reject"}

EventHandler = Callable[[User, Dict[str, Any], RepositoryBundle, ConnectionManager], Awaitable[None]]


def get_session_factory() -> async_sessionmaker:
    """Session factory for socket events; each event gets its own session."""
    return async_session_maker


def _require_int(data: Dict[str, Any], name: str) -> int:
    value = data.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationFailed(f"{name} is required")
    return value


async def handle_swipe(user: User, data: Dict[str, Any], repos: RepositoryBundle, manager: ConnectionManager) -> None:
    target_id = data.get("target_user_id")
    action = SWIPE_DIRECTIONS.get(data.get("direction"))
    if settings.rate_limit.enabled:
        await swipe_limiter.hit(f"user:{user.id}")

    service = MatchService(
        repos, cache=get_score_cache(), notifier=manager, model_version=settings.matching.model_version
    )
    outcome = await service.record_swipe(user, target_id, action)
    result: Dict[str, Any] = {
        "success": True,
        "target_user_id": outcome.swiped_user.id,
        "action": action,
        "match": outcome.is_match,
    }
    if outcome.is_match:
        result.update(match_id=outcome.match.id, match_score=outcome.match.match_score)
    await manager.send_to_user(user.id, "swipeResult", result)


async def handle_message(user: User, data: Dict[str, Any], repos: RepositoryBundle, manager: ConnectionManager) -> None:
    conversation_id = _require_int(data, "conversation_id")
    message = await ConversationService(repos, manager).post_message(user, conversation_id, data.get("content"))
    # Echo to the sender so every open client shows the stored message
    await manager.send_to_user(user.id, "message", message_payload(message))


async def handle_typing(user: User, data: Dict[str, Any], repos: RepositoryBundle, manager: ConnectionManager) -> None:
    conversation_id = _require_int(data, "conversation_id")
    await ConversationService(repos, manager).relay_typing(user, conversation_id, bool(data.get("is_typing")))


EVENT_HANDLERS: Dict[str, EventHandler] = {
    "swipe": handle_swipe,
    "message": handle_message,
    "typing": handle_typing,
}


async def _authenticate(websocket: WebSocket, session_factory: async_sessionmaker) -> Optional[User]:
    token = extract_token(
        websocket.headers.get("authorization"),
        websocket.query_params.get("token") or websocket.cookies.get(settings.auth.cookie_name),
    )
    async with session_factory() as session:
        try:
            return await authenticate_token(token, UserRepository(session))
        except AuthenticationFailed as e:
            logger.info(f"Rejected WebSocket connection: {e.message}")
            return None


async def dispatch(
    user_id: int, frame: str, session_factory: async_sessionmaker, manager: ConnectionManager
) -> None:
    """Handle one client frame, answering failures with an ``error`` event."""
    try:
        parsed = json.loads(frame)
    except json.JSONDecodeError:
        await manager.send_to_user(user_id, "error", {"message": "Invalid JSON frame"})
        return
    if not isinstance(parsed, dict):
        await manager.send_to_user(user_id, "error", {"message": "Invalid frame"})
        return

    event = parsed.get("event")
    handler = EVENT_HANDLERS.get(event)
    if handler is None:
        await manager.send_to_user(user_id, "error", {"message": f"Unknown event: {event}"})
        return
    data = parsed.get("data") if isinstance(parsed.get("data"), dict) else {}

    async with session_factory() as session:
        repos = build_repositories(session)
        user = await repos.users.get_by_id(user_id)
        if user is None or not user.active:
            await manager.send_to_user(user_id, "error", {"message": "The user belonging to this token no longer exists."})
            return
        try:
            await handler(user, data, repos, manager)
        except TravelBuddyError as e:
            logger.info(f"WebSocket {event} from user {user_id} failed: {e.message}")
            if event == "swipe":
                await manager.send_to_user(user_id, "swipeResult", {"success": False, "message": e.message})
            await manager.send_to_user(user_id, "error", {"event": event, "message": e.message})
        except Exception as e:
            logger.error(f"WebSocket {event} from user {user_id} crashed: {e}", exc_info=True)
            await manager.send_to_user(user_id, "error", {"event": event, "message": "Something went wrong"})


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    session_factory: async_sessionmaker = Depends(get_session_factory),
    manager: ConnectionManager = Depends(get_connection_manager),
) -> None:
    user = await _authenticate(websocket, session_factory)
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    await manager.connect(user.id, websocket)
    try:
        while True:
            frame = await websocket.receive_text()
            await dispatch(user.id, frame, session_factory, manager)
    except WebSocketDisconnect:
        logger.debug(f"WebSocket of user {user.id} closed by client")
    finally:
        await manager.disconnect(user.id, websocket)
