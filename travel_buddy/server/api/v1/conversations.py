"""
Conversation Endpoints.

Private conversations between matched travellers. Mounted below
``/matches/conversations``.
"""

from typing import List

from fastapi import APIRouter, Query, Response

from travel_buddy.core.models.io.conversations import (
    ConversationCreate,
    ConversationRead,
    MessageCreate,
    MessageRead,
    MessagesPage,
)
from travel_buddy.core.models.io.users import PublicUserRead
from travel_buddy.server.services.conversations import DEFAULT_PAGE_SIZE, ConversationView
from travel_buddy.server.services.deps import ConversationServiceDep, CurrentUserDep

router = APIRouter()


def to_conversation_read(view: ConversationView) -> ConversationRead:
    conversation = view.conversation
    return ConversationRead(
        id=conversation.id,
        name=conversation.name,
        participants=[PublicUserRead.model_validate(u) for u in view.participants],
        last_message=MessageRead.model_validate(view.last_message) if view.last_message is not None else None,
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
    )


@router.get(
    "/",
    response_model=List[ConversationRead],
    summary="List Conversations",
    description="Conversations of the caller, most recently active first.",
)
async def list_conversations(user: CurrentUserDep, service: ConversationServiceDep) -> List[ConversationRead]:
    return [to_conversation_read(view) for view in await service.list_for_user(user)]


@router.post(
    "/",
    response_model=ConversationRead,
    status_code=201,
    summary="Start Conversation",
    description="Open a conversation with another user, reusing the existing one if there is one.",
    responses={
        200: {"description": "The existing conversation"},
        400: {"description": "Participant ID is required"},
        404: {"description": "Participant not found"},
    },
)
async def start_conversation(
    payload: ConversationCreate, response: Response, user: CurrentUserDep, service: ConversationServiceDep
) -> ConversationRead:
    """
    Start a conversation.

    - **participant_id**: the other user
    - **initial_message**: optional first message, trimmed
    """
    view, created = await service.start(user, payload.participant_id, payload.initial_message)
    if not created:
        response.status_code = 200
    return to_conversation_read(view)


@router.get(
    "/{conversation_id}/messages",
    response_model=MessagesPage,
    summary="List Messages",
    description="A page of messages. Pages go back in time; each page is in chronological order.",
    responses={404: {"description": "Conversation not found or access denied"}},
)
async def list_messages(
    conversation_id: int,
    user: CurrentUserDep,
    service: ConversationServiceDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=200),
) -> MessagesPage:
    messages = await service.messages(user, conversation_id, page=page, limit=limit)
    return MessagesPage(
        results=len(messages),
        page=page,
        messages=[MessageRead.model_validate(m) for m in messages],
    )


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageRead,
    status_code=201,
    summary="Send Message",
    description="Post a message and push it to the other participants.",
    responses={
        400: {"description": "Empty message"},
        404: {"description": "Conversation not found or access denied"},
    },
)
async def send_message(
    conversation_id: int, payload: MessageCreate, user: CurrentUserDep, service: ConversationServiceDep
) -> MessageRead:
    message = await service.post_message(user, conversation_id, payload.content)
    return MessageRead.model_validate(message)
