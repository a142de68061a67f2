"""
Private conversations between users.

Used by the REST conversation routes and by the WebSocket channel, so both
store messages and relay them to the other participants the same way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from travel_buddy.core.database.entities.conversations import Conversation, Message
from travel_buddy.core.database.entities.users import User
from travel_buddy.core.database.repositories import RepositoryBundle
from travel_buddy.core.exceptions import NotFound, ValidationFailed
from travel_buddy.core.models.io.conversations import MAX_MESSAGE_LENGTH, MessageRead

from .connections import ConnectionManager

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


@dataclass
class ConversationView:
    """A conversation as seen by one of its participants."""

    conversation: Conversation
    participants: List[User] = field(default_factory=list)
    last_message: Optional[Message] = None


def clean_content(content: Optional[str]) -> str:
    """Trim message content and enforce its length bounds.

    Raises:
        ValidationFailed: Blank or too long content
    """
    text = (content or "").strip()
    if not text:
        raise ValidationFailed("Message content is required")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise ValidationFailed(f"Message cannot be more than {MAX_MESSAGE_LENGTH} characters")
    return text


def message_payload(message: Message) -> dict:
    return MessageRead.model_validate(message).model_dump(mode="json")


class ConversationService:
    """Conversation listing, creation and messaging for one request."""

    def __init__(self, repos: RepositoryBundle, connections: Optional[ConnectionManager] = None) -> None:
        self.repos = repos
        self.connections = connections

    async def list_for_user(self, user: User) -> List[ConversationView]:
        """Conversations of ``user``, most recently updated first."""
        conversations = await self.repos.conversations.list_for_user(user.id)
        last_messages = {
            m.id: m for m in await self.repos.messages.get_many(c.last_message_id for c in conversations)
        }
        views = []
        for conversation in conversations:
            views.append(
                ConversationView(
                    conversation=conversation,
                    participants=await self._other_participants(conversation.id, user.id),
                    last_message=last_messages.get(conversation.last_message_id),
                )
            )
        return views

    async def start(
        self, user: User, participant_id: Optional[int], initial_message: Optional[str] = None
    ) -> Tuple[ConversationView, bool]:
        """Open the two-person conversation with ``participant_id``.

        Returns:
            The conversation and whether it was newly created

        Raises:
            ValidationFailed: No participant given, or the caller themselves
            NotFound: The participant does not exist
        """
        if not participant_id:
            raise ValidationFailed("Participant ID is required")
        if participant_id == user.id:
            raise ValidationFailed("You cannot start a conversation with yourself")
        participant = await self.repos.users.get_by_id(participant_id)
        if participant is None:
            raise NotFound("Participant not found")

        existing = await self.repos.conversations.find_direct(user.id, participant.id)
        if existing is not None:
            last_message = None
            if existing.last_message_id is not None:
                last_message = await self.repos.messages.get_by_id(existing.last_message_id)
            return ConversationView(existing, [participant], last_message), False

        conversation = await self.repos.conversations.create_with_participants([user.id, participant.id])
        logger.info(f"Conversation {conversation.id} started by user {user.id} with user {participant.id}")
        view = ConversationView(conversation, [participant])

        text = (initial_message or "").strip()
        if text:
            view.last_message = await self._store(conversation, user, text)
        return view, True

    async def messages(
        self, user: User, conversation_id: int, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> List[Message]:
        """One page of messages, newest page first but in chronological order."""
        await self._require_participant(conversation_id, user.id)
        page, limit = max(page, 1), max(limit, 1)
        newest_first = await self.repos.messages.list_for_conversation(
            conversation_id, limit=limit, offset=(page - 1) * limit
        )
        return list(reversed(newest_first))

    async def post_message(self, user: User, conversation_id: int, content: Optional[str]) -> Message:
        """Store a message and push it to the other participants."""
        conversation = await self._require_participant(conversation_id, user.id)
        text = clean_content(content)
        message = await self._store(conversation, user, text)

        if self.connections is not None:
            recipients = [uid for uid in await self.repos.conversations.participant_ids(conversation.id) if uid != user.id]
            await self.connections.send_to_users(recipients, "message", message_payload(message))
        return message

    async def relay_typing(self, user: User, conversation_id: int, is_typing: bool) -> int:
        """Forward a typing indicator to the other participants."""
        await self._require_participant(conversation_id, user.id)
        if self.connections is None:
            return 0
        recipients = [uid for uid in await self.repos.conversations.participant_ids(conversation_id) if uid != user.id]
        return await self.connections.send_to_users(
            recipients,
            "typing",
            {"conversation_id": conversation_id, "user_id": user.id, "is_typing": bool(is_typing)},
        )

    async def _store(self, conversation: Conversation, sender: User, text: str) -> Message:
        message = await self.repos.messages.create(
            Message(conversation_id=conversation.id, sender_id=sender.id, content=text)
        )
        await self.repos.conversations.touch(conversation, message.id)
        return message

    async def _require_participant(self, conversation_id: int, user_id: int) -> Conversation:
        conversation = await self.repos.conversations.get_by_id(conversation_id)
        if conversation is None or not await self.repos.conversations.is_participant(conversation_id, user_id):
            raise NotFound("Conversation not found or access denied")
        return conversation

    async def _other_participants(self, conversation_id: int, user_id: int) -> List[User]:
        ids = [uid for uid in await self.repos.conversations.participant_ids(conversation_id) if uid != user_id]
        users = await self.repos.users.get_many(ids)
        return [users[uid] for uid in ids if uid in users]
