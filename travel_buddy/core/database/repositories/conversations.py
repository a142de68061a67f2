"""
Conversation and message repositories.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import utc_now
from ..entities.conversations import Conversation, ConversationParticipant, Message
from .base import QueryBuilder, SQLModelRepository


class ConversationRepository(SQLModelRepository[Conversation]):
    """Repository for private conversations and their participants."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Conversation)

    def default_order(self) -> tuple:
        return (Conversation.updated_at.desc(),)  # type: ignore[attr-defined]

    async def create_with_participants(self, user_ids: Iterable[int], name: Optional[str] = None) -> Conversation:
        """Create a conversation and register its participants."""
        conversation = Conversation(name=name)
        self.session.add(conversation)
        await self.session.flush()
        for user_id in dict.fromkeys(user_ids):
            self.session.add(ConversationParticipant(conversation_id=conversation.id, user_id=user_id))
        await self.session.commit()
        await self.session.refresh(conversation)
        return conversation

    async def delete(self, entity_id: int) -> bool:
        conversation = await self.get_by_id(entity_id)
        if conversation is None:
            return False
        await self.session.execute(delete(Message).where(Message.conversation_id == entity_id))
        await self.session.execute(
            delete(ConversationParticipant).where(ConversationParticipant.conversation_id == entity_id)
        )
        await self.session.delete(conversation)
        await self.session.commit()
        return True

    async def participant_ids(self, conversation_id: int) -> List[int]:
        stmt = (
            select(ConversationParticipant.user_id)
            .where(ConversationParticipant.conversation_id == conversation_id)
            .order_by(ConversationParticipant.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def is_participant(self, conversation_id: int, user_id: int) -> bool:
        stmt = select(ConversationParticipant.id).where(
            (ConversationParticipant.conversation_id == conversation_id) & (ConversationParticipant.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def find_direct(self, first_id: int, second_id: int) -> Optional[Conversation]:
        """Find the conversation whose participants are exactly these two users."""
        pair = {first_id, second_id}
        member_of_pair = (
            select(ConversationParticipant.conversation_id)
            .where(ConversationParticipant.user_id.in_(pair))  # type: ignore[attr-defined]
            .group_by(ConversationParticipant.conversation_id)
            .having(func.count() == len(pair))
        )
        sized = (
            select(ConversationParticipant.conversation_id)
            .group_by(ConversationParticipant.conversation_id)
            .having(func.count() == len(pair))
        )
        stmt = (
            select(Conversation)
            .where(Conversation.id.in_(member_of_pair))  # type: ignore[union-attr]
            .where(Conversation.id.in_(sized))  # type: ignore[union-attr]
            .order_by(Conversation.id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_user(self, user_id: int) -> List[Conversation]:
        """Conversations of ``user_id``, most recently updated first."""
        stmt = (
            select(Conversation)
            .join(ConversationParticipant, ConversationParticipant.conversation_id == Conversation.id)
            .where(ConversationParticipant.user_id == user_id)
            .order_by(Conversation.updated_at.desc(), Conversation.id.desc())  # type: ignore[union-attr]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def touch(self, conversation: Conversation, last_message_id: int) -> Conversation:
        """Point the conversation at its newest message."""
        conversation.last_message_id = last_message_id
        conversation.updated_at = utc_now()
        return await self.update(conversation)


class MessageRepository(SQLModelRepository[Message]):
    """Repository for conversation and group messages."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Message)

    async def get_many(self, message_ids: Iterable[int]) -> List[Message]:
        ids = [message_id for message_id in message_ids if message_id is not None]
        if not ids:
            return []
        result = await self.session.execute(select(Message).where(Message.id.in_(ids)))  # type: ignore[union-attr]
        return list(result.scalars().all())

    async def list_for_conversation(
        self, conversation_id: int, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Message]:
        """A page of conversation messages, newest first."""
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.desc(), Message.id.desc())  # type: ignore[union-attr]
        )
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_group(
        self, group_id: int, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Message]:
        """A page of group messages, newest first."""
        stmt = (
            select(Message)
            .where(Message.group_id == group_id)
            .order_by(Message.created_at.desc(), Message.id.desc())  # type: ignore[union-attr]
        )
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
