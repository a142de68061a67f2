"""
Conversation and message entity models.

Messages belong either to a one-to-one conversation or to a group chat,
never both.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, utc_now


class Conversation(Base, table=True):
    """Entity for a private conversation.

    Table: conversations
    """

    __tablename__ = "conversations"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = Field(default=None, max_length=100)
    last_message_id: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Conversation(id={self.id}, last_message_id={self.last_message_id})"


class ConversationParticipant(Base, table=True):
    """Membership of a user in a conversation.

    Table: conversation_participants
    """

    __tablename__ = "conversation_participants"
    __table_args__ = (
        UniqueConstraint("conversation_id", "user_id", name="uq_conversation_participants"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    conversation_id: int = Field(foreign_key="conversations.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    joined_at: datetime = Field(default_factory=utc_now)


class MessageBase(Base):
    """Base fields for message entity."""

    content: str = Field(max_length=2000)
    message_type: str = Field(default="text", max_length=16)
    is_read: bool = Field(default=False)
    read_by: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    edited_at: Optional[datetime] = Field(default=None)
    deleted: bool = Field(default=False)


class Message(MessageBase, table=True):
    """Entity for a chat message.

    Table: messages
    """

    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint(
            "(conversation_id IS NULL) <> (group_id IS NULL)",
            name="ck_messages_single_parent",
        ),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    conversation_id: Optional[int] = Field(default=None, foreign_key="conversations.id", index=True)
    group_id: Optional[int] = Field(default=None, foreign_key="travel_groups.id", index=True)
    sender_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Message(id={self.id}, sender_id={self.sender_id}, conversation_id={self.conversation_id})"
