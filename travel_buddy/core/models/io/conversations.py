"""
Conversation and message I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .users import PublicUserRead

MAX_MESSAGE_LENGTH = 2000


class ConversationCreate(BaseModel):
    """Schema for starting a conversation with another user."""

    participant_id: Optional[int] = None
    initial_message: Optional[str] = Field(default=None, max_length=MAX_MESSAGE_LENGTH)


class MessageCreate(BaseModel):
    """Schema for posting a message.

    Blank content is rejected by the service after trimming.
    """

    content: str = Field(default="", max_length=MAX_MESSAGE_LENGTH)


class MessageRead(BaseModel):
    """Schema for reading a message."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    conversation_id: Optional[int] = None
    group_id: Optional[int] = None
    sender_id: int
    content: str
    message_type: str
    is_read: bool
    read_by: List[Dict[str, Any]] = Field(default_factory=list)
    edited_at: Optional[datetime] = None
    deleted: bool = False
    created_at: datetime


class ConversationRead(BaseModel):
    """Schema for reading a conversation from the caller's point of view."""

    id: int
    name: Optional[str] = None
    participants: List[PublicUserRead]
    last_message: Optional[MessageRead] = None
    created_at: datetime
    updated_at: datetime


class MessagesPage(BaseModel):
    """A page of messages in chronological order."""

    results: int
    page: int
    messages: List[MessageRead]
