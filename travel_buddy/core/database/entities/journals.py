"""
Travel journal entity models.

Journals hold their location, media and expenses as JSON documents. Likes and
comments are separate tables so they can be toggled and paged independently.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, utc_now


class TravelJournalBase(Base):
    """Base fields for travel journal entity."""

    title: str = Field(max_length=100)
    content: str = Field(max_length=5000)
    location: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    start_date: date
    end_date: date
    media: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    tags: List[str] = Field(default_factory=list, sa_type=JSON)
    category: str = Field(default="other", max_length=32, index=True)
    mood: str = Field(max_length=16)
    weather: str = Field(max_length=16)
    expenses: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    companions: List[int] = Field(default_factory=list, sa_type=JSON)
    group_id: Optional[int] = Field(default=None, foreign_key="travel_groups.id")
    privacy: str = Field(default="public", max_length=16, index=True)
    status: str = Field(default="published", max_length=16, index=True)


class TravelJournal(TravelJournalBase, table=True):
    """Entity for a travel journal entry.

    Table: travel_journals
    """

    __tablename__ = "travel_journals"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    is_edited: bool = Field(default=False)
    last_edited_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"TravelJournal(id={self.id}, user_id={self.user_id}, title={self.title})"


class JournalLike(Base, table=True):
    """A user's like on a journal.

    Table: journal_likes
    """

    __tablename__ = "journal_likes"
    __table_args__ = (
        UniqueConstraint("journal_id", "user_id", name="uq_journal_likes"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    journal_id: int = Field(foreign_key="travel_journals.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)


class JournalComment(Base, table=True):
    """A comment on a journal.

    Table: journal_comments
    """

    __tablename__ = "journal_comments"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    journal_id: int = Field(foreign_key="travel_journals.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    content: str = Field(max_length=500)
    created_at: datetime = Field(default_factory=utc_now)
