"""
Travel journal I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..domain.enums import (
    ExpenseCategory,
    JournalCategory,
    JournalPrivacy,
    JournalStatus,
    MediaType,
    Mood,
    Weather,
)


class JournalLocation(BaseModel):
    name: str = Field(min_length=1)
    country: Optional[str] = None
    city: Optional[str] = None
    coordinates: Optional[List[float]] = Field(default=None, description="[longitude, latitude]")


class MediaItem(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: MediaType
    url: str
    caption: Optional[str] = None
    thumbnail: Optional[str] = None
    order: int = 0


class Expense(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    category: ExpenseCategory
    amount: float = Field(ge=0)
    currency: str = "USD"
    description: Optional[str] = None


class JournalCreate(BaseModel):
    """Schema for creating a travel journal."""

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(min_length=3, max_length=100)
    content: str = Field(min_length=10, max_length=5000)
    location: JournalLocation
    start_date: date
    end_date: date
    media: List[MediaItem] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    category: JournalCategory = JournalCategory.other
    mood: Mood
    weather: Weather
    expenses: List[Expense] = Field(default_factory=list)
    companions: List[int] = Field(default_factory=list)
    group_id: Optional[int] = None
    privacy: JournalPrivacy = JournalPrivacy.public
    status: JournalStatus = JournalStatus.published

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "JournalCreate":
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class JournalUpdate(BaseModel):
    """Schema for updating a journal. The owner, likes and comments are not part of it."""

    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    content: Optional[str] = Field(default=None, min_length=10, max_length=5000)
    location: Optional[JournalLocation] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    media: Optional[List[MediaItem]] = None
    tags: Optional[List[str]] = None
    category: Optional[JournalCategory] = None
    mood: Optional[Mood] = None
    weather: Optional[Weather] = None
    expenses: Optional[List[Expense]] = None
    companions: Optional[List[int]] = None
    group_id: Optional[int] = None
    privacy: Optional[JournalPrivacy] = None
    status: Optional[JournalStatus] = None


class CommentCreate(BaseModel):
    """Schema for commenting; blank content is rejected by the service."""

    content: str = Field(default="", max_length=500)


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    journal_id: int
    user_id: int
    content: str
    created_at: datetime


class JournalRead(BaseModel):
    """Schema for reading a journal with its likes and comments."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    content: str
    location: Dict[str, Any]
    start_date: date
    end_date: date
    media: List[Dict[str, Any]] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    category: str
    mood: str
    weather: str
    expenses: List[Dict[str, Any]] = Field(default_factory=list)
    companions: List[int] = Field(default_factory=list)
    group_id: Optional[int] = None
    privacy: str
    status: str
    is_edited: bool
    last_edited_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    likes: List[int] = Field(default_factory=list)
    like_count: int = 0
    comments: List[CommentRead] = Field(default_factory=list)


class Pagination(BaseModel):
    page: int
    pages: int
    total: int


class JournalListResponse(BaseModel):
    """A page of journals."""

    results: int
    journals: List[JournalRead]
    pagination: Pagination


class LikeToggleResponse(BaseModel):
    liked: bool
    like_count: int
