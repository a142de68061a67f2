"""
Matching I/O models for swipes, matches and discovery.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .users import PublicUserRead


class SwipeRequest(BaseModel):
    """Schema for recording a swipe.

    Both fields are checked by the matching service so that a missing or
    invalid one is answered with a 400.
    """

    swiped_user_id: Optional[int] = Field(default=None, description="User being swiped on")
    action: Optional[str] = Field(default=None, description="like or reject")


class SwipeResponse(BaseModel):
    """Result of a swipe.

    ``match`` tells whether the swipe completed a mutual like; the match
    fields are only set in that case and ``swipe_id`` only otherwise.
    """

    match: bool
    message: str
    match_id: Optional[int] = None
    match_score: Optional[int] = None
    other_user: Optional[PublicUserRead] = None
    swipe_id: Optional[int] = None


class CandidateRead(PublicUserRead):
    """A discovery candidate with its score and distance in km."""

    match_score: int
    distance: Optional[int] = None


class PotentialMatchesMetadata(BaseModel):
    total_found: int
    average_score: int
    has_more: bool


class PotentialMatchesResponse(BaseModel):
    """Schema for a page of discovery candidates."""

    results: int
    page: int
    total_pages: int
    data: List[CandidateRead]
    metadata: PotentialMatchesMetadata


class MatchRead(BaseModel):
    """Schema for reading a match together with the other member."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_one_id: int
    user_two_id: int
    match_score: int
    status: str
    match_type: str
    initiated_by: Optional[int] = None
    notification_status: str
    common_interests: List[str] = Field(default_factory=list)
    initial_message_sent: bool = False
    matched_on: datetime
    match_age_days: int
    other_user: Optional[PublicUserRead] = None


class SuggestionRead(BaseModel):
    """A preference-based suggestion."""

    user: PublicUserRead
    score: int


class CompatibilityRead(BaseModel):
    """Enhanced compatibility breakdown between the caller and another user."""

    user_id: int
    score: int
    components: Dict[str, int]
    weights: Dict[str, float]
    model_version: str
