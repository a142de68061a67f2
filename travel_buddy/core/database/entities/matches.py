"""
Swipe and match entity models.

A swipe is one user's like/reject decision about another user. A match is
created once two users like each other; its user ids are stored in ascending
order so that a pair can only ever have one match row.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, utc_now


class Swipe(Base, table=True):
    """Entity for a single swipe decision.

    Table: swipes
    """

    __tablename__ = "swipes"
    __table_args__ = (
        UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_swiper_swiped"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    swiper_id: int = Field(foreign_key="users.id", index=True)
    swiped_id: int = Field(foreign_key="users.id", index=True)
    action: str = Field(max_length=16, description="like or reject")
    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Swipe(id={self.id}, swiper_id={self.swiper_id}, swiped_id={self.swiped_id}, action={self.action})"


class MatchBase(Base):
    """Base fields for match entity."""

    match_score: int = Field(default=50, ge=0, le=100)
    status: str = Field(default="pending", max_length=16)
    initiated_by: Optional[int] = Field(default=None, foreign_key="users.id")
    notification_status: str = Field(default="pending", max_length=16)
    common_interests: List[str] = Field(default_factory=list, sa_type=JSON)

    # Metadata
    match_type: str = Field(default="mutual", max_length=16)
    initial_message_sent: bool = Field(default=False)
    compatibility_factors: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)


class Match(MatchBase, table=True):
    """Entity for a mutual match between two users.

    Table: matches
    """

    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("user_one_id", "user_two_id", name="uq_matches_user_pair"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_one_id: int = Field(foreign_key="users.id", index=True)
    user_two_id: int = Field(foreign_key="users.id", index=True)

    # Timestamps
    matched_on: datetime = Field(default_factory=utc_now, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @staticmethod
    def ordered_pair(first_id: int, second_id: int) -> Tuple[int, int]:
        return (first_id, second_id) if first_id <= second_id else (second_id, first_id)

    @property
    def user_ids(self) -> Tuple[int, int]:
        return self.user_one_id, self.user_two_id

    def other_user_id(self, user_id: int) -> int:
        return self.user_two_id if self.user_one_id == user_id else self.user_one_id

    def involves(self, user_id: int) -> bool:
        return user_id in (self.user_one_id, self.user_two_id)

    def match_age_days(self, now: Optional[datetime] = None) -> int:
        """Whole days elapsed since the match was made."""
        return ((now or utc_now()) - self.matched_on).days

    def __repr__(self) -> str:
        return (
            f"Match(id={self.id}, users=({self.user_one_id}, {self.user_two_id}), "
            f"score={self.match_score}, status={self.status})"
        )
