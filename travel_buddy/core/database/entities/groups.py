"""
Travel group entity models.

A group carries its trip details and settings as JSON documents; members and
join requests live in their own tables.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, utc_now

DEFAULT_GROUP_SETTINGS: Dict[str, Any] = {
    "is_private": False,
    "join_requires_approval": True,
    "member_can_invite": False,
    "message_retention_days": 365,
}


def default_group_settings() -> Dict[str, Any]:
    return dict(DEFAULT_GROUP_SETTINGS)


class GroupBase(Base):
    """Base fields for travel group entity."""

    name: str = Field(max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)
    type: str = Field(default="travel", max_length=16)
    travel_details: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    settings: Dict[str, Any] = Field(default_factory=default_group_settings, sa_type=JSON)
    avatar: str = Field(default="default-group.jpg", max_length=255)


class Group(GroupBase, table=True):
    """Entity for a travel group.

    Table: travel_groups
    """

    __tablename__ = "travel_groups"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    creator_id: int = Field(foreign_key="users.id", index=True)
    message_count: int = Field(default=0)
    is_archived: bool = Field(default=False)
    last_activity: datetime = Field(default_factory=utc_now)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, index=True, sa_column_kwargs={"onupdate": utc_now})

    @property
    def max_members(self) -> Optional[int]:
        return (self.travel_details or {}).get("max_members")

    @property
    def requires_approval(self) -> bool:
        return bool((self.settings or {}).get("join_requires_approval", True))

    def __repr__(self) -> str:
        return f"Group(id={self.id}, name={self.name}, type={self.type})"


class GroupMember(Base, table=True):
    """Membership of a user in a group.

    Table: group_members
    """

    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_members"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    group_id: int = Field(foreign_key="travel_groups.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    role: str = Field(default="member", max_length=16)
    status: str = Field(default="active", max_length=16)
    joined_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role in ("admin", "moderator")


class GroupJoinRequest(Base, table=True):
    """A user's request to join a group that needs approval.

    Table: group_join_requests
    """

    __tablename__ = "group_join_requests"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    group_id: int = Field(foreign_key="travel_groups.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    status: str = Field(default="pending", max_length=16)
    requested_at: datetime = Field(default_factory=utc_now)
