"""
Travel group I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import GroupBudget, GroupType, TripStatus


class TravelDetails(BaseModel):
    """Trip details of a travel group."""

    model_config = ConfigDict(use_enum_values=True)

    destination: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[GroupBudget] = None
    max_members: Optional[int] = Field(default=None, ge=2, le=20)
    interests: List[str] = Field(default_factory=list)
    status: TripStatus = TripStatus.planning


class GroupSettings(BaseModel):
    is_private: bool = False
    join_requires_approval: bool = True
    member_can_invite: bool = False
    message_retention_days: int = Field(default=365, ge=1)


class GroupCreate(BaseModel):
    """Schema for creating a travel group."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=3, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)
    type: GroupType = GroupType.travel
    travel_details: Optional[TravelDetails] = None
    settings: Optional[GroupSettings] = None
    avatar: Optional[str] = None
    members: List[int] = Field(default_factory=list, description="Users added as plain members")


class GroupUpdate(BaseModel):
    """Schema for updating a group.

    The creator, the member list and the join requests are not part of it.
    """

    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=3, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)
    type: Optional[GroupType] = None
    travel_details: Optional[TravelDetails] = None
    settings: Optional[GroupSettings] = None
    avatar: Optional[str] = None
    is_archived: Optional[bool] = None


class GroupMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    role: str
    status: str
    joined_at: datetime


class JoinRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    status: str
    requested_at: datetime


class GroupRead(BaseModel):
    """Schema for reading a group with its members and pending requests."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    type: str
    creator_id: int
    travel_details: Dict[str, Any] = Field(default_factory=dict)
    settings: Dict[str, Any] = Field(default_factory=dict)
    avatar: str
    last_activity: datetime
    message_count: int
    is_archived: bool
    created_at: datetime
    updated_at: datetime
    members: List[GroupMemberRead] = Field(default_factory=list)
    join_requests: List[JoinRequestRead] = Field(default_factory=list)


class JoinGroupResponse(BaseModel):
    message: str
    group: GroupRead


class JoinRequestDecision(BaseModel):
    status: Literal["approved", "rejected"]


class MemberRoleUpdate(BaseModel):
    """Role change request; unknown roles are rejected by the service with 400."""

    role: str
