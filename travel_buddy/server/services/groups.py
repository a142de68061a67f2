"""
Travel groups.

Group creation and settings, membership with optional approval, member roles
and the group chat. Every change to a group records activity on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from travel_buddy.core.database.base import utc_now
from travel_buddy.core.database.entities.conversations import Message
from travel_buddy.core.database.entities.groups import Group, GroupJoinRequest, GroupMember
from travel_buddy.core.database.entities.users import User
from travel_buddy.core.database.repositories import RepositoryBundle
from travel_buddy.core.exceptions import NotFound, PermissionDenied, ValidationFailed
from travel_buddy.core.models.domain.enums import GroupRole
from travel_buddy.core.models.io.groups import GroupCreate, GroupSettings, GroupUpdate, TravelDetails

from .connections import ConnectionManager
from .conversations import DEFAULT_PAGE_SIZE, clean_content, message_payload

logger = logging.getLogger(__name__)


@dataclass
class GroupView:
    """A group with its members and pending join requests."""

    group: Group
    members: List[GroupMember] = field(default_factory=list)
    join_requests: List[GroupJoinRequest] = field(default_factory=list)


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    """Compare aware dates as naive UTC like every stored timestamp."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _validate_travel_details(group_type: str, details: Optional[TravelDetails]) -> Dict[str, Any]:
    """Check trip details and return them as a JSON document.

    Raises:
        ValidationFailed: Missing destination or dates on a travel group, a
            start date in the past or an end date before the start
    """
    if details is None:
        if group_type == "travel":
            raise ValidationFailed("Travel groups require a destination, start date and end date")
        return {}

    start, end = _naive(details.start_date), _naive(details.end_date)
    if group_type == "travel":
        if not details.destination or start is None or end is None:
            raise ValidationFailed("Travel groups require a destination, start date and end date")
        if start < utc_now():
            raise ValidationFailed("Start date must be in the future")
    if start is not None and end is not None and end < start:
        raise ValidationFailed("End date must be after start date")
    return details.model_dump(mode="json", exclude_none=True)


class GroupService:
    """Group operations for one request."""

    def __init__(self, repos: RepositoryBundle, connections: Optional[ConnectionManager] = None) -> None:
        self.repos = repos
        self.connections = connections

    async def create(self, user: User, payload: GroupCreate) -> GroupView:
        """Create a group with the caller as its admin member."""
        details = _validate_travel_details(payload.type, payload.travel_details)
        settings_doc = (payload.settings or GroupSettings()).model_dump()

        group = Group(
            name=payload.name.strip(),
            description=payload.description,
            type=payload.type,
            travel_details=details,
            settings=settings_doc,
            creator_id=user.id,
        )
        if payload.avatar:
            group.avatar = payload.avatar
        group = await self.repos.groups.create(group)

        await self.repos.groups.add_member(group.id, user.id, role=GroupRole.admin.value)
        extra = [uid for uid in dict.fromkeys(payload.members) if uid != user.id]
        existing = await self.repos.users.get_many(extra)
        for member_id in extra:
            if member_id in existing:
                await self.repos.groups.add_member(group.id, member_id)
        logger.info(f"Group {group.id} created by user {user.id} with {1 + len(existing)} members")
        return await self.view(group)

    async def list_for_user(self, user: User) -> List[GroupView]:
        groups = await self.repos.groups.list_for_member(user.id)
        return [await self.view(group) for group in groups]

    async def get(self, group_id: int) -> GroupView:
        return await self.view(await self._group(group_id))

    async def update(self, user: User, group_id: int, payload: GroupUpdate) -> GroupView:
        """Apply a partial update; admins and moderators only."""
        group = await self._group(group_id)
        await self._require_admin(group, user, "Only admins can update group details")

        changes = payload.model_dump(exclude_unset=True)
        if "travel_details" in changes:
            group_type = changes.get("type") or group.type
            group.travel_details = _validate_travel_details(group_type, payload.travel_details)
            changes.pop("travel_details")
        if "settings" in changes:
            group.settings = payload.settings.model_dump() if payload.settings else dict(group.settings)
            changes.pop("settings")
        for name, value in changes.items():
            if value is not None:
                setattr(group, name, value)
        group = await self.repos.groups.touch(group)
        return await self.view(group)

    async def join(self, user: User, group_id: int) -> Tuple[str, GroupView]:
        """Join a group or ask to join it.

        Returns:
            The status message and the group

        Raises:
            ValidationFailed: Already a member, a request is already pending,
                or the group is full
        """
        group = await self._group(group_id)
        if await self.repos.groups.get_member(group.id, user.id) is not None:
            raise ValidationFailed("You are already a member of this group")

        if group.requires_approval:
            if await self.repos.groups.get_pending_request(group.id, user.id) is not None:
                raise ValidationFailed("You already have a pending join request for this group")
            await self.repos.groups.add_request(group.id, user.id)
            message = "Join request sent successfully"
        else:
            await self._add_member(group, user.id)
            message = "Joined group successfully"
        group = await self.repos.groups.touch(group)
        return message, await self.view(group)

    async def decide_request(self, user: User, group_id: int, applicant_id: int, status: str) -> GroupView:
        """Approve or reject a pending join request; admins only."""
        if status not in ("approved", "rejected"):
            raise ValidationFailed("Invalid status")
        group = await self._group(group_id)
        await self._require_admin(group, user, "Only admins can handle join requests")

        request = await self.repos.groups.get_pending_request(group.id, applicant_id)
        if request is None:
            raise NotFound("Join request not found")
        if status == "approved":
            await self._add_member(group, applicant_id)
        request.status = status
        await self.repos.groups.save_request(request)
        logger.info(f"Join request of user {applicant_id} to group {group.id} {status} by user {user.id}")
        group = await self.repos.groups.touch(group)
        return await self.view(group)

    async def leave(self, user: User, group_id: int) -> None:
        group = await self._group(group_id)
        member = await self.repos.groups.get_member(group.id, user.id)
        if member is None:
            raise ValidationFailed("You are not a member of this group")
        if group.creator_id == user.id:
            raise ValidationFailed("Group creator cannot leave. Transfer ownership first.")
        await self.repos.groups.remove_member(member)
        await self.repos.groups.touch(group)

    async def change_role(self, user: User, group_id: int, member_id: int, role: str) -> GroupView:
        """Change a member's role; admins only."""
        if role not in {r.value for r in GroupRole}:
            raise ValidationFailed("Invalid role")
        group = await self._group(group_id)
        await self._require_admin(group, user, "Only admins can update member roles")
        member = await self.repos.groups.get_member(group.id, member_id)
        if member is None:
            raise ValidationFailed("User is not a member of this group")
        member.role = role
        await self.repos.groups.save_member(member)
        group = await self.repos.groups.touch(group)
        return await self.view(group)

    async def delete(self, user: User, group_id: int) -> None:
        group = await self._group(group_id)
        if group.creator_id != user.id:
            raise PermissionDenied("Only group creator can delete the group")
        await self.repos.groups.delete(group.id)
        logger.info(f"Group {group_id} deleted by user {user.id}")

    async def messages(
        self, user: User, group_id: int, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> List[Message]:
        """One page of group chat, in chronological order; members only."""
        group = await self._group(group_id)
        await self._require_member(group, user, "You must be a member to view messages")
        page, limit = max(page, 1), max(limit, 1)
        newest_first = await self.repos.messages.list_for_group(group.id, limit=limit, offset=(page - 1) * limit)
        return list(reversed(newest_first))

    async def post_message(self, user: User, group_id: int, content: Optional[str]) -> Message:
        """Post to the group chat and push the message to connected members."""
        group = await self._group(group_id)
        await self._require_member(group, user, "You must be a member to send messages")
        text = clean_content(content)

        message = await self.repos.messages.create(Message(group_id=group.id, sender_id=user.id, content=text))
        group.message_count = (group.message_count or 0) + 1
        await self.repos.groups.touch(group)

        if self.connections is not None:
            members = await self.repos.groups.members(group.id)
            recipients = [m.user_id for m in members if m.user_id != user.id and m.status == "active"]
            await self.connections.send_to_users(recipients, "message", message_payload(message))
        return message

    async def view(self, group: Group) -> GroupView:
        return GroupView(
            group=group,
            members=await self.repos.groups.members(group.id),
            join_requests=await self.repos.groups.pending_requests(group.id),
        )

    async def _group(self, group_id: int) -> Group:
        group = await self.repos.groups.get_by_id(group_id)
        if group is None:
            raise NotFound("Group not found")
        return group

    async def _add_member(self, group: Group, user_id: int) -> GroupMember:
        limit = group.max_members
        if limit and await self.repos.groups.count_members(group.id) >= limit:
            raise ValidationFailed("Group has reached maximum member limit")
        return await self.repos.groups.add_member(group.id, user_id)

    async def _require_admin(self, group: Group, user: User, message: str) -> GroupMember:
        member = await self.repos.groups.get_member(group.id, user.id)
        if member is None or member.status != "active" or not member.is_admin:
            raise PermissionDenied(message)
        return member

    async def _require_member(self, group: Group, user: User, message: str) -> GroupMember:
        member = await self.repos.groups.get_member(group.id, user.id)
        if member is None or member.status != "active":
            raise PermissionDenied(message)
        return member
