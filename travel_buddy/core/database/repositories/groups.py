"""
Travel group repository.

Groups, their members and join requests form one aggregate and are handled
by one repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import utc_now
from ..entities.conversations import Message
from ..entities.groups import Group, GroupJoinRequest, GroupMember
from ..entities.journals import TravelJournal
from .base import SQLModelRepository


class GroupRepository(SQLModelRepository[Group]):
    """Repository for travel groups, members and join requests."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Group)

    def default_order(self) -> tuple:
        return (Group.updated_at.desc(),)  # type: ignore[attr-defined]

    async def delete(self, entity_id: int) -> bool:
        """Delete a group with its members, requests and messages."""
        group = await self.get_by_id(entity_id)
        if group is None:
            return False
        await self.session.execute(delete(GroupMember).where(GroupMember.group_id == entity_id))
        await self.session.execute(delete(GroupJoinRequest).where(GroupJoinRequest.group_id == entity_id))
        await self.session.execute(delete(Message).where(Message.group_id == entity_id))
        await self.session.execute(
            update(TravelJournal).where(TravelJournal.group_id == entity_id).values(group_id=None)
        )
        await self.session.delete(group)
        await self.session.commit()
        return True

    async def touch(self, group: Group) -> Group:
        """Record activity on the group."""
        now = utc_now()
        group.last_activity = now
        group.updated_at = now
        return await self.update(group)

    async def list_for_member(self, user_id: int) -> List[Group]:
        """Groups where ``user_id`` is an active member, most recently updated first."""
        stmt = (
            select(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .where((GroupMember.user_id == user_id) & (GroupMember.status == "active"))
            .order_by(Group.updated_at.desc(), Group.id.desc())  # type: ignore[union-attr]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # Members

    async def members(self, group_id: int) -> List[GroupMember]:
        stmt = select(GroupMember).where(GroupMember.group_id == group_id).order_by(GroupMember.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_member(self, group_id: int, user_id: int) -> Optional[GroupMember]:
        stmt = select(GroupMember).where((GroupMember.group_id == group_id) & (GroupMember.user_id == user_id))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_members(self, group_id: int) -> int:
        stmt = select(func.count()).select_from(GroupMember).where(
            (GroupMember.group_id == group_id) & (GroupMember.status == "active")
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def add_member(self, group_id: int, user_id: int, role: str = "member") -> GroupMember:
        member = GroupMember(group_id=group_id, user_id=user_id, role=role)
        self.session.add(member)
        await self.session.commit()
        await self.session.refresh(member)
        return member

    async def save_member(self, member: GroupMember) -> GroupMember:
        self.session.add(member)
        await self.session.commit()
        await self.session.refresh(member)
        return member

    async def remove_member(self, member: GroupMember) -> None:
        await self.session.delete(member)
        await self.session.commit()

    # Join requests

    async def pending_requests(self, group_id: int) -> List[GroupJoinRequest]:
        stmt = (
            select(GroupJoinRequest)
            .where((GroupJoinRequest.group_id == group_id) & (GroupJoinRequest.status == "pending"))
            .order_by(GroupJoinRequest.requested_at, GroupJoinRequest.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_pending_request(self, group_id: int, user_id: int) -> Optional[GroupJoinRequest]:
        stmt = select(GroupJoinRequest).where(
            (GroupJoinRequest.group_id == group_id)
            & (GroupJoinRequest.user_id == user_id)
            & (GroupJoinRequest.status == "pending")
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add_request(self, group_id: int, user_id: int) -> GroupJoinRequest:
        request = GroupJoinRequest(group_id=group_id, user_id=user_id)
        self.session.add(request)
        await self.session.commit()
        await self.session.refresh(request)
        return request

    async def save_request(self, request: GroupJoinRequest) -> GroupJoinRequest:
        self.session.add(request)
        await self.session.commit()
        await self.session.refresh(request)
        return request
