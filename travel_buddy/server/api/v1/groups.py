"""
Travel Group Endpoints.

Group management, membership and join requests, member roles and the group
chat.
"""

from typing import List

from fastapi import APIRouter, Query

from travel_buddy.core.models.io.auth import MessageResponse
from travel_buddy.core.models.io.conversations import MessageCreate, MessageRead, MessagesPage
from travel_buddy.core.models.io.groups import (
    GroupCreate,
    GroupMemberRead,
    GroupRead,
    GroupUpdate,
    JoinGroupResponse,
    JoinRequestDecision,
    JoinRequestRead,
    MemberRoleUpdate,
)
from travel_buddy.server.services.conversations import DEFAULT_PAGE_SIZE
from travel_buddy.server.services.deps import CurrentUserDep, GroupServiceDep
from travel_buddy.server.services.groups import GroupView

router = APIRouter()


def to_group_read(view: GroupView) -> GroupRead:
    group = view.group
    return GroupRead(
        **group.model_dump(include=set(GroupRead.model_fields) - {"members", "join_requests"}),
        members=[GroupMemberRead.model_validate(m) for m in view.members],
        join_requests=[JoinRequestRead.model_validate(r) for r in view.join_requests],
    )


@router.post(
    "/",
    response_model=GroupRead,
    status_code=201,
    summary="Create Group",
    description="Create a group. The caller becomes its admin.",
    responses={400: {"description": "Invalid trip details"}},
)
async def create_group(payload: GroupCreate, user: CurrentUserDep, service: GroupServiceDep) -> GroupRead:
    """
    Create a travel group.

    - **name**: 3 to 50 characters
    - **type**: travel, chat or event; travel groups need a destination and
      future start and end dates in **travel_details**
    - **members**: users added as plain members
    """
    return to_group_read(await service.create(user, payload))


@router.get(
    "/",
    response_model=List[GroupRead],
    summary="My Groups",
    description="Groups the caller is an active member of, most recently active first.",
)
async def list_groups(user: CurrentUserDep, service: GroupServiceDep) -> List[GroupRead]:
    return [to_group_read(view) for view in await service.list_for_user(user)]


@router.get(
    "/{group_id}",
    response_model=GroupRead,
    summary="Get Group",
    description="A group with its members and pending join requests.",
    responses={404: {"description": "Group not found"}},
)
async def get_group(group_id: int, _: CurrentUserDep, service: GroupServiceDep) -> GroupRead:
    return to_group_read(await service.get(group_id))


@router.patch(
    "/{group_id}",
    response_model=GroupRead,
    summary="Update Group",
    description="Update group details. Admins and moderators only.",
    responses={403: {"description": "Not an admin"}, 404: {"description": "Group not found"}},
)
async def update_group(
    group_id: int, payload: GroupUpdate, user: CurrentUserDep, service: GroupServiceDep
) -> GroupRead:
    return to_group_read(await service.update(user, group_id, payload))


@router.post(
    "/{group_id}/join",
    response_model=JoinGroupResponse,
    summary="Join Group",
    description="Join the group, or ask to join when the group requires approval.",
    responses={400: {"description": "Already a member, request pending, or group full"}},
)
async def join_group(group_id: int, user: CurrentUserDep, service: GroupServiceDep) -> JoinGroupResponse:
    message, view = await service.join(user, group_id)
    return JoinGroupResponse(message=message, group=to_group_read(view))


@router.patch(
    "/{group_id}/requests/{user_id}",
    response_model=GroupRead,
    summary="Handle Join Request",
    description="Approve or reject a pending join request. Admins only.",
    responses={403: {"description": "Not an admin"}, 404: {"description": "Join request not found"}},
)
async def handle_join_request(
    group_id: int, user_id: int, payload: JoinRequestDecision, user: CurrentUserDep, service: GroupServiceDep
) -> GroupRead:
    return to_group_read(await service.decide_request(user, group_id, user_id, payload.status))


@router.delete(
    "/{group_id}/leave",
    response_model=MessageResponse,
    summary="Leave Group",
    description="Leave a group. The creator cannot leave.",
    responses={400: {"description": "Not a member, or the creator"}},
)
async def leave_group(group_id: int, user: CurrentUserDep, service: GroupServiceDep) -> MessageResponse:
    await service.leave(user, group_id)
    return MessageResponse(message="Left group successfully")


@router.patch(
    "/{group_id}/members/{user_id}/role",
    response_model=GroupRead,
    summary="Change Member Role",
    description="Make a member an admin, moderator or plain member. Admins only.",
    responses={400: {"description": "Invalid role or not a member"}, 403: {"description": "Not an admin"}},
)
async def change_member_role(
    group_id: int, user_id: int, payload: MemberRoleUpdate, user: CurrentUserDep, service: GroupServiceDep
) -> GroupRead:
    return to_group_read(await service.change_role(user, group_id, user_id, payload.role))


@router.delete(
    "/{group_id}",
    status_code=204,
    summary="Delete Group",
    description="Delete a group with its members, requests and messages. Creator only.",
    responses={403: {"description": "Not the creator"}},
)
async def delete_group(group_id: int, user: CurrentUserDep, service: GroupServiceDep) -> None:
    await service.delete(user, group_id)


@router.get(
    "/{group_id}/messages",
    response_model=MessagesPage,
    summary="Group Messages",
    description="A page of the group chat in chronological order. Members only.",
    responses={403: {"description": "Not a member"}},
)
async def list_group_messages(
    group_id: int,
    user: CurrentUserDep,
    service: GroupServiceDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=200),
) -> MessagesPage:
    messages = await service.messages(user, group_id, page=page, limit=limit)
    return MessagesPage(results=len(messages), page=page, messages=[MessageRead.model_validate(m) for m in messages])


@router.post(
    "/{group_id}/messages",
    response_model=MessageRead,
    status_code=201,
    summary="Send Group Message",
    description="Post to the group chat. Members only.",
    responses={400: {"description": "Empty message"}, 403: {"description": "Not a member"}},
)
async def send_group_message(
    group_id: int, payload: MessageCreate, user: CurrentUserDep, service: GroupServiceDep
) -> MessageRead:
    message = await service.post_message(user, group_id, payload.content)
    return MessageRead.model_validate(message)
