"""
User Profile Endpoints.

Public profiles, profile editing, profile picture upload and the admin user
listing.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from travel_buddy.core.database.entities.users import User
from travel_buddy.core.models.io.users import ProfilePictureRead, ProfileUpdate, PublicUserRead, UserRead
from travel_buddy.server.services.auth import require_roles
from travel_buddy.server.services.deps import AccountServiceDep, CurrentUserDep, ReposDep, ScoreCacheDep

router = APIRouter()


@router.get(
    "/",
    response_model=List[UserRead],
    summary="List Users",
    description="List accounts, newest first. Admins only.",
    responses={403: {"description": "Caller is not an admin"}},
)
async def list_users(
    repos: ReposDep,
    admin: User = Depends(require_roles("admin")),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> List[UserRead]:
    users = await repos.users.list(limit=limit, offset=offset)
    return [UserRead.model_validate(u) for u in users]


@router.put(
    "/profile",
    response_model=UserRead,
    summary="Update Profile",
    description="Update the editable fields of the caller's profile.",
)
async def update_profile(
    payload: ProfileUpdate, user: CurrentUserDep, accounts: AccountServiceDep, score_cache: ScoreCacheDep
) -> UserRead:
    """
    Update the profile.

    Only **name**, **profile_picture**, **personality_type**,
    **travel_preferences**, **languages**, **location**, **bio** and **age**
    can be changed; anything else in the body is ignored. Cached
    compatibility scores involving the caller are dropped.
    """
    user = await accounts.update_profile(user, payload)
    await score_cache.invalidate_user(user.id)
    return UserRead.model_validate(user)


@router.post(
    "/upload-profile-picture",
    response_model=ProfilePictureRead,
    summary="Upload Profile Picture",
    description="Upload an image (at most 10 MB) and use it as the profile picture.",
    responses={400: {"description": "Missing file, not an image, or too large"}},
)
async def upload_profile_picture(
    user: CurrentUserDep,
    accounts: AccountServiceDep,
    profile_picture: Optional[UploadFile] = File(default=None),
) -> ProfilePictureRead:
    user, url = await accounts.upload_profile_picture(user, profile_picture)
    return ProfilePictureRead(profile_picture=url, user=UserRead.model_validate(user))


@router.get(
    "/{user_id}",
    response_model=PublicUserRead,
    summary="Get User",
    description="Retrieve the public profile of a user.",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: int, repos: ReposDep, _: CurrentUserDep) -> PublicUserRead:
    user = await repos.users.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return PublicUserRead.model_validate(user)
