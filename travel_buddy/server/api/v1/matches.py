"""
Matching Endpoints.

Swipes, ranked discovery of potential matches, preference suggestions,
compatibility breakdowns and the caller's matches.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from travel_buddy.core.database.base import utc_now
from travel_buddy.core.models.io.matches import (
    CandidateRead,
    CompatibilityRead,
    MatchRead,
    PotentialMatchesMetadata,
    PotentialMatchesResponse,
    SuggestionRead,
    SwipeRequest,
    SwipeResponse,
)
from travel_buddy.core.models.io.users import PublicUserRead
from travel_buddy.matching.service import DEFAULT_MIN_SCORE, MatchWithUser
from travel_buddy.server.services.deps import CurrentUserDep, MatchServiceDep
from travel_buddy.server.services.rate_limit import matches_rate_limit, swipe_rate_limit

router = APIRouter()


def to_match_read(item: MatchWithUser) -> MatchRead:
    match = item.match
    return MatchRead(
        **match.model_dump(include=set(MatchRead.model_fields) - {"match_age_days", "other_user"}),
        match_age_days=match.match_age_days(utc_now()),
        other_user=PublicUserRead.model_validate(item.other_user) if item.other_user is not None else None,
    )


@router.get(
    "/potential",
    response_model=PotentialMatchesResponse,
    summary="Potential Matches",
    description="Rank users the caller has not swiped on yet by compatibility and distance.",
    response_description="A page of scored candidates with paging metadata.",
    responses={429: {"description": "Too many requests"}},
    dependencies=[Depends(matches_rate_limit)],
)
async def potential_matches(
    user: CurrentUserDep,
    service: MatchServiceDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> PotentialMatchesResponse:
    """
    Get potential matches.

    - **page**: 1-based page number
    - **limit**: candidates per page

    Each candidate carries its **match_score** (15 to 100) and its
    **distance** in km, which is null when either side has no location.
    """
    result = await service.potential_matches(user, page=page, limit=limit)
    data = [
        CandidateRead(
            **PublicUserRead.model_validate(c.user).model_dump(),
            match_score=c.match_score,
            distance=c.distance,
        )
        for c in result.candidates
    ]
    return PotentialMatchesResponse(
        results=len(data),
        page=result.page,
        total_pages=result.total_pages,
        data=data,
        metadata=PotentialMatchesMetadata(
            total_found=result.total_found,
            average_score=result.average_score,
            has_more=result.has_more,
        ),
    )


@router.post(
    "/swipe",
    response_model=SwipeResponse,
    response_model_exclude_none=True,
    summary="Swipe",
    description="Like or reject another user. A mutual like creates a match.",
    responses={
        400: {"description": "Invalid action, swipe on self, or repeated swipe"},
        404: {"description": "Swiped user not found"},
        429: {"description": "Swipe limit reached"},
    },
    dependencies=[Depends(swipe_rate_limit)],
)
async def swipe(payload: SwipeRequest, user: CurrentUserDep, service: MatchServiceDep) -> SwipeResponse:
    outcome = await service.record_swipe(user, payload.swiped_user_id, payload.action)
    if outcome.is_match:
        return SwipeResponse(
            match=True,
            message="It's a match!",
            match_id=outcome.match.id,
            match_score=outcome.match.match_score,
            other_user=PublicUserRead.model_validate(outcome.swiped_user),
        )
    return SwipeResponse(match=False, message="Swipe recorded successfully", swipe_id=outcome.swipe.id)


@router.get(
    "/my-matches",
    response_model=List[MatchRead],
    summary="My Matches",
    description="Accepted and pending matches of the caller, newest first.",
)
async def my_matches(user: CurrentUserDep, service: MatchServiceDep) -> List[MatchRead]:
    return [to_match_read(item) for item in await service.my_matches(user)]


@router.get(
    "/suggestions",
    response_model=List[SuggestionRead],
    summary="Suggestions",
    description="Users whose travel preferences overlap most with the caller's.",
)
async def suggestions(
    user: CurrentUserDep,
    service: MatchServiceDep,
    limit: int = Query(default=10, ge=1, le=100),
    min_score: int = Query(default=DEFAULT_MIN_SCORE, ge=0, le=100),
) -> List[SuggestionRead]:
    found = await service.find_matches(user, limit=limit, min_score=min_score)
    return [SuggestionRead(user=PublicUserRead.model_validate(s.user), score=s.score) for s in found]


@router.get(
    "/compatibility/{user_id}",
    response_model=CompatibilityRead,
    summary="Compatibility",
    description="Detailed compatibility between the caller and another user.",
    responses={400: {"description": "Compatibility with oneself"}, 404: {"description": "User not found"}},
)
async def compatibility(user_id: int, user: CurrentUserDep, service: MatchServiceDep) -> CompatibilityRead:
    breakdown = await service.compatibility(user, user_id)
    return CompatibilityRead(
        user_id=user_id,
        score=breakdown.score,
        components=breakdown.components,
        weights=breakdown.weights,
        model_version=breakdown.model_version,
    )


@router.delete(
    "/{match_id}",
    status_code=204,
    summary="Delete Match",
    description="Remove one of the caller's matches.",
    responses={404: {"description": "Match not found"}},
)
async def delete_match(match_id: int, user: CurrentUserDep, service: MatchServiceDep) -> None:
    await service.delete_match(user, match_id)
