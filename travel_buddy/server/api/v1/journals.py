"""
Travel Journal Endpoints.

Journals with privacy-aware visibility, a personal feed, likes and comments.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from travel_buddy.core.database.repositories.journals import JournalFilters
from travel_buddy.core.models.io.journals import (
    CommentCreate,
    CommentRead,
    JournalCreate,
    JournalListResponse,
    JournalRead,
    JournalUpdate,
    LikeToggleResponse,
    Pagination,
)
from travel_buddy.server.services.deps import CurrentUserDep, JournalServiceDep, OptionalUserDep
from travel_buddy.server.services.journals import DEFAULT_PAGE_SIZE, JournalPage, JournalView

router = APIRouter()


def to_journal_read(view: JournalView) -> JournalRead:
    journal = view.journal
    return JournalRead(
        **journal.model_dump(include=set(JournalRead.model_fields) - {"likes", "like_count", "comments"}),
        likes=view.likes,
        like_count=len(view.likes),
        comments=[CommentRead.model_validate(c) for c in view.comments],
    )


def to_list_response(page: JournalPage) -> JournalListResponse:
    return JournalListResponse(
        results=len(page.journals),
        journals=[to_journal_read(view) for view in page.journals],
        pagination=Pagination(page=page.page, pages=page.pages, total=page.total),
    )


@router.post(
    "/",
    response_model=JournalRead,
    status_code=201,
    summary="Create Journal",
    description="Write a travel journal entry.",
)
async def create_journal(payload: JournalCreate, user: CurrentUserDep, service: JournalServiceDep) -> JournalRead:
    return to_journal_read(await service.create(user, payload))


@router.get(
    "/",
    response_model=JournalListResponse,
    summary="Search Journals",
    description="Filter the journals the caller may see, newest first.",
)
async def list_journals(
    viewer: CurrentUserDep,
    service: JournalServiceDep,
    user: Optional[int] = Query(default=None, description="Author user id"),
    category: Optional[str] = None,
    location: Optional[str] = Query(default=None, description="Substring of the location name"),
    start_date: Optional[date] = Query(default=None, description="Journals starting on or after"),
    end_date: Optional[date] = Query(default=None, description="Journals ending on or before"),
    privacy: Optional[str] = None,
    status: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> JournalListResponse:
    filters = JournalFilters(
        user_id=user,
        category=category,
        location=location,
        start_date=start_date,
        end_date=end_date,
        privacy=privacy,
        status=status,
    )
    return to_list_response(await service.search(viewer, filters, page=page, limit=limit))


@router.get(
    "/feed",
    response_model=JournalListResponse,
    summary="Journal Feed",
    description="Published journals the caller may see: public ones, their own and their matches' friends-only ones.",
)
async def journal_feed(
    user: CurrentUserDep,
    service: JournalServiceDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> JournalListResponse:
    return to_list_response(await service.feed(user, page=page, limit=limit))


@router.get(
    "/{journal_id}",
    response_model=JournalRead,
    summary="Get Journal",
    description="A journal with its likes and comments. Anonymous callers see public journals only.",
    responses={403: {"description": "Not allowed to view"}, 404: {"description": "Journal not found"}},
)
async def get_journal(journal_id: int, viewer: OptionalUserDep, service: JournalServiceDep) -> JournalRead:
    return to_journal_read(await service.get(journal_id, viewer))


@router.patch(
    "/{journal_id}",
    response_model=JournalRead,
    summary="Update Journal",
    description="Edit a journal. Owner only.",
    responses={403: {"description": "Not the owner"}},
)
async def update_journal(
    journal_id: int, payload: JournalUpdate, user: CurrentUserDep, service: JournalServiceDep
) -> JournalRead:
    return to_journal_read(await service.update(user, journal_id, payload))


@router.delete(
    "/{journal_id}",
    status_code=204,
    summary="Delete Journal",
    description="Delete a journal with its likes and comments. Owner only.",
    responses={403: {"description": "Not the owner"}},
)
async def delete_journal(journal_id: int, user: CurrentUserDep, service: JournalServiceDep) -> None:
    await service.delete(user, journal_id)


@router.post(
    "/{journal_id}/like",
    response_model=LikeToggleResponse,
    summary="Toggle Like",
    description="Like the journal, or remove the caller's like.",
)
async def toggle_like(journal_id: int, user: CurrentUserDep, service: JournalServiceDep) -> LikeToggleResponse:
    liked, count = await service.toggle_like(user, journal_id)
    return LikeToggleResponse(liked=liked, like_count=count)


@router.post(
    "/{journal_id}/comments",
    response_model=CommentRead,
    status_code=201,
    summary="Add Comment",
    description="Comment on a journal.",
    responses={400: {"description": "Empty comment"}},
)
async def add_comment(
    journal_id: int, payload: CommentCreate, user: CurrentUserDep, service: JournalServiceDep
) -> CommentRead:
    comment = await service.comment(user, journal_id, payload.content)
    return CommentRead.model_validate(comment)
