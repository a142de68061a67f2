"""
Travel journals.

Journals are visible according to their privacy: public to everyone, private
to the owner, and ``friends`` to the owner and the users they have an
accepted match with.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from travel_buddy.core.database.base import utc_now
from travel_buddy.core.database.entities.journals import JournalComment, TravelJournal
from travel_buddy.core.database.entities.users import User
from travel_buddy.core.database.repositories import RepositoryBundle
from travel_buddy.core.database.repositories.journals import JournalFilters
from travel_buddy.core.exceptions import NotFound, PermissionDenied, ValidationFailed
from travel_buddy.core.models.io.journals import JournalCreate, JournalUpdate

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_COMMENT_LENGTH = 500


@dataclass
class JournalView:
    journal: TravelJournal
    likes: List[int] = field(default_factory=list)
    comments: List[JournalComment] = field(default_factory=list)


@dataclass
class JournalPage:
    journals: List[JournalView]
    page: int
    pages: int
    total: int


class JournalService:
    """Journal operations for one request."""

    def __init__(self, repos: RepositoryBundle) -> None:
        self.repos = repos

    async def create(self, user: User, payload: JournalCreate) -> JournalView:
        journal = TravelJournal(user_id=user.id, **payload.model_dump(mode="json"))
        journal.start_date, journal.end_date = payload.start_date, payload.end_date
        journal = await self.repos.journals.create(journal)
        logger.info(f"Journal {journal.id} created by user {user.id}")
        return JournalView(journal)

    async def search(
        self, viewer: User, filters: JournalFilters, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> JournalPage:
        """Filtered journals, limited to the ones ``viewer`` may see."""
        page, limit = max(page, 1), max(limit, 1)
        friends = await self.repos.matches.matched_user_ids(viewer.id)
        journals, total = await self.repos.journals.search(
            filters, viewer.id, friends, limit=limit, offset=(page - 1) * limit
        )
        return await self._page(journals, total, page, limit)

    async def feed(self, user: User, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> JournalPage:
        """Published journals the user may see, newest first."""
        page, limit = max(page, 1), max(limit, 1)
        friends = await self.repos.matches.matched_user_ids(user.id)
        journals, total = await self.repos.journals.feed(user.id, friends, limit=limit, offset=(page - 1) * limit)
        return await self._page(journals, total, page, limit)

    async def get(self, journal_id: int, viewer: Optional[User]) -> JournalView:
        """Load a journal the viewer is allowed to see.

        Raises:
            NotFound: No such journal
            PermissionDenied: The viewer may not see it
        """
        journal = await self._journal(journal_id)
        if not await self.can_view(journal, viewer):
            raise PermissionDenied("You do not have permission to view this journal")
        return await self._view(journal)

    async def can_view(self, journal: TravelJournal, viewer: Optional[User]) -> bool:
        if journal.privacy == "public":
            return True
        if viewer is None:
            return False
        if journal.user_id == viewer.id:
            return True
        if journal.privacy == "friends":
            return await self.repos.matches.are_matched(journal.user_id, viewer.id)
        return False

    async def update(self, user: User, journal_id: int, payload: JournalUpdate) -> JournalView:
        journal = await self._owned(journal_id, user, "You can only update your own journals")
        changes = payload.model_dump(mode="json", exclude_unset=True)
        for name in ("start_date", "end_date"):
            if name in changes:
                changes[name] = getattr(payload, name)

        start = changes.get("start_date") or journal.start_date
        end = changes.get("end_date") or journal.end_date
        if end < start:
            raise ValidationFailed("End date must be after start date")

        content_changed = False
        for name, value in changes.items():
            if value is None:
                continue
            if name in ("title", "content") and value != getattr(journal, name):
                content_changed = True
            setattr(journal, name, value)
        if content_changed:
            journal.is_edited = True
            journal.last_edited_at = utc_now()
        journal = await self.repos.journals.update(journal)
        return await self._view(journal)

    async def delete(self, user: User, journal_id: int) -> None:
        await self._owned(journal_id, user, "You can only delete your own journals")
        await self.repos.journals.delete(journal_id)
        logger.info(f"Journal {journal_id} deleted by user {user.id}")

    async def toggle_like(self, user: User, journal_id: int) -> tuple:
        """Like or unlike a journal.

        Returns:
            Whether the journal is now liked and the new like count
        """
        journal = await self._journal(journal_id)
        if not await self.can_view(journal, user):
            raise PermissionDenied("You do not have permission to view this journal")
        like = await self.repos.journals.get_like(journal.id, user.id)
        if like is None:
            await self.repos.journals.add_like(journal.id, user.id)
            liked = True
        else:
            await self.repos.journals.remove_like(like)
            liked = False
        return liked, len(await self.repos.journals.like_user_ids(journal.id))

    async def comment(self, user: User, journal_id: int, content: Optional[str]) -> JournalComment:
        journal = await self._journal(journal_id)
        if not await self.can_view(journal, user):
            raise PermissionDenied("You do not have permission to view this journal")
        text = (content or "").strip()
        if not text:
            raise ValidationFailed("Comment content is required")
        if len(text) > MAX_COMMENT_LENGTH:
            raise ValidationFailed(f"Comment cannot be more than {MAX_COMMENT_LENGTH} characters")
        return await self.repos.journals.add_comment(journal.id, user.id, text)

    async def _journal(self, journal_id: int) -> TravelJournal:
        journal = await self.repos.journals.get_by_id(journal_id)
        if journal is None:
            raise NotFound("Journal not found")
        return journal

    async def _owned(self, journal_id: int, user: User, message: str) -> TravelJournal:
        journal = await self._journal(journal_id)
        if journal.user_id != user.id:
            raise PermissionDenied(message)
        return journal

    async def _view(self, journal: TravelJournal) -> JournalView:
        return JournalView(
            journal=journal,
            likes=await self.repos.journals.like_user_ids(journal.id),
            comments=await self.repos.journals.comments(journal.id),
        )

    async def _page(self, journals: List[TravelJournal], total: int, page: int, limit: int) -> JournalPage:
        return JournalPage(
            journals=[await self._view(journal) for journal in journals],
            page=page,
            pages=math.ceil(total / limit),
            total=total,
        )
