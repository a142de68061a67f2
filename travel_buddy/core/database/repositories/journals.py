"""
Travel journal repository.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.journals import JournalComment, JournalLike, TravelJournal
from .base import QueryBuilder, SQLModelRepository


@dataclass
class JournalFilters:
    """Optional filters accepted by ``JournalRepository.search``."""

    user_id: Optional[int] = None
    category: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    privacy: Optional[str] = None
    status: Optional[str] = None


class JournalRepository(SQLModelRepository[TravelJournal]):
    """Repository for travel journals, their likes and comments."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TravelJournal)

    async def delete(self, entity_id: int) -> bool:
        journal = await self.get_by_id(entity_id)
        if journal is None:
            return False
        await self.session.execute(delete(JournalLike).where(JournalLike.journal_id == entity_id))
        await self.session.execute(delete(JournalComment).where(JournalComment.journal_id == entity_id))
        await self.session.delete(journal)
        await self.session.commit()
        return True

    async def search(
        self,
        filters: JournalFilters,
        viewer_id: int,
        friend_ids: Iterable[int] = (),
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[TravelJournal], int]:
        """Filter the journals ``viewer_id`` may see, newest first.

        Returns:
            The requested page and the total number of matching journals
        """
        stmt = select(TravelJournal).where(self._visible_to(viewer_id, friend_ids))
        stmt = QueryBuilder.apply_filters(
            stmt,
            TravelJournal,
            {
                "user_id": filters.user_id,
                "category": filters.category,
                "privacy": filters.privacy,
                "status": filters.status,
            },
        )
        if filters.start_date is not None:
            stmt = stmt.where(TravelJournal.start_date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(TravelJournal.end_date <= filters.end_date)

        journals = await self._execute(stmt)
        if filters.location:
            needle = filters.location.lower()
            journals = [j for j in journals if needle in str((j.location or {}).get("name", "")).lower()]
        return _page(journals, limit, offset), len(journals)

    async def feed(
        self, user_id: int, friend_ids: Iterable[int], limit: Optional[int] = None, offset: Optional[int] = None
    ) -> Tuple[List[TravelJournal], int]:
        """Published journals visible to ``user_id``, newest first."""
        base = select(TravelJournal).where(
            (TravelJournal.status == "published") & self._visible_to(user_id, friend_ids)
        )

        total_result = await self.session.execute(select(func.count()).select_from(base.subquery()))
        stmt = QueryBuilder.apply_pagination(base.order_by(*self._newest_first()), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), int(total_result.scalar_one())

    # Likes

    async def get_like(self, journal_id: int, user_id: int) -> Optional[JournalLike]:
        stmt = select(JournalLike).where((JournalLike.journal_id == journal_id) & (JournalLike.user_id == user_id))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add_like(self, journal_id: int, user_id: int) -> JournalLike:
        like = JournalLike(journal_id=journal_id, user_id=user_id)
        self.session.add(like)
        await self.session.commit()
        return like

    async def remove_like(self, like: JournalLike) -> None:
        await self.session.delete(like)
        await self.session.commit()

    async def like_user_ids(self, journal_id: int) -> List[int]:
        stmt = select(JournalLike.user_id).where(JournalLike.journal_id == journal_id).order_by(JournalLike.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # Comments

    async def add_comment(self, journal_id: int, user_id: int, content: str) -> JournalComment:
        comment = JournalComment(journal_id=journal_id, user_id=user_id, content=content)
        self.session.add(comment)
        await self.session.commit()
        await self.session.refresh(comment)
        return comment

    async def comments(self, journal_id: int) -> List[JournalComment]:
        stmt = (
            select(JournalComment).where(JournalComment.journal_id == journal_id).order_by(JournalComment.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def _visible_to(user_id: int, friend_ids: Iterable[int]):
        """Public journals, the user's own, and friends-only journals of their matches."""
        friends = list(friend_ids)
        visible = [TravelJournal.privacy == "public", TravelJournal.user_id == user_id]
        if friends:
            visible.append(
                and_(TravelJournal.privacy == "friends", TravelJournal.user_id.in_(friends))  # type: ignore[attr-defined]
            )
        return or_(*visible)

    def _newest_first(self) -> tuple:
        return (TravelJournal.created_at.desc(), TravelJournal.id.desc())  # type: ignore[union-attr]

    async def _execute(self, stmt) -> List[TravelJournal]:
        result = await self.session.execute(stmt.order_by(*self._newest_first()))
        return list(result.scalars().all())


def _page(items: list, limit: Optional[int], offset: Optional[int]) -> list:
    start = offset or 0
    return items[start : start + limit] if limit is not None else items[start:]
