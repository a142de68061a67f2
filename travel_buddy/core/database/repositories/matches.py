"""
Swipe and match repositories.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.matches import Match, Swipe
from .base import SQLModelRepository


class SwipeRepository(SQLModelRepository[Swipe]):
    """Repository for swipe decisions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Swipe)

    async def get_swipe(self, swiper_id: int, swiped_id: int) -> Optional[Swipe]:
        stmt = select(Swipe).where((Swipe.swiper_id == swiper_id) & (Swipe.swiped_id == swiped_id))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def swiped_user_ids(self, swiper_id: int) -> List[int]:
        """Ids of every user ``swiper_id`` has already swiped on."""
        result = await self.session.execute(select(Swipe.swiped_id).where(Swipe.swiper_id == swiper_id))
        return list(result.scalars().all())

    async def has_liked(self, swiper_id: int, swiped_id: int) -> bool:
        swipe = await self.get_swipe(swiper_id, swiped_id)
        return swipe is not None and swipe.action == "like"


class MatchRepository(SQLModelRepository[Match]):
    """Repository for mutual matches."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Match)

    async def get_for_pair(self, first_id: int, second_id: int) -> Optional[Match]:
        """Get the match of two users regardless of argument order."""
        low, high = Match.ordered_pair(first_id, second_id)
        stmt = select(Match).where((Match.user_one_id == low) & (Match.user_two_id == high))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_user(self, user_id: int, statuses: Optional[Iterable[str]] = None) -> List[Match]:
        """Matches involving ``user_id``, newest first.

        Args:
            user_id: Member of the matches
            statuses: Optional status whitelist

        Returns:
            List of matches
        """
        stmt = select(Match).where(or_(Match.user_one_id == user_id, Match.user_two_id == user_id))
        if statuses is not None:
            stmt = stmt.where(Match.status.in_(list(statuses)))  # type: ignore[attr-defined]
        stmt = stmt.order_by(Match.matched_on.desc(), Match.id.desc())  # type: ignore[union-attr]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def matched_user_ids(self, user_id: int) -> List[int]:
        """Ids of users with an accepted match with ``user_id``."""
        matches = await self.list_for_user(user_id, statuses=["accepted"])
        return [match.other_user_id(user_id) for match in matches]

    async def are_matched(self, first_id: int, second_id: int) -> bool:
        match = await self.get_for_pair(first_id, second_id)
        return match is not None and match.status == "accepted"
