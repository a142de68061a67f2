"""
User repository.

Data access for accounts and the candidate queries used by discovery.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.users import User
from .base import QueryBuilder, SQLModelRepository


class UserRepository(SQLModelRepository[User]):
    """Repository for user data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (compared lower-cased).

        Args:
            email: Login email

        Returns:
            User instance or None
        """
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_reset_token(self, token_digest: str, now: datetime) -> Optional[User]:
        """Get the user owning an unexpired password reset token digest."""
        stmt = select(User).where(
            (User.password_reset_token == token_digest) & (User.password_reset_expires > now)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_many(self, user_ids: Iterable[int]) -> Dict[int, User]:
        """Load several users at once, keyed by id."""
        ids = {user_id for user_id in user_ids if user_id is not None}
        if not ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(ids)))  # type: ignore[union-attr]
        return {user.id: user for user in result.scalars().all()}

    async def list_candidates(
        self,
        exclude_ids: Iterable[int],
        *,
        min_age: Optional[int] = None,
        max_age: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[User]:
        """List active users not in ``exclude_ids``, newest first.

        Args:
            exclude_ids: Users to leave out (the caller and everyone already swiped)
            min_age: Inclusive lower age bound
            max_age: Inclusive upper age bound
            limit: Maximum number of users

        Returns:
            List of candidate users
        """
        stmt = select(User).where(User.active == True)  # noqa: E712
        excluded = list(exclude_ids)
        if excluded:
            stmt = stmt.where(User.id.not_in(excluded))  # type: ignore[union-attr]
        if min_age is not None:
            stmt = stmt.where(User.age >= min_age)  # type: ignore[operator]
        if max_age is not None:
            stmt = stmt.where(User.age <= max_age)  # type: ignore[operator]
        stmt = stmt.order_by(User.created_at.desc(), User.id.desc())  # type: ignore[union-attr]
        stmt = QueryBuilder.apply_pagination(stmt, limit, None)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
