"""
Marketplace listing repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.marketplace import MarketplaceListing
from .base import SQLModelRepository


class ListingRepository(SQLModelRepository[MarketplaceListing]):
    """Repository for marketplace listings."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, MarketplaceListing)

    async def search(
        self,
        *,
        category: Optional[str] = None,
        search: Optional[str] = None,
        location: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[MarketplaceListing]:
        """Filter listings, newest first.

        Text filters are case-insensitive substring matches. ``location`` is
        matched against the listing's city.
        """
        stmt = select(MarketplaceListing)
        if category:
            stmt = stmt.where(func.lower(MarketplaceListing.category).contains(category.lower(), autoescape=True))
        if search:
            needle = search.lower()
            stmt = stmt.where(
                or_(
                    func.lower(MarketplaceListing.title).contains(needle, autoescape=True),
                    func.lower(MarketplaceListing.description).contains(needle, autoescape=True),
                )
            )
        if min_price is not None:
            stmt = stmt.where(MarketplaceListing.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(MarketplaceListing.price <= max_price)
        stmt = stmt.order_by(MarketplaceListing.created_at.desc(), MarketplaceListing.id.desc())  # type: ignore[union-attr]

        result = await self.session.execute(stmt)
        listings = list(result.scalars().all())
        if location:
            needle = location.lower()
            listings = [item for item in listings if needle in str((item.location or {}).get("city", "")).lower()]
        return listings
