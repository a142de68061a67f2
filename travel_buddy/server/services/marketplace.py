"""
Marketplace listings.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import UploadFile

from travel_buddy.core.database.entities.marketplace import MarketplaceListing, default_listing_location
from travel_buddy.core.database.entities.users import User
from travel_buddy.core.database.repositories import RepositoryBundle
from travel_buddy.core.exceptions import NotFound, PermissionDenied, ValidationFailed
from travel_buddy.core.models.io.marketplace import ListingCreate, ListingUpdate

from .uploads import MARKETPLACE, delete_upload, save_image

logger = logging.getLogger(__name__)


class MarketplaceService:
    """Listing operations for one request."""

    def __init__(self, repos: RepositoryBundle) -> None:
        self.repos = repos

    async def search(
        self,
        *,
        category: Optional[str] = None,
        search: Optional[str] = None,
        location: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[MarketplaceListing]:
        return await self.repos.listings.search(
            category=category, search=search, location=location, min_price=min_price, max_price=max_price
        )

    async def get(self, listing_id: int) -> MarketplaceListing:
        listing = await self.repos.listings.get_by_id(listing_id)
        if listing is None:
            raise NotFound("Listing not found")
        return listing

    async def create(self, user: User, payload: ListingCreate) -> MarketplaceListing:
        title = (payload.title or "").strip()
        description = (payload.description or "").strip()
        if not title or not description or payload.price is None:
            raise ValidationFailed("Title, description, and price are required")

        location = payload.location.model_dump() if payload.location else default_listing_location()
        listing = await self.repos.listings.create(
            MarketplaceListing(
                title=title,
                description=description,
                price=payload.price,
                category=payload.category,
                condition=payload.condition,
                location=location,
                created_by=user.id,
            )
        )
        logger.info(f"Listing {listing.id} created by user {user.id}")
        return listing

    async def update(self, user: User, listing_id: int, payload: ListingUpdate) -> MarketplaceListing:
        listing = await self._owned(listing_id, user, "You can only update your own listings")
        changes = payload.model_dump(exclude_unset=True)
        for name, value in changes.items():
            if value is None:
                continue
            if name == "location":
                value = payload.location.model_dump()
            setattr(listing, name, value)
        return await self.repos.listings.update(listing)

    async def delete(self, user: User, listing_id: int) -> None:
        listing = await self._owned(listing_id, user, "You can only delete your own listings")
        image = listing.image
        await self.repos.listings.delete(listing.id)
        delete_upload(image)
        logger.info(f"Listing {listing_id} deleted by user {user.id}")

    async def upload_image(self, user: User, listing_id: int, upload: Optional[UploadFile]) -> MarketplaceListing:
        """Store a new listing image and remove the previous one."""
        listing = await self._owned(listing_id, user, "You can only update your own listings")
        url = await save_image(upload, MARKETPLACE)
        previous = listing.image
        listing.image = url
        listing = await self.repos.listings.update(listing)
        if previous and previous != url:
            delete_upload(previous)
        return listing

    async def _owned(self, listing_id: int, user: User, message: str) -> MarketplaceListing:
        listing = await self.get(listing_id)
        if listing.created_by != user.id:
            raise PermissionDenied(message)
        return listing
