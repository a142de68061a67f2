"""
Marketplace Endpoints.

Second-hand travel gear listings. Browsing is open to everyone; creating and
changing listings needs an account, and only the owner can change a listing.
"""

from typing import List, Optional

from fastapi import APIRouter, File, Query, UploadFile

from travel_buddy.core.models.io.marketplace import ListingCreate, ListingRead, ListingUpdate
from travel_buddy.server.services.deps import CurrentUserDep, MarketplaceServiceDep

router = APIRouter()


@router.get(
    "/listings",
    response_model=List[ListingRead],
    summary="Browse Listings",
    description="Filter listings, newest first.",
)
async def list_listings(
    service: MarketplaceServiceDep,
    category: Optional[str] = Query(default=None, description="Case-insensitive category substring"),
    search: Optional[str] = Query(default=None, description="Text searched in title and description"),
    location: Optional[str] = Query(default=None, description="City substring"),
    min_price: Optional[float] = Query(default=None, ge=0),
    max_price: Optional[float] = Query(default=None, ge=0),
) -> List[ListingRead]:
    listings = await service.search(
        category=category, search=search, location=location, min_price=min_price, max_price=max_price
    )
    return [ListingRead.model_validate(item) for item in listings]


@router.get(
    "/listings/{listing_id}",
    response_model=ListingRead,
    summary="Get Listing",
    responses={404: {"description": "Listing not found"}},
)
async def get_listing(listing_id: int, service: MarketplaceServiceDep) -> ListingRead:
    return ListingRead.model_validate(await service.get(listing_id))


@router.post(
    "/listings",
    response_model=ListingRead,
    status_code=201,
    summary="Create Listing",
    responses={400: {"description": "Title, description, and price are required"}},
)
async def create_listing(payload: ListingCreate, user: CurrentUserDep, service: MarketplaceServiceDep) -> ListingRead:
    """
    Create a listing.

    - **title**, **description**, **price**: required
    - **location**: coordinates default to [0, 0]
    """
    return ListingRead.model_validate(await service.create(user, payload))


@router.put(
    "/listings/{listing_id}",
    response_model=ListingRead,
    summary="Update Listing",
    description="Partially update a listing. Owner only.",
    responses={403: {"description": "You can only update your own listings"}, 404: {"description": "Listing not found"}},
)
async def update_listing(
    listing_id: int, payload: ListingUpdate, user: CurrentUserDep, service: MarketplaceServiceDep
) -> ListingRead:
    return ListingRead.model_validate(await service.update(user, listing_id, payload))


@router.delete(
    "/listings/{listing_id}",
    status_code=204,
    summary="Delete Listing",
    description="Delete a listing and its stored image. Owner only.",
    responses={403: {"description": "You can only delete your own listings"}, 404: {"description": "Listing not found"}},
)
async def delete_listing(listing_id: int, user: CurrentUserDep, service: MarketplaceServiceDep) -> None:
    await service.delete(user, listing_id)


@router.post(
    "/listings/{listing_id}/image",
    response_model=ListingRead,
    summary="Upload Listing Image",
    description="Upload an image (at most 10 MB) for a listing, replacing the previous one. Owner only.",
    responses={400: {"description": "Missing file, not an image, or too large"}},
)
async def upload_listing_image(
    listing_id: int,
    user: CurrentUserDep,
    service: MarketplaceServiceDep,
    image: Optional[UploadFile] = File(default=None),
) -> ListingRead:
    return ListingRead.model_validate(await service.upload_image(user, listing_id, image))
