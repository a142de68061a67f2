"""
Marketplace listing entity models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import JSON, Field

from ..base import Base, utc_now


def default_listing_location() -> Dict[str, Any]:
    return {"coordinates": [0, 0]}


class MarketplaceListingBase(Base):
    """Base fields for marketplace listing entity."""

    title: str = Field(max_length=200)
    description: str
    price: float = Field(ge=0)
    category: str = Field(default="Other", max_length=32, index=True)
    condition: str = Field(default="Good", max_length=16)
    image: Optional[str] = Field(default=None, max_length=512)
    location: Dict[str, Any] = Field(default_factory=default_listing_location, sa_type=JSON)
    status: str = Field(default="active", max_length=16)
    is_available: bool = Field(default=True)


class MarketplaceListing(MarketplaceListingBase, table=True):
    """Entity for an item offered on the marketplace.

    Table: marketplace_listings
    """

    __tablename__ = "marketplace_listings"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    created_by: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"MarketplaceListing(id={self.id}, title={self.title}, price={self.price})"
