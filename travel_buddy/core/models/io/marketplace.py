"""
Marketplace listing I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import ListingCategory, ListingCondition, ListingStatus


class ListingLocation(BaseModel):
    coordinates: List[float] = Field(default_factory=lambda: [0, 0], description="[longitude, latitude]")
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class ListingCreate(BaseModel):
    """Schema for creating a listing.

    ``title``, ``description`` and ``price`` are required; they are declared
    optional so that a missing one is answered with a 400.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    category: ListingCategory = ListingCategory.other
    condition: ListingCondition = ListingCondition.good
    location: Optional[ListingLocation] = None


class ListingUpdate(BaseModel):
    """Schema for a partial listing update."""

    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[ListingCategory] = None
    condition: Optional[ListingCondition] = None
    location: Optional[ListingLocation] = None
    status: Optional[ListingStatus] = None
    is_available: Optional[bool] = None


class ListingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    price: float
    category: str
    condition: str
    image: Optional[str] = None
    location: Dict[str, Any] = Field(default_factory=dict)
    created_by: int
    status: str
    is_available: bool
    created_at: datetime
    updated_at: datetime
