"""
User I/O models for API requests and responses.

These schemas define the public contract for accounts and travel profiles.
None of them carries a password or credential field.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.enums import BudgetLevel, Destination, Interest, PersonalityType, TravelPace, TravelStyle


class TravelPreferences(BaseModel):
    """Travel preferences of a user profile."""

    model_config = ConfigDict(use_enum_values=True)

    budget: Optional[BudgetLevel] = None
    pace: Optional[TravelPace] = None
    travel_style: Optional[TravelStyle] = None
    planning_style: Optional[str] = None
    accommodation_preference: Optional[str] = None
    group_size: Optional[str] = None
    interests: Optional[List[Interest]] = None
    destinations: Optional[List[Destination]] = None

    def to_document(self) -> Dict[str, Any]:
        """Only the preferences that were actually given."""
        return self.model_dump(mode="json", exclude_none=True)


class Location(BaseModel):
    """A place as ``[lon, lat]`` coordinates plus address parts."""

    coordinates: Optional[List[float]] = Field(default=None, description="[longitude, latitude]")
    city: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None

    @field_validator("coordinates")
    @classmethod
    def _lon_lat_pair(cls, value: Optional[List[float]]) -> Optional[List[float]]:
        if value is not None and len(value) != 2:
            raise ValueError("coordinates must be [longitude, latitude]")
        return value


class PublicUserRead(BaseModel):
    """Schema for the public part of a user profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    photo: Optional[str] = None
    profile_picture: Optional[str] = None
    age: Optional[int] = None
    bio: Optional[str] = None
    location: Optional[Dict[str, Any]] = None
    personality_type: Optional[str] = None
    travel_preferences: Dict[str, Any] = Field(default_factory=dict)
    languages: List[str] = Field(default_factory=list)
    last_active: Optional[datetime] = None


class UserRead(PublicUserRead):
    """Schema for reading the caller's own account."""

    email: str
    role: str
    active: bool
    verified: bool
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile.

    Only these fields may change through the profile endpoint.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    profile_picture: Optional[str] = None
    personality_type: Optional[PersonalityType] = None
    travel_preferences: Optional[TravelPreferences] = None
    languages: Optional[List[str]] = None
    location: Optional[Location] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    age: Optional[int] = Field(default=None, ge=18, le=100)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class ProfilePictureRead(BaseModel):
    """Schema returned after uploading a profile picture."""

    profile_picture: str
    user: UserRead
