"""
User entity models.

This module contains the database entity for user accounts and their travel
profile. Nested profile documents (location, travel preferences) are stored
as JSON columns and always replaced as a whole when they change.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import JSON, Field

from ..base import Base, utc_now

DEFAULT_TRAVEL_PREFERENCES: Dict[str, Any] = {
    "budget": "moderate",
    "pace": "moderate",
    "accommodation_preference": "flexible",
    "interests": ["nature", "culture", "food"],
    "destinations": [],
}


def default_travel_preferences() -> Dict[str, Any]:
    prefs = dict(DEFAULT_TRAVEL_PREFERENCES)
    prefs["interests"] = list(prefs["interests"])
    prefs["destinations"] = list(prefs["destinations"])
    return prefs


class UserBase(Base):
    """Base fields for user entity."""

    # Profile
    name: str = Field(max_length=50, description="Display name")
    email: str = Field(max_length=255, unique=True, index=True, description="Lower-cased login email")
    photo: str = Field(default="default.jpg", max_length=255)
    profile_picture: Optional[str] = Field(default=None, max_length=512)
    age: Optional[int] = Field(default=None, ge=18, le=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    personality_type: Optional[str] = Field(default=None, max_length=32)

    # Nested documents
    location: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    travel_preferences: Dict[str, Any] = Field(default_factory=default_travel_preferences, sa_type=JSON)
    languages: List[str] = Field(default_factory=list, sa_type=JSON)

    # Account state
    role: str = Field(default="user", max_length=16)
    active: bool = Field(default=True)
    verified: bool = Field(default=False)


class User(UserBase, table=True):
    """Entity for a Travel Buddy account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    # Credentials
    password_hash: str = Field(max_length=255)
    password_changed_at: Optional[datetime] = Field(default=None)
    password_reset_token: Optional[str] = Field(default=None, max_length=64, index=True)
    password_reset_expires: Optional[datetime] = Field(default=None)
    login_attempts: int = Field(default=0)
    lock_until: Optional[datetime] = Field(default=None)

    # Activity
    last_active: datetime = Field(default_factory=utc_now)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def preferences(self) -> Dict[str, Any]:
        return self.travel_preferences or {}

    @property
    def coordinates(self) -> Optional[List[float]]:
        """Return ``[lon, lat]`` when the user has a usable location."""
        coords = (self.location or {}).get("coordinates")
        if isinstance(coords, (list, tuple)) and len(coords) == 2:
            return [float(coords[0]), float(coords[1])]
        return None

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        return self.lock_until is not None and self.lock_until > (now or utc_now())

    def changed_password_after(self, issued_at: int) -> bool:
        """Whether the password changed after a token's ``iat`` (epoch seconds)."""
        if self.password_changed_at is None:
            return False
        return _epoch(self.password_changed_at) > issued_at

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"


def _epoch(value: datetime) -> int:
    return int((value - datetime(1970, 1, 1)).total_seconds())
