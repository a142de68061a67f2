"""
Authentication I/O models.

Required fields are declared optional here so that missing values are
reported with the same 400 response as other credential problems.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .users import TravelPreferences, UserRead


class SignupRequest(BaseModel):
    """Schema for creating an account."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    password_confirm: Optional[str] = None
    travel_preferences: Optional[TravelPreferences] = None
    languages: Optional[List[str]] = None


class LoginRequest(BaseModel):
    """Schema for logging in."""

    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    """Schema returned whenever a new access token is issued."""

    token: str
    user: UserRead


class UpdatePasswordRequest(BaseModel):
    """Schema for changing the password of the logged-in user."""

    current_password: str
    new_password: str
    password_confirm: str


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    password: str
    password_confirm: str


class MessageResponse(BaseModel):
    message: str


class ForgotPasswordResponse(MessageResponse):
    """Generic reset acknowledgement.

    ``reset_token`` is only filled in outside production so the reset flow
    can be exercised without a mail server.
    """

    reset_token: Optional[str] = Field(default=None, description="Raw reset token (development only)")
