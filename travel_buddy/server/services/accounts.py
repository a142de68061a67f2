"""
Account management.

Signup, login with lockout after repeated failures, password changes and
resets, and profile updates. Token issuing and cookies stay in the routers;
this service only works on users.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Optional, Tuple

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError

from travel_buddy.core.database.base import utc_now
from travel_buddy.core.database.entities.users import User, default_travel_preferences
from travel_buddy.core.database.repositories.users import UserRepository
from travel_buddy.core.exceptions import AccountLocked, AuthenticationFailed, Conflict, ValidationFailed
from travel_buddy.core.models.io.auth import SignupRequest
from travel_buddy.core.models.io.users import ProfileUpdate
from travel_buddy.core.security import (
    MIN_PASSWORD_LENGTH,
    create_password_reset_token,
    hash_password,
    hash_reset_token,
    is_valid_email,
    verify_password,
)
from travel_buddy.server.core.config import settings

from .uploads import PROFILE_PICTURES, delete_upload, save_image

logger = logging.getLogger(__name__)

# Keeps tokens issued right after a password change valid
PASSWORD_CHANGE_SKEW = timedelta(seconds=1)


def _check_new_password(password: Optional[str], confirm: Optional[str], mismatch: str) -> str:
    if password != confirm:
        raise ValidationFailed(mismatch)
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


class AccountService:
    """User account operations for one request."""

    def __init__(self, users: UserRepository) -> None:
        self.users = users

    async def signup(self, payload: SignupRequest) -> User:
        """Create an account.

        Raises:
            ValidationFailed: Missing fields, mismatched or short password,
                invalid email
            Conflict: The email is already registered
        """
        name = (payload.name or "").strip()
        if not name or not payload.email or not payload.password:
            raise ValidationFailed("Please provide name, email, and password")
        if payload.password != payload.password_confirm:
            raise ValidationFailed("Passwords do not match")
        email = payload.email.strip().lower()
        if not is_valid_email(email):
            raise ValidationFailed("Please provide a valid email address")
        _check_new_password(payload.password, payload.password_confirm, "Passwords do not match")
        if await self.users.get_by_email(email) is not None:
            raise Conflict("Email already registered")

        preferences = default_travel_preferences()
        if payload.travel_preferences is not None:
            preferences.update(payload.travel_preferences.to_document())

        user = User(
            name=name[:50],
            email=email,
            password_hash=hash_password(payload.password),
            travel_preferences=preferences,
            languages=list(payload.languages or []),
        )
        try:
            user = await self.users.create(user)
        except IntegrityError:
            await self.users.session.rollback()
            raise Conflict("Email already registered")
        logger.info(f"User {user.id} signed up")
        return user

    async def login(self, email: Optional[str], password: Optional[str]) -> User:
        """Check credentials, counting failures towards a temporary lock.

        Raises:
            ValidationFailed: Missing fields or an invalid email
            AuthenticationFailed: Unknown email, inactive account or wrong password
            AccountLocked: The account is locked, or just became locked
        """
        if not email or not password:
            raise ValidationFailed("Please provide email and password!")
        email = email.strip().lower()
        if not is_valid_email(email):
            raise ValidationFailed("Please provide a valid email address")

        user = await self.users.get_by_email(email)
        if user is None:
            raise AuthenticationFailed("Invalid credentials")
        if not user.active:
            raise AuthenticationFailed("Your account has been deactivated. Please contact support.")

        now = utc_now()
        if user.is_locked(now):
            minutes = math.ceil((user.lock_until - now).total_seconds() / 60)
            raise AccountLocked(f"Account is temporarily locked. Please try again in {minutes} minutes.")

        auth = settings.auth
        if not verify_password(password, user.password_hash):
            user.login_attempts = (user.login_attempts or 0) + 1
            locked = user.login_attempts >= auth.max_login_attempts
            if locked:
                user.lock_until = now + timedelta(minutes=auth.lock_minutes)
            await self.users.update(user)
            if locked:
                logger.warning(f"User {user.id} locked after {user.login_attempts} failed logins")
                raise AccountLocked("Account temporarily locked due to too many failed attempts")
            remaining = auth.max_login_attempts - user.login_attempts
            raise AuthenticationFailed(f"Invalid credentials. {remaining} attempts remaining.")

        user.login_attempts = 0
        user.lock_until = None
        user.last_active = now
        user = await self.users.update(user)
        logger.info(f"User {user.id} logged in")
        return user

    async def update_password(self, user: User, current: str, new: str, confirm: str) -> User:
        _check_new_password(new, confirm, "New passwords do not match")
        if not verify_password(current, user.password_hash):
            raise AuthenticationFailed("Your current password is incorrect.")
        self._set_password(user, new)
        user = await self.users.update(user)
        logger.info(f"User {user.id} changed their password")
        return user

    async def forgot_password(self, email: Optional[str]) -> Optional[str]:
        """Store a reset token for the account behind ``email``, if any.

        Returns:
            The raw reset token, or None when no account matched
        """
        if not email:
            raise ValidationFailed("Please provide email address")
        user = await self.users.get_by_email(email.strip().lower())
        if user is None:
            return None
        raw, digest = create_password_reset_token()
        user.password_reset_token = digest
        user.password_reset_expires = utc_now() + timedelta(minutes=settings.auth.password_reset_expires_minutes)
        await self.users.update(user)
        logger.info(f"Password reset requested for user {user.id}")
        return raw

    async def reset_password(self, raw_token: str, password: str, confirm: str) -> User:
        if password != confirm:
            raise ValidationFailed("Passwords do not match")
        user = await self.users.get_by_reset_token(hash_reset_token(raw_token), utc_now())
        if user is None:
            raise ValidationFailed("Token is invalid or has expired")
        _check_new_password(password, confirm, "Passwords do not match")
        self._set_password(user, password)
        user.password_reset_token = None
        user.password_reset_expires = None
        user = await self.users.update(user)
        logger.info(f"User {user.id} reset their password")
        return user

    async def update_profile(self, user: User, payload: ProfileUpdate) -> User:
        """Apply the editable profile fields that were sent."""
        changes = payload.model_dump(mode="json", exclude_unset=True)
        for name, value in changes.items():
            if name == "travel_preferences":
                value = payload.travel_preferences.to_document() if payload.travel_preferences else {}
            elif name == "location" and payload.location is not None:
                value = payload.location.model_dump(exclude_none=True)
            setattr(user, name, value)
        user.last_active = utc_now()
        return await self.users.update(user)

    async def upload_profile_picture(self, user: User, upload: Optional[UploadFile]) -> Tuple[User, str]:
        url = await save_image(upload, PROFILE_PICTURES)
        previous = user.profile_picture
        user.profile_picture = url
        user = await self.users.update(user)
        if previous and previous != url:
            delete_upload(previous)
        return user, url

    @staticmethod
    def _set_password(user: User, password: str) -> None:
        user.password_hash = hash_password(password)
        user.password_changed_at = utc_now() - PASSWORD_CHANGE_SKEW
        user.login_attempts = 0
        user.lock_until = None
