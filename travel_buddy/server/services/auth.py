"""
Authentication dependencies.

Resolves the current user from a bearer token or the ``jwt`` cookie and
provides role checks for admin-only endpoints. The same token resolution is
reused by the WebSocket endpoint.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Callable, Optional

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from travel_buddy.core.database import get_session
from travel_buddy.core.database.entities.users import User
from travel_buddy.core.database.repositories.users import UserRepository
from travel_buddy.core.exceptions import AuthenticationFailed, PermissionDenied
from travel_buddy.core.security import create_access_token, decode_access_token
from travel_buddy.server.core.config import settings

logger = logging.getLogger(__name__)

LOGGED_OUT_COOKIE = "loggedout"


def extract_token(authorization: Optional[str], cookie: Optional[str]) -> Optional[str]:
    """Pick the access token from an ``Authorization: Bearer`` header or the cookie."""
    if authorization and authorization.startswith("Bearer "):
        token = authorization.split(" ", 1)[1].strip()
        if token:
            return token
    if cookie and cookie != LOGGED_OUT_COOKIE:
        return cookie
    return None


async def authenticate_token(token: Optional[str], users: UserRepository) -> User:
    """Resolve the user behind an access token.

    Raises:
        AuthenticationFailed: Token missing, invalid or expired, user gone or
            inactive, or password changed since the token was issued
    """
    if not token:
        raise AuthenticationFailed("You are not logged in! Please log in to get access.")

    payload = decode_access_token(token)
    user = await users.get_by_id(payload["id"])
    if user is None:
        raise AuthenticationFailed("The user belonging to this token no longer exists.")
    if not user.active:
        raise AuthenticationFailed("Your account has been deactivated. Please contact support.")
    if user.changed_password_after(int(payload["iat"])):
        raise AuthenticationFailed("User recently changed password! Please log in again.")
    return user


async def get_current_user(request: Request, session: AsyncSession = Depends(get_session)) -> User:
    """FastAPI dependency returning the authenticated user."""
    token = extract_token(request.headers.get("Authorization"), request.cookies.get(settings.auth.cookie_name))
    return await authenticate_token(token, UserRepository(session))


async def get_optional_user(request: Request, session: AsyncSession = Depends(get_session)) -> Optional[User]:
    """Like ``get_current_user`` but anonymous callers yield None.

    A stale or invalid token is treated as no token at all.
    """
    token = extract_token(request.headers.get("Authorization"), request.cookies.get(settings.auth.cookie_name))
    if token is None:
        return None
    try:
        return await authenticate_token(token, UserRepository(session))
    except AuthenticationFailed as e:
        logger.debug(f"Ignoring unusable token on an optional-auth route: {e.message}")
        return None


def require_roles(*roles: str) -> Callable:
    """Build a dependency that only lets users with one of ``roles`` through."""

    async def _check(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise PermissionDenied("You do not have permission to perform this action")
        return user

    return _check


def issue_token(user: User, response: Response) -> str:
    """Sign a token for ``user`` and attach it as the ``jwt`` cookie."""
    auth = settings.auth
    token = create_access_token(user.id)
    response.set_cookie(
        key=auth.cookie_name,
        value=token,
        max_age=int(timedelta(days=auth.jwt_expires_in_days).total_seconds()),
        httponly=True,
        secure=auth.cookie_secure,
        samesite="lax",
    )
    return token


def clear_token_cookie(response: Response) -> None:
    """Overwrite the token cookie with a short-lived placeholder."""
    auth = settings.auth
    response.set_cookie(
        key=auth.cookie_name,
        value=LOGGED_OUT_COOKIE,
        max_age=10,
        httponly=True,
        secure=auth.cookie_secure,
        samesite="lax",
    )
