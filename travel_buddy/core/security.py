"""
Security utilities for password hashing, access tokens and reset tokens.

Passwords are hashed with PBKDF2-SHA256 and a random per-password salt.
Access tokens are HS256 JWTs carrying the user id, and password reset tokens
are random hex strings of which only the SHA-256 digest is stored.
"""

import base64
import hashlib
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from travel_buddy.core.exceptions import AuthenticationFailed
from travel_buddy.server.core.config import settings

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


class PasswordHasher:
    """
    Secure password hashing using PBKDF2 with SHA-256.

    This implementation uses a random salt for each password and
    a high iteration count for security against brute force attacks.
    """

    ITERATIONS = 100_000
    SALT_LENGTH = 32  # 32 bytes = 256 bits

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password with a random salt.

        Args:
            password: Plain text password to hash

        Returns:
            Base64-encoded string containing salt and hash
        """
        salt = secrets.token_bytes(cls.SALT_LENGTH)
        password_hash = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, cls.ITERATIONS)
        return base64.b64encode(salt + password_hash).decode("utf-8")

    @classmethod
    def verify_password(cls, password: str, stored_hash: str) -> bool:
        """
        Verify a password against a stored hash.

        Args:
            password: Plain text password to verify
            stored_hash: Base64-encoded stored hash

        Returns:
            True if password matches, False otherwise
        """
        try:
            salt, stored_password_hash = cls._extract_salt_and_hash(stored_hash)
        except (ValueError, TypeError):
            return False
        if len(salt) != cls.SALT_LENGTH or not stored_password_hash:
            return False

        password_hash = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, cls.ITERATIONS)
        return secrets.compare_digest(password_hash, stored_password_hash)

    @classmethod
    def _extract_salt_and_hash(cls, stored_hash: str) -> Tuple[bytes, bytes]:
        combined = base64.b64decode(stored_hash.encode("utf-8"), validate=True)
        return combined[: cls.SALT_LENGTH], combined[cls.SALT_LENGTH :]


def hash_password(password: str) -> str:
    """Hash a password using secure defaults."""
    return PasswordHasher.hash_password(password)


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against a stored hash."""
    return PasswordHasher.verify_password(password, stored_hash)


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


# =====================================================================
# Access tokens
# =====================================================================


def create_access_token(
    user_id: int,
    *,
    expires_in: Optional[timedelta] = None,
    issued_at: Optional[datetime] = None,
    secret: Optional[str] = None,
    algorithm: Optional[str] = None,
) -> str:
    """
    Sign an access token for a user.

    Args:
        user_id: Identifier stored in the ``id`` claim
        expires_in: Token lifetime (defaults to ``JWT_EXPIRES_IN_DAYS``)
        issued_at: Override for the ``iat`` claim (defaults to now)
        secret: Signing secret (defaults to ``JWT_SECRET``)
        algorithm: JWT algorithm (defaults to ``JWT_ALGORITHM``)

    Returns:
        Encoded JWT string
    """
    auth = settings.auth
    now = issued_at or datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(days=auth.jwt_expires_in_days)
    payload = {"id": user_id, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, secret or auth.jwt_secret, algorithm=algorithm or auth.jwt_algorithm)


def decode_access_token(token: str, *, secret: Optional[str] = None, algorithm: Optional[str] = None) -> Dict[str, Any]:
    """
    Validate an access token and return its claims.

    Raises:
        AuthenticationFailed: If the token is expired, malformed or lacks a user id
    """
    auth = settings.auth
    try:
        payload = jwt.decode(
            token,
            secret or auth.jwt_secret,
            algorithms=[algorithm or auth.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
    except ExpiredSignatureError:
        raise AuthenticationFailed("Your token has expired. Please log in again.")
    except InvalidTokenError:
        raise AuthenticationFailed("Invalid token. Please log in again.")

    if "id" not in payload:
        raise AuthenticationFailed("Invalid token. Please log in again.")
    return payload


# =====================================================================
# Password reset tokens
# =====================================================================


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def create_password_reset_token() -> Tuple[str, str]:
    """Return ``(raw_token, stored_digest)`` for a new password reset."""
    raw_token = secrets.token_hex(32)
    return raw_token, hash_reset_token(raw_token)
