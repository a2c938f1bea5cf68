"""Password hashing (bcrypt) and access tokens (JWT)."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING
from uuid import UUID

import bcrypt
import jwt

from avis.core.exceptions import AuthConfigurationError, InvalidTokenError

if TYPE_CHECKING:
    from avis.config import Settings

# bcrypt ignores (or rejects) anything past this many bytes
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def _hash_password_sync(password: str, rounds: int) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def _verify_password_sync(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long password
        return False


async def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with bcrypt off the event loop."""
    return await asyncio.to_thread(_hash_password_sync, password, rounds)


async def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a bcrypt hash off the event loop."""
    return await asyncio.to_thread(_verify_password_sync, password, hashed)


def _secret(settings: Settings) -> str:
    if settings.jwt_secret is None or not settings.jwt_secret.get_secret_value():
        raise AuthConfigurationError("JWT_SECRET is not configured")
    return settings.jwt_secret.get_secret_value()


def create_access_token(user_id: UUID, settings: Settings, now: datetime | None = None) -> str:
    """Issue a signed token carrying the user id."""
    issued = now or datetime.now(timezone.utc)
    payload = {
        "id": str(user_id),
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.jwt_expires_minutes),
    }
    return jwt.encode(payload, _secret(settings), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> UUID:
    """Verify a token and return the user id it carries.

    Raises:
        InvalidTokenError: Bad signature, expired, or no usable ``id`` claim.
        AuthConfigurationError: JWT_SECRET is not configured.
    """
    secret = _secret(settings)
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {e}") from e

    raw_id = payload.get("id")
    if not raw_id:
        raise InvalidTokenError("Invalid token payload")
    try:
        return UUID(str(raw_id))
    except ValueError as e:
        raise InvalidTokenError("Invalid token payload") from e
