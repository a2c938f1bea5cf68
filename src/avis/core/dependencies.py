"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from typing import Annotated

import asyncpg
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis

from avis.config import Settings, get_settings
from avis.core.exceptions import InvalidTokenError
from avis.core.logging import get_logger
from avis.core.security import decode_access_token
from avis.storage.database import Database, get_database
from avis.storage.redis import MockRedis, get_redis

logger = get_logger(__name__)

# auto_error=False so a missing header yields our 401 rather than FastAPI's 403
_bearer = HTTPBearer(auto_error=False)

# Type aliases for cleaner dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_db() -> Database:
    """Get database dependency."""
    return get_database()


DbDep = Annotated[Database, Depends(get_db)]
RedisDep = Annotated[Redis | MockRedis, Depends(get_redis)]


async def get_current_user(
    settings: SettingsDep,
    db: DbDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> asyncpg.Record:
    """Resolve the authenticated user from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        user_id = decode_access_token(credentials.credentials, settings)
    except InvalidTokenError as e:
        logger.debug("Rejected token", reason=e.message)
        raise HTTPException(status_code=401, detail=e.message)

    user = await db.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user


CurrentUserDep = Annotated[asyncpg.Record, Depends(get_current_user)]
