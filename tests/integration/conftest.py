"""Shared fixtures for integration tests.

These run the real application against live PostgreSQL and Redis, using
DATABASE_URL and REDIS_URL from the environment (or .env).
"""

from collections.abc import AsyncIterator

import httpx
import pytest

from avis.config import get_settings
from avis.storage import close_database, close_redis, init_database, init_redis
from avis.storage.database import Database


@pytest.fixture
async def live_db() -> AsyncIterator[Database]:
    """Connect the global database and make sure the schema exists."""
    settings = get_settings()
    db = await init_database(settings.database_url)
    await db.ensure_schema()
    await init_redis(settings.redis_url)
    try:
        yield db
    finally:
        await close_redis()
        await close_database()


@pytest.fixture
async def live_client(live_db: Database) -> AsyncIterator[httpx.AsyncClient]:
    from avis.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
