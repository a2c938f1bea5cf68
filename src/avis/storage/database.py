"""PostgreSQL database connection using raw asyncpg."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, cast
from uuid import UUID

import asyncpg

from avis.core.exceptions import DatabaseConnectionError
from avis.core.logging import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
CREATE SCHEMA IF NOT EXISTS avis;

CREATE TABLE IF NOT EXISTS avis.users (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS avis.channels (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name TEXT NOT NULL UNIQUE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS avis.feedback (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    text TEXT NOT NULL,
    sentiment DOUBLE PRECISION NOT NULL DEFAULT 0,
    channel_id UUID REFERENCES avis.channels (id) ON DELETE SET NULL,
    user_id UUID REFERENCES avis.users (id) ON DELETE SET NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS feedback_user_id_idx ON avis.feedback (user_id);
CREATE INDEX IF NOT EXISTS feedback_channel_id_idx ON avis.feedback (channel_id);
CREATE INDEX IF NOT EXISTS feedback_created_at_idx ON avis.feedback (created_at DESC);
"""

# Feedback rows are always returned with their channel and uploader names
_FEEDBACK_SELECT = """
    SELECT f.id, f.text, f.sentiment, f.created_at, f.user_id,
           COALESCE(c.name, 'unknown') AS channel,
           u.name AS user_name
    FROM feedback f
    LEFT JOIN channels c ON c.id = f.channel_id
    LEFT JOIN users u ON u.id = f.user_id
"""

_USER_PUBLIC_COLUMNS = "id, name, email, created_at, updated_at"


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _affected_rows(status: str) -> int:
    """Parse the row count out of an asyncpg status string like 'DELETE 3'."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError):
        return 0


class Database:
    """Async PostgreSQL database wrapper using asyncpg."""

    def __init__(self, dsn: str, min_size: int = 5, max_size: int = 20) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool: asyncpg.Pool[asyncpg.Record] | None = None

    async def connect(self) -> None:
        """Create connection pool."""
        # Convert SQLAlchemy-style DSN to asyncpg format
        dsn = self._dsn.replace("postgresql+asyncpg://", "postgresql://")

        async def init_connection(conn: asyncpg.Connection[asyncpg.Record]) -> None:
            """Initialize each connection with avis schema search_path."""
            await conn.execute("SET search_path TO avis, public")

        try:
            self._pool = await asyncpg.create_pool(
                dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                init=init_connection,
            )
        except (OSError, asyncpg.PostgresError) as e:
            raise DatabaseConnectionError(f"Could not connect to PostgreSQL: {e}") from e
        logger.debug("Database pool created", min_size=self._min_size, max_size=self._max_size)

    async def disconnect(self) -> None:
        """Close connection pool."""
        if self._pool:
            await self._pool.close()
            logger.debug("Database pool closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection[asyncpg.Record]]:
        """Acquire a connection from the pool."""
        if not self._pool:
            raise RuntimeError("Database not connected. Call connect() first.")
        async with self._pool.acquire() as conn:
            yield conn

    async def execute(self, query: str, *args: Any) -> str:
        """Execute a query and return status."""
        async with self.acquire() as conn:
            result = await conn.execute(query, *args)
            return cast(str, result)

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        """Fetch multiple rows."""
        async with self.acquire() as conn:
            result = await conn.fetch(query, *args)
            return list(result)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        """Fetch a single row."""
        async with self.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        """Fetch a single value."""
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args)

    async def ensure_schema(self) -> None:
        """Create the avis schema and tables if they do not exist."""
        await self.execute(SCHEMA_SQL)
        logger.debug("Database schema ensured")

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def create_user(self, name: str, email: str, password_hash: str) -> asyncpg.Record:
        """Insert a user.

        Raises:
            asyncpg.UniqueViolationError: If the email is already registered.
        """
        query = f"""
            INSERT INTO users (name, email, password)
            VALUES ($1, $2, $3)
            RETURNING {_USER_PUBLIC_COLUMNS}
        """
        row = await self.fetchrow(query, name, email, password_hash)
        if row is None:
            raise RuntimeError(f"User insert returned no row for {email}")
        logger.info("User created", user_id=str(row["id"]))
        return row

    async def get_user_by_email(self, email: str) -> asyncpg.Record | None:
        """Get a user by email, including the password hash."""
        return await self.fetchrow(
            f"SELECT {_USER_PUBLIC_COLUMNS}, password FROM users WHERE email = $1", email
        )

    async def get_user_by_id(self, user_id: UUID) -> asyncpg.Record | None:
        """Get a user by id, without the password hash."""
        return await self.fetchrow(f"SELECT {_USER_PUBLIC_COLUMNS} FROM users WHERE id = $1", user_id)

    async def list_users(self) -> list[asyncpg.Record]:
        return await self.fetch(f"SELECT {_USER_PUBLIC_COLUMNS} FROM users ORDER BY created_at")

    async def delete_user(self, user_id: UUID) -> bool:
        """Delete a user. Their feedback is kept with no uploader.

        Returns:
            True if a user was deleted.
        """
        status = await self.execute("DELETE FROM users WHERE id = $1", user_id)
        deleted = _affected_rows(status) > 0
        if deleted:
            logger.info("User deleted", user_id=str(user_id))
        return deleted

    # -------------------------------------------------------------------------
    # Channels
    # -------------------------------------------------------------------------

    async def list_channels(self) -> list[asyncpg.Record]:
        return await self.fetch("SELECT id, name, created_at FROM channels ORDER BY name")

    async def get_channel(self, channel_id: UUID) -> asyncpg.Record | None:
        return await self.fetchrow(
            "SELECT id, name, created_at FROM channels WHERE id = $1", channel_id
        )

    async def get_channel_by_name(self, name: str) -> asyncpg.Record | None:
        return await self.fetchrow(
            "SELECT id, name, created_at FROM channels WHERE name = $1", name
        )

    async def create_channel(self, name: str) -> asyncpg.Record | None:
        """Create a channel.

        Returns:
            The new channel, or None if a channel with that name exists.
        """
        query = """
            INSERT INTO channels (name)
            VALUES ($1)
            ON CONFLICT (name) DO NOTHING
            RETURNING id, name, created_at
        """
        row = await self.fetchrow(query, name)
        if row is not None:
            logger.info("Channel created", channel=name)
        return row

    async def get_or_create_channel(self, name: str) -> asyncpg.Record:
        """Get a channel by name, creating it on first use."""
        # The no-op update makes RETURNING yield the existing row on conflict
        query = """
            INSERT INTO channels (name)
            VALUES ($1)
            ON CONFLICT (name) DO UPDATE SET name = EXCLUDED.name
            RETURNING id, name, created_at, (xmax = 0) AS is_new
        """
        row = await self.fetchrow(query, name)
        if row is None:
            raise RuntimeError(f"Channel upsert returned no row for {name!r}")
        if row["is_new"]:
            logger.info("Channel created", channel=name)
        return row

    # -------------------------------------------------------------------------
    # Feedback
    # -------------------------------------------------------------------------

    async def insert_feedback(
        self,
        channel_id: UUID,
        text: str,
        user_id: UUID,
        sentiment: float,
    ) -> asyncpg.Record:
        """Insert a feedback item.

        Args:
            channel_id: Channel the feedback is filed under
            text: Feedback text
            user_id: Uploader
            sentiment: Score in [-1, 1]

        Returns:
            The inserted row (id, text, sentiment, created_at, user_id, channel_id)
        """
        query = """
            INSERT INTO feedback (channel_id, text, user_id, sentiment)
            VALUES ($1, $2, $3, $4)
            RETURNING id, text, sentiment, created_at, user_id, channel_id
        """
        row = await self.fetchrow(query, channel_id, text, user_id, sentiment)
        if row is None:
            raise RuntimeError("Feedback insert returned no row")
        logger.debug(
            "Feedback inserted",
            id=str(row["id"]),
            channel_id=str(channel_id),
            sentiment=sentiment,
        )
        return row

    async def get_feedback(self, feedback_id: UUID) -> asyncpg.Record | None:
        return await self.fetchrow(f"{_FEEDBACK_SELECT} WHERE f.id = $1", feedback_id)

    async def list_feedback(self, user_id: UUID | None = None) -> list[asyncpg.Record]:
        """List feedback newest first, optionally only one user's."""
        if user_id is None:
            return await self.fetch(f"{_FEEDBACK_SELECT} ORDER BY f.created_at DESC")
        return await self.fetch(
            f"{_FEEDBACK_SELECT} WHERE f.user_id = $1 ORDER BY f.created_at DESC", user_id
        )

    async def search_feedback(self, text: str) -> list[asyncpg.Record]:
        """Case-insensitive substring search over feedback text."""
        query = f"""
            {_FEEDBACK_SELECT}
            WHERE f.text ILIKE '%' || $1 || '%' ESCAPE '\\'
            ORDER BY f.created_at DESC
        """
        return await self.fetch(query, _escape_like(text))

    async def list_feedback_by_channel(self, channel_id: UUID) -> list[asyncpg.Record]:
        return await self.fetch(
            f"{_FEEDBACK_SELECT} WHERE f.channel_id = $1 ORDER BY f.created_at DESC", channel_id
        )

    async def delete_feedback(self, feedback_id: UUID) -> bool:
        status = await self.execute("DELETE FROM feedback WHERE id = $1", feedback_id)
        return _affected_rows(status) > 0

    async def delete_user_feedback(self, feedback_id: UUID, user_id: UUID) -> bool:
        """Delete a feedback item only if it belongs to user_id."""
        status = await self.execute(
            "DELETE FROM feedback WHERE id = $1 AND user_id = $2", feedback_id, user_id
        )
        return _affected_rows(status) > 0

    async def delete_all_feedback(self) -> int:
        """Delete every feedback item.

        Returns:
            Number of deleted rows
        """
        status = await self.execute("DELETE FROM feedback")
        count = _affected_rows(status)
        logger.warning("All feedback deleted", count=count)
        return count


# Global database instance (initialized in lifespan)
_db: Database | None = None


def get_database() -> Database:
    """Get the global database instance."""
    if _db is None:
        raise RuntimeError("Database not initialized")
    return _db


async def init_database(dsn: str) -> Database:
    """Initialize the global database instance."""
    global _db
    _db = Database(dsn)
    await _db.connect()
    return _db


async def close_database() -> None:
    """Close the global database instance."""
    global _db
    if _db:
        await _db.disconnect()
        _db = None
