"""Storage layer: PostgreSQL (asyncpg), Redis."""

from avis.storage.database import Database, close_database, get_database, init_database
from avis.storage.redis import MockRedis, close_redis, get_redis, init_redis, is_mock_redis

__all__ = [
    "Database",
    "MockRedis",
    "close_database",
    "close_redis",
    "get_database",
    "get_redis",
    "init_database",
    "init_redis",
    "is_mock_redis",
]
