"""Redis client connection.

Redis only backs the metrics relay, so the service keeps running when it is
unreachable: ``init_redis`` falls back to ``MockRedis``, which accepts writes
and returns empty reads.
"""

from typing import Any

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionFailure
from redis.exceptions import TimeoutError as RedisTimeout

from avis.core.logging import get_logger

logger = get_logger(__name__)


class MockRedis:
    """In-memory stand-in used when Redis is unreachable. Stores nothing."""

    async def ping(self) -> bool:
        return True

    async def get(self, name: str) -> bytes | None:
        return None

    async def set(self, name: str, value: Any, **kwargs: Any) -> bool:
        return True

    async def delete(self, *names: str) -> int:
        return 1

    async def exists(self, *names: str) -> int:
        return 0

    async def keys(self, pattern: str = "*") -> list[bytes]:
        return []

    async def hset(self, name: str, key: str | None = None, value: Any = None, **kwargs: Any) -> int:
        return 0

    async def hget(self, name: str, key: str) -> bytes | None:
        return None

    async def hkeys(self, name: str) -> list[bytes]:
        return []

    async def hgetall(self, name: str) -> dict[bytes, bytes]:
        return {}

    async def aclose(self) -> None:
        return None


# Global Redis instance (initialized in lifespan)
_redis: Redis | MockRedis | None = None


def get_redis() -> Redis | MockRedis:
    """Get the global Redis instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized")
    return _redis


def is_mock_redis() -> bool:
    """Return True if the mock fallback is installed."""
    return isinstance(_redis, MockRedis)


async def init_redis(redis_url: str) -> Redis | MockRedis:
    """Initialize the global Redis instance, falling back to MockRedis."""
    global _redis
    client = Redis.from_url(redis_url, decode_responses=False)
    try:
        # Test connection
        pong = client.ping()
        if hasattr(pong, "__await__"):
            await pong
    except (RedisConnectionFailure, RedisTimeout, OSError) as e:
        logger.warning("Redis unreachable, using mock client", error=str(e))
        await client.aclose()
        _redis = MockRedis()
        return _redis

    _redis = client
    logger.info("Redis connected")
    return _redis


async def close_redis() -> None:
    """Close the global Redis instance."""
    global _redis
    if _redis:
        try:
            await _redis.aclose()
            logger.info("Redis disconnected")
        except (RedisConnectionFailure, OSError) as e:
            logger.error("Redis close failed", error=str(e))
        _redis = None
