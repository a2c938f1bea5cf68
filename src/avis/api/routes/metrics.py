"""Load-test metrics relay into a Redis hash."""

from datetime import datetime, timezone
from typing import Any

import orjson
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from avis.core.dependencies import RedisDep, SettingsDep
from avis.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


class MetricsPayload(BaseModel):
    timestamp: str | None = None
    # Any so that a non-object gets the 400 below instead of a 422
    metrics: Any = None


class MetricsStored(BaseModel):
    success: bool
    message: str
    timestamp: str


def _decode(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


@router.post("", response_model=MetricsStored, status_code=201)
async def store_metrics(
    body: MetricsPayload, redis: RedisDep, settings: SettingsDep
) -> MetricsStored:
    if not isinstance(body.metrics, dict):
        raise HTTPException(400, detail="Request body must contain a 'metrics' object")

    timestamp = body.timestamp or datetime.now(timezone.utc).isoformat()
    await redis.hset(settings.metrics_key, timestamp, orjson.dumps(body.metrics))
    logger.info("Metrics stored", timestamp=timestamp, fields=len(body.metrics))
    return MetricsStored(success=True, message="Metrics stored", timestamp=timestamp)


@router.get("")
async def get_metrics(redis: RedisDep, settings: SettingsDep) -> dict[str, Any]:
    raw = await redis.hgetall(settings.metrics_key)
    results: dict[str, Any] = {}
    for key, value in raw.items():
        try:
            results[_decode(key)] = orjson.loads(value)
        except orjson.JSONDecodeError:
            logger.warning("Skipping unparseable metrics entry", timestamp=_decode(key))
    return dict(sorted(results.items()))
