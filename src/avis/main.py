"""FastAPI application entry point."""

import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from avis import __version__
from avis.api import api_router
from avis.api.routes.auth import limiter
from avis.config import get_settings
from avis.core.dependencies import DbDep, RedisDep
from avis.core.logging import bind_request, get_logger, setup_logging
from avis.storage import close_database, close_redis, init_database, init_redis, is_mock_redis

logger = get_logger(__name__)

# Requests slower than this are logged at warning level
SLOW_REQUEST_MS = 1000


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the database pool and the metrics cache for the app lifetime."""
    settings = get_settings()
    setup_logging(settings)

    db = await init_database(settings.database_url)
    await db.ensure_schema()
    await init_redis(settings.redis_url)
    logger.info("Avis ready", env=settings.env, redis_mock=is_mock_redis())

    try:
        yield
    finally:
        await close_redis()
        await close_database()
        logger.info("Avis stopped")


app = FastAPI(
    title="Avis",
    description="Feedback collection API with sentiment scoring",
    version=__version__,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Bind a request id into the log context and log each request with its duration."""
    request_id = bind_request(
        request.method, request.url.path, request.headers.get("x-request-id")
    )
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 1)

    log = logger.warning if duration_ms > SLOW_REQUEST_MS else logger.info
    log("Request handled", status=response.status_code, duration_ms=duration_ms)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and hide details outside development."""
    logger.exception("Unhandled error", method=request.method, path=request.url.path)
    content: dict[str, str] = {"detail": "Internal server error"}
    if get_settings().is_development:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# Infrastructure (no prefix, not versioned)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check: always ok if the process is running."""
    return {"status": "ok"}


@app.get("/ready")
async def ready(redis: RedisDep, db: DbDep) -> dict[str, str]:
    """Readiness check: verifies the database and Redis answer."""
    checks: dict[str, str] = {}
    try:
        await redis.ping()
        checks["redis"] = "mock" if is_mock_redis() else "ok"
    except Exception:
        checks["redis"] = "error"
    try:
        await db.fetchval("SELECT 1")
        checks["db"] = "ok"
    except Exception:
        checks["db"] = "error"
    status = "ready" if all(v != "error" for v in checks.values()) else "not_ready"
    return {"status": status, **checks}


# Domain API
app.include_router(api_router, prefix="/api")
