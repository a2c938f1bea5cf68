"""Top-level API router, mounted under /api by main."""

from fastapi import APIRouter

from avis.api.routes import auth, channels, feedback, metrics, users

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(channels.router, prefix="/channels", tags=["channels"])
api_router.include_router(feedback.router, prefix="/feedback", tags=["feedback"])
api_router.include_router(metrics.router, prefix="/metrics", tags=["metrics"])
