"""HTTP API: auth, users, channels, feedback, metrics."""

from avis.api.router import api_router

__all__ = ["api_router"]
