"""Core utilities: logging, exceptions, security, dependencies."""

from avis.core.exceptions import AvisError
from avis.core.logging import get_logger, setup_logging

__all__ = [
    "AvisError",
    "get_logger",
    "setup_logging",
]
