"""Custom exceptions for Avis."""


class AvisError(Exception):
    """Base exception for all Avis errors."""

    def __init__(self, message: str, *args: object) -> None:
        self.message = message
        super().__init__(message, *args)


# Storage errors
class StorageError(AvisError):
    """Base error for storage layer."""


class DatabaseConnectionError(StorageError):
    """Failed to connect to database."""


# Auth errors
class AuthError(AvisError):
    """Base error for authentication."""


class AuthConfigurationError(AuthError):
    """JWT secret is not configured."""


class InvalidTokenError(AuthError):
    """Access token is malformed, expired or carries no user id."""
