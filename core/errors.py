"""
Error taxonomy shared by the auth layer and the HTTP handlers.

Every ``AppError`` carries a client-safe message and the HTTP status it maps
to.  Nothing else about the failure is ever sent to the client.
"""

from __future__ import annotations

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 422
    message = "Invalid request"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class UnauthorizedError(AuthError):
    """No bearer token was presented."""


class ForbiddenError(AuthError):
    """A token was presented but is malformed, forged or expired."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid token"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Resource already exists"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class InternalError(AppError):
    pass


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""


class HashingError(RuntimeError):
    """The password hashing primitive failed."""
