"""Domain errors raised by the service layer.

Each error carries the HTTP status the API maps it to; the mapping itself
lives in a single exception handler registered on the application.
"""
from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Base class for errors raised by services."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UnauthorizedError(ServiceError):
    """Bad credentials or token. Message stays generic."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class CredentialProcessingError(ServiceError):
    """Password verification or token signing failed."""

    default_message = "Unable to process credentials"
