"""Service-level exceptions.

Services raise these for validation and state-precondition failures.
The API layer maps each one onto an HTTP status with a safe message.
"""

from fastapi import status


class ServiceError(Exception):
    """Base exception for service operations."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "ServiceError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BadRequestError(ServiceError):
    """Request is well-formed but not acceptable in the current state."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "BadRequest"


class UnauthorizedError(ServiceError):
    """Missing, invalid or rejected credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class NotFoundError(ServiceError):
    """Entity not found."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "NotFound"


class ConflictError(ServiceError):
    """Entity already exists."""

    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"
