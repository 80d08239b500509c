"""
Error taxonomy for the booking service.
Raised in the service layer and mapped to HTTP responses in main.py.
"""

from fastapi import status


class BookingError(Exception):
    """Base exception for expected, user-facing failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Raised when input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(BookingError):
    """Raised when the requested slot already holds an active booking."""

    status_code = status.HTTP_409_CONFLICT


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthError(BookingError):
    status_code = status.HTTP_401_UNAUTHORIZED


class DependencyError(BookingError):
    """Raised when the store or a third-party service cannot be used."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
