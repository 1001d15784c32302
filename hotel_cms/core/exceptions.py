"""Operational error taxonomy shared by services and routes."""

from typing import Any, Dict, Optional

from fastapi import status


class AppError(Exception):
    """
    Base class for expected (operational) errors.

    The message is safe to return to the caller verbatim; the exception
    handlers in ``hotel_cms.main`` turn it into ``{success: false, message}``
    with ``status_code``.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class UnauthenticatedError(AppError):
    """Missing, invalid or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(AppError):
    """Role or tenant-scope denial."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class NotFoundError(AppError):
    """Identity, website or sub-resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ValidationError(AppError):
    """Payload shape or bounds violated."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class ConflictError(AppError):
    """A concurrent write changed the website document first."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "The resource was modified by another request, please retry"
