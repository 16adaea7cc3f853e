"""Typed service errors and their HTTP status codes.

Services raise these; the handlers registered in app.main render them as
``{"error": message}``. Messages are client-safe: never include passwords,
hashes, tokens or secrets.
"""

from fastapi import status


class ServiceError(Exception):
    """Base class for expected, client-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailedError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class InvalidPriorityError(ValidationFailedError):
    default_message = "Invalid priority value"


class CategoryNotFoundError(ValidationFailedError):
    """Referenced category is absent or owned by another account (400, not 404)."""

    default_message = "Category not found"


class ConflictError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"
