"""Domain error types raised by services.

Each error is an ``HTTPException`` so services can raise it directly and the
routes let it propagate with the matching status code.
"""

from fastapi import HTTPException, status


class SeenlogError(HTTPException):
    """Base class for domain failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotFoundError(SeenlogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ValidationFailedError(SeenlogError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid input"


class StateConflictError(SeenlogError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicting state"


class UnauthorizedError(SeenlogError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not allowed"


class DefaultCollectionProtectedError(SeenlogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Can not delete a default collection"


class StorageError(SeenlogError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage failure"
