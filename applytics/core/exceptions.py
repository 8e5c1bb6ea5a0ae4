"""Custom exceptions for the application."""

from fastapi import HTTPException, status


class TrackerError(Exception):
    """Base exception for tracker errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(TrackerError):
    """Raised when a required field is missing or blank."""

    def __init__(self, field: str, detail: str | None = None):
        self.field = field
        super().__init__(detail or f"Field '{field}' must not be empty")


class NotFoundError(TrackerError):
    """Raised when an operation addresses a nonexistent application."""

    def __init__(self, application_id: int):
        self.application_id = application_id
        super().__init__(f"Application {application_id} not found")


class StorageError(TrackerError):
    """Raised when the underlying database fails."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage failure during {operation}: {detail}")


def bad_request_exception(detail: str = "Invalid request") -> HTTPException:
    """Return a 400 Bad Request exception."""
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def not_found_exception(detail: str = "Resource not found") -> HTTPException:
    """Return a 404 Not Found exception."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def storage_exception(detail: str = "Database error") -> HTTPException:
    """Return a 500 Internal Server Error exception."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )
