"""Application-specific exceptions for consistent error handling.

Services raise these directly; the global handlers in ``app.core.errors``
render them as ``{error_code, message, details, request_id}``.
"""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Application error with standardized error code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | list[Any] | None = None,
    ):
        """Initialize application error."""
        super().__init__(
            status_code=status_code,
            detail={
                "code": code,
                "message": message,
                "details": details,
            },
        )
        self.code = code
        self.message = message
        self.details = details


class InvalidArgumentError(AppError):
    """Bad input, rejected before any I/O."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, "INVALID_ARGUMENT", message, details)


class NotFoundError(AppError):
    """Missing current selection or unknown session."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(status.HTTP_404_NOT_FOUND, "NOT_FOUND", message, details)


class ConflictError(AppError):
    """Lost a race against a concurrent writer. Safe to retry."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "CONFLICT",
            message,
            {**(details or {}), "retryable": True},
        )


class DataIntegrityError(AppError):
    """Stored state references rows that no longer exist."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, "DATA_INTEGRITY", message, details)

