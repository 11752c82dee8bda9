"""
Error handling utilities for API handlers.

Provides standardized error responses with error codes and HTTP statuses.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Application error with error code and message.

    Raised anywhere below the handler boundary and converted into the
    JSON error envelope by the router.
    """

    def __init__(self, error_code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def status_code(self) -> int:
        """HTTP status for this error."""
        return status_for(self.error_code)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the JSON error envelope."""
        return {
            "errorCode": self.error_code,
            "message": self.message,
            **self.details,
        }


# Common error codes
class ErrorCode:
    """Standard error codes for the application."""

    # Authorization errors
    FORBIDDEN = "FORBIDDEN"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_JSON = "INVALID_JSON"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


_STATUS_BY_CODE: Dict[str, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.INVALID_JSON: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.METHOD_NOT_ALLOWED: 405,
    ErrorCode.ALREADY_EXISTS: 409,
}

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


def status_for(error_code: str) -> int:
    """Map an error code to its HTTP status (500 for anything unknown)."""
    return _STATUS_BY_CODE.get(error_code, 500)


def handle_error(error: Exception) -> Dict[str, Any]:
    """
    Convert exception to standardized error response.

    Args:
        error: Exception to handle

    Returns:
        Error dictionary for the JSON envelope
    """
    if isinstance(error, AppError):
        return error.to_dict()

    # Unexpected error - caller logs, client gets a generic message
    return {
        "errorCode": ErrorCode.INTERNAL_ERROR,
        "message": GENERIC_ERROR_MESSAGE,
    }
