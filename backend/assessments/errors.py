"""
Custom error classes for the assessment engine.

Every rejected operation raises an AppError subclass so the exception handler can
render one consistent JSON shape. None of these are retried by the engine itself.
"""

from typing import Any, Dict, Optional
from django.utils import timezone

from .error_codes import ErrorCodes, get_status_code


class AppError(Exception):
    """
    Custom application error class for standardized error handling.

    This class ensures all errors follow a consistent format:
    - code: Standardized error code from ErrorCodes
    - message: User-friendly error message
    - status_code: HTTP status code
    - details: Optional additional error details for debugging

    Usage:
        raise AppError(
            code=ErrorCodes.INVALID_INPUT,
            message="test_id is required",
            details={"field": "test_id"}
        )
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code or get_status_code(code)
        self.details = details or {}
        self.timestamp = timezone.now().isoformat()

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary format for JSON serialization."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp,
                "details": self.details if self.details else None
            }
        }

    def __str__(self) -> str:
        return f"AppError({self.code}): {self.message}"

    def __repr__(self) -> str:
        return f"AppError(code='{self.code}', message='{self.message}', status_code={self.status_code})"


class ValidationError(AppError):
    """Input validation failure, e.g. an option index outside the question's range.

    Defaults to ErrorCodes.INVALID_INPUT; callers pass a narrower code where one exists.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: Optional[str] = None,
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field

        super().__init__(
            code=code or ErrorCodes.INVALID_INPUT,
            message=message,
            details=error_details,
        )


class AuthenticationError(AppError):
    """No caller identity."""

    def __init__(self, message: str = "Authentication required", code: str = ErrorCodes.AUTH_REQUIRED):
        super().__init__(
            code=code,
            message=message
        )


class AuthorizationError(AppError):
    """Caller is known but not allowed to perform the operation."""

    def __init__(self, message: str = "Access forbidden", code: str = ErrorCodes.AUTH_FORBIDDEN):
        super().__init__(
            code=code,
            message=message
        )


class NotFoundError(AppError):
    """Specific error for resource not found."""

    def __init__(self, message: str = "Resource not found", resource_type: Optional[str] = None):
        code = ErrorCodes.NOT_FOUND
        if resource_type:
            # Map specific resource types to specific error codes
            resource_code_map = {
                "user": ErrorCodes.USER_NOT_FOUND,
                "test": ErrorCodes.TEST_NOT_FOUND,
                "question": ErrorCodes.QUESTION_NOT_FOUND,
                "attempt": ErrorCodes.ATTEMPT_NOT_FOUND,
                "batch": ErrorCodes.BATCH_NOT_FOUND,
            }
            code = resource_code_map.get(resource_type, ErrorCodes.NOT_FOUND)

        super().__init__(
            code=code,
            message=message
        )


class InvalidStateError(AppError):
    """Operation not allowed in the resource's current state."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.INVALID_STATE,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            code=code,
            message=message,
            details=details
        )
