"""
Centralized error codes for the assessment engine.

This module defines all standardized error codes used throughout the application.
Each error code should be descriptive and mapped to appropriate HTTP status codes.
"""

class ErrorCodes:
    """
    Centralized error code definitions.

    Format: ERROR_CATEGORY_SPECIFIC_ISSUE
    """

    # Authentication & Authorization Errors (401-403)
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_TOKEN_INVALID = "AUTH_TOKEN_INVALID"
    AUTH_FORBIDDEN = "AUTH_FORBIDDEN"
    ACCOUNT_SUSPENDED = "ACCOUNT_SUSPENDED"
    CROSS_ORGANIZATION_ACCESS = "CROSS_ORGANIZATION_ACCESS"

    # Input Validation Errors (400)
    INVALID_INPUT = "INVALID_INPUT"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_OPTION_INDEX = "INVALID_OPTION_INDEX"
    QUESTION_NOT_IN_TEST = "QUESTION_NOT_IN_TEST"

    # Resource Errors (404)
    NOT_FOUND = "NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    TEST_NOT_FOUND = "TEST_NOT_FOUND"
    QUESTION_NOT_FOUND = "QUESTION_NOT_FOUND"
    ATTEMPT_NOT_FOUND = "ATTEMPT_NOT_FOUND"
    BATCH_NOT_FOUND = "BATCH_NOT_FOUND"

    # State Errors (409)
    INVALID_STATE = "INVALID_STATE"
    ATTEMPT_ALREADY_SUBMITTED = "ATTEMPT_ALREADY_SUBMITTED"
    ATTEMPT_START_CONFLICT = "ATTEMPT_START_CONFLICT"
    TEST_NOT_PUBLISHED = "TEST_NOT_PUBLISHED"
    ATTEMPT_NOT_SUBMITTED = "ATTEMPT_NOT_SUBMITTED"

    # Rate Limiting (429)
    RATE_LIMITED = "RATE_LIMITED"

    # Server Errors (500)
    SERVER_ERROR = "SERVER_ERROR"


# Error code to HTTP status mapping
ERROR_CODE_STATUS_MAP = {
    # Authentication & Authorization
    ErrorCodes.AUTH_REQUIRED: 401,
    ErrorCodes.AUTH_TOKEN_INVALID: 401,
    ErrorCodes.AUTH_FORBIDDEN: 403,
    ErrorCodes.ACCOUNT_SUSPENDED: 403,
    ErrorCodes.CROSS_ORGANIZATION_ACCESS: 403,

    # Input Validation
    ErrorCodes.INVALID_INPUT: 400,
    ErrorCodes.MISSING_REQUIRED_FIELD: 400,
    ErrorCodes.INVALID_OPTION_INDEX: 400,
    ErrorCodes.QUESTION_NOT_IN_TEST: 400,

    # Resource Errors
    ErrorCodes.NOT_FOUND: 404,
    ErrorCodes.USER_NOT_FOUND: 404,
    ErrorCodes.TEST_NOT_FOUND: 404,
    ErrorCodes.QUESTION_NOT_FOUND: 404,
    ErrorCodes.ATTEMPT_NOT_FOUND: 404,
    ErrorCodes.BATCH_NOT_FOUND: 404,

    # State
    ErrorCodes.INVALID_STATE: 409,
    ErrorCodes.ATTEMPT_ALREADY_SUBMITTED: 409,
    ErrorCodes.ATTEMPT_START_CONFLICT: 409,
    ErrorCodes.TEST_NOT_PUBLISHED: 409,
    ErrorCodes.ATTEMPT_NOT_SUBMITTED: 409,

    # Rate Limiting
    ErrorCodes.RATE_LIMITED: 429,

    # Server Errors
    ErrorCodes.SERVER_ERROR: 500,
}


def get_status_code(error_code: str) -> int:
    """
    Get HTTP status code for a given error code.

    Args:
        error_code: The error code string

    Returns:
        HTTP status code (defaults to 500 if not found)
    """
    return ERROR_CODE_STATUS_MAP.get(error_code, 500)
