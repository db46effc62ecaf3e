"""
DRF exception handler for the assessment API.

Every rejected request leaves the service as:
    {"error": {"code": ..., "message": ..., "timestamp": ..., "details": ...}}
"""

import logging
import traceback

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework.exceptions import (
    ValidationError as DRFValidationError,
    AuthenticationFailed,
    NotAuthenticated,
    PermissionDenied,
    NotFound,
    MethodNotAllowed,
    ParseError,
    UnsupportedMediaType,
    Throttled
)
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

from .errors import AppError
from .error_codes import ErrorCodes

logger = logging.getLogger(__name__)

# Checked in order; NotAuthenticated must come before AuthenticationFailed
DRF_ERROR_MAP = [
    (NotAuthenticated, ErrorCodes.AUTH_REQUIRED, "Authentication credentials were not provided"),
    ((AuthenticationFailed, InvalidToken, TokenError), ErrorCodes.AUTH_TOKEN_INVALID, "Authentication failed"),
    (PermissionDenied, ErrorCodes.AUTH_FORBIDDEN, "Access forbidden"),
    (NotFound, ErrorCodes.NOT_FOUND, "Resource not found"),
    (DRFValidationError, ErrorCodes.INVALID_INPUT, "Validation failed"),
    (ParseError, ErrorCodes.INVALID_INPUT, "Invalid request format"),
    (UnsupportedMediaType, ErrorCodes.INVALID_INPUT, "Unsupported media type"),
    (MethodNotAllowed, ErrorCodes.INVALID_INPUT, "Method not allowed"),
    (Throttled, ErrorCodes.RATE_LIMITED, "Rate limit exceeded"),
]


def standard_exception_handler(exc, context):
    """
    AppError (raised by the attempt, analytics and leaderboard services) is
    rendered as-is. DRF and simplejwt rejections are mapped through
    DRF_ERROR_MAP. Anything else is a SERVER_ERROR.
    """
    request = context.get('request')
    user_id = getattr(getattr(request, 'user', None), 'user_id', 'anonymous')

    if isinstance(exc, AppError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(f"AppError: {exc.code} - {exc.message}", extra={"user_id": user_id, "details": exc.details})
        return Response(exc.to_dict(), status=exc.status_code)

    drf_response = exception_handler(exc, context)
    if drf_response is not None:
        logger.info(f"Request rejected: {type(exc).__name__} - {exc}", extra={"user_id": user_id})
        code, message = _lookup(exc)
        return Response(
            error_body(code, message, _drf_details(exc, drf_response.data)),
            status=drf_response.status_code
        )

    logger.exception(f"Unhandled exception: {type(exc).__name__} - {exc}", extra={"user_id": user_id})
    return Response(
        error_body(
            ErrorCodes.SERVER_ERROR,
            str(exc) if settings.DEBUG else "An unexpected error occurred",
            {"traceback": traceback.format_exc()} if settings.DEBUG else None
        ),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _lookup(exc):
    for exc_types, code, message in DRF_ERROR_MAP:
        if isinstance(exc, exc_types):
            return code, message
    return ErrorCodes.SERVER_ERROR, "An error occurred"


def _drf_details(exc, data):
    if isinstance(exc, DRFValidationError):
        return {"validation_errors": exc.detail}
    if isinstance(data, dict):
        return data
    if isinstance(data, list):
        return {"errors": data}
    return None


def error_body(code: str, message: str, details=None) -> dict:
    """Error envelope. Field-level validation details are always sent; anything else only under DEBUG."""
    body = {"code": code, "message": message, "timestamp": timezone.now().isoformat()}
    if details and (settings.DEBUG or "validation_errors" in details or "field" in details):
        body["details"] = details
    return {"error": body}
