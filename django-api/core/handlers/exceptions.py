"""Maps domain errors to HTTP responses.

Only the error code and the user-safe message leave the process; internal
details stay in the logs.
"""

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.errors import (
    ConflictError,
    DatabaseError,
    DomainError,
    ErrorCode,
    ExternalServiceError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidStateTransition, status.HTTP_409_CONFLICT),
    (DatabaseError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ExternalServiceError, status.HTTP_502_BAD_GATEWAY),
)


def status_for(error: DomainError) -> int:
    for error_type, http_status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(error: DomainError) -> dict:
    body = {"code": error.code.value, "message": error.message}
    if isinstance(error, ValidationError) and error.errors:
        body["errors"] = error.errors
    if isinstance(error, ConflictError) and error.retryable:
        body["retryable"] = True
    return {"error": body}


def domain_exception_handler(exc, context):
    """DRF exception handler that understands DomainError."""
    if isinstance(exc, DomainError):
        http_status = status_for(exc)
        if http_status >= 500:
            logger.error("Request failed: %s", exc)
        return Response(error_body(exc), status=http_status)
    if isinstance(exc, exceptions.ValidationError):
        # Malformed request bodies share the domain error envelope.
        body = {
            "code": ErrorCode.VALIDATION_ERROR.value,
            "message": "Invalid request",
            "fields": exc.detail,
        }
        return Response({"error": body}, status=status.HTTP_400_BAD_REQUEST)
    return exception_handler(exc, context)
