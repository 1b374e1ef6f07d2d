"""Domain error taxonomy shared by every app.

Handlers map these to HTTP responses; services raise them and never swallow
them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    DATABASE_ERROR = "DATABASE_ERROR"

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    DUPLICATE_BOOKING = "DUPLICATE_BOOKING"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    PAYMENT_REFERENCE_EXISTS = "PAYMENT_REFERENCE_EXISTS"
    LOCK_TIMEOUT = "LOCK_TIMEOUT"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


@dataclass(eq=False)
class ValidationError(DomainError):
    """Bad input or unmet precondition. Not retryable without new input."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    message: str = "Invalid request"
    errors: list[dict[str, Any]] = field(default_factory=list)


@dataclass(eq=False)
class NotFoundError(DomainError):
    """A referenced entity does not exist."""

    code: ErrorCode = ErrorCode.NOT_FOUND
    message: str = "Resource not found"


@dataclass(eq=False)
class ConflictError(DomainError):
    """Capacity, duplicate or double-payment conflicts.

    ``retryable`` is set when re-reading state and trying again may succeed,
    e.g. after a lock wait timed out.
    """

    code: ErrorCode = ErrorCode.CONFLICT
    message: str = "Conflict"
    retryable: bool = False


@dataclass(eq=False)
class InvalidStateTransition(DomainError):
    """An illegal lifecycle move was attempted."""

    code: ErrorCode = ErrorCode.INVALID_STATE_TRANSITION
    message: str = "Invalid state transition"


@dataclass(eq=False)
class DatabaseError(DomainError):
    """Transaction or infrastructure failure. Retry with backoff."""

    code: ErrorCode = ErrorCode.DATABASE_ERROR
    message: str = "Database error occurred"


@dataclass(eq=False)
class ExternalServiceError(DomainError):
    """A collaborator outside the core (payment provider) failed."""

    code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR
    message: str = "External service error"


class InvalidIdError(ValidationError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, label: str = "ID") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {label} format",
        )
