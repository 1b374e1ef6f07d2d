from core.domain.errors import (
    ConflictError,
    DatabaseError,
    DomainError,
    ErrorCode,
    ExternalServiceError,
    InvalidIdError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)
from core.domain.value_objects import Capacity, Money, parse_id

__all__ = [
    "DomainError",
    "ErrorCode",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "InvalidStateTransition",
    "DatabaseError",
    "ExternalServiceError",
    "InvalidIdError",
    "Money",
    "Capacity",
    "parse_id",
]
