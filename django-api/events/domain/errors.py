"""Domain errors for the events module."""

from uuid import UUID

from core.domain.errors import ConflictError, ErrorCode, NotFoundError


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: UUID | str) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class CapacityExceededError(ConflictError):
    """Raised when an event cannot fit the requested seats."""

    def __init__(self, event_id: UUID, requested: int, remaining: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message=f"Insufficient capacity. Only {remaining} spot(s) available",
        )
        self.event_id = event_id
        self.requested = requested
        self.remaining = remaining
