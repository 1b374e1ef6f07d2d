"""Domain errors for the bookings module."""

from uuid import UUID

from core.domain.errors import ConflictError, ErrorCode, NotFoundError


class BookingNotFoundError(NotFoundError):
    """Raised when a booking is not found."""

    def __init__(self, booking_id: UUID | str) -> None:
        super().__init__(code=ErrorCode.BOOKING_NOT_FOUND, message="Booking not found")
        self.booking_id = booking_id


class DuplicateBookingError(ConflictError):
    """Raised when the user already holds a non-cancelled booking for the event."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_BOOKING,
            message="You already have a booking for this event",
        )
