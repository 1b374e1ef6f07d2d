from bookings.domain.errors import BookingNotFoundError, DuplicateBookingError
from bookings.domain.models import Booking, BookingStatus

__all__ = ["Booking", "BookingStatus", "BookingNotFoundError", "DuplicateBookingError"]
