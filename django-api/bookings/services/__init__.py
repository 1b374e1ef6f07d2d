from bookings.services.booking_service import BookingService, build_booking_service

__all__ = ["BookingService", "build_booking_service"]
