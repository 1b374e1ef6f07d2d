from bookings.handlers.views import BookingCancelView, BookingDetailView, BookingListView

__all__ = ["BookingListView", "BookingDetailView", "BookingCancelView"]
