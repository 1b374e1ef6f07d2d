"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from uuid import UUID

from bookings.domain import Booking, BookingStatus
from core.domain.value_objects import Money


class BookingStore(ABC):
    """Interface for booking persistence operations."""

    @abstractmethod
    def get(self, booking_id: UUID) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def lock(self, booking_id: UUID) -> Booking | None:
        """Return a booking and hold its row lock until the transaction ends."""
        ...

    @abstractmethod
    def has_active_booking(self, user_id: UUID, event_id: UUID) -> bool:
        """Check whether the user holds a non-cancelled booking for the event."""
        ...

    @abstractmethod
    def create(
        self, user_id: UUID, event_id: UUID, seats: int, unit_price: Money
    ) -> Booking:
        """Insert a pending booking priced at ``unit_price * seats``."""
        ...

    @abstractmethod
    def set_status(self, booking_id: UUID, status: BookingStatus) -> Booking:
        """Change the status and stamp the status change time."""
        ...

    @abstractmethod
    def attach_order(self, booking_id: UUID, order_id: UUID) -> Booking:
        """Record the order that pays for the booking."""
        ...

    @abstractmethod
    def list_for_user(
        self, user_id: UUID, status: BookingStatus | None = None
    ) -> list[Booking]:
        """Return the user's bookings, newest first."""
        ...

    @abstractmethod
    def count_for_event(self, event_id: UUID, status: BookingStatus | None = None) -> int:
        """Count the event's bookings, optionally only those in ``status``."""
        ...

    @abstractmethod
    def seats_for_event(self, event_id: UUID, statuses: Iterable[BookingStatus]) -> int:
        """Sum the seats held by the event's bookings in any of ``statuses``."""
        ...
