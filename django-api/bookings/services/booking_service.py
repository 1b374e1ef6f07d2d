"""Booking service - seat reservation and cancellation.

Every seat that leaves an event's remaining capacity is tied 1:1 to a Booking
row written in the same transaction, and every cancellation gives the seats
back in the same transaction that flips the status.
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from django.conf import settings
from django.utils import timezone

from bookings.domain import (
    Booking,
    BookingNotFoundError,
    BookingStatus,
    DuplicateBookingError,
)
from bookings.stores import BookingStore, DjangoBookingStore
from core.db import locked_transaction
from core.domain.errors import ValidationError
from core.domain.value_objects import parse_id
from core.notifications import Notifier, get_notifier, notify_on_commit
from events.domain import EventNotFoundError
from events.stores import DjangoEventStore, DjangoInventoryLedger, EventStore, InventoryLedger

logger = logging.getLogger(__name__)


class BookingService:
    """Service for event bookings."""

    def __init__(
        self,
        store: BookingStore,
        events: EventStore,
        ledger: InventoryLedger,
        notifier: Notifier | None = None,
        max_seats: int | None = None,
    ) -> None:
        self._store = store
        self._events = events
        self._ledger = ledger
        self._notifier = notifier or get_notifier()
        self._max_seats = max_seats or settings.COMMERCE["MAX_SEATS_PER_BOOKING"]

    def reserve(self, user_id: str | UUID, event_id: str | UUID, seats: int = 1) -> Booking:
        """Book ``seats`` at an event for a user.

        Raises:
            ValidationError: Event unpublished or started, or seats out of range.
            EventNotFoundError: If the event does not exist.
            DuplicateBookingError: If the user already has an active booking.
            CapacityExceededError: If the event cannot fit the seats.
        """
        user = parse_id(user_id, "user ID")
        event_uuid = parse_id(event_id, "event ID")
        self._validate_seats(seats)

        try:
            with locked_transaction(conflict=DuplicateBookingError()):
                event = self._events.lock_event(event_uuid)
                if event is None:
                    raise EventNotFoundError(event_uuid)
                if not event.is_published:
                    raise ValidationError(message="Event is not available for booking")
                if event.has_started(timezone.now()):
                    raise ValidationError(message="Cannot book past events")
                if self._store.has_active_booking(user, event.id):
                    raise DuplicateBookingError()

                reservation = self._ledger.reserve(event.id, seats)
                booking = self._store.create(user, event.id, seats, event.price)
        except (ValidationError, DuplicateBookingError) as exc:
            logger.warning(
                "Booking rejected: %s",
                exc.message,
                extra={"user_id": str(user), "event_id": str(event_uuid), "seats": seats},
            )
            raise

        logger.info(
            "Booking created",
            extra={
                "booking_id": str(booking.id),
                "event_id": str(booking.event_id),
                "seats": seats,
                "remaining": reservation.remaining_capacity,
            },
        )
        notify_on_commit(
            self._notifier,
            booking.user_id,
            "booking.created",
            {"booking_id": str(booking.id), "event_id": str(booking.event_id), "seats": seats},
        )
        return booking

    def cancel(
        self,
        booking_id: str | UUID,
        user_id: str | UUID,
        order_id: UUID | None = None,
    ) -> Booking:
        """Cancel a booking and give its seats back to the event.

        A booking that is being paid for through an order can only be
        cancelled by that order (``order_id``).

        Raises:
            BookingNotFoundError: If the booking does not exist.
            ValidationError: Not owned by caller, already cancelled, or owned
                by an order.
        """
        booking_uuid = parse_id(booking_id, "booking ID")
        user = parse_id(user_id, "user ID")

        with locked_transaction():
            booking = self._store.lock(booking_uuid)
            if booking is None:
                raise BookingNotFoundError(booking_uuid)
            if booking.user_id != user:
                raise ValidationError(
                    message="You do not have permission to cancel this booking"
                )
            if booking.status is BookingStatus.CANCELLED:
                raise ValidationError(message="Booking is already cancelled")
            if booking.order_id is not None and booking.order_id != order_id:
                raise ValidationError(
                    message="Booking belongs to an order; cancel or refund the order instead"
                )

            cancelled = self._store.set_status(booking.id, BookingStatus.CANCELLED)
            remaining = self._ledger.release(booking.event_id, booking.seats)

        logger.info(
            "Booking cancelled",
            extra={
                "booking_id": str(booking.id),
                "event_id": str(booking.event_id),
                "seats": booking.seats,
                "remaining": remaining,
            },
        )
        notify_on_commit(
            self._notifier,
            booking.user_id,
            "booking.cancelled",
            {"booking_id": str(booking.id), "event_id": str(booking.event_id)},
        )
        return cancelled

    def confirm(self, booking_id: str | UUID) -> Booking:
        """Move a pending booking to confirmed. Capacity is untouched.

        Raises:
            BookingNotFoundError: If the booking does not exist.
            ValidationError: If the booking is not pending.
        """
        booking_uuid = parse_id(booking_id, "booking ID")
        with locked_transaction():
            booking = self._store.lock(booking_uuid)
            if booking is None:
                raise BookingNotFoundError(booking_uuid)
            if booking.status is not BookingStatus.PENDING:
                raise ValidationError(
                    message=f"Cannot confirm a {booking.status.value} booking"
                )
            confirmed = self._store.set_status(booking.id, BookingStatus.CONFIRMED)

        logger.info("Booking confirmed", extra={"booking_id": str(booking.id)})
        return confirmed

    def attach_to_order(self, booking_id: UUID, order_id: UUID) -> Booking:
        with locked_transaction():
            booking = self._store.lock(booking_id)
            if booking is None:
                raise BookingNotFoundError(booking_id)
            if booking.order_id is not None and booking.order_id != order_id:
                raise ValidationError(message="Booking is already part of another order")
            return self._store.attach_order(booking_id, order_id)

    def get_booking(self, booking_id: str | UUID, user_id: str | UUID | None = None) -> Booking:
        """Return a booking, restricted to its owner when ``user_id`` is given."""
        booking_uuid = parse_id(booking_id, "booking ID")
        booking = self._store.get(booking_uuid)
        if booking is None:
            raise BookingNotFoundError(booking_uuid)
        if user_id is not None and booking.user_id != parse_id(user_id, "user ID"):
            raise BookingNotFoundError(booking_uuid)
        return booking

    def list_user_bookings(
        self, user_id: str | UUID, status: BookingStatus | None = None
    ) -> list[Booking]:
        return self._store.list_for_user(parse_id(user_id, "user ID"), status)

    def count_event_bookings(
        self, event_id: str | UUID, status: BookingStatus | None = None
    ) -> int:
        return self._store.count_for_event(parse_id(event_id, "event ID"), status)

    def total_event_seats(
        self,
        event_id: str | UUID,
        statuses: Iterable[BookingStatus] = (BookingStatus.CONFIRMED, BookingStatus.PENDING),
    ) -> int:
        """Total seats held at an event, counting only bookings in ``statuses``."""
        return self._store.seats_for_event(parse_id(event_id, "event ID"), tuple(statuses))

    def _validate_seats(self, seats: int) -> None:
        if seats < 1:
            raise ValidationError(message="Number of seats must be at least 1")
        if seats > self._max_seats:
            raise ValidationError(
                message=f"Cannot book more than {self._max_seats} seats at once"
            )


def build_booking_service(notifier: Notifier | None = None) -> BookingService:
    """Wire a BookingService to the Django stores."""
    return BookingService(
        DjangoBookingStore(),
        DjangoEventStore(),
        DjangoInventoryLedger(),
        notifier=notifier,
    )
