"""Tests for BookingService.

Run with: pytest tests/test_booking_service.py -v
"""

import threading
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.db import connection
from django.utils import timezone

from bookings.domain import BookingNotFoundError, BookingStatus, DuplicateBookingError
from bookings.models import Booking as BookingRow
from bookings.stores import DjangoBookingStore
from core.db import locked_transaction
from core.domain.errors import ConflictError, ErrorCode, InvalidIdError, ValidationError
from core.domain.value_objects import Money
from core.notifications import Notifier
from events.domain import CapacityExceededError, EventNotFoundError
from events.models import Event


def remaining(event) -> int:
    return Event.objects.values_list("remaining_capacity", flat=True).get(pk=event.pk)


class FailingNotifier(Notifier):
    def notify(self, user_id, event, payload):
        raise RuntimeError("smtp down")


@pytest.mark.django_db
class TestReserve:
    """Tests for BookingService.reserve."""

    def test_reserve_creates_pending_booking(self, booking_service, make_event, user_id):
        """A booking captures the event price and takes seats from the ledger."""
        event = make_event(total_capacity=5)
        booking = booking_service.reserve(user_id, event.id, 2)

        assert booking.status is BookingStatus.PENDING
        assert booking.seats == 2
        assert booking.unit_price.amount == event.price
        assert booking.total_price.amount == event.price * 2
        assert remaining(event) == 3

    def test_last_seat_goes_to_first_caller(
        self, booking_service, make_event, user_id, other_user_id
    ):
        """With one seat left, the second user gets a capacity error."""
        event = make_event(total_capacity=1)
        booking_service.reserve(user_id, event.id)

        with pytest.raises(CapacityExceededError):
            booking_service.reserve(other_user_id, event.id)
        assert remaining(event) == 0
        assert BookingRow.objects.filter(event=event).count() == 1

    def test_duplicate_booking_rejected(self, booking_service, make_event, user_id):
        event = make_event()
        booking_service.reserve(user_id, event.id)
        with pytest.raises(DuplicateBookingError) as exc_info:
            booking_service.reserve(user_id, event.id)
        assert exc_info.value.message == "You already have a booking for this event"
        assert remaining(event) == 9

    def test_rebook_after_cancel(self, booking_service, make_event, user_id):
        """A cancelled booking does not block a new one."""
        event = make_event()
        first = booking_service.reserve(user_id, event.id)
        booking_service.cancel(first.id, user_id)

        second = booking_service.reserve(user_id, event.id)
        assert second.id != first.id
        assert remaining(event) == 9

    def test_unknown_event(self, booking_service, user_id):
        with pytest.raises(EventNotFoundError):
            booking_service.reserve(user_id, uuid4())

    def test_unpublished_event(self, booking_service, make_event, user_id):
        event = make_event(is_published=False)
        with pytest.raises(ValidationError) as exc_info:
            booking_service.reserve(user_id, event.id)
        assert exc_info.value.message == "Event is not available for booking"

    def test_started_event(self, booking_service, make_event, user_id):
        event = make_event(starts_at=timezone.now() - timedelta(minutes=5))
        with pytest.raises(ValidationError) as exc_info:
            booking_service.reserve(user_id, event.id)
        assert exc_info.value.message == "Cannot book past events"
        assert remaining(event) == 10

    @pytest.mark.parametrize("seats", [0, 11])
    def test_seat_count_out_of_range(self, booking_service, make_event, user_id, seats):
        event = make_event()
        with pytest.raises(ValidationError):
            booking_service.reserve(user_id, event.id, seats)

    def test_failed_reserve_leaves_no_booking(self, booking_service, make_event, user_id):
        """A capacity failure writes neither a booking nor a decrement."""
        event = make_event(total_capacity=2)
        with pytest.raises(CapacityExceededError):
            booking_service.reserve(user_id, event.id, 3)
        assert remaining(event) == 2
        assert not BookingRow.objects.exists()


@pytest.mark.django_db
class TestCancel:
    """Tests for BookingService.cancel."""

    def test_cancel_releases_seats(self, booking_service, make_event, user_id):
        """Cancellation is the exact inverse of the reservation."""
        event = make_event(total_capacity=5)
        booking = booking_service.reserve(user_id, event.id, 3)

        cancelled = booking_service.cancel(booking.id, user_id)

        assert cancelled.status is BookingStatus.CANCELLED
        assert remaining(event) == 5

    def test_cancel_twice_rejected(self, booking_service, make_event, user_id):
        """A second cancel fails and does not release seats again."""
        event = make_event(total_capacity=5)
        taken = booking_service.reserve(user_id, event.id, 2)
        booking_service.cancel(taken.id, user_id)
        booking_service.reserve(uuid4(), event.id, 4)

        with pytest.raises(ValidationError) as exc_info:
            booking_service.cancel(taken.id, user_id)
        assert exc_info.value.message == "Booking is already cancelled"
        assert remaining(event) == 1

    def test_cancel_by_other_user_rejected(
        self, booking_service, make_event, user_id, other_user_id
    ):
        event = make_event()
        booking = booking_service.reserve(user_id, event.id)
        with pytest.raises(ValidationError):
            booking_service.cancel(booking.id, other_user_id)
        assert remaining(event) == 9

    def test_cancel_unknown_booking(self, booking_service, user_id):
        with pytest.raises(BookingNotFoundError):
            booking_service.cancel(uuid4(), user_id)

    def test_cancel_order_owned_booking_rejected(self, booking_service, make_event, user_id):
        """Bookings inside an order can only be released through the order."""
        event = make_event()
        booking = booking_service.reserve(user_id, event.id)
        booking_service.attach_to_order(booking.id, uuid4())

        with pytest.raises(ValidationError) as exc_info:
            booking_service.cancel(booking.id, user_id)
        assert "order" in exc_info.value.message
        assert remaining(event) == 9


@pytest.mark.django_db
class TestQueries:
    """Tests for booking lookups."""

    def test_get_booking_hides_other_users(
        self, booking_service, make_event, user_id, other_user_id
    ):
        booking = booking_service.reserve(user_id, make_event().id)
        with pytest.raises(BookingNotFoundError):
            booking_service.get_booking(booking.id, other_user_id)

    def test_list_user_bookings_filters_status(self, booking_service, make_event, user_id):
        kept = booking_service.reserve(user_id, make_event().id)
        dropped = booking_service.reserve(user_id, make_event().id)
        booking_service.cancel(dropped.id, user_id)

        pending = booking_service.list_user_bookings(user_id, BookingStatus.PENDING)
        assert [booking.id for booking in pending] == [kept.id]
        assert len(booking_service.list_user_bookings(user_id)) == 2

    def test_confirm_only_from_pending(self, booking_service, make_event, user_id):
        booking = booking_service.reserve(user_id, make_event().id)
        confirmed = booking_service.confirm(booking.id)
        assert confirmed.status is BookingStatus.CONFIRMED
        with pytest.raises(ValidationError):
            booking_service.confirm(booking.id)

    def test_event_counts_after_reserve_and_cancel(
        self, booking_service, make_event, user_id, other_user_id
    ):
        event = make_event()
        third_user = uuid4()
        confirmed = booking_service.reserve(user_id, event.id, seats=3)
        booking_service.confirm(confirmed.id)
        booking_service.reserve(other_user_id, event.id, seats=2)
        dropped = booking_service.reserve(third_user, event.id, seats=4)
        booking_service.cancel(dropped.id, third_user)

        assert booking_service.count_event_bookings(event.id) == 3
        assert booking_service.count_event_bookings(event.id, BookingStatus.PENDING) == 1
        assert booking_service.count_event_bookings(event.id, BookingStatus.CANCELLED) == 1
        assert booking_service.total_event_seats(event.id) == 5
        assert booking_service.total_event_seats(event.id, [BookingStatus.CONFIRMED]) == 3
        assert booking_service.total_event_seats(event.id, [BookingStatus.CANCELLED]) == 4

    def test_event_counts_for_event_without_bookings(self, booking_service, make_event):
        event = make_event()
        assert booking_service.count_event_bookings(event.id) == 0
        assert booking_service.total_event_seats(event.id) == 0

    def test_event_counts_reject_malformed_id(self, booking_service):
        with pytest.raises(InvalidIdError):
            booking_service.total_event_seats("not-a-uuid")


@pytest.mark.django_db
class TestNotifications:
    """Notifications are sent after commit and never undo the booking."""

    def test_booking_created_notification(
        self, booking_service, notifier, make_event, user_id, django_capture_on_commit_callbacks
    ):
        event = make_event()
        with django_capture_on_commit_callbacks(execute=True):
            booking = booking_service.reserve(user_id, event.id)
        assert notifier.sent == [
            (
                user_id,
                "booking.created",
                {"booking_id": str(booking.id), "event_id": str(event.id), "seats": 1},
            )
        ]

    def test_failing_notifier_keeps_booking(
        self, booking_service, make_event, user_id, django_capture_on_commit_callbacks
    ):
        booking_service._notifier = FailingNotifier()
        event = make_event()
        with django_capture_on_commit_callbacks(execute=True):
            booking = booking_service.reserve(user_id, event.id)

        assert BookingRow.objects.filter(pk=booking.id).exists()
        assert remaining(event) == 9


@pytest.mark.django_db(transaction=True)
class TestConcurrency:
    """Concurrent reservations against real transactions."""

    def test_no_oversell_under_contention(self, booking_service, make_event):
        """Eight users racing for three seats: exactly three win."""
        event = make_event(total_capacity=3)
        workers = 8
        barrier = threading.Barrier(workers)
        results: list[str] = []
        lock = threading.Lock()

        def attempt():
            outcome = "error"
            try:
                barrier.wait()
                booking_service.reserve(uuid4(), event.id)
                outcome = "booked"
            except CapacityExceededError:
                outcome = "full"
            except ConflictError as exc:
                outcome = "busy" if exc.code is ErrorCode.LOCK_TIMEOUT else "conflict"
            finally:
                connection.close()
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=attempt) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        booked = results.count("booked")
        assert booked == 3
        assert results.count("full") + results.count("busy") == workers - booked
        assert remaining(event) == 0
        assert BookingRow.objects.filter(event=event).count() == 3


@pytest.mark.django_db
class TestLockedTransaction:
    """Database constraint failures surface as domain conflicts."""

    def test_active_booking_constraint_maps_to_duplicate(self, make_event, user_id):
        store = DjangoBookingStore()
        event = make_event()
        store.create(user_id, event.id, 1, Money(Decimal("25.00")))

        with pytest.raises(DuplicateBookingError):
            with locked_transaction(conflict=DuplicateBookingError()):
                store.create(user_id, event.id, 1, Money(Decimal("25.00")))

    def test_default_conflict(self, make_event, user_id):
        store = DjangoBookingStore()
        event = make_event()
        store.create(user_id, event.id, 1, Money(Decimal("25.00")))

        with pytest.raises(ConflictError) as exc_info:
            with locked_transaction():
                store.create(user_id, event.id, 1, Money(Decimal("25.00")))
        assert exc_info.value.code is ErrorCode.CONFLICT
        assert not exc_info.value.retryable
