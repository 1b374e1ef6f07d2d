"""Django ORM implementation of the BookingStore."""

from collections.abc import Iterable
from uuid import UUID

from django.db.models import Sum
from django.utils import timezone

from bookings import models
from bookings.domain import Booking, BookingStatus
from bookings.stores.interfaces import BookingStore
from core.domain.value_objects import Money


def to_domain(row: models.Booking) -> Booking:
    return Booking(
        id=row.id,
        user_id=row.user_id,
        event_id=row.event_id,
        seats=row.seats,
        unit_price=Money(row.unit_price),
        total_price=Money(row.total_price),
        status=BookingStatus(row.status),
        order_id=row.order_id,
        created_at=row.created_at,
        status_changed_at=row.status_changed_at,
    )


class DjangoBookingStore(BookingStore):
    """Booking store using Django ORM."""

    def get(self, booking_id: UUID) -> Booking | None:
        row = models.Booking.objects.filter(pk=booking_id).first()
        return to_domain(row) if row else None

    def lock(self, booking_id: UUID) -> Booking | None:
        row = models.Booking.objects.select_for_update().filter(pk=booking_id).first()
        return to_domain(row) if row else None

    def has_active_booking(self, user_id: UUID, event_id: UUID) -> bool:
        return (
            models.Booking.objects.filter(user_id=user_id, event_id=event_id)
            .exclude(status=models.Booking.Status.CANCELLED)
            .exists()
        )

    def create(
        self, user_id: UUID, event_id: UUID, seats: int, unit_price: Money
    ) -> Booking:
        row = models.Booking.objects.create(
            user_id=user_id,
            event_id=event_id,
            seats=seats,
            unit_price=unit_price.amount,
            total_price=(unit_price * seats).amount,
            status=models.Booking.Status.PENDING,
        )
        return to_domain(row)

    def set_status(self, booking_id: UUID, status: BookingStatus) -> Booking:
        models.Booking.objects.filter(pk=booking_id).update(
            status=status.value, status_changed_at=timezone.now()
        )
        return to_domain(models.Booking.objects.get(pk=booking_id))

    def attach_order(self, booking_id: UUID, order_id: UUID) -> Booking:
        models.Booking.objects.filter(pk=booking_id).update(order_id=order_id)
        return to_domain(models.Booking.objects.get(pk=booking_id))

    def list_for_user(
        self, user_id: UUID, status: BookingStatus | None = None
    ) -> list[Booking]:
        rows = models.Booking.objects.filter(user_id=user_id)
        if status is not None:
            rows = rows.filter(status=status.value)
        return [to_domain(row) for row in rows.order_by("-created_at")]

    def count_for_event(self, event_id: UUID, status: BookingStatus | None = None) -> int:
        rows = models.Booking.objects.filter(event_id=event_id)
        if status is not None:
            rows = rows.filter(status=status.value)
        return rows.count()

    def seats_for_event(self, event_id: UUID, statuses: Iterable[BookingStatus]) -> int:
        total = models.Booking.objects.filter(
            event_id=event_id, status__in=[status.value for status in statuses]
        ).aggregate(seats=Sum("seats"))["seats"]
        return total or 0
