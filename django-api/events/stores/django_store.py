"""Django ORM implementation of the event stores."""

import logging
from uuid import UUID

from django.db.models import F
from django.db.models.functions import Least
from django.utils import timezone

from core.db import locked_transaction
from core.domain.errors import ValidationError
from core.domain.value_objects import Capacity, Money
from events import models
from events.domain import CapacityExceededError, Event, EventNotFoundError, Reservation
from events.stores.interfaces import EventStore, InventoryLedger

logger = logging.getLogger(__name__)


def to_domain(row: models.Event) -> Event:
    return Event(
        id=row.id,
        title=row.title,
        price=Money(row.price),
        starts_at=row.starts_at,
        total_capacity=Capacity(row.total_capacity),
        remaining_capacity=Capacity(row.remaining_capacity),
        is_published=row.is_published,
    )


def _require_seats(seats: int) -> None:
    if seats < 1:
        raise ValidationError(message="Number of seats must be at least 1")


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def get_event(self, event_id: UUID) -> Event | None:
        row = models.Event.objects.filter(pk=event_id).first()
        return to_domain(row) if row else None

    def lock_event(self, event_id: UUID) -> Event | None:
        row = models.Event.objects.select_for_update().filter(pk=event_id).first()
        return to_domain(row) if row else None


class DjangoInventoryLedger(InventoryLedger):
    """Ledger backed by a conditional UPDATE on the event row.

    The ``remaining_capacity >= seats`` guard and the decrement run as one
    statement, so concurrent callers cannot both take the last seats.
    """

    def reserve(self, event_id: UUID, seats: int) -> Reservation:
        _require_seats(seats)
        with locked_transaction():
            updated = models.Event.objects.filter(
                pk=event_id, remaining_capacity__gte=seats
            ).update(
                remaining_capacity=F("remaining_capacity") - seats,
                updated_at=timezone.now(),
            )
            remaining = (
                models.Event.objects.filter(pk=event_id)
                .values_list("remaining_capacity", flat=True)
                .first()
            )
            if remaining is None:
                raise EventNotFoundError(event_id)
            if updated == 0:
                logger.warning(
                    "Capacity exceeded",
                    extra={"event_id": str(event_id), "seats": seats, "remaining": remaining},
                )
                raise CapacityExceededError(event_id, seats, remaining)

        logger.info(
            "Seats reserved",
            extra={"event_id": str(event_id), "seats": seats, "remaining": remaining},
        )
        return Reservation(event_id=event_id, seats=seats, remaining_capacity=remaining)

    def release(self, event_id: UUID, seats: int) -> int:
        _require_seats(seats)
        with locked_transaction():
            updated = models.Event.objects.filter(pk=event_id).update(
                remaining_capacity=Least(
                    F("remaining_capacity") + seats, F("total_capacity")
                ),
                updated_at=timezone.now(),
            )
            if updated == 0:
                raise EventNotFoundError(event_id)
            remaining = models.Event.objects.values_list(
                "remaining_capacity", flat=True
            ).get(pk=event_id)

        logger.info(
            "Seats released",
            extra={"event_id": str(event_id), "seats": seats, "remaining": remaining},
        )
        return remaining
