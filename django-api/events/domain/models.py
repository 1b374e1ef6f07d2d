"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from core.domain.value_objects import Capacity, Money


@dataclass(frozen=True)
class Event:
    """Domain representation of a bookable Event."""

    id: UUID
    title: str
    price: Money
    starts_at: datetime
    total_capacity: Capacity
    remaining_capacity: Capacity
    is_published: bool

    def has_started(self, now: datetime) -> bool:
        return self.starts_at <= now

    def is_bookable(self, now: datetime) -> bool:
        return self.is_published and not self.has_started(now)


@dataclass(frozen=True)
class Reservation:
    """Proof that ``seats`` were taken from an event's remaining capacity."""

    event_id: UUID
    seats: int
    remaining_capacity: int


@dataclass(frozen=True)
class Availability:
    """Read-only capacity snapshot for an event."""

    event_id: UUID
    total_capacity: int
    remaining_capacity: int
    requested_seats: int
    is_bookable: bool

    @property
    def available(self) -> bool:
        return self.is_bookable and self.remaining_capacity >= self.requested_seats
