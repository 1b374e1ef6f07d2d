"""Event service - read-side queries over bookable events.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from django.utils import timezone

from core.domain.errors import ValidationError
from core.domain.value_objects import parse_id
from events.domain import Availability, Event, EventNotFoundError
from events.stores.interfaces import EventStore


class EventService:
    """Service for event lookups and capacity checks."""

    def __init__(self, store: EventStore) -> None:
        self._store = store

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        parsed = parse_id(event_id, "event ID")
        event = self._store.get_event(parsed)
        if event is None:
            raise EventNotFoundError(parsed)
        return event

    def check_capacity(self, event_id: str, seats: int = 1) -> Availability:
        """Report whether ``seats`` could currently be booked.

        This is advisory only; the ledger re-checks atomically on reserve.
        """
        if seats < 1:
            raise ValidationError(message="Number of seats must be at least 1")
        event = self.get_event(event_id)
        return Availability(
            event_id=event.id,
            total_capacity=event.total_capacity.value,
            remaining_capacity=event.remaining_capacity.value,
            requested_seats=seats,
            is_bookable=event.is_bookable(timezone.now()),
        )
