from events.domain.errors import CapacityExceededError, EventNotFoundError
from events.domain.models import Availability, Event, Reservation

__all__ = [
    "Event",
    "Reservation",
    "Availability",
    "EventNotFoundError",
    "CapacityExceededError",
]
