"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from events.domain import Event, Reservation


class EventStore(ABC):
    """Interface for event reads."""

    @abstractmethod
    def get_event(self, event_id: UUID) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def lock_event(self, event_id: UUID) -> Event | None:
        """Return an event and hold its row lock until the transaction ends."""
        ...


class InventoryLedger(ABC):
    """Authoritative remaining-capacity counts per event.

    Implementations must make ``reserve`` a single atomic check-and-decrement.
    """

    @abstractmethod
    def reserve(self, event_id: UUID, seats: int) -> Reservation:
        """Take ``seats`` from the event or raise.

        Raises:
            EventNotFoundError: If the event does not exist.
            CapacityExceededError: If fewer than ``seats`` remain.
        """
        ...

    @abstractmethod
    def release(self, event_id: UUID, seats: int) -> int:
        """Give ``seats`` back, never exceeding total capacity.

        Returns the remaining capacity after the release.
        """
        ...
