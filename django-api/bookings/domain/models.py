"""Domain models representing persisted booking state."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from core.domain.value_objects import Money


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking."""

    id: UUID
    user_id: UUID
    event_id: UUID
    seats: int
    unit_price: Money
    total_price: Money
    status: BookingStatus
    order_id: UUID | None
    created_at: datetime
    status_changed_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status is not BookingStatus.CANCELLED
