"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from catalog.domain import ItemType
from orders.domain import (
    Order,
    OrderLine,
    OrderStats,
    OrderStatus,
    OrderStatusChange,
    OrderTotals,
)


class OrderStore(ABC):
    """Interface for order persistence operations."""

    @abstractmethod
    def get(self, order_id: UUID) -> Order | None:
        """Return an order with its lines, or None if not found."""
        ...

    @abstractmethod
    def lock(self, order_id: UUID) -> Order | None:
        """Return an order and hold its row lock until the transaction ends."""
        ...

    @abstractmethod
    def get_by_payment_reference(self, reference: str) -> Order | None:
        """Return the order carrying the payment reference, if any."""
        ...

    @abstractmethod
    def create(
        self,
        user_id: UUID,
        lines: Sequence[OrderLine],
        totals: OrderTotals,
        currency: str,
    ) -> Order:
        """Insert a pending order and its lines."""
        ...

    @abstractmethod
    def update(
        self,
        order_id: UUID,
        status: OrderStatus,
        payment_reference: str | None = None,
        completed_at: datetime | None = None,
    ) -> Order:
        """Persist a status change, optionally with payment reference or completion time."""
        ...

    @abstractmethod
    def record_transition(
        self,
        order_id: UUID,
        from_status: OrderStatus | None,
        to_status: OrderStatus,
        reason: str = "",
    ) -> None:
        """Append an entry to the order status log."""
        ...

    @abstractmethod
    def history(self, order_id: UUID) -> list[OrderStatusChange]:
        """Return the status log, oldest first."""
        ...

    @abstractmethod
    def list_for_user(
        self, user_id: UUID, status: OrderStatus | None = None
    ) -> list[Order]:
        """Return the user's orders, newest first."""
        ...

    @abstractmethod
    def has_open_line(self, user_id: UUID, item_type: ItemType, item_id: UUID) -> bool:
        """Check whether an open order of the user already contains the item."""
        ...

    @abstractmethod
    def stats(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        top: int = 10,
    ) -> OrderStats:
        """Aggregate orders created in ``[start, end]``."""
        ...
