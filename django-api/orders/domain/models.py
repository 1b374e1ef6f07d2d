"""Order domain models and the order status state machine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from catalog.domain import ItemType
from core.domain.errors import InvalidStateTransition
from core.domain.value_objects import Money


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAYMENT_PENDING = "payment_pending"
    PAID = "paid"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]

    def can_transition_to(self, target: "OrderStatus") -> bool:
        return target in TRANSITIONS[self]


TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAYMENT_PENDING, OrderStatus.CANCELLED}),
    OrderStatus.PAYMENT_PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.PROCESSING, OrderStatus.REFUNDED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.REFUNDED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

# Orders in these states may still be paid for and fulfilled.
OPEN_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.PAYMENT_PENDING,
        OrderStatus.PAID,
        OrderStatus.PROCESSING,
    }
)


def ensure_transition(current: OrderStatus, target: OrderStatus) -> None:
    """Raise InvalidStateTransition unless ``current -> target`` is allowed."""
    if not current.can_transition_to(target):
        raise InvalidStateTransition(
            message=f"Cannot transition from {current.value} to {target.value}"
        )


@dataclass(frozen=True)
class CartLine:
    """A line as submitted by the client. Prices are never trusted from here."""

    item_type: ItemType
    item_id: UUID
    quantity: int = 1
    booking_id: UUID | None = None


@dataclass(frozen=True)
class OrderLine:
    """Domain representation of a persisted order line."""

    id: UUID
    item_type: ItemType
    item_id: UUID
    title: str
    unit_price: Money
    quantity: int
    booking_id: UUID | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Order:
    """Domain representation of an Order."""

    id: UUID
    user_id: UUID
    status: OrderStatus
    subtotal: Money
    tax: Money
    total: Money
    currency: str
    payment_reference: str | None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    lines: tuple[OrderLine, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OrderStatusChange:
    """One entry of the append-only order status log."""

    order_id: UUID
    from_status: OrderStatus | None
    to_status: OrderStatus
    reason: str
    created_at: datetime


@dataclass(frozen=True)
class TopItem:
    """A best-selling item across completed orders."""

    item_type: ItemType
    item_id: UUID
    title: str
    quantity: int
    revenue: Money


@dataclass(frozen=True)
class OrderStats:
    """Sales summary. Revenue and averages count completed orders only."""

    total_revenue: Money
    order_count: int
    average_order_value: Money
    orders_by_status: dict[OrderStatus, int]
    top_items: tuple[TopItem, ...] = ()
