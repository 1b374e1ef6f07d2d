from orders.domain.errors import OrderNotFoundError, PaymentReferenceExistsError
from orders.domain.models import (
    OPEN_STATUSES,
    TRANSITIONS,
    CartLine,
    Order,
    OrderLine,
    OrderStatus,
    OrderStats,
    OrderStatusChange,
    TopItem,
    ensure_transition,
)
from orders.domain.pricing import OrderTotals, PricedLine, compute_totals

__all__ = [
    "CartLine",
    "Order",
    "OrderLine",
    "OrderStatus",
    "OrderStatusChange",
    "TRANSITIONS",
    "OPEN_STATUSES",
    "OrderStats",
    "TopItem",
    "ensure_transition",
    "OrderTotals",
    "PricedLine",
    "compute_totals",
    "OrderNotFoundError",
    "PaymentReferenceExistsError",
]
