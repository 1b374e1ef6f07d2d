"""Order service - the order lifecycle.

Owns the status state machine, prices orders at commit time, and drives
fulfillment and refund. Fulfillment and refund run every line inside one
transaction: either every access grant changes or none does.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from django.conf import settings
from django.utils import timezone

from access.stores import AccessGrantor, default_grantors
from bookings.domain import Booking, BookingNotFoundError, BookingStatus
from bookings.services import BookingService, build_booking_service
from catalog.domain import CatalogItem, ItemType
from catalog.stores import CatalogLookup, DjangoCatalogLookup
from core.db import locked_transaction
from core.domain.errors import ValidationError
from core.domain.value_objects import Money, parse_id
from core.notifications import Notifier, get_notifier, notify_on_commit
from orders.domain import (
    CartLine,
    Order,
    OrderLine,
    OrderNotFoundError,
    OrderStats,
    OrderStatus,
    OrderStatusChange,
    PaymentReferenceExistsError,
    PricedLine,
    compute_totals,
    ensure_transition,
)
from orders.stores import DjangoOrderStore, OrderStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _DraftLine:
    item_type: ItemType
    item_id: UUID
    title: str
    unit_price: Money
    quantity: int
    booking_id: UUID | None


class OrderService:
    """Service for the order lifecycle."""

    def __init__(
        self,
        store: OrderStore,
        catalog: CatalogLookup,
        bookings: BookingService,
        grantors: Mapping[ItemType, AccessGrantor],
        notifier: Notifier | None = None,
        tax_rate: Decimal | None = None,
        currency: str | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._bookings = bookings
        self._grantors = grantors
        self._notifier = notifier or get_notifier()
        self._tax_rate = tax_rate if tax_rate is not None else settings.COMMERCE["TAX_RATE"]
        self._currency = currency or settings.COMMERCE["CURRENCY"]

    # Creation

    def create(self, user_id: str | UUID, cart_lines: Sequence[CartLine]) -> Order:
        """Create a pending order from a cart snapshot.

        Every line is revalidated against the live catalog; client prices
        are ignored. Event lines without a booking get one reserved here.

        Raises:
            ValidationError: Empty cart, or one entry per invalid line in
                ``errors``.
            ConflictError: If a seat reservation loses a capacity race.
        """
        user = parse_id(user_id, "user ID")
        if not cart_lines:
            raise ValidationError(message="Cart is empty")

        drafts, errors = self._validate_lines(user, cart_lines)
        if errors:
            logger.warning(
                "Order rejected",
                extra={"user_id": str(user), "invalid_lines": len(errors)},
            )
            raise ValidationError(message="Order contains invalid items", errors=errors)

        with locked_transaction():
            lines = [self._materialize(user, draft) for draft in drafts]
            totals = compute_totals(
                (PricedLine(line.unit_price, line.quantity) for line in lines),
                self._tax_rate,
            )
            order = self._store.create(user, lines, totals, self._currency)
            for line in order.lines:
                if line.booking_id is not None:
                    self._bookings.attach_to_order(line.booking_id, order.id)
            self._store.record_transition(order.id, None, OrderStatus.PENDING, "created")

        logger.info(
            "Order created",
            extra={"order_id": str(order.id), "user_id": str(user), "total": str(order.total)},
        )
        self._notify(order, "order.created", {"total": str(order.total)})
        return order

    def _validate_lines(
        self, user: UUID, cart_lines: Sequence[CartLine]
    ) -> tuple[list[_DraftLine], list[dict[str, Any]]]:
        drafts: list[_DraftLine] = []
        errors: list[dict[str, Any]] = []
        seen: set[tuple[ItemType, UUID]] = set()

        for index, cart_line in enumerate(cart_lines):
            key = (cart_line.item_type, cart_line.item_id)
            if key in seen:
                problem = "Duplicate item in cart"
            else:
                seen.add(key)
                draft, problem = self._validate_line(user, cart_line)
                if draft is not None:
                    drafts.append(draft)
            if problem:
                errors.append(
                    {
                        "line": index,
                        "item_type": cart_line.item_type.value,
                        "item_id": str(cart_line.item_id),
                        "message": problem,
                    }
                )
        return drafts, errors

    def _validate_line(
        self, user: UUID, cart_line: CartLine
    ) -> tuple[_DraftLine | None, str]:
        if cart_line.quantity < 1:
            return None, "Quantity must be at least 1"
        if cart_line.item_type is not ItemType.EVENT:
            if cart_line.booking_id is not None:
                return None, "Only event lines can reference a booking"
            if cart_line.quantity != 1:
                return None, "Quantity must be 1"

        if cart_line.item_type is ItemType.EVENT and cart_line.booking_id is not None:
            return self._validate_booked_event(user, cart_line)

        item = self._catalog.get_price_and_availability(
            cart_line.item_type, cart_line.item_id, cart_line.quantity
        )
        if item is None:
            return None, "Item not found"
        if not item.available:
            return None, item.reason or "Item is not available"
        if self._grantor(cart_line.item_type).has_active_grant(user, item.item_id):
            if cart_line.item_type is ItemType.EVENT:
                return None, "You already have a booking for this event"
            return None, "You already own this item"
        if cart_line.item_type is not ItemType.EVENT and self._store.has_open_line(
            user, cart_line.item_type, item.item_id
        ):
            return None, "Item is already in another open order"
        return self._draft(cart_line, item, item.price, None), ""

    def _validate_booked_event(
        self, user: UUID, cart_line: CartLine
    ) -> tuple[_DraftLine | None, str]:
        try:
            booking = self._bookings.get_booking(cart_line.booking_id, user)
        except BookingNotFoundError:
            return None, "Booking not found"
        problem = self._booking_problem(booking, cart_line)
        if problem:
            return None, problem
        # Seats are already held, so only publication and start time matter.
        item = self._catalog.get_price_and_availability(ItemType.EVENT, cart_line.item_id, 0)
        if item is None:
            return None, "Item not found"
        if not item.available:
            return None, item.reason or "Item is not available"
        return self._draft(cart_line, item, booking.unit_price, booking.id), ""

    @staticmethod
    def _booking_problem(booking: Booking, cart_line: CartLine) -> str:
        if booking.event_id != cart_line.item_id:
            return "Booking does not match event"
        if booking.status is not BookingStatus.PENDING:
            return f"Booking is {booking.status.value}"
        if booking.seats != cart_line.quantity:
            return "Quantity does not match booked seats"
        if booking.order_id is not None:
            return "Booking is already part of another order"
        return ""

    @staticmethod
    def _draft(
        cart_line: CartLine, item: CatalogItem, price: Money, booking_id: UUID | None
    ) -> _DraftLine:
        return _DraftLine(
            item_type=cart_line.item_type,
            item_id=item.item_id,
            title=item.title,
            unit_price=price,
            quantity=cart_line.quantity,
            booking_id=booking_id,
        )

    def _materialize(self, user: UUID, draft: _DraftLine) -> OrderLine:
        unit_price = draft.unit_price
        booking_id = draft.booking_id
        if draft.item_type is ItemType.EVENT and booking_id is None:
            booking = self._bookings.reserve(user, draft.item_id, draft.quantity)
            booking_id = booking.id
            unit_price = booking.unit_price
        return OrderLine(
            id=uuid4(),
            item_type=draft.item_type,
            item_id=draft.item_id,
            title=draft.title,
            unit_price=unit_price,
            quantity=draft.quantity,
            booking_id=booking_id,
        )

    # Payment

    def attach_payment_reference(self, order_id: str | UUID, reference: str) -> Order:
        """Record the charge reference; ``pending -> payment_pending``.

        Raises:
            PaymentReferenceExistsError: If the order already has a reference.
            InvalidStateTransition: If the order is not pending.
        """
        reference = (reference or "").strip()
        if not reference:
            raise ValidationError(message="Payment reference is required")
        oid = parse_id(order_id, "order ID")

        with locked_transaction(conflict=PaymentReferenceExistsError()):
            order = self._lock(oid)
            if order.payment_reference:
                raise PaymentReferenceExistsError()
            updated = self._move(
                order,
                OrderStatus.PAYMENT_PENDING,
                "payment reference attached",
                payment_reference=reference,
            )
        return updated

    def mark_paid(self, order_id: str | UUID) -> Order:
        """Accept the external payment confirmation; ``payment_pending -> paid``.

        The caller must have authenticated the payment event.
        """
        oid = parse_id(order_id, "order ID")
        with locked_transaction():
            order = self._lock(oid)
            paid = self._move(order, OrderStatus.PAID, "payment confirmed")
        self._notify(paid, "order.paid", {"total": str(paid.total)})
        return paid

    # Fulfillment

    def fulfill(self, order_id: str | UUID) -> Order:
        """Grant access to every line of a paid order, all or nothing.

        Raises:
            ValidationError: If the order is not paid.
        """
        oid = parse_id(order_id, "order ID")
        with locked_transaction():
            order = self._lock(oid)
            if order.status is not OrderStatus.PAID:
                raise ValidationError(message="Order must be paid before fulfillment")
            processing = self._move(order, OrderStatus.PROCESSING, "fulfillment started")
            for line in processing.lines:
                self._grantor(line.item_type).grant(processing, line)
            completed = self._move(
                processing,
                OrderStatus.COMPLETED,
                "fulfilled",
                completed_at=timezone.now(),
            )

        logger.info(
            "Order fulfilled",
            extra={"order_id": str(completed.id), "lines": len(completed.lines)},
        )
        self._notify(completed, "order.completed", {"lines": len(completed.lines)})
        return completed

    # Cancellation and refund

    def cancel(self, order_id: str | UUID, reason: str = "") -> Order:
        """Cancel an unpaid order and release any seats it holds.

        Raises:
            InvalidStateTransition: Unless the order is pending or payment_pending.
        """
        oid = parse_id(order_id, "order ID")
        with locked_transaction():
            order = self._lock(oid)
            ensure_transition(order.status, OrderStatus.CANCELLED)
            for line in order.lines:
                if line.booking_id is not None:
                    self._cancel_booking(order, line.booking_id)
            cancelled = self._move(order, OrderStatus.CANCELLED, reason)

        logger.info("Order cancelled", extra={"order_id": str(oid), "reason": reason})
        self._notify(cancelled, "order.cancelled", {"reason": reason})
        return cancelled

    def refund(self, order_id: str | UUID, reason: str = "") -> Order:
        """Revoke every grant and booking of a paid order, all or nothing.

        Raises:
            InvalidStateTransition: Unless the order is paid, processing or completed.
        """
        oid = parse_id(order_id, "order ID")
        with locked_transaction():
            order = self._lock(oid)
            ensure_transition(order.status, OrderStatus.REFUNDED)
            revoked = 0
            for line in order.lines:
                if self._grantor(line.item_type).revoke(order, line) is not None:
                    revoked += 1
            refunded = self._move(order, OrderStatus.REFUNDED, reason)

        logger.info(
            "Order refunded",
            extra={"order_id": str(oid), "revoked_grants": revoked, "reason": reason},
        )
        self._notify(refunded, "order.refunded", {"reason": reason, "total": str(refunded.total)})
        return refunded

    # Queries

    def get_order(self, order_id: str | UUID, user_id: str | UUID | None = None) -> Order:
        """Return an order, restricted to its owner when ``user_id`` is given."""
        oid = parse_id(order_id, "order ID")
        order = self._store.get(oid)
        if order is None:
            raise OrderNotFoundError(oid)
        if user_id is not None and order.user_id != parse_id(user_id, "user ID"):
            raise OrderNotFoundError(oid)
        return order

    def get_order_by_payment_reference(self, reference: str) -> Order:
        order = self._store.get_by_payment_reference(reference)
        if order is None:
            raise OrderNotFoundError(reference)
        return order

    def list_user_orders(
        self, user_id: str | UUID, status: OrderStatus | None = None
    ) -> list[Order]:
        return self._store.list_for_user(parse_id(user_id, "user ID"), status)

    def history(self, order_id: str | UUID) -> list[OrderStatusChange]:
        return self._store.history(self.get_order(order_id).id)

    def get_order_stats(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> OrderStats:
        """Revenue, order counts by status and top sellers for a period.

        Revenue and top sellers only count completed orders.
        """
        if start is not None and end is not None and start > end:
            raise ValidationError(message="Start date must be before end date")
        return self._store.stats(start, end)

    # Internals

    def _lock(self, order_id: UUID) -> Order:
        order = self._store.lock(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def _move(self, order: Order, target: OrderStatus, reason: str, **fields) -> Order:
        ensure_transition(order.status, target)
        updated = self._store.update(order.id, target, **fields)
        self._store.record_transition(order.id, order.status, target, reason)
        logger.info(
            "Order status changed",
            extra={
                "order_id": str(order.id),
                "from_status": order.status.value,
                "to_status": target.value,
            },
        )
        return updated

    def _grantor(self, item_type: ItemType) -> AccessGrantor:
        try:
            return self._grantors[item_type]
        except KeyError:
            raise ValidationError(message=f"Unsupported item type {item_type.value}") from None

    def _cancel_booking(self, order: Order, booking_id: UUID) -> None:
        booking = self._bookings.get_booking(booking_id)
        if booking.is_active:
            self._bookings.cancel(booking.id, order.user_id, order_id=order.id)

    def _notify(self, order: Order, event: str, payload: dict[str, Any]) -> None:
        notify_on_commit(
            self._notifier,
            order.user_id,
            event,
            {"order_id": str(order.id), "status": order.status.value, **payload},
        )


def build_order_service(
    notifier: Notifier | None = None,
    grantors: Mapping[ItemType, AccessGrantor] | None = None,
) -> OrderService:
    """Wire an OrderService to the Django stores."""
    bookings = build_booking_service(notifier=notifier)
    return OrderService(
        DjangoOrderStore(),
        DjangoCatalogLookup(),
        bookings,
        grantors if grantors is not None else default_grantors(bookings),
        notifier=notifier,
    )
