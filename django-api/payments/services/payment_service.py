"""Payment service - glue between the payment provider and the order lifecycle.

Webhooks can be delivered more than once; every callback here is safe to
repeat.
"""

import logging
from uuid import UUID

from orders.domain import Order, OrderStatus, PaymentReferenceExistsError, ensure_transition
from orders.services import OrderService, build_order_service
from payments.gateways import (
    ChargeIntent,
    PaymentEvent,
    PaymentGateway,
    PaymentOutcome,
    get_payment_gateway,
)

logger = logging.getLogger(__name__)


class PaymentService:
    """Starts checkouts and applies authenticated payment outcomes."""

    def __init__(self, orders: OrderService, gateway: PaymentGateway) -> None:
        self._orders = orders
        self._gateway = gateway

    def start_checkout(self, order_id: str | UUID, user_id: str | UUID) -> tuple[Order, ChargeIntent]:
        """Create a charge for a pending order and attach its reference.

        Raises:
            PaymentReferenceExistsError: If the order was already sent to payment.
            InvalidStateTransition: If the order is not pending.
        """
        order = self._orders.get_order(order_id, user_id)
        if order.payment_reference:
            raise PaymentReferenceExistsError()
        ensure_transition(order.status, OrderStatus.PAYMENT_PENDING)

        intent = self._gateway.create_charge_intent(
            order.total,
            order.currency,
            {"order_id": str(order.id), "user_id": str(order.user_id)},
        )
        order = self._orders.attach_payment_reference(order.id, intent.reference)
        logger.info(
            "Checkout started",
            extra={"order_id": str(order.id), "reference": intent.reference},
        )
        return order, intent

    def on_payment_confirmed(self, reference: str) -> Order:
        """Mark the order paid and fulfill it.

        A ``paid`` order left behind by a failed fulfillment is retried;
        later states are a no-op.
        """
        order = self._orders.get_order_by_payment_reference(reference)
        if order.status is OrderStatus.PAYMENT_PENDING:
            order = self._orders.mark_paid(order.id)
        if order.status is OrderStatus.PAID:
            return self._orders.fulfill(order.id)

        logger.info(
            "Payment confirmation ignored",
            extra={"order_id": str(order.id), "status": order.status.value},
        )
        return order

    def on_payment_failed(self, reference: str) -> Order:
        """Cancel an order whose payment failed, releasing held seats."""
        order = self._orders.get_order_by_payment_reference(reference)
        if order.status in (OrderStatus.PENDING, OrderStatus.PAYMENT_PENDING):
            return self._orders.cancel(order.id, "payment failed")

        logger.warning(
            "Payment failure ignored",
            extra={"order_id": str(order.id), "status": order.status.value},
        )
        return order

    def handle_webhook(self, payload: bytes, signature: str) -> Order | None:
        """Verify a provider delivery and apply it."""
        event = self._gateway.parse_event(payload, signature)
        if event is None:
            return None
        return self.apply(event)

    def apply(self, event: PaymentEvent) -> Order:
        if event.outcome is PaymentOutcome.CONFIRMED:
            return self.on_payment_confirmed(event.reference)
        return self.on_payment_failed(event.reference)


def build_payment_service(gateway: PaymentGateway | None = None) -> PaymentService:
    return PaymentService(build_order_service(), gateway or get_payment_gateway())
