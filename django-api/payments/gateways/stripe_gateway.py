"""Stripe implementation of the payment gateway."""

import logging
from typing import Any

import stripe
from django.conf import settings

from core.domain.errors import ExternalServiceError, ValidationError
from core.domain.value_objects import Money
from payments.gateways.interfaces import (
    ChargeIntent,
    PaymentEvent,
    PaymentGateway,
    PaymentOutcome,
)

logger = logging.getLogger(__name__)

EVENT_OUTCOMES = {
    "payment_intent.succeeded": PaymentOutcome.CONFIRMED,
    "payment_intent.payment_failed": PaymentOutcome.FAILED,
    "payment_intent.canceled": PaymentOutcome.FAILED,
}


class StripePaymentGateway(PaymentGateway):
    """PaymentIntent-based Stripe integration. Amounts are sent in cents."""

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self._api_key = api_key
        self._webhook_secret = webhook_secret

    def create_charge_intent(
        self, amount: Money, currency: str, metadata: dict[str, Any]
    ) -> ChargeIntent:
        if amount.minor_units() <= 0:
            raise ValidationError(message="Amount must be greater than zero")
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self._api_key,
                amount=amount.minor_units(),
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata={key: str(value) for key, value in metadata.items()},
            )
        except stripe.StripeError as exc:
            logger.error("Stripe charge intent failed", extra={"error": str(exc)})
            raise ExternalServiceError(message="Payment provider error") from exc
        return ChargeIntent(reference=intent.id, client_secret=intent.client_secret)

    def parse_event(self, payload: bytes, signature: str) -> PaymentEvent | None:
        try:
            event = stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except ValueError:
            raise ValidationError(message="Invalid webhook payload") from None
        except stripe.SignatureVerificationError:
            raise ValidationError(message="Invalid signature") from None

        outcome = EVENT_OUTCOMES.get(event["type"])
        if outcome is None:
            logger.info("Ignoring webhook event", extra={"event_type": event["type"]})
            return None
        return PaymentEvent(outcome=outcome, reference=event["data"]["object"]["id"])


def get_payment_gateway() -> PaymentGateway:
    return StripePaymentGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_WEBHOOK_SECRET)
