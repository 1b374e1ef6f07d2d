from payments.gateways.interfaces import (
    ChargeIntent,
    PaymentEvent,
    PaymentGateway,
    PaymentOutcome,
)
from payments.gateways.stripe_gateway import StripePaymentGateway, get_payment_gateway

__all__ = [
    "ChargeIntent",
    "PaymentEvent",
    "PaymentGateway",
    "PaymentOutcome",
    "StripePaymentGateway",
    "get_payment_gateway",
]
