"""Payment provider boundary."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.domain.value_objects import Money


@dataclass(frozen=True)
class ChargeIntent:
    """A provider-side charge awaiting the customer's payment."""

    reference: str
    client_secret: str


class PaymentOutcome(str, Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class PaymentEvent:
    """An authenticated payment notification from the provider."""

    outcome: PaymentOutcome
    reference: str


class PaymentGateway(ABC):
    """Interface to the card processor."""

    @abstractmethod
    def create_charge_intent(
        self, amount: Money, currency: str, metadata: dict[str, Any]
    ) -> ChargeIntent:
        """Create a charge for ``amount`` and return its reference.

        Raises:
            ExternalServiceError: If the provider rejects or cannot be reached.
        """
        ...

    @abstractmethod
    def parse_event(self, payload: bytes, signature: str) -> PaymentEvent | None:
        """Verify and decode a webhook delivery.

        Returns None for event types the core does not act on.

        Raises:
            ValidationError: If the payload or signature is invalid.
        """
        ...
