"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Self
from uuid import UUID

from core.domain.errors import InvalidIdError

CENT = Decimal("0.01")


def parse_id(value: str | UUID, label: str = "ID") -> UUID:
    """Parse a UUID, raising InvalidIdError on malformed input."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError(label) from None


@dataclass(frozen=True)
class Money:
    """Price representation with validation. Always held to cents."""

    amount: Decimal

    def __post_init__(self) -> None:
        amount = Decimal(self.amount)
        if amount < 0:
            raise ValueError("Money amount cannot be negative")
        object.__setattr__(self, "amount", amount.quantize(CENT, rounding=ROUND_HALF_UP))

    @classmethod
    def zero(cls) -> Self:
        return cls(Decimal("0"))

    def __add__(self, other: "Money") -> "Money":
        return Money(self.amount + other.amount)

    def __mul__(self, factor: int) -> "Money":
        return Money(self.amount * factor)

    def percentage(self, rate: Decimal) -> "Money":
        """Return ``rate`` of this amount, rounded half-up to cents."""
        return Money(self.amount * Decimal(rate))

    def minor_units(self) -> int:
        """Amount in cents, as payment providers expect it."""
        return int(self.amount * 100)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")

    def can_fit(self, seats: int) -> bool:
        return self.value >= seats
