"""Order total computation."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from core.domain.value_objects import Money


@dataclass(frozen=True)
class PricedLine:
    """A validated cart line with the price captured at commit time."""

    unit_price: Money
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    tax: Money
    total: Money


def compute_totals(lines: Iterable[PricedLine], tax_rate: Decimal) -> OrderTotals:
    """Sum line totals and apply tax once, rounded half-up to cents.

    ``total`` is derived from the rounded parts so it always equals
    ``subtotal + tax`` exactly.
    """
    subtotal = sum((line.line_total for line in lines), Money.zero())
    tax = subtotal.percentage(tax_rate)
    return OrderTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)
