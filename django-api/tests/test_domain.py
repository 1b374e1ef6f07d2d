"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from decimal import Decimal
from uuid import UUID

import pytest

from core.domain.errors import ErrorCode, InvalidIdError, InvalidStateTransition
from core.domain.value_objects import Capacity, Money, parse_id
from orders.domain import OrderStatus, PricedLine, compute_totals, ensure_transition


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        """Money can be created with positive amount."""
        assert Money(Decimal("10.50")).amount == Decimal("10.50")

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money.zero().amount == Decimal("0.00")

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_rounds_half_up_to_cents(self):
        """Money rounds half-up to two decimal places."""
        assert Money(Decimal("1.005")).amount == Decimal("1.01")
        assert Money(Decimal("1.004")).amount == Decimal("1.00")

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("5"))) == "5.00"

    def test_money_minor_units(self):
        """minor_units returns the amount in cents."""
        assert Money(Decimal("12.34")).minor_units() == 1234


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_zero(self):
        """Capacity can be created with zero."""
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        """Capacity raises ValueError for negative value."""
        with pytest.raises(ValueError):
            Capacity(-1)

    def test_can_fit(self):
        assert Capacity(2).can_fit(2)
        assert not Capacity(2).can_fit(3)


class TestParseId:
    """Tests for parse_id."""

    def test_parses_valid_uuid(self):
        """parse_id returns a UUID for a well-formed string."""
        raw = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
        assert parse_id(raw) == UUID(raw)

    def test_rejects_malformed_uuid(self):
        """parse_id raises InvalidIdError naming the identifier."""
        with pytest.raises(InvalidIdError) as exc_info:
            parse_id("not-a-uuid", "event ID")
        assert exc_info.value.code is ErrorCode.INVALID_ID
        assert exc_info.value.message == "Invalid event ID format"


class TestOrderStatus:
    """Tests for the order state machine."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.PAYMENT_PENDING),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.PAYMENT_PENDING, OrderStatus.PAID),
            (OrderStatus.PAYMENT_PENDING, OrderStatus.CANCELLED),
            (OrderStatus.PAID, OrderStatus.PROCESSING),
            (OrderStatus.PAID, OrderStatus.REFUNDED),
            (OrderStatus.PROCESSING, OrderStatus.COMPLETED),
            (OrderStatus.PROCESSING, OrderStatus.REFUNDED),
            (OrderStatus.COMPLETED, OrderStatus.REFUNDED),
        ],
    )
    def test_allowed_transitions(self, current, target):
        ensure_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.PAID),
            (OrderStatus.PAID, OrderStatus.CANCELLED),
            (OrderStatus.COMPLETED, OrderStatus.CANCELLED),
            (OrderStatus.CANCELLED, OrderStatus.PENDING),
            (OrderStatus.REFUNDED, OrderStatus.COMPLETED),
        ],
    )
    def test_rejected_transitions(self, current, target):
        with pytest.raises(InvalidStateTransition) as exc_info:
            ensure_transition(current, target)
        assert exc_info.value.message == (
            f"Cannot transition from {current.value} to {target.value}"
        )

    def test_terminal_states(self):
        """Only cancelled and refunded are terminal."""
        terminal = {status for status in OrderStatus if status.is_terminal}
        assert terminal == {OrderStatus.CANCELLED, OrderStatus.REFUNDED}


class TestComputeTotals:
    """Tests for order total computation."""

    def test_total_is_subtotal_plus_tax(self):
        totals = compute_totals(
            [
                PricedLine(Money(Decimal("49.99")), 1),
                PricedLine(Money(Decimal("25.00")), 2),
            ],
            Decimal("0.08"),
        )
        assert totals.subtotal.amount == Decimal("99.99")
        assert totals.tax.amount == Decimal("8.00")
        assert totals.total.amount == Decimal("107.99")

    def test_tax_rounds_half_up(self):
        """10% of 0.25 is 0.025, which rounds up to 0.03."""
        totals = compute_totals([PricedLine(Money(Decimal("0.25")), 1)], Decimal("0.10"))
        assert totals.tax.amount == Decimal("0.03")
        assert totals.total.amount == totals.subtotal.amount + totals.tax.amount

    def test_empty_lines_total_zero(self):
        totals = compute_totals([], Decimal("0.08"))
        assert totals.total == Money.zero()
