"""Unit tests for the fee and tax calculator.

Run with: pytest tests/test_fees.py -v
"""

import uuid
from decimal import Decimal

from checkout.domain import ContentId, FeeSettings, LineItem, Quantity, TicketTier
from checkout.domain import fees

EXAMPLE_SETTINGS = FeeSettings(
    fee_fixed_cents=100,
    fee_percent=Decimal("5"),
    payment_fee_fixed_cents=0,
    payment_fee_percent=Decimal("2"),
    tax_percent=Decimal("22"),
)


def _item(unit_cents: int, quantity: int) -> LineItem:
    return LineItem(
        content_id=ContentId(uuid.uuid4()),
        content_title="Show",
        tier=TicketTier.STANDARD,
        quantity=Quantity(quantity),
        unit_price_cents=unit_cents,
    )


class TestQuoteSubtotal:
    """Tests for the staged fee computation."""

    def test_worked_example(self):
        """3500 cents with the reference settings totals 4698."""
        breakdown = fees.quote_subtotal(3500, EXAMPLE_SETTINGS)
        assert breakdown.service_fee == 275
        assert breakdown.payment_fee == 76
        assert breakdown.tax == 847
        assert breakdown.total == 4698

    def test_total_is_sum_of_components(self):
        """total == subtotal + serviceFee + paymentFee + tax."""
        breakdown = fees.quote_subtotal(12345, EXAMPLE_SETTINGS)
        assert breakdown.total == (
            breakdown.subtotal + breakdown.service_fee + breakdown.payment_fee + breakdown.tax
        )

    def test_zero_settings_charge_nothing(self):
        """With all-zero settings the total equals the subtotal."""
        breakdown = fees.quote_subtotal(2000, FeeSettings())
        assert (breakdown.service_fee, breakdown.payment_fee, breakdown.tax) == (0, 0, 0)
        assert breakdown.total == 2000

    def test_fixed_payment_fee_added_after_percent(self):
        """The fixed payment fee is added on top of the percentage."""
        settings = FeeSettings(payment_fee_fixed_cents=25, payment_fee_percent=Decimal("1"))
        breakdown = fees.quote_subtotal(1000, settings)
        assert breakdown.payment_fee == 35

    def test_is_deterministic(self):
        """Identical inputs give identical breakdowns."""
        assert fees.quote_subtotal(999, EXAMPLE_SETTINGS) == fees.quote_subtotal(999, EXAMPLE_SETTINGS)


class TestPercentOf:
    """Tests for half-up rounding."""

    def test_rounds_half_up(self):
        """x.5 cents rounds up."""
        assert fees.percent_of(3775, Decimal("2")) == 76
        assert fees.percent_of(25, Decimal("10")) == 3

    def test_rounds_down_below_half(self):
        """Below x.5 cents rounds down."""
        assert fees.percent_of(1001, Decimal("10")) == 100


class TestQuoteLineItems:
    """Tests for quoting resolved cart lines."""

    def test_subtotal_sums_line_totals(self):
        """Subtotal is the sum of unit price times quantity over all lines."""
        breakdown = fees.quote([_item(1000, 2), _item(1500, 1)], EXAMPLE_SETTINGS)
        assert breakdown.subtotal == 3500
        assert breakdown.total == 4698
