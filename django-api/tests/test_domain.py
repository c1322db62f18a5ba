"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

import re
import uuid
from decimal import Decimal

import pytest

from checkout.domain import (
    Availability,
    Capacity,
    ContentId,
    Money,
    OrderStatus,
    Quantity,
    TicketCode,
    TicketTier,
)


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        """Money can be created with positive amount."""
        assert Money(Decimal("12.50")).amount == Decimal("12.50")

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money(Decimal("0")).to_cents() == 0

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("7.5"))) == "7.50"

    def test_to_cents_rounds_half_up(self):
        """Sub-cent amounts round half-up to whole cents."""
        assert Money(Decimal("10.005")).to_cents() == 1001
        assert Money(Decimal("10.004")).to_cents() == 1000


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_zero(self):
        """Capacity can be created with zero."""
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        """Capacity raises ValueError for negative value."""
        with pytest.raises(ValueError):
            Capacity(-1)


class TestQuantity:
    """Tests for Quantity value object."""

    def test_quantity_rejects_out_of_range(self):
        """Quantity outside 1..10 is rejected at construction."""
        with pytest.raises(ValueError):
            Quantity(0)
        with pytest.raises(ValueError):
            Quantity(11)

    @pytest.mark.parametrize("raw,expected", [(-3, 1), (0, 1), (1, 1), (7, 7), (10, 10), (25, 10)])
    def test_clamped_pulls_value_into_range(self, raw, expected):
        """Quantity.clamped clamps instead of rejecting."""
        assert Quantity.clamped(raw).value == expected


class TestContentId:
    """Tests for ContentId value object."""

    def test_from_string_valid_uuid(self):
        """ContentId.from_string parses valid UUID."""
        raw = uuid.uuid4()
        assert ContentId.from_string(str(raw)).value == raw

    def test_from_string_invalid_uuid(self):
        """ContentId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            ContentId.from_string("not-a-uuid")


class TestTicketTier:
    """Tests for TicketTier parsing."""

    def test_parse_is_case_insensitive(self):
        """Tier names match regardless of case and surrounding spaces."""
        assert TicketTier.parse(" VIP ") is TicketTier.VIP
        assert TicketTier.parse("Premium") is TicketTier.PREMIUM

    def test_parse_unknown_tier(self):
        """Unknown tier names raise ValueError."""
        with pytest.raises(ValueError):
            TicketTier.parse("balcony")


class TestTicketCode:
    """Tests for TicketCode generation and normalization."""

    def test_generate_format(self):
        """Generated codes are two 4-character A-Z0-9 segments."""
        code = TicketCode.generate()
        assert re.fullmatch(r"[A-Z0-9]{4}-[A-Z0-9]{4}", code.value)

    def test_generate_is_random(self):
        """Consecutive codes differ."""
        codes = {TicketCode.generate().value for _ in range(50)}
        assert len(codes) > 45

    def test_normalize_upper_cases_and_strips(self):
        """Presented codes are normalized before lookup."""
        assert TicketCode.normalize("  ab12-cd34 ").value == "AB12-CD34"

    def test_empty_code_rejected(self):
        """An empty code is not a valid TicketCode."""
        with pytest.raises(ValueError):
            TicketCode("")


class TestOrderStatus:
    """Tests for OrderStatus values."""

    def test_status_values(self):
        """Statuses serialize to their lowercase names."""
        assert OrderStatus.PENDING.value == "pending"
        assert OrderStatus.PAID.value == "paid"


class TestAvailability:
    """Tests for Availability admission checks."""

    def _availability(self, available=3, unlimited=False):
        return Availability(
            content_id=ContentId(uuid.uuid4()), unit_prices={}, unlimited=unlimited, available=available
        )

    def test_admits_within_capacity(self):
        assert self._availability().admits(3)
        assert not self._availability().admits(4)

    def test_unlimited_admits_anything(self):
        availability = self._availability(available=0, unlimited=True)
        assert availability.admits(10)
        assert availability.shortfall(10) == 0

    def test_shortfall(self):
        """Only the tickets beyond capacity are counted."""
        assert self._availability().shortfall(5) == 2
        assert self._availability().shortfall(2) == 0
