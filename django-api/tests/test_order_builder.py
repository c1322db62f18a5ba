"""Tests for building order groups from carts.

Run with: pytest tests/test_order_builder.py -v
"""

import uuid

import pytest

from checkout import models
from checkout.domain import Buyer, CartLine, FeeSettings, OrderStatus, TicketTier
from checkout.domain.errors import (
    ContentNotFoundError,
    InsufficientInventoryError,
    InvalidIdError,
    InvalidTierError,
    MissingBuyerEmailError,
    ValidationError,
)
from checkout.services.order_builder import OrderGroupBuilder, resolve_buyer_email
from checkout.stores.django_store import DjangoContentStore, DjangoOrderStore


@pytest.fixture
def builder() -> OrderGroupBuilder:
    return OrderGroupBuilder(DjangoContentStore(), DjangoOrderStore(), "eur")


class TestResolveBuyerEmail:
    """Tests for buyer email resolution."""

    def test_explicit_email_wins(self):
        """An explicit email is used even when an identity is present."""
        buyer = Buyer(id="1", email="account@example.com")
        assert resolve_buyer_email("gift@example.com", buyer) == "gift@example.com"

    def test_identity_email_is_fallback(self):
        """The identity email is used when none is given."""
        assert resolve_buyer_email("", Buyer(id="1", email="a@example.com")) == "a@example.com"

    def test_missing_email_raises(self):
        """Anonymous buyers must give an email."""
        with pytest.raises(MissingBuyerEmailError):
            resolve_buyer_email(None, None)


@pytest.mark.django_db
class TestBuildGroup:
    """Tests for OrderGroupBuilder.build_group."""

    def test_build_group_persists_group_and_orders(self, builder, make_content):
        """One group row plus one order per cart line, all pending."""
        show = make_content(title="Show A")
        other = make_content(title="Show B")
        cart = [
            CartLine(str(show.id), "standard", 2),
            CartLine(str(other.id), "VIP", 1),
        ]
        group = builder.build_group(cart, "buyer@example.com", None, FeeSettings())

        assert group.status is OrderStatus.PENDING
        assert group.currency == "eur"
        assert [o.tier for o in group.orders] == [TicketTier.STANDARD, TicketTier.VIP]
        assert sum(o.total_amount for o in group.orders) == group.amounts.subtotal == 4500
        assert models.OrderGroup.objects.count() == 1
        assert models.Order.objects.filter(group_id=group.id.value).count() == 2

    def test_fee_breakdown_is_stored(self, builder, content):
        """The group carries the fee breakdown computed at build time."""
        settings = FeeSettings(fee_fixed_cents=100)
        group = builder.build_group(
            [CartLine(str(content.id), "standard", 1)], "b@example.com", None, settings
        )
        assert group.amounts.service_fee == 100
        assert group.amounts.total == 1100

    def test_insufficient_inventory_creates_nothing(self, builder, make_content):
        """Requesting 2 when 1 is left fails and leaves no rows behind."""
        show = make_content(available_tickets=1, total_tickets=1)
        with pytest.raises(InsufficientInventoryError) as exc_info:
            builder.build_group(
                [CartLine(str(show.id), "standard", 2)], "b@example.com", None, FeeSettings()
            )
        assert exc_info.value.content_id == str(show.id)
        assert models.OrderGroup.objects.count() == 0
        assert models.Order.objects.count() == 0
        assert models.Ticket.objects.count() == 0

    def test_lines_for_same_content_are_checked_together(self, builder, make_content):
        """Two lines of 2 for a content with 3 left exceed availability."""
        show = make_content(available_tickets=3)
        cart = [CartLine(str(show.id), "standard", 2), CartLine(str(show.id), "vip", 2)]
        with pytest.raises(InsufficientInventoryError):
            builder.build_group(cart, "b@example.com", None, FeeSettings())

    def test_unlimited_content_skips_inventory(self, builder, make_content):
        """Unlimited contents admit any quantity."""
        show = make_content(unlimited_tickets=True, available_tickets=0, total_tickets=0)
        group = builder.build_group(
            [CartLine(str(show.id), "premium", 10)], "b@example.com", None, FeeSettings()
        )
        assert group.orders[0].quantity.value == 10

    def test_quantity_is_clamped(self, builder, content):
        """Quantities above 10 are clamped to 10."""
        group = builder.build_group(
            [CartLine(str(content.id), "standard", 50)], "b@example.com", None, FeeSettings()
        )
        assert group.orders[0].quantity.value == 10

    def test_invalid_tier(self, builder, content):
        """Unknown tiers fail with InvalidTierError."""
        with pytest.raises(InvalidTierError):
            builder.build_group(
                [CartLine(str(content.id), "balcony", 1)], "b@example.com", None, FeeSettings()
            )

    def test_unknown_content(self, builder, db):
        """Missing contents fail with ContentNotFoundError."""
        with pytest.raises(ContentNotFoundError):
            builder.build_group(
                [CartLine(str(uuid.uuid4()), "standard", 1)], "b@example.com", None, FeeSettings()
            )

    def test_malformed_content_id(self, builder, db):
        """Malformed ids fail with InvalidIdError."""
        with pytest.raises(InvalidIdError):
            builder.build_group([CartLine("abc", "standard", 1)], "b@example.com", None, FeeSettings())

    def test_empty_cart(self, builder, db):
        """An empty cart is a validation error."""
        with pytest.raises(ValidationError):
            builder.build_group([], "b@example.com", None, FeeSettings())

    def test_missing_email_creates_nothing(self, builder, content):
        """Anonymous checkout without an email fails before persisting."""
        with pytest.raises(MissingBuyerEmailError):
            builder.build_group([CartLine(str(content.id), "standard", 1)], "", None, FeeSettings())
        assert models.OrderGroup.objects.count() == 0


@pytest.mark.django_db
class TestQuote:
    """Tests for OrderGroupBuilder.quote."""

    def test_quote_ignores_inventory_and_persists_nothing(self, builder, make_content):
        """Quoting never fails on inventory and writes no rows."""
        show = make_content(available_tickets=0)
        items, breakdown = builder.quote([CartLine(str(show.id), "vip", 2)], FeeSettings())
        assert items[0].unit_price_cents == 2500
        assert breakdown.subtotal == 5000
        assert models.OrderGroup.objects.count() == 0


@pytest.mark.django_db
class TestBuildOrder:
    """Tests for single-tier orders."""

    def test_build_order_total_is_unit_times_quantity(self, builder, content, user):
        """A standalone order has no fees and no group."""
        buyer = Buyer(id=str(user.pk), email=user.email)
        order = builder.build_order(CartLine(str(content.id), "premium", 3), None, buyer)
        assert order.total_amount == 12000
        assert order.group_id is None
        assert order.buyer_email == "viewer@example.com"
        assert order.buyer_id == str(user.pk)
