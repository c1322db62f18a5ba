"""Fee and tax calculator.

Every stage works in integer minor units and rounds half-up. The order of
the stages is part of the contract: the service fee is charged on the
subtotal, the payment fee on subtotal plus service fee, and tax on the sum
of all three.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from checkout.domain.models import FeeBreakdown, FeeSettings, LineItem


def percent_of(amount: int, percent: Decimal) -> int:
    """Return ``percent`` % of ``amount`` rounded half-up to a whole cent."""
    value = Decimal(amount) * Decimal(percent) / Decimal(100)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def quote_subtotal(subtotal: int, settings: FeeSettings) -> FeeBreakdown:
    service_fee = percent_of(subtotal, settings.fee_percent) + settings.fee_fixed_cents
    payment_base = subtotal + service_fee
    payment_fee = (
        percent_of(payment_base, settings.payment_fee_percent)
        + settings.payment_fee_fixed_cents
    )
    tax = percent_of(subtotal + service_fee + payment_fee, settings.tax_percent)
    return FeeBreakdown(
        subtotal=subtotal,
        service_fee=service_fee,
        payment_fee=payment_fee,
        tax=tax,
        total=subtotal + service_fee + payment_fee + tax,
    )


def quote(line_items: Iterable[LineItem], settings: FeeSettings) -> FeeBreakdown:
    """Compute the fee breakdown for resolved cart lines."""
    subtotal = sum(item.total_cents for item in line_items)
    return quote_subtotal(subtotal, settings)
