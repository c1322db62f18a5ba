"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in checkout/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from checkout.domain.value_objects import (
    Capacity,
    ContentId,
    Money,
    OrderGroupId,
    OrderId,
    OrderStatus,
    Quantity,
    TicketCode,
    TicketId,
    TicketTier,
)


@dataclass(frozen=True)
class Buyer:
    """Caller identity supplied by the identity provider."""

    id: str
    email: str


@dataclass(frozen=True)
class Content:
    """Domain representation of a purchasable performance."""

    id: ContentId
    title: str
    description: str
    image_url: str
    vr_url: str
    duration_minutes: int
    tags: tuple[str, ...]
    seller_id: str | None
    price_standard: Money
    price_vip: Money
    price_premium: Money
    total_tickets: Capacity
    unlimited_tickets: bool
    available_tickets: Capacity
    created_at: datetime
    updated_at: datetime

    def unit_price(self, tier: TicketTier) -> Money:
        return {
            TicketTier.STANDARD: self.price_standard,
            TicketTier.VIP: self.price_vip,
            TicketTier.PREMIUM: self.price_premium,
        }[tier]


@dataclass(frozen=True)
class Availability:
    """Pricing and remaining capacity for one content."""

    content_id: ContentId
    unit_prices: dict[TicketTier, Money]
    unlimited: bool
    available: int

    @classmethod
    def of(cls, content: Content) -> "Availability":
        return cls(
            content_id=content.id,
            unit_prices={tier: content.unit_price(tier) for tier in TicketTier},
            unlimited=content.unlimited_tickets,
            available=content.available_tickets.value,
        )

    def admits(self, quantity: int) -> bool:
        return self.unlimited or self.available >= quantity

    def shortfall(self, quantity: int) -> int:
        """Tickets of ``quantity`` that remaining capacity cannot cover."""
        if self.unlimited:
            return 0
        return max(0, quantity - self.available)


@dataclass(frozen=True)
class CartLine:
    """A requested cart line before it has been checked against the catalog."""

    content_id: str
    ticket_type: str
    quantity: int


@dataclass(frozen=True)
class LineItem:
    """A cart line resolved against current content state."""

    content_id: ContentId
    content_title: str
    tier: TicketTier
    quantity: Quantity
    unit_price_cents: int

    @property
    def total_cents(self) -> int:
        return self.unit_price_cents * self.quantity.value


@dataclass(frozen=True)
class FeeSettings:
    """Fee and tax configuration read by the calculator."""

    fee_fixed_cents: int = 0
    fee_percent: Decimal = Decimal("0")
    payment_fee_fixed_cents: int = 0
    payment_fee_percent: Decimal = Decimal("0")
    tax_percent: Decimal = Decimal("0")


@dataclass(frozen=True)
class PlatformSettings:
    """Platform-wide configuration.

    Only the fee block and the public app URL matter to checkout; the
    SMTP block is consumed by ticket delivery.
    """

    fees: FeeSettings
    app_url: str = ""
    company_name: str = ""
    support_email: str = ""
    smtp_host: str = ""
    smtp_port: int | None = None
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""


@dataclass(frozen=True)
class FeeBreakdown:
    """Fee and tax amounts for a cart, all in minor currency units."""

    subtotal: int
    service_fee: int
    payment_fee: int
    tax: int
    total: int


@dataclass(frozen=True)
class Order:
    """Domain representation of one cart line's purchase intent."""

    id: OrderId
    content_id: ContentId
    buyer_id: str | None
    buyer_email: str
    tier: TicketTier
    quantity: Quantity
    total_amount: int
    currency: str
    status: OrderStatus
    payment_session_id: str | None
    group_id: OrderGroupId | None
    created_at: datetime
    content_title: str = ""
    oversold_quantity: int = 0

    @property
    def is_paid(self) -> bool:
        return self.status is OrderStatus.PAID


@dataclass(frozen=True)
class OrderGroup:
    """Domain representation of a cart checkout with its fee breakdown."""

    id: OrderGroupId
    buyer_id: str | None
    buyer_email: str
    amounts: FeeBreakdown
    currency: str
    status: OrderStatus
    payment_session_id: str | None
    created_at: datetime
    orders: tuple[Order, ...] = field(default=())

    @property
    def is_paid(self) -> bool:
        return self.status is OrderStatus.PAID


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a single-use admission credential."""

    id: TicketId
    order_id: OrderId
    content_id: ContentId
    tier: TicketTier
    code: TicketCode
    issued_to: str
    used_at: datetime | None
    used_by: str | None
    created_at: datetime

    @property
    def is_used(self) -> bool:
        return self.used_at is not None


@dataclass(frozen=True)
class CheckoutSession:
    """Hosted checkout session returned by the payment gateway."""

    session_id: str
    checkout_url: str
