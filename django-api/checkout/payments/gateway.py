"""Payment gateway interface.

The gateway only ever sees integer minor-unit amounts. It creates hosted
checkout sessions and authenticates the asynchronous events the processor
sends back.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from checkout.domain import CheckoutSession, Order, OrderGroup, PlatformSettings

CHECKOUT_COMPLETED = "checkout.session.completed"
ASYNC_PAYMENT_SUCCEEDED = "checkout.session.async_payment_succeeded"
SETTLED_PAYMENT_STATUSES = frozenset({"paid", "no_payment_required"})


class PaymentGatewayError(Exception):
    """The processor could not be reached or refused the request."""


@dataclass(frozen=True)
class GatewayLineItem:
    name: str
    unit_amount: int
    quantity: int


@dataclass(frozen=True)
class WebhookEvent:
    """An authenticated processor event, reduced to what fulfillment needs."""

    id: str
    type: str
    session_id: str | None = None
    payment_status: str | None = None
    # Order group or order the session was opened for, from its metadata.
    reference_kind: str | None = None
    reference: str | None = None

    @property
    def confirms_payment(self) -> bool:
        if self.type == ASYNC_PAYMENT_SUCCEEDED:
            return True
        return self.type == CHECKOUT_COMPLETED and self.payment_status in SETTLED_PAYMENT_STATUSES


def group_line_items(group: OrderGroup) -> list[GatewayLineItem]:
    """Ticket lines plus one line per non-zero fee, summing to the group total."""
    items = [order_line_item(order) for order in group.orders]
    fees = (
        ("Service fee", group.amounts.service_fee),
        ("Payment fee", group.amounts.payment_fee),
        ("Tax", group.amounts.tax),
    )
    items.extend(
        GatewayLineItem(name=name, unit_amount=amount, quantity=1)
        for name, amount in fees
        if amount > 0
    )
    return items


def order_line_item(order: Order) -> GatewayLineItem:
    quantity = order.quantity.value
    return GatewayLineItem(
        name=f"{order.content_title} ({order.tier.value.upper()})",
        unit_amount=order.total_amount // quantity,
        quantity=quantity,
    )


class PaymentGateway(ABC):
    """Interface for the external hosted-checkout processor."""

    @abstractmethod
    def create_checkout_session(
        self,
        *,
        reference: str,
        reference_kind: str,
        line_items: list[GatewayLineItem],
        customer_email: str,
        currency: str,
        settings: PlatformSettings,
        attempt: int = 1,
    ) -> CheckoutSession:
        """Create a hosted checkout session keyed to an order group or order.

        ``attempt`` numbers retries for the same reference; each attempt is a
        distinct request to the processor.

        Raises:
            PaymentGatewayError: If the processor is unavailable or rejects the request.
        """
        ...

    @abstractmethod
    def parse_event(self, payload: bytes, signature: str | None) -> WebhookEvent:
        """Authenticate and decode a webhook delivery.

        Raises:
            SignatureVerificationError: If the payload is forged or malformed.
        """
        ...
