"""Order group builder.

Validates a cart against current content state and the fee calculator, then
materializes an order group with one order per cart line.
"""

import logging
from collections import defaultdict
from collections.abc import Sequence

from checkout.domain import (
    Availability,
    Buyer,
    CartLine,
    Content,
    ContentId,
    FeeBreakdown,
    FeeSettings,
    LineItem,
    Order,
    OrderGroup,
    Quantity,
    TicketTier,
)
from checkout.domain import fees
from checkout.domain.errors import (
    ContentNotFoundError,
    InsufficientInventoryError,
    InvalidTierError,
    MissingBuyerEmailError,
    ValidationError,
)
from checkout.services.catalog_service import parse_content_id
from checkout.stores.interfaces import ContentStore, OrderStore

logger = logging.getLogger(__name__)


def resolve_buyer_email(buyer_email: str | None, buyer: Buyer | None) -> str:
    """An explicit email wins, then the caller's identity.

    Raises:
        MissingBuyerEmailError: If neither provides an address.
    """
    email = (buyer_email or "").strip()
    if not email and buyer is not None:
        email = (buyer.email or "").strip()
    if not email:
        raise MissingBuyerEmailError()
    return email


class OrderGroupBuilder:
    """Turns requested cart lines into persisted orders."""

    def __init__(self, content_store: ContentStore, order_store: OrderStore, currency: str) -> None:
        self._contents = content_store
        self._orders = order_store
        self._currency = currency

    @property
    def currency(self) -> str:
        return self._currency

    def resolve_lines(
        self, cart: list[CartLine], *, check_inventory: bool = True
    ) -> list[LineItem]:
        """Price every cart line against current content state.

        Quantities outside 1..10 are clamped. Lines for the same content are
        checked against its availability together.

        Raises:
            ValidationError: If the cart is empty.
            InvalidIdError: If a content id is malformed.
            ContentNotFoundError: If a content does not exist.
            InvalidTierError: If a ticket type is unknown.
            InsufficientInventoryError: If a content has too few tickets left.
        """
        if not cart:
            raise ValidationError("Cart is empty")

        content_ids = [parse_content_id(line.content_id) for line in cart]
        contents = self._contents.get_contents(list(dict.fromkeys(content_ids)))

        items: list[LineItem] = []
        requested: dict[ContentId, int] = defaultdict(int)
        for line, content_id in zip(cart, content_ids):
            content = contents.get(content_id)
            if content is None:
                raise ContentNotFoundError(line.content_id)
            try:
                tier = TicketTier.parse(line.ticket_type)
            except ValueError:
                raise InvalidTierError(str(line.ticket_type)) from None
            quantity = Quantity.clamped(line.quantity)
            requested[content_id] += quantity.value
            if check_inventory:
                self._check_inventory(content, requested[content_id])
            items.append(
                LineItem(
                    content_id=content_id,
                    content_title=content.title,
                    tier=tier,
                    quantity=quantity,
                    unit_price_cents=content.unit_price(tier).to_cents(),
                )
            )
        return items

    def check_capacity(self, orders: Sequence[Order]) -> None:
        """Re-check persisted orders against current availability.

        Raises:
            ContentNotFoundError: If a content no longer exists.
            InsufficientInventoryError: If a content has too few tickets left.
        """
        requested: dict[ContentId, int] = defaultdict(int)
        for order in orders:
            requested[order.content_id] += order.quantity.value
        contents = self._contents.get_contents(list(requested))
        for content_id, quantity in requested.items():
            content = contents.get(content_id)
            if content is None:
                raise ContentNotFoundError(str(content_id))
            self._check_inventory(content, quantity)

    @staticmethod
    def _check_inventory(content: Content, quantity: int) -> None:
        availability = Availability.of(content)
        if not availability.admits(quantity):
            raise InsufficientInventoryError(
                str(content.id), content.title, availability.available
            )

    def quote(self, cart: list[CartLine], settings: FeeSettings) -> tuple[list[LineItem], FeeBreakdown]:
        """Read-only price preview; never touches inventory or persists anything."""
        items = self.resolve_lines(cart, check_inventory=False)
        return items, fees.quote(items, settings)

    def build_group(
        self,
        cart: list[CartLine],
        buyer_email: str | None,
        buyer: Buyer | None,
        settings: FeeSettings,
    ) -> OrderGroup:
        """Validate the cart and persist one group plus one order per line."""
        email = resolve_buyer_email(buyer_email, buyer)
        items = self.resolve_lines(cart)
        breakdown = fees.quote(items, settings)
        group = self._orders.create_group(
            buyer_id=buyer.id if buyer else None,
            buyer_email=email,
            amounts=breakdown,
            currency=self._currency,
            line_items=items,
        )
        logger.info(
            "Order group %s created: %d lines, total %d %s",
            group.id,
            len(group.orders),
            breakdown.total,
            self._currency,
        )
        return group

    def build_order(self, line: CartLine, buyer_email: str | None, buyer: Buyer | None) -> Order:
        """Validate one tier purchase and persist it as a standalone order."""
        email = resolve_buyer_email(buyer_email, buyer)
        (item,) = self.resolve_lines([line])
        order = self._orders.create_order(
            buyer_id=buyer.id if buyer else None,
            buyer_email=email,
            currency=self._currency,
            line_item=item,
        )
        logger.info("Order %s created: total %d %s", order.id, order.total_amount, self._currency)
        return order
