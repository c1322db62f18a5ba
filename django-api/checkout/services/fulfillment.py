"""Fulfillment engine: issue tickets and decrement inventory for paid orders.

Every entry point first performs the conditional pending -> paid transition
and only issues tickets when that transition actually happened, so repeated
invocations for the same order or group are no-ops.
"""

import logging
from collections.abc import Callable

from checkout.domain import Order, OrderGroupId, OrderId, Ticket, TicketCode
from checkout.domain.errors import (
    InsufficientInventoryError,
    OrderGroupNotFoundError,
    OrderNotFoundError,
    TicketIssuanceError,
)
from checkout.notifications.delivery import TicketDelivery
from checkout.services.inventory import InventoryLedger
from checkout.stores.interfaces import (
    DuplicateTicketCode,
    OrderStore,
    TicketStore,
    TransactionManager,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_CODE_ATTEMPTS = 5


class FulfillmentService:
    """Marks orders paid, issues one ticket per unit and triggers delivery."""

    def __init__(
        self,
        order_store: OrderStore,
        ticket_store: TicketStore,
        ledger: InventoryLedger,
        delivery: TicketDelivery,
        transactions: TransactionManager,
        code_generator: Callable[[], TicketCode] = TicketCode.generate,
        max_code_attempts: int = DEFAULT_MAX_CODE_ATTEMPTS,
    ) -> None:
        self._orders = order_store
        self._tickets = ticket_store
        self._ledger = ledger
        self._delivery = delivery
        self._tx = transactions
        self._generate_code = code_generator
        self._max_code_attempts = max_code_attempts

    def fulfill_order(self, order_id: OrderId, *, strict: bool = False) -> list[Ticket]:
        """Fulfil a standalone order.

        Returns the issued tickets, or an empty list when the order was
        already paid.

        With ``strict`` the sale is refused with InsufficientInventoryError
        when capacity ran out in the meantime; otherwise payment has already
        been captured, so tickets are issued and the overrun is recorded on
        the order as ``oversold_quantity`` for follow-up.
        """
        with self._tx.atomic():
            order = self._orders.get_order(order_id)
            if order is None:
                raise OrderNotFoundError(str(order_id))
            if not self._orders.mark_order_paid(order.id):
                logger.info("Order %s already paid; skipping fulfillment", order.id)
                return []
            tickets = self._issue(order, strict=strict)
            self._schedule_delivery(order.buyer_email, [order], tickets)
        logger.info("Order %s fulfilled with %d tickets", order.id, len(tickets))
        return tickets

    def fulfill_group(self, group_id: OrderGroupId, *, strict: bool = False) -> list[Ticket]:
        """Fulfil every order of a group; see fulfill_order for ``strict``."""
        with self._tx.atomic():
            group = self._orders.get_group(group_id)
            if group is None:
                raise OrderGroupNotFoundError(str(group_id))
            if not self._orders.mark_group_paid(group.id):
                logger.info("Order group %s already paid; skipping fulfillment", group.id)
                return []
            tickets: list[Ticket] = []
            for order in group.orders:
                tickets.extend(self._issue(order, strict=strict))
            self._schedule_delivery(group.buyer_email, list(group.orders), tickets)
        logger.info("Order group %s fulfilled with %d tickets", group.id, len(tickets))
        return tickets

    def _issue(self, order: Order, *, strict: bool) -> list[Ticket]:
        tickets = [self._issue_one(order) for _ in range(order.quantity.value)]
        if strict:
            if not self._ledger.decrement(order.content_id, order.quantity.value):
                available = self._ledger.get_availability(order.content_id).available
                raise InsufficientInventoryError(
                    str(order.content_id), order.content_title, available
                )
            return tickets

        shortfall = self._ledger.decrement_clamped(order.content_id, order.quantity.value)
        if shortfall:
            self._orders.record_oversell(order.id, shortfall)
            logger.error(
                "Oversold content %s: order %s was paid for %d tickets beyond capacity",
                order.content_id,
                order.id,
                shortfall,
            )
        return tickets

    def _issue_one(self, order: Order) -> Ticket:
        for attempt in range(1, self._max_code_attempts + 1):
            code = self._generate_code()
            try:
                return self._tickets.create_ticket(order, code)
            except DuplicateTicketCode:
                logger.warning(
                    "Ticket code collision for order %s (attempt %d/%d)",
                    order.id,
                    attempt,
                    self._max_code_attempts,
                )
        logger.critical(
            "Could not issue a unique ticket code for paid order %s after %d attempts",
            order.id,
            self._max_code_attempts,
        )
        raise TicketIssuanceError(str(order.id))

    def _schedule_delivery(self, recipient: str, orders: list[Order], tickets: list[Ticket]) -> None:
        self._tx.on_commit(lambda: self._delivery.dispatch(recipient, orders, tickets))
