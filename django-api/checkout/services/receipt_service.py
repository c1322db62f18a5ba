"""Read side for order groups, orders and their tickets."""

from checkout.domain import Order, OrderGroup, OrderGroupId, OrderId, Ticket, TicketCode
from checkout.domain.errors import (
    InvalidIdError,
    OrderGroupNotFoundError,
    OrderNotFoundError,
    TicketNotFoundError,
)
from checkout.stores.interfaces import OrderStore, TicketStore


class ReceiptService:
    def __init__(self, order_store: OrderStore, ticket_store: TicketStore) -> None:
        self._orders = order_store
        self._tickets = ticket_store

    def get_group(self, group_id: str) -> tuple[OrderGroup, list[Ticket]]:
        """Return a group with the tickets issued for it.

        Raises:
            InvalidIdError: If the group_id is not a valid UUID.
            OrderGroupNotFoundError: If the group does not exist.
        """
        try:
            gid = OrderGroupId.from_string(group_id)
        except (ValueError, TypeError):
            raise InvalidIdError("order group") from None
        group = self._orders.get_group(gid)
        if group is None:
            raise OrderGroupNotFoundError(group_id)
        return group, self._tickets.list_for_orders([order.id for order in group.orders])

    def get_order(self, order_id: str) -> tuple[Order, list[Ticket]]:
        """Return an order with its tickets.

        Raises:
            InvalidIdError: If the order_id is not a valid UUID.
            OrderNotFoundError: If the order does not exist.
        """
        try:
            oid = OrderId.from_string(order_id)
        except (ValueError, TypeError):
            raise InvalidIdError("order") from None
        order = self._orders.get_order(oid)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order, self._tickets.list_for_orders([order.id])

    def get_ticket(self, code: str) -> Ticket:
        ticket = self._tickets.get_by_code(TicketCode.normalize(code)) if code.strip() else None
        if ticket is None:
            raise TicketNotFoundError()
        return ticket
