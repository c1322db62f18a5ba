"""Ticket redemption gate."""

import logging

from checkout.domain import Buyer, Ticket, TicketCode
from checkout.domain.errors import (
    ContentMismatchError,
    TicketAlreadyUsedError,
    TicketNotFoundError,
    ValidationError,
)
from checkout.services.catalog_service import parse_content_id
from checkout.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)


class RedemptionService:
    """Consumes ticket codes exactly once."""

    def __init__(self, store: TicketStore) -> None:
        self._store = store

    def redeem(self, code: str, content_id: str, redeemer: Buyer | None = None) -> Ticket:
        """Mark a ticket used for ``content_id``.

        The consume step is one conditional update, so two concurrent scans of
        the same code cannot both succeed. When it matches nothing the ticket
        is re-read only to report why.

        Raises:
            ValidationError: If the code is blank.
            InvalidIdError: If the content_id is not a valid UUID.
            TicketNotFoundError: If no ticket has this code.
            ContentMismatchError: If the ticket belongs to another content.
            TicketAlreadyUsedError: If the ticket was already redeemed.
        """
        if not (code or "").strip():
            raise ValidationError("Ticket code is required")
        ticket_code = TicketCode.normalize(code)
        cid = parse_content_id(content_id)

        ticket = self._store.mark_used(ticket_code, cid, redeemer.id if redeemer else None)
        if ticket is not None:
            logger.info("Ticket %s redeemed for content %s", ticket.code, cid)
            return ticket

        existing = self._store.get_by_code(ticket_code)
        if existing is None:
            raise TicketNotFoundError()
        if existing.content_id != cid:
            raise ContentMismatchError()
        raise TicketAlreadyUsedError()
