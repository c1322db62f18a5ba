"""Webhook intake for payment-confirmation events."""

import logging
from enum import Enum

from checkout.domain import Order, OrderGroup, OrderGroupId, OrderId
from checkout.payments.gateway import PaymentGateway, WebhookEvent
from checkout.services.fulfillment import FulfillmentService
from checkout.stores.interfaces import OrderStore

logger = logging.getLogger(__name__)


class WebhookOutcome(Enum):
    FULFILLED = "fulfilled"
    ALREADY_FULFILLED = "already_fulfilled"
    UNKNOWN_SESSION = "unknown_session"
    IGNORED = "ignored"


class WebhookService:
    """Authenticates processor events and fulfils paid sessions exactly once."""

    def __init__(
        self,
        gateway: PaymentGateway,
        order_store: OrderStore,
        fulfillment: FulfillmentService,
    ) -> None:
        self._gateway = gateway
        self._orders = order_store
        self._fulfillment = fulfillment

    def handle_event(self, payload: bytes, signature: str | None) -> WebhookOutcome:
        """Process one delivery.

        Raises:
            SignatureVerificationError: If the payload is forged or malformed.
            TicketIssuanceError: If a paid order could not be fulfilled; the
                transition is rolled back so a redelivery can retry it.
        """
        event = self._gateway.parse_event(payload, signature)
        if not event.confirms_payment or not event.session_id:
            logger.debug("Webhook event %s (%s) acknowledged without action", event.id, event.type)
            return WebhookOutcome.IGNORED

        group = self._orders.find_group_by_session(event.session_id) or self._referenced_group(event)
        if group is not None:
            if group.is_paid:
                logger.info("Duplicate delivery of %s for paid group %s", event.id, group.id)
                return WebhookOutcome.ALREADY_FULFILLED
            tickets = self._fulfillment.fulfill_group(group.id)
            return WebhookOutcome.FULFILLED if tickets else WebhookOutcome.ALREADY_FULFILLED

        order = self._orders.find_order_by_session(event.session_id) or self._referenced_order(event)
        if order is not None:
            if order.is_paid:
                logger.info("Duplicate delivery of %s for paid order %s", event.id, order.id)
                return WebhookOutcome.ALREADY_FULFILLED
            tickets = self._fulfillment.fulfill_order(order.id)
            return WebhookOutcome.FULFILLED if tickets else WebhookOutcome.ALREADY_FULFILLED

        logger.warning("Webhook event %s references unknown session %s", event.id, event.session_id)
        return WebhookOutcome.UNKNOWN_SESSION

    def _referenced_group(self, event: WebhookEvent) -> OrderGroup | None:
        # A checkout retry replaces the stored session id; older sessions
        # still name their group in metadata.
        if event.reference_kind != "group" or not event.reference:
            return None
        try:
            group_id = OrderGroupId.from_string(event.reference)
        except (ValueError, TypeError):
            return None
        return self._orders.get_group(group_id)

    def _referenced_order(self, event: WebhookEvent) -> Order | None:
        if event.reference_kind != "order" or not event.reference:
            return None
        try:
            order_id = OrderId.from_string(event.reference)
        except (ValueError, TypeError):
            return None
        return self._orders.get_order(order_id)
