"""Purchase orchestration: build orders, then settle them by the chosen method.

- ``manual`` settles synchronously: the group is built and fulfilled in one
  transaction, so a lost inventory race leaves no rows behind.
- ``stripe`` opens a hosted checkout session keyed to the group (cart) or the
  order (single tier); fulfillment happens later through the webhook.
- Any other method is refused after the unpaid order or group has been
  created, so the client can retry with a different method.

Unpaid groups and orders are settled again through ``retry_group`` and
``retry_order``; each Stripe attempt is numbered so the processor treats it
as a new request.
"""

import logging
from dataclasses import dataclass

from checkout.domain import (
    Buyer,
    CartLine,
    CheckoutSession,
    FeeBreakdown,
    LineItem,
    Order,
    OrderGroup,
    OrderGroupId,
    OrderId,
    PlatformSettings,
    Ticket,
)
from checkout.domain.errors import (
    AlreadyPaidError,
    InvalidIdError,
    OrderGroupNotFoundError,
    OrderNotFoundError,
    PaymentGatewayUnavailableError,
    PaymentMethodNotSupportedError,
    ValidationError,
)
from checkout.payments.gateway import (
    GatewayLineItem,
    PaymentGateway,
    PaymentGatewayError,
    group_line_items,
    order_line_item,
)
from checkout.services.fulfillment import FulfillmentService
from checkout.services.order_builder import OrderGroupBuilder
from checkout.stores.interfaces import OrderStore, SettingsStore, TransactionManager

logger = logging.getLogger(__name__)

METHOD_STRIPE = "stripe"
METHOD_MANUAL = "manual"


@dataclass(frozen=True)
class PurchaseResult:
    group: OrderGroup | None = None
    order: Order | None = None
    session: CheckoutSession | None = None
    tickets: tuple[Ticket, ...] = ()


def _normalize_method(method: str | None) -> str:
    return (method or "").strip().lower()


class PurchaseService:
    """Entry point for quotes, cart checkouts and single-tier purchases."""

    def __init__(
        self,
        builder: OrderGroupBuilder,
        fulfillment: FulfillmentService,
        gateway: PaymentGateway,
        order_store: OrderStore,
        settings_store: SettingsStore,
        transactions: TransactionManager,
        manual_enabled: bool = False,
    ) -> None:
        self._builder = builder
        self._fulfillment = fulfillment
        self._gateway = gateway
        self._orders = order_store
        self._settings = settings_store
        self._tx = transactions
        self._manual_enabled = manual_enabled

    @property
    def currency(self) -> str:
        return self._builder.currency

    def quote(self, cart: list[CartLine]) -> tuple[list[LineItem], FeeBreakdown]:
        return self._builder.quote(cart, self._settings.get_settings().fees)

    def checkout_cart(
        self,
        cart: list[CartLine],
        method: str,
        buyer_email: str | None,
        buyer: Buyer | None,
    ) -> PurchaseResult:
        method = _normalize_method(method)
        platform = self._settings.get_settings()

        if self._settles_manually(method):
            with self._tx.atomic():
                group = self._builder.build_group(cart, buyer_email, buyer, platform.fees)
                return self._settle_group(group, method, platform)

        group = self._builder.build_group(cart, buyer_email, buyer, platform.fees)
        return self._settle_group(group, method, platform)

    def purchase(
        self,
        line: CartLine,
        method: str,
        buyer_email: str | None,
        buyer: Buyer | None,
    ) -> PurchaseResult:
        method = _normalize_method(method)

        if self._settles_manually(method):
            with self._tx.atomic():
                order = self._builder.build_order(line, buyer_email, buyer)
                return self._settle_order(order, method)

        order = self._builder.build_order(line, buyer_email, buyer)
        return self._settle_order(order, method)

    def retry_group(self, group_id: str, method: str) -> PurchaseResult:
        """Settle an unpaid order group again, by the same or another method.

        Current capacity is re-checked first. A new Stripe session replaces
        the one recorded on the group.

        Raises:
            InvalidIdError: If the group_id is not a valid UUID.
            OrderGroupNotFoundError: If the group does not exist.
            AlreadyPaidError: If the group has been paid.
            InsufficientInventoryError: If capacity no longer covers the group.
        """
        try:
            gid = OrderGroupId.from_string(group_id)
        except (ValueError, TypeError):
            raise InvalidIdError("order group") from None
        group = self._orders.get_group(gid)
        if group is None:
            raise OrderGroupNotFoundError(group_id)
        if group.is_paid:
            raise AlreadyPaidError(group_id=str(group.id))

        self._builder.check_capacity(group.orders)
        logger.info("Retrying checkout for order group %s", group.id)
        return self._settle_group(group, _normalize_method(method), self._settings.get_settings())

    def retry_order(self, order_id: str, method: str) -> PurchaseResult:
        """Settle an unpaid standalone order again; see retry_group."""
        try:
            oid = OrderId.from_string(order_id)
        except (ValueError, TypeError):
            raise InvalidIdError("order") from None
        order = self._orders.get_order(oid)
        if order is None:
            raise OrderNotFoundError(order_id)
        if order.is_paid:
            raise AlreadyPaidError(order_id=str(order.id))
        if order.group_id is not None:
            raise ValidationError("Order is part of an order group; retry the group")

        self._builder.check_capacity([order])
        logger.info("Retrying checkout for order %s", order.id)
        return self._settle_order(order, _normalize_method(method))

    def _settles_manually(self, method: str) -> bool:
        return method == METHOD_MANUAL and self._manual_enabled

    def _settle_group(
        self, group: OrderGroup, method: str, platform: PlatformSettings
    ) -> PurchaseResult:
        if self._settles_manually(method):
            with self._tx.atomic():
                tickets = self._fulfillment.fulfill_group(group.id, strict=True)
            return PurchaseResult(group=self._orders.get_group(group.id), tickets=tuple(tickets))

        if method != METHOD_STRIPE:
            logger.info("Order group %s left pending: method %r not supported", group.id, method)
            raise PaymentMethodNotSupportedError(method, group_id=str(group.id))

        try:
            session = self._open_session(
                reference=str(group.id),
                reference_kind="group",
                line_items=group_line_items(group),
                customer_email=group.buyer_email,
                currency=group.currency,
                platform=platform,
                attempt=self._orders.next_group_attempt(group.id),
            )
        except PaymentGatewayError:
            raise PaymentGatewayUnavailableError(group_id=str(group.id)) from None
        self._orders.attach_group_session(group.id, session.session_id)
        return PurchaseResult(group=self._orders.get_group(group.id), session=session)

    def _settle_order(self, order: Order, method: str) -> PurchaseResult:
        if self._settles_manually(method):
            with self._tx.atomic():
                tickets = self._fulfillment.fulfill_order(order.id, strict=True)
            return PurchaseResult(order=self._orders.get_order(order.id), tickets=tuple(tickets))

        if method != METHOD_STRIPE:
            logger.info("Order %s left pending: method %r not supported", order.id, method)
            raise PaymentMethodNotSupportedError(method, order_id=str(order.id))

        try:
            session = self._open_session(
                reference=str(order.id),
                reference_kind="order",
                line_items=[order_line_item(order)],
                customer_email=order.buyer_email,
                currency=order.currency,
                platform=self._settings.get_settings(),
                attempt=self._orders.next_order_attempt(order.id),
            )
        except PaymentGatewayError:
            raise PaymentGatewayUnavailableError(order_id=str(order.id)) from None
        self._orders.attach_order_session(order.id, session.session_id)
        return PurchaseResult(order=self._orders.get_order(order.id), session=session)

    def _open_session(
        self,
        *,
        reference: str,
        reference_kind: str,
        line_items: list[GatewayLineItem],
        customer_email: str,
        currency: str,
        platform: PlatformSettings,
        attempt: int,
    ) -> CheckoutSession:
        try:
            return self._gateway.create_checkout_session(
                reference=reference,
                reference_kind=reference_kind,
                line_items=line_items,
                customer_email=customer_email,
                currency=currency,
                settings=platform,
                attempt=attempt,
            )
        except PaymentGatewayError:
            logger.warning(
                "Checkout session failed for %s %s (attempt %d); left pending for retry",
                reference_kind,
                reference,
                attempt,
            )
            raise
