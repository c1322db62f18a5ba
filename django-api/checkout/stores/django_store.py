"""Django ORM implementations of the checkout stores."""

from decimal import Decimal

from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from checkout import cache as cache_keys
from checkout import models
from checkout.domain import (
    Capacity,
    Content,
    ContentId,
    FeeBreakdown,
    FeeSettings,
    LineItem,
    Money,
    Order,
    OrderGroup,
    OrderGroupId,
    OrderId,
    OrderStatus,
    PlatformSettings,
    Quantity,
    Ticket,
    TicketCode,
    TicketId,
    TicketTier,
)
from checkout.stores.interfaces import (
    ContentPage,
    ContentStore,
    DuplicateTicketCode,
    OrderStore,
    SettingsStore,
    TicketStore,
    TransactionManager,
)


def _to_content(row: models.Content) -> Content:
    return Content(
        id=ContentId(row.id),
        title=row.title,
        description=row.description,
        image_url=row.image_url,
        vr_url=row.vr_url,
        duration_minutes=row.duration_minutes,
        tags=tuple(row.tags or ()),
        seller_id=str(row.seller_id) if row.seller_id is not None else None,
        price_standard=Money(row.ticket_price_standard),
        price_vip=Money(row.ticket_price_vip),
        price_premium=Money(row.ticket_price_premium),
        total_tickets=Capacity(row.total_tickets),
        unlimited_tickets=row.unlimited_tickets,
        available_tickets=Capacity(0 if row.unlimited_tickets else row.available_tickets),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_order(row: models.Order) -> Order:
    return Order(
        id=OrderId(row.id),
        content_id=ContentId(row.content_id),
        buyer_id=str(row.buyer_id) if row.buyer_id is not None else None,
        buyer_email=row.buyer_email,
        tier=TicketTier(row.ticket_type),
        quantity=Quantity(row.quantity),
        total_amount=row.total_amount,
        currency=row.currency,
        status=OrderStatus(row.status),
        payment_session_id=row.payment_session_id,
        group_id=OrderGroupId(row.group_id) if row.group_id is not None else None,
        created_at=row.created_at,
        content_title=row.content.title,
        oversold_quantity=row.oversold_quantity,
    )


def _to_group(row: models.OrderGroup, orders: list[models.Order]) -> OrderGroup:
    return OrderGroup(
        id=OrderGroupId(row.id),
        buyer_id=str(row.buyer_id) if row.buyer_id is not None else None,
        buyer_email=row.buyer_email,
        amounts=FeeBreakdown(
            subtotal=row.subtotal_amount,
            service_fee=row.service_fee_amount,
            payment_fee=row.payment_fee_amount,
            tax=row.tax_amount,
            total=row.total_amount,
        ),
        currency=row.currency,
        status=OrderStatus(row.status),
        payment_session_id=row.payment_session_id,
        created_at=row.created_at,
        orders=tuple(_to_order(order) for order in orders),
    )


def _to_ticket(row: models.Ticket) -> Ticket:
    return Ticket(
        id=TicketId(row.id),
        order_id=OrderId(row.order_id),
        content_id=ContentId(row.content_id),
        tier=TicketTier(row.ticket_type),
        code=TicketCode(row.code),
        issued_to=row.issued_to,
        used_at=row.used_at,
        used_by=str(row.used_by_id) if row.used_by_id is not None else None,
        created_at=row.created_at,
    )


class DjangoContentStore(ContentStore):
    """Content catalog and inventory counters backed by the Django ORM."""

    def list_contents(self, page: int, limit: int, tag: str | None = None) -> ContentPage:
        qs = models.Content.objects.all()
        if tag and tag != "all":
            qs = qs.filter(tags__icontains=tag)
        offset = (page - 1) * limit
        rows = list(qs[offset : offset + limit + 1])
        has_more = len(rows) > limit
        return ContentPage(
            contents=[_to_content(row) for row in rows[:limit]],
            total=qs.count(),
            has_more=has_more,
        )

    def get_content(self, content_id: ContentId) -> Content | None:
        row = models.Content.objects.filter(pk=content_id.value).first()
        return _to_content(row) if row else None

    def get_contents(self, content_ids: list[ContentId]) -> dict[ContentId, Content]:
        qs = models.Content.objects.filter(pk__in=[cid.value for cid in content_ids])
        return {ContentId(row.id): _to_content(row) for row in qs}

    def decrement_if_available(self, content_id: ContentId, quantity: int) -> bool:
        updated = models.Content.objects.filter(
            pk=content_id.value,
            unlimited_tickets=False,
            available_tickets__gte=quantity,
        ).update(available_tickets=F("available_tickets") - quantity, updated_at=timezone.now())
        if updated:
            cache_keys.invalidate_content(content_id)
        return bool(updated)

    def decrement_clamped(self, content_id: ContentId, quantity: int) -> int:
        with transaction.atomic():
            row = (
                models.Content.objects.select_for_update()
                .filter(pk=content_id.value, unlimited_tickets=False)
                .only("available_tickets")
                .first()
            )
            if row is None:
                return 0
            shortfall = max(0, quantity - row.available_tickets)
            models.Content.objects.filter(pk=row.pk).update(
                available_tickets=Greatest(F("available_tickets") - quantity, Value(0)),
                updated_at=timezone.now(),
            )
        cache_keys.invalidate_content(content_id)
        return shortfall


class DjangoOrderStore(OrderStore):
    """Orders and order groups backed by the Django ORM."""

    def create_group(
        self,
        buyer_id: str | None,
        buyer_email: str,
        amounts: FeeBreakdown,
        currency: str,
        line_items: list[LineItem],
    ) -> OrderGroup:
        with transaction.atomic():
            group = models.OrderGroup.objects.create(
                buyer_id=buyer_id,
                buyer_email=buyer_email,
                subtotal_amount=amounts.subtotal,
                service_fee_amount=amounts.service_fee,
                payment_fee_amount=amounts.payment_fee,
                tax_amount=amounts.tax,
                total_amount=amounts.total,
                currency=currency,
            )
            for item in line_items:
                models.Order.objects.create(
                    group=group,
                    content_id=item.content_id.value,
                    buyer_id=buyer_id,
                    buyer_email=buyer_email,
                    ticket_type=item.tier.value,
                    quantity=item.quantity.value,
                    total_amount=item.total_cents,
                    currency=currency,
                )
        return self.get_group(OrderGroupId(group.id))

    def create_order(
        self,
        buyer_id: str | None,
        buyer_email: str,
        currency: str,
        line_item: LineItem,
    ) -> Order:
        row = models.Order.objects.create(
            content_id=line_item.content_id.value,
            buyer_id=buyer_id,
            buyer_email=buyer_email,
            ticket_type=line_item.tier.value,
            quantity=line_item.quantity.value,
            total_amount=line_item.total_cents,
            currency=currency,
        )
        return self.get_order(OrderId(row.id))

    def get_group(self, group_id: OrderGroupId) -> OrderGroup | None:
        row = models.OrderGroup.objects.filter(pk=group_id.value).first()
        if row is None:
            return None
        orders = list(row.orders.select_related("content").order_by("created_at", "id"))
        return _to_group(row, orders)

    def get_order(self, order_id: OrderId) -> Order | None:
        row = models.Order.objects.select_related("content").filter(pk=order_id.value).first()
        return _to_order(row) if row else None

    def find_group_by_session(self, session_id: str) -> OrderGroup | None:
        row = models.OrderGroup.objects.filter(payment_session_id=session_id).first()
        return self.get_group(OrderGroupId(row.id)) if row else None

    def find_order_by_session(self, session_id: str) -> Order | None:
        row = (
            models.Order.objects.select_related("content")
            .filter(payment_session_id=session_id)
            .first()
        )
        return _to_order(row) if row else None

    def attach_group_session(self, group_id: OrderGroupId, session_id: str) -> None:
        models.OrderGroup.objects.filter(pk=group_id.value).update(
            payment_session_id=session_id, updated_at=timezone.now()
        )

    def attach_order_session(self, order_id: OrderId, session_id: str) -> None:
        models.Order.objects.filter(pk=order_id.value).update(
            payment_session_id=session_id, updated_at=timezone.now()
        )

    def mark_group_paid(self, group_id: OrderGroupId) -> bool:
        now = timezone.now()
        with transaction.atomic():
            updated = models.OrderGroup.objects.filter(
                pk=group_id.value, status=models.OrderGroup.Status.PENDING
            ).update(status=models.OrderGroup.Status.PAID, updated_at=now)
            if updated:
                models.Order.objects.filter(group_id=group_id.value).update(
                    status=models.Order.Status.PAID, updated_at=now
                )
        return bool(updated)

    def mark_order_paid(self, order_id: OrderId) -> bool:
        updated = models.Order.objects.filter(
            pk=order_id.value, status=models.Order.Status.PENDING
        ).update(status=models.Order.Status.PAID, updated_at=timezone.now())
        return bool(updated)

    def record_oversell(self, order_id: OrderId, quantity: int) -> None:
        models.Order.objects.filter(pk=order_id.value).update(
            oversold_quantity=F("oversold_quantity") + quantity, updated_at=timezone.now()
        )

    def next_group_attempt(self, group_id: OrderGroupId) -> int:
        return self._next_attempt(models.OrderGroup, group_id.value)

    def next_order_attempt(self, order_id: OrderId) -> int:
        return self._next_attempt(models.Order, order_id.value)

    @staticmethod
    def _next_attempt(model, pk) -> int:
        with transaction.atomic():
            model.objects.filter(pk=pk).update(checkout_attempts=F("checkout_attempts") + 1)
            return model.objects.values_list("checkout_attempts", flat=True).get(pk=pk)


class DjangoTicketStore(TicketStore):
    """Tickets backed by the Django ORM; code uniqueness is a database constraint."""

    def create_ticket(self, order: Order, code: TicketCode) -> Ticket:
        try:
            with transaction.atomic():
                row = models.Ticket.objects.create(
                    order_id=order.id.value,
                    content_id=order.content_id.value,
                    ticket_type=order.tier.value,
                    code=code.value,
                    issued_to=order.buyer_email,
                )
        except IntegrityError as exc:
            raise DuplicateTicketCode(code.value) from exc
        return _to_ticket(row)

    def get_by_code(self, code: TicketCode) -> Ticket | None:
        row = models.Ticket.objects.filter(code=code.value).first()
        return _to_ticket(row) if row else None

    def list_for_orders(self, order_ids: list[OrderId]) -> list[Ticket]:
        rows = models.Ticket.objects.filter(
            order_id__in=[oid.value for oid in order_ids]
        ).order_by("created_at", "code")
        return [_to_ticket(row) for row in rows]

    def mark_used(
        self, code: TicketCode, content_id: ContentId, used_by: str | None
    ) -> Ticket | None:
        updated = models.Ticket.objects.filter(
            code=code.value,
            content_id=content_id.value,
            used_at__isnull=True,
        ).update(used_at=timezone.now(), used_by_id=used_by)
        return self.get_by_code(code) if updated else None


class DjangoSettingsStore(SettingsStore):
    """Platform settings row, cached until the admin saves it again."""

    def get_settings(self) -> PlatformSettings:
        cached = cache.get(cache_keys.SETTINGS_KEY)
        if cached is not None:
            return cached
        row = models.PlatformSettings.load()
        value = PlatformSettings(
            fees=FeeSettings(
                fee_fixed_cents=row.fee_fixed_cents or 0,
                fee_percent=Decimal(row.fee_percent or 0),
                payment_fee_fixed_cents=row.payment_fee_fixed_cents or 0,
                payment_fee_percent=Decimal(row.payment_fee_percent or 0),
                tax_percent=Decimal(row.tax_percent or 0),
            ),
            app_url=row.app_url,
            company_name=row.company_name,
            support_email=row.support_email,
            smtp_host=row.smtp_host,
            smtp_port=row.smtp_port,
            smtp_user=row.smtp_user,
            smtp_password=row.smtp_password,
            smtp_from=row.smtp_from,
        )
        cache.set(cache_keys.SETTINGS_KEY, value, cache_keys.settings_ttl())
        return value


class DjangoTransactionManager(TransactionManager):
    def atomic(self):
        return transaction.atomic()

    def on_commit(self, callback) -> None:
        transaction.on_commit(callback)
