"""Ticket delivery by email.

Delivery is best-effort: it runs after the fulfillment transaction has
committed, optionally on a worker thread, and a failing mail transport is
logged and never propagated back into checkout.
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor

from django.conf import settings as django_settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string

from checkout.domain import Order, PlatformSettings, Ticket
from checkout.notifications.qr import ticket_qr_png
from checkout.stores.interfaces import SettingsStore

logger = logging.getLogger(__name__)

SMTPS_PORT = 465
SUBMISSION_PORT = 587

_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="ticket-delivery")


class TicketDelivery(ABC):
    """Interface for handing issued tickets to the buyer."""

    @abstractmethod
    def dispatch(self, recipient: str, orders: list[Order], tickets: list[Ticket]) -> None:
        """Schedule delivery. Must not raise."""
        ...


class EmailTicketDelivery(TicketDelivery):
    """Sends one email per fulfillment with a QR attachment per ticket."""

    def __init__(self, settings_store: SettingsStore, run_async: bool | None = None) -> None:
        self._settings_store = settings_store
        self._run_async = (
            django_settings.TICKET_DELIVERY_ASYNC if run_async is None else run_async
        )

    def dispatch(self, recipient: str, orders: list[Order], tickets: list[Ticket]) -> None:
        if not tickets:
            return
        try:
            platform = self._settings_store.get_settings()
        except Exception:
            logger.exception("Could not load platform settings for ticket delivery to %s", recipient)
            return
        if self._run_async:
            _executor.submit(self.send, recipient, orders, tickets, platform)
        else:
            self.send(recipient, orders, tickets, platform)

    def send(
        self,
        recipient: str,
        orders: list[Order],
        tickets: list[Ticket],
        platform: PlatformSettings,
    ) -> bool:
        try:
            message = build_ticket_email(recipient, orders, tickets, platform)
            message.send()
        except Exception:
            logger.exception("Ticket delivery to %s failed (%d tickets)", recipient, len(tickets))
            return False
        logger.info("Delivered %d tickets to %s", len(tickets), recipient)
        return True


def smtp_connection(platform: PlatformSettings):
    """Use the admin-configured SMTP server when there is one."""
    if not platform.smtp_host:
        return get_connection()
    port = platform.smtp_port or SUBMISSION_PORT
    return get_connection(
        backend="django.core.mail.backends.smtp.EmailBackend",
        host=platform.smtp_host,
        port=port,
        username=platform.smtp_user or None,
        password=platform.smtp_password or None,
        # 465 is implicit TLS; 587 upgrades with STARTTLS.
        use_ssl=port == SMTPS_PORT,
        use_tls=port == SUBMISSION_PORT,
        timeout=django_settings.EMAIL_TIMEOUT,
    )


def build_ticket_email(
    recipient: str,
    orders: list[Order],
    tickets: list[Ticket],
    platform: PlatformSettings,
) -> EmailMultiAlternatives:
    titles = {order.id: order.content_title for order in orders}
    context = {
        "company_name": platform.company_name or "VR Theatre",
        "support_email": platform.support_email,
        "app_url": platform.app_url,
        "tickets": [
            {
                "code": ticket.code.value,
                "tier": ticket.tier.value.upper(),
                "title": titles.get(ticket.order_id, ""),
            }
            for ticket in tickets
        ],
    }
    subject = f"Your tickets ({len(tickets)})"
    message = EmailMultiAlternatives(
        subject=subject,
        body=render_to_string("checkout/email/tickets.txt", context),
        from_email=platform.smtp_from or django_settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
        connection=smtp_connection(platform),
    )
    message.attach_alternative(render_to_string("checkout/email/tickets.html", context), "text/html")
    for ticket in tickets:
        message.attach(f"ticket-{ticket.code.value}.png", ticket_qr_png(ticket.code.value), "image/png")
    return message
