"""Service construction from Django settings.

Handlers call these factories instead of instantiating stores themselves, so
tests can swap the payment gateway through the MARKETPLACE_PAYMENT_GATEWAY
setting.
"""

from django.conf import settings
from django.utils.module_loading import import_string

from checkout.notifications.delivery import EmailTicketDelivery
from checkout.payments.gateway import PaymentGateway
from checkout.services.catalog_service import CatalogService
from checkout.services.fulfillment import FulfillmentService
from checkout.services.inventory import InventoryLedger
from checkout.services.order_builder import OrderGroupBuilder
from checkout.services.purchase_service import PurchaseService
from checkout.services.receipt_service import ReceiptService
from checkout.services.redemption_service import RedemptionService
from checkout.services.webhook_service import WebhookService
from checkout.stores.django_store import (
    DjangoContentStore,
    DjangoOrderStore,
    DjangoSettingsStore,
    DjangoTicketStore,
    DjangoTransactionManager,
)


def get_payment_gateway() -> PaymentGateway:
    return import_string(settings.MARKETPLACE_PAYMENT_GATEWAY)()


def get_catalog_service() -> CatalogService:
    return CatalogService(DjangoContentStore())


def get_fulfillment_service() -> FulfillmentService:
    return FulfillmentService(
        order_store=DjangoOrderStore(),
        ticket_store=DjangoTicketStore(),
        ledger=InventoryLedger(DjangoContentStore()),
        delivery=EmailTicketDelivery(DjangoSettingsStore()),
        transactions=DjangoTransactionManager(),
        max_code_attempts=settings.TICKET_CODE_MAX_ATTEMPTS,
    )


def get_purchase_service() -> PurchaseService:
    order_store = DjangoOrderStore()
    return PurchaseService(
        builder=OrderGroupBuilder(
            DjangoContentStore(), order_store, settings.MARKETPLACE_CURRENCY
        ),
        fulfillment=get_fulfillment_service(),
        gateway=get_payment_gateway(),
        order_store=order_store,
        settings_store=DjangoSettingsStore(),
        transactions=DjangoTransactionManager(),
        manual_enabled=settings.MARKETPLACE_MANUAL_PAYMENTS,
    )


def get_webhook_service() -> WebhookService:
    return WebhookService(
        gateway=get_payment_gateway(),
        order_store=DjangoOrderStore(),
        fulfillment=get_fulfillment_service(),
    )


def get_receipt_service() -> ReceiptService:
    return ReceiptService(DjangoOrderStore(), DjangoTicketStore())


def get_redemption_service() -> RedemptionService:
    return RedemptionService(DjangoTicketStore())
