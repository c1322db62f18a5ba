"""Pytest configuration and shared fixtures."""

import hashlib
import hmac
import itertools
import json
import time
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from checkout.domain import CheckoutSession
from checkout.payments.gateway import PaymentGateway, PaymentGatewayError

WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def marketplace_settings(settings):
    settings.TICKET_DELIVERY_ASYNC = False
    settings.STRIPE_SECRET_KEY = "sk_test_key"
    settings.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    settings.MARKETPLACE_MANUAL_PAYMENTS = True
    settings.MARKETPLACE_CURRENCY = "eur"
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    return settings


class FakeGateway(PaymentGateway):
    """Records checkout sessions instead of calling the processor."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sessions: list[dict] = []
        self.attempts: list[int] = []
        self._ids = itertools.count(1)

    def create_checkout_session(
        self,
        *,
        reference,
        reference_kind,
        line_items,
        customer_email,
        currency,
        settings,
        attempt=1,
    ) -> CheckoutSession:
        self.attempts.append(attempt)
        if self.fail:
            raise PaymentGatewayError("processor down")
        session_id = f"cs_test_{next(self._ids)}"
        self.sessions.append(
            {
                "id": session_id,
                "reference": reference,
                "reference_kind": reference_kind,
                "line_items": line_items,
                "customer_email": customer_email,
                "currency": currency,
            }
        )
        return CheckoutSession(session_id=session_id, checkout_url=f"https://pay.test/{session_id}")

    def parse_event(self, payload, signature):
        raise NotImplementedError


@pytest.fixture
def fake_gateway(monkeypatch) -> FakeGateway:
    from checkout import wiring

    gateway = FakeGateway()
    monkeypatch.setattr(wiring, "get_payment_gateway", lambda: gateway)
    return gateway


@pytest.fixture
def stripe_webhooks(monkeypatch):
    """Route webhook intake through the real Stripe signature check."""
    from checkout import wiring
    from checkout.payments.stripe_gateway import StripeGateway

    monkeypatch.setattr(
        wiring,
        "get_payment_gateway",
        lambda: StripeGateway(api_key="sk_test_key", webhook_secret=WEBHOOK_SECRET, tolerance=300),
    )


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.{payload}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def checkout_event(
    session_id: str,
    event_type: str = "checkout.session.completed",
    payment_status: str = "paid",
    event_id: str = "evt_test_1",
    metadata: dict | None = None,
) -> str:
    return json.dumps(
        {
            "id": event_id,
            "object": "event",
            "type": event_type,
            "data": {
                "object": {
                    "id": session_id,
                    "object": "checkout.session",
                    "payment_status": payment_status,
                    "metadata": metadata or {},
                }
            },
        }
    )


@pytest.fixture
def make_content(db):
    from checkout.models import Content

    def _make(**overrides):
        fields = {
            "title": "Hamlet in VR",
            "description": "A staged reading",
            "duration_minutes": 90,
            "tags": ["drama"],
            "ticket_price_standard": Decimal("10.00"),
            "ticket_price_vip": Decimal("25.00"),
            "ticket_price_premium": Decimal("40.00"),
            "total_tickets": 100,
            "available_tickets": 100,
            "unlimited_tickets": False,
        }
        fields.update(overrides)
        return Content.objects.create(**fields)

    return _make


@pytest.fixture
def content(make_content):
    return make_content()


@pytest.fixture
def platform_settings(db):
    from checkout.models import PlatformSettings

    row = PlatformSettings.load()
    row.fee_fixed_cents = 100
    row.fee_percent = Decimal("5")
    row.payment_fee_fixed_cents = 0
    row.payment_fee_percent = Decimal("2")
    row.tax_percent = Decimal("22")
    row.company_name = "Lumen Stage"
    row.support_email = "help@lumen.test"
    row.app_url = "https://lumen.test"
    row.save()
    return row


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        username="viewer", email="viewer@example.com", password="pw-12345"
    )


@pytest.fixture
def post_webhook(api_client, stripe_webhooks):
    """Post a signed Stripe event for a checkout session."""

    def _post(session_id: str, signature: str | None = None, **event):
        payload = checkout_event(session_id, **event)
        headers = {}
        if signature is None:
            signature = sign_payload(payload)
        if signature:
            headers["HTTP_STRIPE_SIGNATURE"] = signature
        return api_client.post(
            "/api/payment-webhook", data=payload, content_type="application/json", **headers
        )

    return _post


@pytest.fixture
def sign():
    return sign_payload


@pytest.fixture
def event_payload():
    return checkout_event
