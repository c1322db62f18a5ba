"""Tests for the Stripe payment gateway adapter.

Run with: pytest tests/test_stripe_gateway.py -v
"""

import json
from types import SimpleNamespace

import pytest
import stripe

from checkout.domain import FeeSettings, PlatformSettings
from checkout.domain.errors import SignatureVerificationError
from checkout.payments.gateway import GatewayLineItem, PaymentGatewayError
from checkout.payments.stripe_gateway import StripeGateway

PLATFORM = PlatformSettings(fees=FeeSettings(), app_url="https://lumen.test/")


def _create(gateway: StripeGateway):
    return gateway.create_checkout_session(
        reference="grp-1",
        reference_kind="group",
        line_items=[GatewayLineItem(name="Show (STANDARD)", unit_amount=1000, quantity=2)],
        customer_email="b@example.com",
        currency="eur",
        settings=PLATFORM,
    )


class TestCreateCheckoutSession:
    """Tests for StripeGateway.create_checkout_session."""

    def test_session_request(self, monkeypatch):
        """Line items, email, return URLs and idempotency key reach Stripe."""
        captured = {}

        def fake_create(**kwargs):
            captured.update(kwargs)
            return SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.test/cs_test_1")

        monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
        session = _create(StripeGateway(api_key="sk_test", webhook_secret="whsec", tolerance=300))

        assert session.session_id == "cs_test_1"
        assert session.checkout_url == "https://checkout.stripe.test/cs_test_1"
        assert captured["api_key"] == "sk_test"
        assert captured["mode"] == "payment"
        assert captured["customer_email"] == "b@example.com"
        assert captured["line_items"] == [
            {
                "price_data": {
                    "currency": "eur",
                    "product_data": {"name": "Show (STANDARD)"},
                    "unit_amount": 1000,
                },
                "quantity": 2,
            }
        ]
        assert captured["success_url"].startswith("https://lumen.test/receipt/grp-1?session_id=")
        assert captured["idempotency_key"] == "checkout-group-grp-1-1"

    def test_retry_attempt_gets_its_own_idempotency_key(self, monkeypatch):
        """A retried session is not answered with the previous attempt's stored result."""
        keys = []

        def fake_create(**kwargs):
            keys.append(kwargs["idempotency_key"])
            return SimpleNamespace(id=f"cs_test_{len(keys)}", url="https://checkout.stripe.test")

        monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
        gateway = StripeGateway(api_key="sk_test", webhook_secret="whsec", tolerance=300)
        _create(gateway)
        gateway.create_checkout_session(
            reference="grp-1",
            reference_kind="group",
            line_items=[GatewayLineItem(name="Show (STANDARD)", unit_amount=1000, quantity=2)],
            customer_email="b@example.com",
            currency="eur",
            settings=PLATFORM,
            attempt=2,
        )
        assert keys == ["checkout-group-grp-1-1", "checkout-group-grp-1-2"]

    def test_stripe_error_becomes_gateway_error(self, monkeypatch):
        """Stripe failures surface as PaymentGatewayError."""

        def failing_create(**kwargs):
            raise stripe.APIConnectionError("network down")

        monkeypatch.setattr(stripe.checkout.Session, "create", failing_create)
        with pytest.raises(PaymentGatewayError):
            _create(StripeGateway(api_key="sk_test", webhook_secret="whsec", tolerance=300))

    def test_missing_api_key(self):
        """Without a secret key no request is attempted."""
        with pytest.raises(PaymentGatewayError):
            _create(StripeGateway(api_key="", webhook_secret="whsec", tolerance=300))


class TestParseEvent:
    """Tests for StripeGateway.parse_event."""

    def test_valid_event(self, sign, event_payload):
        """A correctly signed payload yields the session and payment status."""
        payload = event_payload("cs_test_9", payment_status="no_payment_required")
        gateway = StripeGateway(api_key="sk", webhook_secret="whsec_test_secret", tolerance=300)
        event = gateway.parse_event(payload.encode(), sign(payload))
        assert event.session_id == "cs_test_9"
        assert event.confirms_payment

    def test_wrong_secret(self, sign, event_payload):
        """Payloads signed with another secret are rejected."""
        payload = event_payload("cs_test_9")
        gateway = StripeGateway(api_key="sk", webhook_secret="whsec_other", tolerance=300)
        with pytest.raises(SignatureVerificationError):
            gateway.parse_event(payload.encode(), sign(payload))

    def test_unconfigured_secret(self, sign, event_payload):
        """With no webhook secret configured every event is rejected."""
        payload = event_payload("cs_test_9")
        gateway = StripeGateway(api_key="sk", webhook_secret="", tolerance=300)
        with pytest.raises(SignatureVerificationError):
            gateway.parse_event(payload.encode(), sign(payload))

    def test_event_without_object(self, sign):
        """Signed events that carry no session are parsed without one."""
        payload = json.dumps({"id": "evt_1", "type": "customer.created", "data": {}})
        gateway = StripeGateway(api_key="sk", webhook_secret="whsec_test_secret", tolerance=300)
        event = gateway.parse_event(payload.encode(), sign(payload))
        assert event.session_id is None
        assert not event.confirms_payment

    def test_metadata_reference(self, sign, event_payload):
        """The group or order named in session metadata is carried on the event."""
        payload = event_payload("cs_test_9", metadata={"group_id": "grp-42"})
        gateway = StripeGateway(api_key="sk", webhook_secret="whsec_test_secret", tolerance=300)
        event = gateway.parse_event(payload.encode(), sign(payload))
        assert event.reference_kind == "group"
        assert event.reference == "grp-42"
