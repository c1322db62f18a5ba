"""Stripe Checkout implementation of the payment gateway."""

import json
import logging

import stripe
from django.conf import settings as django_settings

from checkout.domain import CheckoutSession, PlatformSettings
from checkout.domain.errors import SignatureVerificationError
from checkout.payments.gateway import (
    GatewayLineItem,
    PaymentGateway,
    PaymentGatewayError,
    WebhookEvent,
)

logger = logging.getLogger(__name__)


class StripeGateway(PaymentGateway):
    """Hosted checkout through Stripe Checkout Sessions."""

    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
        tolerance: int | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else django_settings.STRIPE_SECRET_KEY
        self._webhook_secret = (
            webhook_secret if webhook_secret is not None else django_settings.STRIPE_WEBHOOK_SECRET
        )
        self._tolerance = (
            tolerance if tolerance is not None else django_settings.STRIPE_WEBHOOK_TOLERANCE
        )

    def create_checkout_session(
        self,
        *,
        reference: str,
        reference_kind: str,
        line_items: list[GatewayLineItem],
        customer_email: str,
        currency: str,
        settings: PlatformSettings,
        attempt: int = 1,
    ) -> CheckoutSession:
        if not self._api_key:
            raise PaymentGatewayError("STRIPE_SECRET_KEY is not configured")

        app_url = (settings.app_url or django_settings.MARKETPLACE_APP_URL).rstrip("/")
        receipt_path = "receipt" if reference_kind == "group" else "orders"
        try:
            session = stripe.checkout.Session.create(
                api_key=self._api_key,
                mode="payment",
                line_items=[
                    {
                        "price_data": {
                            "currency": currency,
                            "product_data": {"name": item.name},
                            "unit_amount": item.unit_amount,
                        },
                        "quantity": item.quantity,
                    }
                    for item in line_items
                ],
                customer_email=customer_email,
                client_reference_id=reference,
                success_url=f"{app_url}/{receipt_path}/{reference}?session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=f"{app_url}/cart?cancelled={reference}",
                metadata={f"{reference_kind}_id": reference},
                # One key per attempt; a reused key would replay the stored error.
                idempotency_key=f"checkout-{reference_kind}-{reference}-{attempt}",
            )
        except stripe.StripeError as exc:
            logger.exception("Stripe session creation failed for %s %s", reference_kind, reference)
            raise PaymentGatewayError(str(exc)) from exc

        logger.info("Stripe session %s created for %s %s", session.id, reference_kind, reference)
        return CheckoutSession(session_id=session.id, checkout_url=session.url)

    def parse_event(self, payload: bytes, signature: str | None) -> WebhookEvent:
        if not self._webhook_secret:
            logger.error("STRIPE_WEBHOOK_SECRET is not configured; rejecting webhook")
            raise SignatureVerificationError()
        if not signature:
            raise SignatureVerificationError()

        try:
            body = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                body, signature, self._webhook_secret, self._tolerance
            )
            data = json.loads(body)
            event_id = data["id"]
            event_type = data["type"]
            obj = data.get("data", {}).get("object", {}) or {}
            reference_kind, reference = _metadata_reference(obj.get("metadata") or {})
            event = WebhookEvent(
                id=event_id,
                type=event_type,
                session_id=obj.get("id"),
                payment_status=obj.get("payment_status"),
                reference_kind=reference_kind,
                reference=reference,
            )
        except stripe.SignatureVerificationError as exc:
            logger.warning("Webhook signature rejected: %s", exc)
            raise SignatureVerificationError() from exc
        except (UnicodeDecodeError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Malformed webhook payload: %s", exc)
            raise SignatureVerificationError() from exc

        return event


def _metadata_reference(metadata: dict) -> tuple[str | None, str | None]:
    for kind in ("group", "order"):
        value = metadata.get(f"{kind}_id")
        if value:
            return kind, str(value)
    return None, None
