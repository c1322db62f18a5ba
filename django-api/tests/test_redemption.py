"""Tests for ticket redemption (POST /api/redeem).

Run with: pytest tests/test_redemption.py -v
"""

import uuid

import pytest
from rest_framework.test import APIClient

from checkout import models
from checkout.domain.errors import (
    ContentMismatchError,
    TicketAlreadyUsedError,
    TicketNotFoundError,
    ValidationError,
)
from checkout.services.redemption_service import RedemptionService
from checkout.stores.django_store import DjangoTicketStore


@pytest.fixture
def ticket(content):
    order = models.Order.objects.create(
        content=content,
        buyer_email="buyer@example.com",
        ticket_type="standard",
        quantity=1,
        total_amount=1000,
        currency="eur",
        status="paid",
    )
    return models.Ticket.objects.create(
        order=order,
        content=content,
        ticket_type="standard",
        code="K7QX-2MZD",
        issued_to="buyer@example.com",
    )


@pytest.mark.django_db
class TestRedemptionService:
    """Tests for RedemptionService.redeem."""

    def test_first_redemption_succeeds(self, ticket, content):
        """A fresh ticket is marked used."""
        result = RedemptionService(DjangoTicketStore()).redeem("K7QX-2MZD", str(content.id))
        assert result.is_used
        ticket.refresh_from_db()
        assert ticket.used_at is not None

    def test_second_redemption_fails(self, ticket, content):
        """A used ticket cannot be redeemed again."""
        service = RedemptionService(DjangoTicketStore())
        service.redeem("K7QX-2MZD", str(content.id))
        with pytest.raises(TicketAlreadyUsedError):
            service.redeem("K7QX-2MZD", str(content.id))

    def test_code_is_normalized(self, ticket, content):
        """Lowercase codes with whitespace still match."""
        result = RedemptionService(DjangoTicketStore()).redeem("  k7qx-2mzd ", str(content.id))
        assert result.code.value == "K7QX-2MZD"

    def test_wrong_content_fails_and_keeps_ticket_valid(self, ticket, make_content, content):
        """A ticket for show A cannot enter show B and stays unused."""
        other = make_content(title="Other show")
        service = RedemptionService(DjangoTicketStore())
        with pytest.raises(ContentMismatchError):
            service.redeem("K7QX-2MZD", str(other.id))
        ticket.refresh_from_db()
        assert ticket.used_at is None
        assert service.redeem("K7QX-2MZD", str(content.id)).is_used

    def test_unknown_code(self, content):
        """Unknown codes raise TicketNotFoundError."""
        with pytest.raises(TicketNotFoundError):
            RedemptionService(DjangoTicketStore()).redeem("ZZZZ-ZZZZ", str(content.id))

    def test_blank_code(self, content):
        """Blank codes are a validation error."""
        with pytest.raises(ValidationError):
            RedemptionService(DjangoTicketStore()).redeem("   ", str(content.id))

    def test_redeemer_is_recorded(self, ticket, content, user):
        """The redeeming identity is stored on the ticket."""
        from checkout.domain import Buyer

        RedemptionService(DjangoTicketStore()).redeem(
            "K7QX-2MZD", str(content.id), Buyer(id=str(user.pk), email=user.email)
        )
        ticket.refresh_from_db()
        assert ticket.used_by_id == user.pk


@pytest.mark.django_db
class TestRedeemEndpoint:
    """Tests for POST /api/redeem"""

    def test_redeem_ok(self, api_client: APIClient, ticket, content):
        """A valid ticket returns ok with the ticket."""
        response = api_client.post(
            "/api/redeem", {"code": "K7QX-2MZD", "contentId": str(content.id)}, format="json"
        )
        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["ticket"]["code"] == "K7QX-2MZD"
        assert body["ticket"]["usedAt"] is not None

    def test_redeem_twice_returns_conflict(self, api_client: APIClient, ticket, content):
        """The second scan reports ALREADY_USED."""
        data = {"code": "K7QX-2MZD", "contentId": str(content.id)}
        api_client.post("/api/redeem", data, format="json")
        response = api_client.post("/api/redeem", data, format="json")
        assert response.status_code == 409
        assert response.json() == {
            "ok": False,
            "code": "ALREADY_USED",
            "message": "Ticket already used",
        }

    def test_redeem_wrong_content(self, api_client: APIClient, ticket, make_content):
        """A ticket presented for another content reports CONTENT_MISMATCH."""
        other = make_content(title="Other")
        response = api_client.post(
            "/api/redeem", {"code": "K7QX-2MZD", "contentId": str(other.id)}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["ok"] is False
        assert response.json()["code"] == "CONTENT_MISMATCH"

    def test_redeem_unknown_code(self, api_client: APIClient, content):
        """Unknown codes return 404 with ok false."""
        response = api_client.post(
            "/api/redeem", {"code": "NOPE-NOPE", "contentId": str(content.id)}, format="json"
        )
        assert response.status_code == 404
        assert response.json()["code"] == "TICKET_NOT_FOUND"

    def test_redeem_invalid_content_id(self, api_client: APIClient, ticket):
        """Malformed content ids are rejected with 400."""
        response = api_client.post(
            "/api/redeem", {"code": "K7QX-2MZD", "contentId": "abc"}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"

    def test_redeem_missing_fields(self, api_client: APIClient, db):
        """Missing fields fail request validation."""
        response = api_client.post("/api/redeem", {"contentId": str(uuid.uuid4())}, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
