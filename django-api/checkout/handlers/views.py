"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.core.cache import cache
from django.http import HttpResponse
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from checkout import cache as cache_keys
from checkout import wiring
from checkout.domain import Buyer
from checkout.domain.errors import (
    ContentMismatchError,
    SignatureVerificationError,
    TicketAlreadyUsedError,
    TicketNotFoundError,
    ValidationError,
)
from checkout.handlers.exceptions import error_body, status_for
from checkout.handlers.serializers import (
    BreakdownSerializer,
    CartRequestSerializer,
    CheckoutRetrySerializer,
    ContentSerializer,
    LineItemSerializer,
    OrderGroupSerializer,
    OrderSerializer,
    PurchaseRequestSerializer,
    QuoteRequestSerializer,
    RedeemRequestSerializer,
    TicketSerializer,
    cart_line,
)
from checkout.notifications.qr import ticket_qr_png
from checkout.services.catalog_service import parse_content_id
from checkout.services.purchase_service import PurchaseResult

logger = logging.getLogger(__name__)


def _buyer(request: Request) -> Buyer | None:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return Buyer(id=str(user.pk), email=user.email or "")


def _int_param(request: Request, name: str, default: int) -> int:
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer") from None


class ContentListView(APIView):
    """Handler for GET /api/contents"""

    def get(self, request: Request) -> Response:
        page = _int_param(request, "page", 1)
        limit = _int_param(request, "limit", 10)
        tag = request.query_params.get("tag") or None

        key = cache_keys.content_list_key(page, limit, tag)
        body = cache.get(key)
        if body is None:
            result = wiring.get_catalog_service().list_contents(page=page, limit=limit, tag=tag)
            body = {
                "contents": ContentSerializer(result.contents, many=True).data,
                "total": result.total,
                "hasMore": result.has_more,
            }
            cache.set(key, body, cache_keys.content_ttl())
        return Response(body)


class ContentDetailView(APIView):
    """Handler for GET /api/contents/{content_id}"""

    def get(self, request: Request, content_id: str) -> Response:
        cid = parse_content_id(content_id)
        key = cache_keys.content_detail_key(cid)
        body = cache.get(key)
        if body is None:
            content = wiring.get_catalog_service().get_content(str(cid))
            body = {"content": ContentSerializer(content).data}
            cache.set(key, body, cache_keys.content_ttl())
        return Response(body)


def _purchase_body(result: PurchaseResult) -> dict:
    body = {}
    if result.group is not None:
        body["groupId"] = str(result.group.id)
        body["status"] = result.group.status.value
    if result.order is not None:
        body["orderId"] = str(result.order.id)
        body["status"] = result.order.status.value
    if result.session is not None:
        body["sessionId"] = result.session.session_id
        body["checkoutUrl"] = result.session.checkout_url
    else:
        body["tickets"] = TicketSerializer(result.tickets, many=True).data
    return body


class PurchaseView(APIView):
    """Handler for POST /api/purchase (single ticket tier)"""

    def post(self, request: Request) -> Response:
        serializer = PurchaseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = wiring.get_purchase_service().purchase(
            cart_line(data),
            method=data["method"],
            buyer_email=data.get("buyerEmail"),
            buyer=_buyer(request),
        )
        return Response(_purchase_body(result), status=status.HTTP_201_CREATED)


class CartPurchaseView(APIView):
    """Handler for POST /api/purchase/cart"""

    def post(self, request: Request) -> Response:
        serializer = CartRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = wiring.get_purchase_service().checkout_cart(
            serializer.cart_lines(),
            method=data["method"],
            buyer_email=data.get("buyerEmail"),
            buyer=_buyer(request),
        )
        return Response(_purchase_body(result), status=status.HTTP_201_CREATED)


class CartQuoteView(APIView):
    """Handler for POST /api/purchase/cart/quote"""

    def post(self, request: Request) -> Response:
        serializer = QuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = wiring.get_purchase_service()
        items, breakdown = service.quote(serializer.cart_lines())
        return Response(
            {
                "items": LineItemSerializer(items, many=True).data,
                "breakdown": BreakdownSerializer(breakdown).data,
                "currency": service.currency,
            }
        )


class OrderGroupView(APIView):
    """Handler for GET /api/order-group/{group_id}"""

    def get(self, request: Request, group_id: str) -> Response:
        group, tickets = wiring.get_receipt_service().get_group(group_id)
        body = OrderGroupSerializer(group).data
        body["tickets"] = TicketSerializer(tickets, many=True).data
        return Response({"group": body})


class OrderView(APIView):
    """Handler for GET /api/orders/{order_id}"""

    def get(self, request: Request, order_id: str) -> Response:
        order, tickets = wiring.get_receipt_service().get_order(order_id)
        return Response(
            {
                "order": OrderSerializer(order).data,
                "tickets": TicketSerializer(tickets, many=True).data,
            }
        )


class OrderGroupCheckoutView(APIView):
    """Handler for POST /api/order-group/{group_id}/checkout (retry payment)"""

    def post(self, request: Request, group_id: str) -> Response:
        serializer = CheckoutRetrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = wiring.get_purchase_service().retry_group(
            group_id, method=serializer.validated_data["method"]
        )
        return Response(_purchase_body(result))


class OrderCheckoutView(APIView):
    """Handler for POST /api/orders/{order_id}/checkout (retry payment)"""

    def post(self, request: Request, order_id: str) -> Response:
        serializer = CheckoutRetrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = wiring.get_purchase_service().retry_order(
            order_id, method=serializer.validated_data["method"]
        )
        return Response(_purchase_body(result))


class PaymentWebhookView(APIView):
    """Handler for POST /api/payment-webhook

    The body is read raw because the signature covers the exact bytes sent.
    """

    authentication_classes = []
    permission_classes = []

    def post(self, request: Request) -> Response:
        try:
            outcome = wiring.get_webhook_service().handle_event(
                request.body, request.META.get("HTTP_STRIPE_SIGNATURE")
            )
        except SignatureVerificationError:
            logger.warning("Rejected payment webhook from %s", request.META.get("REMOTE_ADDR"))
            return Response(status=status.HTTP_400_BAD_REQUEST)
        logger.info("Payment webhook processed: %s", outcome.value)
        return Response({"received": True})


class RedeemView(APIView):
    """Handler for POST /api/redeem"""

    def post(self, request: Request) -> Response:
        serializer = RedeemRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            ticket = wiring.get_redemption_service().redeem(
                data["code"], data["contentId"], redeemer=_buyer(request)
            )
        except (TicketNotFoundError, TicketAlreadyUsedError, ContentMismatchError) as exc:
            return Response({"ok": False, **error_body(exc)}, status=status_for(exc))
        return Response({"ok": True, "ticket": TicketSerializer(ticket).data})


class TicketQRView(APIView):
    """Handler for GET /api/tickets/{code}/qr"""

    def get(self, request: Request, code: str) -> HttpResponse:
        ticket = wiring.get_receipt_service().get_ticket(code)
        response = HttpResponse(ticket_qr_png(ticket.code.value), content_type="image/png")
        response["Cache-Control"] = "private, max-age=3600"
        return response
