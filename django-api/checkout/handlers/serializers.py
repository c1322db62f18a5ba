"""Serializers for request parsing and domain-to-API responses.

The camelCase wire format exists only here; services see snake_case domain
types.
"""

from rest_framework import serializers

from checkout.domain import CartLine


class CartLineSerializer(serializers.Serializer):
    """One requested ticket line."""

    contentId = serializers.CharField()
    ticketType = serializers.CharField(required=False, default="standard")
    quantity = serializers.IntegerField(required=False, default=1)


def cart_line(data: dict) -> CartLine:
    return CartLine(
        content_id=data["contentId"],
        ticket_type=data["ticketType"],
        quantity=data["quantity"],
    )


class PurchaseRequestSerializer(CartLineSerializer):
    method = serializers.CharField(required=False, default="stripe")
    buyerEmail = serializers.EmailField(required=False, allow_blank=True, allow_null=True)


class CartRequestSerializer(serializers.Serializer):
    cart = CartLineSerializer(many=True, allow_empty=False)
    method = serializers.CharField(required=False, default="stripe")
    buyerEmail = serializers.EmailField(required=False, allow_blank=True, allow_null=True)

    def cart_lines(self) -> list[CartLine]:
        return [cart_line(line) for line in self.validated_data["cart"]]


class CheckoutRetrySerializer(serializers.Serializer):
    method = serializers.CharField(required=False, default="stripe")


class QuoteRequestSerializer(serializers.Serializer):
    cart = CartLineSerializer(many=True, allow_empty=False)

    def cart_lines(self) -> list[CartLine]:
        return [cart_line(line) for line in self.validated_data["cart"]]


class RedeemRequestSerializer(serializers.Serializer):
    code = serializers.CharField(trim_whitespace=True)
    contentId = serializers.CharField()


class ContentSerializer(serializers.Serializer):
    """Serializer for the Content domain model."""

    id = serializers.CharField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    imageUrl = serializers.CharField(source="image_url")
    vrUrl = serializers.CharField(source="vr_url")
    durationMinutes = serializers.IntegerField(source="duration_minutes")
    tags = serializers.ListField(child=serializers.CharField())
    sellerId = serializers.CharField(source="seller_id", allow_null=True)
    ticketPriceStandard = serializers.DecimalField(
        max_digits=10, decimal_places=2, source="price_standard.amount"
    )
    ticketPriceVip = serializers.DecimalField(
        max_digits=10, decimal_places=2, source="price_vip.amount"
    )
    ticketPricePremium = serializers.DecimalField(
        max_digits=10, decimal_places=2, source="price_premium.amount"
    )
    totalTickets = serializers.IntegerField(source="total_tickets.value")
    unlimitedTickets = serializers.BooleanField(source="unlimited_tickets")
    availableTickets = serializers.IntegerField(source="available_tickets.value")
    createdAt = serializers.DateTimeField(source="created_at")


class BreakdownSerializer(serializers.Serializer):
    subtotal = serializers.IntegerField()
    serviceFee = serializers.IntegerField(source="service_fee")
    paymentFee = serializers.IntegerField(source="payment_fee")
    tax = serializers.IntegerField()
    total = serializers.IntegerField()


class LineItemSerializer(serializers.Serializer):
    contentId = serializers.CharField(source="content_id.value")
    title = serializers.CharField(source="content_title")
    ticketType = serializers.CharField(source="tier.value")
    quantity = serializers.IntegerField(source="quantity.value")
    unitPrice = serializers.IntegerField(source="unit_price_cents")
    total = serializers.IntegerField(source="total_cents")


class TicketSerializer(serializers.Serializer):
    """Serializer for the Ticket domain model."""

    id = serializers.CharField(source="id.value")
    code = serializers.CharField(source="code.value")
    orderId = serializers.CharField(source="order_id.value")
    contentId = serializers.CharField(source="content_id.value")
    ticketType = serializers.CharField(source="tier.value")
    issuedTo = serializers.CharField(source="issued_to")
    usedAt = serializers.DateTimeField(source="used_at", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")


class OrderSerializer(serializers.Serializer):
    """Serializer for the Order domain model."""

    id = serializers.CharField(source="id.value")
    contentId = serializers.CharField(source="content_id.value")
    title = serializers.CharField(source="content_title")
    ticketType = serializers.CharField(source="tier.value")
    quantity = serializers.IntegerField(source="quantity.value")
    totalAmount = serializers.IntegerField(source="total_amount")
    currency = serializers.CharField()
    status = serializers.CharField(source="status.value")
    buyerEmail = serializers.CharField(source="buyer_email")
    createdAt = serializers.DateTimeField(source="created_at")


class OrderGroupSerializer(serializers.Serializer):
    """Serializer for the OrderGroup domain model, items included."""

    id = serializers.CharField(source="id.value")
    status = serializers.CharField(source="status.value")
    buyerEmail = serializers.CharField(source="buyer_email")
    currency = serializers.CharField()
    amounts = BreakdownSerializer()
    items = OrderSerializer(source="orders", many=True)
    createdAt = serializers.DateTimeField(source="created_at")
