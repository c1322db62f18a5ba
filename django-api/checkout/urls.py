from django.urls import path

from checkout.handlers import (
    CartPurchaseView,
    CartQuoteView,
    ContentDetailView,
    ContentListView,
    OrderCheckoutView,
    OrderGroupCheckoutView,
    OrderGroupView,
    OrderView,
    PaymentWebhookView,
    PurchaseView,
    RedeemView,
    TicketQRView,
)

urlpatterns = [
    path("contents", ContentListView.as_view(), name="content-list"),
    path("contents/<str:content_id>", ContentDetailView.as_view(), name="content-detail"),
    path("purchase", PurchaseView.as_view(), name="purchase"),
    path("purchase/cart", CartPurchaseView.as_view(), name="purchase-cart"),
    path("purchase/cart/quote", CartQuoteView.as_view(), name="purchase-cart-quote"),
    path("order-group/<str:group_id>", OrderGroupView.as_view(), name="order-group"),
    path(
        "order-group/<str:group_id>/checkout",
        OrderGroupCheckoutView.as_view(),
        name="order-group-checkout",
    ),
    path("orders/<str:order_id>", OrderView.as_view(), name="order-detail"),
    path("orders/<str:order_id>/checkout", OrderCheckoutView.as_view(), name="order-checkout"),
    path("payment-webhook", PaymentWebhookView.as_view(), name="payment-webhook"),
    path("redeem", RedeemView.as_view(), name="redeem"),
    path("tickets/<str:code>/qr", TicketQRView.as_view(), name="ticket-qr"),
]
