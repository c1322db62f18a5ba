from checkout.handlers.views import (
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

__all__ = [
    "CartPurchaseView",
    "CartQuoteView",
    "ContentDetailView",
    "ContentListView",
    "OrderCheckoutView",
    "OrderGroupCheckoutView",
    "OrderGroupView",
    "OrderView",
    "PaymentWebhookView",
    "PurchaseView",
    "RedeemView",
    "TicketQRView",
]
