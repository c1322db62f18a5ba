from checkout.domain.models import (
    Availability,
    Buyer,
    CartLine,
    CheckoutSession,
    Content,
    FeeBreakdown,
    FeeSettings,
    LineItem,
    Order,
    OrderGroup,
    PlatformSettings,
    Ticket,
)
from checkout.domain.value_objects import (
    Capacity,
    ContentId,
    Money,
    OrderGroupId,
    OrderId,
    OrderStatus,
    Quantity,
    TicketCode,
    TicketId,
    TicketTier,
)

__all__ = [
    "Availability",
    "Buyer",
    "CartLine",
    "CheckoutSession",
    "Content",
    "FeeBreakdown",
    "FeeSettings",
    "LineItem",
    "Order",
    "OrderGroup",
    "PlatformSettings",
    "Ticket",
    "Capacity",
    "ContentId",
    "Money",
    "OrderGroupId",
    "OrderId",
    "OrderStatus",
    "Quantity",
    "TicketCode",
    "TicketId",
    "TicketTier",
]
