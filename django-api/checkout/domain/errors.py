"""Domain error codes for the checkout module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    CONTENT_NOT_FOUND = "CONTENT_NOT_FOUND"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_GROUP_NOT_FOUND = "ORDER_GROUP_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    INVALID_TIER = "INVALID_TIER"
    MISSING_BUYER_EMAIL = "MISSING_BUYER_EMAIL"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    PAYMENT_GATEWAY_UNAVAILABLE = "PAYMENT_GATEWAY_UNAVAILABLE"
    NOT_SUPPORTED = "NOT_SUPPORTED"
    SIGNATURE_VERIFICATION_FAILED = "SIGNATURE_VERIFICATION_FAILED"
    ALREADY_USED = "ALREADY_USED"
    CONTENT_MISMATCH = "CONTENT_MISMATCH"
    TICKET_ISSUANCE_FAILED = "TICKET_ISSUANCE_FAILED"
    ALREADY_PAID = "ALREADY_PAID"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input has the wrong shape or range."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "resource") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )


class ContentNotFoundError(DomainError):
    """Raised when a content is not found."""

    def __init__(self, content_id: str) -> None:
        super().__init__(
            code=ErrorCode.CONTENT_NOT_FOUND,
            message="Content not found",
        )
        self.content_id = content_id


class OrderNotFoundError(DomainError):
    """Raised when an order is not found."""

    def __init__(self, order_id: str) -> None:
        super().__init__(code=ErrorCode.ORDER_NOT_FOUND, message="Order not found")
        self.order_id = order_id


class OrderGroupNotFoundError(DomainError):
    """Raised when an order group is not found."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            code=ErrorCode.ORDER_GROUP_NOT_FOUND,
            message="Order group not found",
        )
        self.group_id = group_id


class TicketNotFoundError(DomainError):
    """Raised when no ticket carries the presented code."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.TICKET_NOT_FOUND, message="Ticket not found")


class InvalidTierError(DomainError):
    """Raised when a ticket tier name is not standard, vip or premium."""

    def __init__(self, tier: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TIER,
            message=f"Invalid ticket type: {tier}",
        )
        self.tier = tier


class MissingBuyerEmailError(DomainError):
    """Raised when an anonymous buyer gives no email address."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.MISSING_BUYER_EMAIL,
            message="Buyer email is required",
        )


class InsufficientInventoryError(DomainError):
    """Raised when a content has fewer tickets left than requested."""

    def __init__(self, content_id: str, title: str, available: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_INVENTORY,
            message=f"Not enough tickets available for {title} ({available} left)",
        )
        self.content_id = content_id
        self.available = available


class PaymentGatewayUnavailableError(DomainError):
    """Raised when the payment processor cannot create a checkout session.

    Carries the id of the unpaid order or group so the client can retry.
    """

    def __init__(self, group_id: str | None = None, order_id: str | None = None) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_GATEWAY_UNAVAILABLE,
            message="Payment provider is unavailable, please retry",
        )
        self.group_id = group_id
        self.order_id = order_id


class PaymentMethodNotSupportedError(DomainError):
    """Raised for payment methods that are not implemented."""

    def __init__(
        self, method: str, group_id: str | None = None, order_id: str | None = None
    ) -> None:
        super().__init__(
            code=ErrorCode.NOT_SUPPORTED,
            message=f"Payment method not supported: {method}",
        )
        self.method = method
        self.group_id = group_id
        self.order_id = order_id


class SignatureVerificationError(DomainError):
    """Raised when a webhook payload cannot be authenticated."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SIGNATURE_VERIFICATION_FAILED,
            message="Invalid webhook",
        )


class TicketAlreadyUsedError(DomainError):
    """Raised when a ticket has already been redeemed."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.ALREADY_USED, message="Ticket already used")


class ContentMismatchError(DomainError):
    """Raised when a ticket is presented for a different content."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CONTENT_MISMATCH,
            message="Ticket is not valid for this content",
        )


class TicketIssuanceError(DomainError):
    """Raised when unique ticket codes could not be issued for a paid order."""

    def __init__(self, order_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_ISSUANCE_FAILED,
            message="Tickets could not be issued",
        )
        self.order_id = order_id


class AlreadyPaidError(DomainError):
    """Raised when checkout is retried for an order or group that is already paid."""

    def __init__(self, group_id: str | None = None, order_id: str | None = None) -> None:
        super().__init__(code=ErrorCode.ALREADY_PAID, message="Already paid")
        self.group_id = group_id
        self.order_id = order_id
