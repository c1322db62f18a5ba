"""Domain primitives that enforce validity at creation time."""

import secrets
import string
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Self
from uuid import UUID

MIN_QUANTITY = 1
MAX_QUANTITY = 10

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_SEGMENT_LENGTH = 4
CODE_SEGMENTS = 2
CODE_SEPARATOR = "-"


@dataclass(frozen=True)
class ContentId:
    """Unique identifier for a Content."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OrderId:
    """Unique identifier for an Order."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OrderGroupId:
    """Unique identifier for an OrderGroup."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TicketId:
    """Unique identifier for a Ticket."""

    value: UUID

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price in decimal currency units."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"

    def to_cents(self) -> int:
        """Convert to integer minor units, rounding half-up."""
        return int((self.amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True)
class Quantity:
    """Tickets requested on a single line, always within 1..10."""

    value: int

    def __post_init__(self) -> None:
        if not MIN_QUANTITY <= self.value <= MAX_QUANTITY:
            raise ValueError(f"Quantity must be between {MIN_QUANTITY} and {MAX_QUANTITY}")

    @classmethod
    def clamped(cls, value: int) -> Self:
        """Build a quantity, clamping out-of-range values instead of rejecting them."""
        return cls(value=max(MIN_QUANTITY, min(MAX_QUANTITY, int(value))))


class TicketTier(Enum):
    """Ticket class with its own unit price."""

    STANDARD = "standard"
    VIP = "vip"
    PREMIUM = "premium"

    @classmethod
    def parse(cls, value: str) -> Self:
        """Match a tier name case-insensitively.

        Raises:
            ValueError: If the name is not a known tier.
        """
        return cls(str(value).strip().lower())


class OrderStatus(Enum):
    """Payment status shared by orders and order groups."""

    PENDING = "pending"
    PAID = "paid"


@dataclass(frozen=True)
class TicketCode:
    """Shareable single-use admission code, e.g. ``K7QX-2MZD``."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Ticket code cannot be empty")

    @classmethod
    def normalize(cls, value: str) -> Self:
        return cls(value=str(value).strip().upper())

    @classmethod
    def generate(cls) -> Self:
        segments = (
            "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_SEGMENT_LENGTH))
            for _ in range(CODE_SEGMENTS)
        )
        return cls(value=CODE_SEPARATOR.join(segments))

    def __str__(self) -> str:
        return self.value
