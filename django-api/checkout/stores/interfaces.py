"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass

from checkout.domain import (
    Content,
    ContentId,
    FeeBreakdown,
    LineItem,
    Order,
    OrderGroup,
    OrderGroupId,
    OrderId,
    PlatformSettings,
    Ticket,
    TicketCode,
)


class DuplicateTicketCode(Exception):
    """Raised by a ticket store when a code is already taken."""


@dataclass(frozen=True)
class ContentPage:
    contents: list[Content]
    total: int
    has_more: bool


class ContentStore(ABC):
    """Interface for content catalog reads and inventory counters."""

    @abstractmethod
    def list_contents(self, page: int, limit: int, tag: str | None = None) -> ContentPage:
        """Return one page of contents ordered by created_at descending."""
        ...

    @abstractmethod
    def get_content(self, content_id: ContentId) -> Content | None:
        """Return a content by ID, or None if not found."""
        ...

    @abstractmethod
    def get_contents(self, content_ids: list[ContentId]) -> dict[ContentId, Content]:
        """Return the existing contents among ``content_ids``, keyed by ID."""
        ...

    @abstractmethod
    def decrement_if_available(self, content_id: ContentId, quantity: int) -> bool:
        """Atomically subtract ``quantity`` if at least that many remain.

        Returns True when a row was updated.
        """
        ...

    @abstractmethod
    def decrement_clamped(self, content_id: ContentId, quantity: int) -> int:
        """Atomically subtract ``quantity``, never going below zero.

        Returns how many of ``quantity`` exceeded the remaining tickets.
        """
        ...


class OrderStore(ABC):
    """Interface for orders and order groups."""

    @abstractmethod
    def create_group(
        self,
        buyer_id: str | None,
        buyer_email: str,
        amounts: FeeBreakdown,
        currency: str,
        line_items: list[LineItem],
    ) -> OrderGroup:
        """Persist a group and one order per line item as one unit."""
        ...

    @abstractmethod
    def create_order(
        self,
        buyer_id: str | None,
        buyer_email: str,
        currency: str,
        line_item: LineItem,
    ) -> Order:
        """Persist a standalone order."""
        ...

    @abstractmethod
    def get_group(self, group_id: OrderGroupId) -> OrderGroup | None:
        """Return a group with its orders, or None if not found."""
        ...

    @abstractmethod
    def get_order(self, order_id: OrderId) -> Order | None:
        """Return an order by ID, or None if not found."""
        ...

    @abstractmethod
    def find_group_by_session(self, session_id: str) -> OrderGroup | None:
        ...

    @abstractmethod
    def find_order_by_session(self, session_id: str) -> Order | None:
        ...

    @abstractmethod
    def attach_group_session(self, group_id: OrderGroupId, session_id: str) -> None:
        ...

    @abstractmethod
    def attach_order_session(self, order_id: OrderId, session_id: str) -> None:
        ...

    @abstractmethod
    def mark_group_paid(self, group_id: OrderGroupId) -> bool:
        """Set a pending group and all its orders to paid.

        Returns True only when this call performed the transition.
        """
        ...

    @abstractmethod
    def mark_order_paid(self, order_id: OrderId) -> bool:
        """Set a pending order to paid.

        Returns True only when this call performed the transition.
        """
        ...

    @abstractmethod
    def record_oversell(self, order_id: OrderId, quantity: int) -> None:
        """Add ``quantity`` to the tickets an order was issued beyond capacity."""
        ...

    @abstractmethod
    def next_group_attempt(self, group_id: OrderGroupId) -> int:
        """Count one more checkout attempt for a group and return the new count."""
        ...

    @abstractmethod
    def next_order_attempt(self, order_id: OrderId) -> int:
        ...


class TicketStore(ABC):
    """Interface for issued tickets."""

    @abstractmethod
    def create_ticket(self, order: Order, code: TicketCode) -> Ticket:
        """Persist a ticket for one unit of an order.

        Raises:
            DuplicateTicketCode: If the code is already in use.
        """
        ...

    @abstractmethod
    def get_by_code(self, code: TicketCode) -> Ticket | None:
        ...

    @abstractmethod
    def list_for_orders(self, order_ids: list[OrderId]) -> list[Ticket]:
        """Return tickets of the given orders ordered by issue time."""
        ...

    @abstractmethod
    def mark_used(
        self, code: TicketCode, content_id: ContentId, used_by: str | None
    ) -> Ticket | None:
        """Consume an unused ticket for ``content_id`` in one conditional update.

        Returns the updated ticket, or None when nothing matched.
        """
        ...


class SettingsStore(ABC):
    """Interface for platform settings."""

    @abstractmethod
    def get_settings(self) -> PlatformSettings:
        ...


class TransactionManager(ABC):
    """Unit-of-work boundary for multi-store writes."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Return a context manager; everything inside commits or rolls back together."""
        ...

    @abstractmethod
    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the current transaction has committed."""
        ...
