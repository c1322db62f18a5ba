"""Inventory ledger: per-content pricing and remaining capacity."""

import logging

from checkout.domain import Availability, ContentId
from checkout.domain.errors import ContentNotFoundError
from checkout.stores.interfaces import ContentStore

logger = logging.getLogger(__name__)


class InventoryLedger:
    """Source of truth for what can still be sold.

    Both decrements are single conditional updates at the storage layer.
    ``decrement`` refuses a sale it cannot cover; ``decrement_clamped`` is for
    sales that were already paid and reports by how many tickets they overran
    capacity.
    """

    def __init__(self, store: ContentStore) -> None:
        self._store = store

    def get_availability(self, content_id: ContentId) -> Availability:
        """Return unit prices and remaining tickets for a content.

        Raises:
            ContentNotFoundError: If the content does not exist.
        """
        content = self._store.get_content(content_id)
        if content is None:
            raise ContentNotFoundError(str(content_id))
        return Availability.of(content)

    def decrement(self, content_id: ContentId, quantity: int) -> bool:
        """Subtract ``quantity`` tickets if that many remain.

        A no-op returning True for unlimited contents. Returns False and
        leaves availability untouched when fewer tickets are left.
        """
        if self._store.decrement_if_available(content_id, quantity):
            return True
        return self.get_availability(content_id).unlimited

    def decrement_clamped(self, content_id: ContentId, quantity: int) -> int:
        """Subtract ``quantity`` tickets, never going below zero.

        Returns the number of tickets remaining capacity could not cover;
        0 when the sale fit or the content is unlimited.
        """
        if self.decrement(content_id, quantity):
            return 0
        shortfall = self._store.decrement_clamped(content_id, quantity)
        logger.warning(
            "Inventory for content %s could not cover %d of %d tickets; clamped to zero",
            content_id,
            shortfall,
            quantity,
        )
        return shortfall
