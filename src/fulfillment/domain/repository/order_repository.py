"""Abstract repository for the Order aggregate.

``save()`` is the single write path for an existing order and always
re-derives the order status from its line items before persisting, so
no caller can mutate a line item and leave the parent status stale.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from fulfillment.domain.model.order import Order, OrderStatus
from fulfillment.domain.service.order_status import recompute_order_status


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a brand-new order with its line items, assigning ids."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_for_update(self, order_id: int) -> Order | None:
        """Return an order and its line items, locked until the unit of
        work ends.  Concurrent callers for the same order block here."""

    @abstractmethod
    def po_number_taken(
        self,
        customer_id: int,
        po_number: str,
        exclude_order_id: int | None = None,
    ) -> bool:
        """True if *customer_id* already has an order with *po_number*."""

    @abstractmethod
    def count_by_status(self) -> dict[OrderStatus, int]:
        """Number of orders per status."""

    @abstractmethod
    def count_shipped_since(self, since: datetime) -> int:
        """Number of shipped orders last updated at or after *since*."""

    def save(self, order: Order) -> None:
        """Recompute status, then persist header and line-item changes."""
        recompute_order_status(order)
        self._persist(order)

    @abstractmethod
    def _persist(self, order: Order) -> None:
        """Write an existing order.  Raise EntityNotFoundError if it is gone."""
