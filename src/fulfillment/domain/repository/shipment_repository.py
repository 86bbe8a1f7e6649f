"""Abstract repository for Shipment records.

Append-only: there is no update or delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from fulfillment.domain.model.shipment import Shipment


class ShipmentRepository(ABC):

    @abstractmethod
    def add(self, shipment: Shipment) -> Shipment:
        """Append a shipment and return it with its assigned id."""

    @abstractmethod
    def list_for_line_item(self, line_item_id: int) -> list[Shipment]:
        """Shipments for a line item, newest ship date first."""

    @abstractmethod
    def total_for_line_item(self, line_item_id: int) -> Decimal:
        """Sum of shipment quantities for a line item (0.00 if none)."""
