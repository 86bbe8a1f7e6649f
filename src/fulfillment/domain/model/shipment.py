"""Shipment records, a write-once log against a line item."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from fulfillment.domain.model.value_objects import Quantity


@dataclass(frozen=True)
class Shipment:
    """An immutable record of goods leaving against one line item.

    The sum of every Shipment's ``quantity`` for a line item always equals
    that item's ``shipped_quantity``.  Corrections are never made by editing
    a record.
    """

    id: int | None
    line_item_id: int
    quantity: Quantity
    ship_date: date
    tracking_number: str | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "line_item_id": self.line_item_id,
            "quantity": str(self.quantity),
            "ship_date": self.ship_date.isoformat(),
            "tracking_number": self.tracking_number,
            "notes": self.notes,
        }
