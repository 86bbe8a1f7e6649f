"""Line items and their derived shipment state.

A line item is owned by exactly one Order.  Part number, description and
colors are captured when the order is placed and never follow later edits
to the catalog Part.  The ordered ``quantity`` and ``unit`` are fixed at
creation; only the ledger (``shipped_quantity``), the production flag and
``date_shipped`` change afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from fulfillment.domain.exceptions import ValidationError
from fulfillment.domain.model.value_objects import ZERO, Quantity


class Unit(Enum):
    FEET = "feet"
    METERS = "meters"
    PIECES = "pieces"

    @staticmethod
    def parse(raw: str | Unit) -> Unit:
        if isinstance(raw, Unit):
            return raw
        try:
            return Unit((raw or "").strip().lower())
        except ValueError:
            allowed = ", ".join(u.value for u in Unit)
            raise ValidationError(f"Unit must be one of {allowed}, got {raw!r}") from None


class ShipmentState(Enum):
    UNSHIPPED = "unshipped"
    PARTIALLY_SHIPPED = "partially_shipped"
    FULLY_SHIPPED = "fully_shipped"


@dataclass
class LineItem:
    """One ordered part/quantity/unit entry within an Order."""

    id: int | None
    part_number: str
    description: str
    quantity: Quantity
    unit: Unit
    part_id: int | None = None
    colors: str | None = None
    in_production: bool = False
    shipped_quantity: Decimal = ZERO
    date_shipped: date | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW line items only) -------------------------------

    @staticmethod
    def create(
        part_number: str,
        description: str,
        quantity: str | int | Decimal | Quantity,
        unit: str | Unit,
        part_id: int | None = None,
        colors: str | None = None,
    ) -> LineItem:
        if not part_number or not part_number.strip():
            raise ValidationError("Part number is required")
        if not description or not description.strip():
            raise ValidationError("Description is required")
        if not isinstance(quantity, Quantity):
            quantity = Quantity.of(quantity)
        return LineItem(
            id=None,
            part_number=part_number.strip(),
            description=description.strip(),
            quantity=quantity,
            unit=Unit.parse(unit),
            part_id=part_id,
            colors=colors.strip() if colors and colors.strip() else None,
        )

    # --- Derived state --------------------------------------------------------

    @property
    def remaining_quantity(self) -> Decimal:
        return self.quantity.value - self.shipped_quantity

    @property
    def shipment_state(self) -> ShipmentState:
        if self.date_shipped is not None or self.shipped_quantity >= self.quantity.value:
            return ShipmentState.FULLY_SHIPPED
        if self.shipped_quantity > ZERO:
            return ShipmentState.PARTIALLY_SHIPPED
        return ShipmentState.UNSHIPPED

    @property
    def is_fully_shipped(self) -> bool:
        return self.shipment_state is ShipmentState.FULLY_SHIPPED

    # --- Mutations ------------------------------------------------------------

    def start_production(self) -> None:
        """Flag the item as in production.  Never cleared automatically."""
        self.in_production = True
        self.touch()

    def mark_fully_shipped(self, on: date) -> None:
        """Stamp ``date_shipped`` once; later calls keep the first date."""
        if self.date_shipped is None:
            self.date_shipped = on
            self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    # --- Audit ----------------------------------------------------------------

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "part_id": self.part_id,
            "part_number": self.part_number,
            "description": self.description,
            "colors": self.colors,
            "quantity": str(self.quantity),
            "unit": self.unit.value,
            "in_production": self.in_production,
            "shipped_quantity": f"{self.shipped_quantity:.2f}",
            "date_shipped": self.date_shipped.isoformat() if self.date_shipped else None,
        }
