"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Quantities travel as
two-place decimal strings so nothing downstream is tempted into floats.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from fulfillment.domain.model.customer import Customer
from fulfillment.domain.model.line_item import LineItem
from fulfillment.domain.model.order import Order
from fulfillment.domain.model.part import Part
from fulfillment.domain.model.shipment import Shipment


@dataclass(frozen=True)
class LineItemSpec:
    """Input: one line of a new order."""

    part_number: str
    description: str
    quantity: str | int | Decimal
    unit: str
    part_id: int | None = None
    colors: str | None = None


@dataclass(frozen=True)
class ShipmentDTO:
    id: int
    quantity: str
    ship_date: str
    tracking_number: str | None
    notes: str | None
    created_by: str | None


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single line item as displayed to the user."""

    id: int
    part_id: int | None
    part_number: str
    description: str
    colors: str | None
    quantity: str
    unit: str
    in_production: bool
    shipped_quantity: str
    remaining_quantity: str
    date_shipped: str | None
    shipment_state: str
    shipments: list[ShipmentDTO] = field(default_factory=list)


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    customer_id: int
    customer_name: str | None
    po_number: str
    due_date: str | None
    quoted_ship_date: str | None
    status: str
    notes: str | None
    items: list[LineItemDTO]
    created_at: str


@dataclass(frozen=True)
class ShipmentResultDTO:
    """Output of shipping a line item."""

    line_item: LineItemDTO
    shipment: ShipmentDTO
    shipped_quantity: str  # this shipment, not the running total
    remaining_quantity: str
    order_status: str


@dataclass(frozen=True)
class DashboardStatsDTO:
    total_orders: int
    pending_orders: int
    production_orders: int
    shipped_this_month: int


@dataclass(frozen=True)
class PartDTO:
    id: int
    part_number: str
    description: str
    colors: str | None


@dataclass(frozen=True)
class CustomerDTO:
    id: int
    name: str
    active: bool


# --- Mapping ------------------------------------------------------------------


def shipment_to_dto(shipment: Shipment) -> ShipmentDTO:
    return ShipmentDTO(
        id=shipment.id,  # type: ignore[arg-type]
        quantity=str(shipment.quantity),
        ship_date=shipment.ship_date.isoformat(),
        tracking_number=shipment.tracking_number,
        notes=shipment.notes,
        created_by=shipment.created_by,
    )


def line_item_to_dto(
    item: LineItem, shipments: list[Shipment] | None = None
) -> LineItemDTO:
    return LineItemDTO(
        id=item.id,  # type: ignore[arg-type]
        part_id=item.part_id,
        part_number=item.part_number,
        description=item.description,
        colors=item.colors,
        quantity=str(item.quantity),
        unit=item.unit.value,
        in_production=item.in_production,
        shipped_quantity=f"{item.shipped_quantity:.2f}",
        remaining_quantity=f"{item.remaining_quantity:.2f}",
        date_shipped=item.date_shipped.isoformat() if item.date_shipped else None,
        shipment_state=item.shipment_state.value,
        shipments=[shipment_to_dto(s) for s in shipments or []],
    )


def order_to_dto(
    order: Order,
    customer_name: str | None = None,
    shipments: dict[int, list[Shipment]] | None = None,
) -> OrderDTO:
    shipments = shipments or {}
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_id=order.customer_id,
        customer_name=customer_name,
        po_number=order.po_number,
        due_date=order.due_date.isoformat() if order.due_date else None,
        quoted_ship_date=(
            order.quoted_ship_date.isoformat() if order.quoted_ship_date else None
        ),
        status=order.status.value,
        notes=order.notes,
        items=[line_item_to_dto(i, shipments.get(i.id)) for i in order.items],  # type: ignore[arg-type]
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def part_to_dto(part: Part) -> PartDTO:
    return PartDTO(
        id=part.id,  # type: ignore[arg-type]
        part_number=part.part_number,
        description=part.description,
        colors=part.colors,
    )


def customer_to_dto(customer: Customer) -> CustomerDTO:
    return CustomerDTO(id=customer.id, name=customer.name, active=customer.active)  # type: ignore[arg-type]
