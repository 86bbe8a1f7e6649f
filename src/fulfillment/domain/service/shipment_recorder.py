"""Domain service: Shipment Recorder.

Appends one immutable Shipment against a line item and applies it to the
Quantity Ledger.  Everything happens inside the caller's unit of work:

  1. lock the order and its line items
  2. append the Shipment row
  3. consume the quantity on the ledger
  4. stamp ``date_shipped`` the first time the item is fully shipped
  5. save the order (which recomputes its status)
  6. write the SHIP_ITEM audit entry

If any step raises, the unit of work is rolled back by the caller and
none of the steps persist.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import NamedTuple

import structlog

from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.model.line_item import LineItem
from fulfillment.domain.model.order import Order
from fulfillment.domain.model.shipment import Shipment
from fulfillment.domain.model.value_objects import Quantity
from fulfillment.domain.repository.audit_sink import AuditAction
from fulfillment.domain.repository.unit_of_work import UnitOfWork
from fulfillment.domain.service.quantity_ledger import QuantityLedger

logger = structlog.get_logger(__name__)


class RecordedShipment(NamedTuple):
    shipment: Shipment
    line_item: LineItem
    order: Order


class ShipmentRecorder:

    def __init__(
        self,
        ledger: QuantityLedger | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._ledger = ledger or QuantityLedger()
        self._today = today

    def record(
        self,
        uow: UnitOfWork,
        order_id: int,
        line_item_id: int,
        quantity: Quantity,
        actor: str | None,
        ship_date: date | None = None,
        tracking_number: str | None = None,
        notes: str | None = None,
    ) -> RecordedShipment:
        order = uow.orders.get_for_update(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        # Raises EntityNotFoundError if the item belongs to another order.
        item = order.line_item(line_item_id)

        before = item.snapshot()
        ship_date = ship_date or self._today()

        shipment = uow.shipments.add(
            Shipment(
                id=None,
                line_item_id=line_item_id,
                quantity=quantity,
                ship_date=ship_date,
                tracking_number=tracking_number,
                notes=notes,
                created_by=actor,
            )
        )

        self._ledger.consume(item, quantity)
        if item.remaining_quantity <= 0:
            item.mark_fully_shipped(ship_date)

        uow.orders.save(order)

        uow.audit.record(
            actor,
            AuditAction.SHIP_ITEM,
            "order_line_items",
            line_item_id,
            before,
            item.snapshot(),
        )

        logger.info(
            "shipment_recorded",
            order_id=order_id,
            line_item_id=line_item_id,
            shipment_id=shipment.id,
            quantity=str(quantity),
            shipped_quantity=f"{item.shipped_quantity:.2f}",
            order_status=order.status.value,
        )
        return RecordedShipment(shipment, item, order)
