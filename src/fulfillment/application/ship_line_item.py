"""Application service: Ship Line Item use case.

Validates the request, then hands the locked work to the
ShipmentRecorder inside a single unit of work.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from decimal import Decimal

from fulfillment.application.dto import (
    ShipmentResultDTO,
    line_item_to_dto,
    shipment_to_dto,
)
from fulfillment.application.parsing import clean_optional_text, parse_optional_date
from fulfillment.domain.model.value_objects import Quantity
from fulfillment.domain.repository.unit_of_work import UnitOfWork
from fulfillment.domain.service.shipment_recorder import ShipmentRecorder


class ShipLineItemHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        recorder: ShipmentRecorder | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._recorder = recorder or ShipmentRecorder()

    def handle(
        self,
        order_id: int,
        line_item_id: int,
        quantity: str | int | Decimal,
        ship_date: date | str | None = None,
        tracking_number: str | None = None,
        notes: str | None = None,
        actor: str | None = None,
    ) -> ShipmentResultDTO:
        """Ship *quantity* of a line item, partially or in full.

        Raises:
            ValidationError: quantity not positive / malformed date.
            EntityNotFoundError: order missing, or item not on this order.
            OverShipmentError: quantity exceeds what remains.
        """
        qty = Quantity.of(quantity)
        when = parse_optional_date(ship_date, "Ship date")

        with self._uow_factory() as uow:
            recorded = self._recorder.record(
                uow,
                order_id=order_id,
                line_item_id=line_item_id,
                quantity=qty,
                actor=actor,
                ship_date=when,
                tracking_number=clean_optional_text(tracking_number),
                notes=clean_optional_text(notes),
            )
            history = uow.shipments.list_for_line_item(line_item_id)
            uow.commit()

        item = recorded.line_item
        return ShipmentResultDTO(
            line_item=line_item_to_dto(item, history),
            shipment=shipment_to_dto(recorded.shipment),
            shipped_quantity=str(qty),
            remaining_quantity=f"{item.remaining_quantity:.2f}",
            order_status=recorded.order.status.value,
        )
