"""Application service: Set In Production use case."""

from __future__ import annotations

from collections.abc import Callable

from fulfillment.application.dto import LineItemDTO, line_item_to_dto
from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.repository.audit_sink import AuditAction
from fulfillment.domain.repository.unit_of_work import UnitOfWork


class SetInProductionHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self, order_id: int, line_item_id: int, actor: str | None = None
    ) -> LineItemDTO:
        """Flag a line item as in production.

        The flag does not change the item's shipment state, but it does
        move a pending order to ``production`` when the order is saved.
        """
        with self._uow_factory() as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            item = order.line_item(line_item_id)

            before = item.snapshot()
            item.start_production()
            uow.orders.save(order)
            uow.audit.record(
                actor,
                AuditAction.SET_PRODUCTION,
                "order_line_items",
                item.id,
                before,
                item.snapshot(),
            )
            shipments = uow.shipments.list_for_line_item(line_item_id)
            uow.commit()

        return line_item_to_dto(item, shipments)
