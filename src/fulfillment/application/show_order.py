"""Application service: Show Order use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from fulfillment.application.dto import OrderDTO, order_to_dto
from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: int) -> OrderDTO:
        """Order header, line items and each item's shipment history."""
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            customer = uow.customers.get_by_id(order.customer_id)
            shipments = {
                item.id: uow.shipments.list_for_line_item(item.id)  # type: ignore[arg-type]
                for item in order.items
            }
        return order_to_dto(
            order,
            customer_name=customer.name if customer else None,
            shipments=shipments,  # type: ignore[arg-type]
        )
