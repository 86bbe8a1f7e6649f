"""Application service: Update Order use case.

Only header fields can change: PO number, due date, quoted ship date
and notes.  Status is never accepted here.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from fulfillment.application.dto import OrderDTO, order_to_dto
from fulfillment.application.parsing import parse_optional_date
from fulfillment.domain.exceptions import ConflictError, EntityNotFoundError
from fulfillment.domain.repository.audit_sink import AuditAction
from fulfillment.domain.repository.unit_of_work import UnitOfWork


class UpdateOrderHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        order_id: int,
        po_number: str | None = None,
        due_date: date | str | None = None,
        quoted_ship_date: date | str | None = None,
        notes: str | None = None,
        actor: str | None = None,
    ) -> OrderDTO:
        due = parse_optional_date(due_date, "Due date")
        quoted = parse_optional_date(quoted_ship_date, "Quoted ship date")

        with self._uow_factory() as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            before = order.snapshot()
            order.update_details(
                po_number=po_number,
                due_date=due,
                quoted_ship_date=quoted,
                notes=notes,
            )
            if order.po_number != before["po_number"] and uow.orders.po_number_taken(
                order.customer_id, order.po_number, exclude_order_id=order.id
            ):
                raise ConflictError(
                    f"PO number '{order.po_number}' already exists for this customer"
                )

            uow.orders.save(order)
            uow.audit.record(
                actor, AuditAction.UPDATE_ORDER, "orders", order.id, before, order.snapshot()
            )
            customer = uow.customers.get_by_id(order.customer_id)
            uow.commit()

        return order_to_dto(order, customer_name=customer.name if customer else None)
