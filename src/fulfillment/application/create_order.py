"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.  The
order row and every line-item row are written in one unit of work: if
anything fails, nothing from this call persists.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import structlog

from fulfillment.application.dto import LineItemSpec, OrderDTO, order_to_dto
from fulfillment.application.parsing import clean_optional_text, parse_optional_date
from fulfillment.domain.exceptions import ConflictError, EntityNotFoundError
from fulfillment.domain.model.line_item import LineItem
from fulfillment.domain.model.order import Order
from fulfillment.domain.repository.audit_sink import AuditAction
from fulfillment.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        customer_id: int,
        po_number: str,
        line_items: list[LineItemSpec],
        due_date: date | str | None = None,
        quoted_ship_date: date | str | None = None,
        notes: str | None = None,
        actor: str | None = None,
    ) -> OrderDTO:
        """Create a new order with its line items.

        Steps:
        1. Validate every line item and the header (no store access).
        2. Check the customer is active, any referenced parts exist,
           and the PO number is free for this customer.
        3. Persist order + items, write the audit entry, commit.
        """
        items = [
            LineItem.create(
                part_number=spec.part_number,
                description=spec.description,
                quantity=spec.quantity,
                unit=spec.unit,
                part_id=spec.part_id,
                colors=spec.colors,
            )
            for spec in line_items
        ]
        order = Order.create(
            customer_id=customer_id,
            po_number=po_number,
            items=items,
            due_date=parse_optional_date(due_date, "Due date"),
            quoted_ship_date=parse_optional_date(quoted_ship_date, "Quoted ship date"),
            notes=clean_optional_text(notes),
            created_by=actor,
        )

        with self._uow_factory() as uow:
            customer = uow.customers.get_by_id(customer_id)
            if customer is None or not customer.active:
                raise EntityNotFoundError(f"Customer #{customer_id} not found")

            for item in items:
                if item.part_id is not None and not uow.parts.exists(item.part_id):
                    raise EntityNotFoundError(f"Part #{item.part_id} not found")

            if uow.orders.po_number_taken(customer_id, order.po_number):
                raise ConflictError(
                    f"PO number '{order.po_number}' already exists for this customer"
                )

            uow.orders.add(order)
            uow.audit.record(
                actor,
                AuditAction.CREATE_ORDER,
                "orders",
                order.id,
                None,
                {**order.snapshot(), "line_items": [i.snapshot() for i in order.items]},
            )
            uow.commit()

        logger.info(
            "order_created",
            order_id=order.id,
            customer_id=customer_id,
            po_number=order.po_number,
            line_items=len(order.items),
        )
        return order_to_dto(order, customer_name=customer.name)
