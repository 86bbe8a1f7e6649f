"""Application service: Cancel Order use case.

Cancellation is a soft delete: the order and its line items stay, the
status becomes CANCELLED and is never recomputed again.  Shipments
against a cancelled order are not blocked here; see DESIGN.md.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.repository.audit_sink import AuditAction
from fulfillment.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: int, actor: str | None = None) -> None:
        with self._uow_factory() as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            before = order.snapshot()
            if not order.cancel():
                return

            uow.orders.save(order)
            uow.audit.record(
                actor, AuditAction.DELETE_ORDER, "orders", order.id, before, None
            )
            uow.commit()

        logger.info("order_cancelled", order_id=order_id, previous_status=before["status"])
