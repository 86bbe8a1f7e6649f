"""Application service: Dashboard Stats use case (query)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from fulfillment.application.dto import DashboardStatsDTO
from fulfillment.domain.model.order import OrderStatus
from fulfillment.domain.repository.unit_of_work import UnitOfWork


class DashboardStatsHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._uow_factory = uow_factory
        self._now = now

    def handle(self) -> DashboardStatsDTO:
        """Counts over non-cancelled orders."""
        month_start = self._now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        with self._uow_factory() as uow:
            counts = uow.orders.count_by_status()
            shipped_this_month = uow.orders.count_shipped_since(month_start)

        active = {s: n for s, n in counts.items() if s is not OrderStatus.CANCELLED}
        return DashboardStatsDTO(
            total_orders=sum(active.values()),
            pending_orders=active.get(OrderStatus.PENDING, 0),
            production_orders=active.get(OrderStatus.PRODUCTION, 0),
            shipped_this_month=shipped_this_month,
        )
