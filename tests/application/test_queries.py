"""Tests for the ShowOrder and DashboardStats queries."""

from datetime import datetime, timezone

import pytest

from fulfillment.application.cancel_order import CancelOrderHandler
from fulfillment.application.dashboard_stats import DashboardStatsHandler
from fulfillment.application.set_in_production import SetInProductionHandler
from fulfillment.application.ship_line_item import ShipLineItemHandler
from fulfillment.application.show_order import ShowOrderHandler
from fulfillment.domain.exceptions import EntityNotFoundError
from tests.fakes import FakeStore, place_order


class TestShowOrder:

    def test_includes_customer_and_shipment_history(self):
        store = FakeStore()
        order = place_order(store, ("100", "5"))
        ship = ShipLineItemHandler(store.unit_of_work)
        ship.handle(order.id, order.items[0].id, "40", ship_date="2024-09-01")
        ship.handle(order.id, order.items[0].id, "10", ship_date="2024-09-05")

        dto = ShowOrderHandler(store.unit_of_work).handle(order.id)

        assert dto.customer_name == "ABC Manufacturing"
        first, second = dto.items
        assert [s.ship_date for s in first.shipments] == ["2024-09-05", "2024-09-01"]
        assert first.shipped_quantity == "50.00"
        assert first.remaining_quantity == "50.00"
        assert second.shipments == []

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(FakeStore().unit_of_work).handle(1)

    def test_does_not_write(self):
        store = FakeStore()
        order = place_order(store)
        audit_count = len(store.state.audit)
        ShowOrderHandler(store.unit_of_work).handle(order.id)
        assert len(store.state.audit) == audit_count


class TestDashboardStats:

    def test_counts_by_status(self):
        store = FakeStore()
        customer_id = store.add_customer().id
        pending = place_order(store, po_number="P1", customer_id=customer_id)
        producing = place_order(store, po_number="P2", customer_id=customer_id)
        shipped = place_order(store, ("3",), po_number="P3", customer_id=customer_id)
        cancelled = place_order(store, po_number="P4", customer_id=customer_id)

        SetInProductionHandler(store.unit_of_work).handle(producing.id, producing.items[0].id)
        ShipLineItemHandler(store.unit_of_work).handle(shipped.id, shipped.items[0].id, "3")
        CancelOrderHandler(store.unit_of_work).handle(cancelled.id)

        stats = DashboardStatsHandler(store.unit_of_work).handle()

        assert pending.status == "pending"
        assert stats.total_orders == 3
        assert stats.pending_orders == 1
        assert stats.production_orders == 1
        assert stats.shipped_this_month == 1

    def test_shipped_last_month_not_counted(self):
        store = FakeStore()
        order = place_order(store, ("1",))
        ShipLineItemHandler(store.unit_of_work).handle(order.id, order.items[0].id, "1")

        next_month = datetime.now(timezone.utc).replace(day=28)
        if next_month.month == 12:
            next_month = next_month.replace(year=next_month.year + 1, month=1)
        else:
            next_month = next_month.replace(month=next_month.month + 1)
        stats = DashboardStatsHandler(store.unit_of_work, now=lambda: next_month).handle()

        assert stats.total_orders == 1
        assert stats.shipped_this_month == 0
