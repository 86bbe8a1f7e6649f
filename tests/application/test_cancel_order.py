"""Integration tests for the CancelOrder use case."""

import pytest

from fulfillment.application.cancel_order import CancelOrderHandler
from fulfillment.application.set_in_production import SetInProductionHandler
from fulfillment.application.ship_line_item import ShipLineItemHandler
from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.model.order import OrderStatus
from fulfillment.domain.repository.audit_sink import AuditAction
from tests.fakes import FakeStore, place_order


def _setup():
    store = FakeStore()
    order = place_order(store, ("10", "10"))
    return CancelOrderHandler(store.unit_of_work), store, order


class TestCancelOrder:

    def test_soft_deletes(self):
        handler, store, order = _setup()
        handler.handle(order.id, actor="erin")
        saved = store.state.orders[order.id]
        assert saved.status is OrderStatus.CANCELLED
        assert len(saved.items) == 2

    def test_audit_entry_has_no_after_image(self):
        handler, store, order = _setup()
        handler.handle(order.id, actor="erin")
        entry = store.state.audit[-1]
        assert entry.action == AuditAction.DELETE_ORDER
        assert entry.before["status"] == "pending"
        assert entry.after is None

    def test_cancel_twice_is_a_silent_no_op(self):
        handler, store, order = _setup()
        handler.handle(order.id)
        audit_count = len(store.state.audit)
        handler.handle(order.id)
        assert len(store.state.audit) == audit_count

    def test_unknown_order(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle(12345)

    def test_shipped_order_can_be_cancelled(self):
        handler, store, order = _setup()
        ship = ShipLineItemHandler(store.unit_of_work)
        for item in order.items:
            ship.handle(order.id, item.id, "10")
        assert store.state.orders[order.id].status is OrderStatus.SHIPPED
        handler.handle(order.id)
        assert store.state.orders[order.id].status is OrderStatus.CANCELLED


class TestCancelledIsTerminal:

    def test_later_mutations_never_revive_status(self):
        handler, store, order = _setup()
        handler.handle(order.id)

        SetInProductionHandler(store.unit_of_work).handle(order.id, order.items[0].id)
        result = ShipLineItemHandler(store.unit_of_work).handle(
            order.id, order.items[1].id, "10"
        )

        assert result.order_status == "cancelled"
        assert store.state.orders[order.id].status is OrderStatus.CANCELLED
