"""End-to-end tests against a real SQLite database file."""

import sqlite3
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, OperationalError

from fulfillment.application.cancel_order import CancelOrderHandler
from fulfillment.application.create_order import CreateOrderHandler
from fulfillment.application.dashboard_stats import DashboardStatsHandler
from fulfillment.application.dto import LineItemSpec
from fulfillment.application.manage_customer import AddCustomerHandler
from fulfillment.application.ship_line_item import ShipLineItemHandler
from fulfillment.application.show_order import ShowOrderHandler
from fulfillment.domain.exceptions import (
    ConflictError,
    OverShipmentError,
    TransactionFailure,
)
from fulfillment.domain.repository.audit_sink import AuditAction, AuditSink
from fulfillment.infrastructure.persistence.models import (
    AuditLogRecord,
    LineItemRecord,
    OrderRecord,
    ShipmentRecord,
)
from fulfillment.infrastructure.persistence.unit_of_work import (
    SqlAlchemyUnitOfWork,
    translate_store_error,
)


def _place_order(container, quantities=("100",), po_number="PO-1001", unit="feet"):
    customer = AddCustomerHandler(container.unit_of_work).handle("ABC Manufacturing")
    specs = [
        LineItemSpec(f"WG-{n}", f"Wire Guard {n}", qty, unit)
        for n, qty in enumerate(quantities, start=1)
    ]
    return CreateOrderHandler(container.unit_of_work).handle(
        customer.id, po_number, specs, actor="test"
    )


def _count(container, model) -> int:
    with container.session_factory()() as session:
        return session.scalar(select(func.count()).select_from(model))


class _BrokenAuditSink(AuditSink):

    def __init__(self, session) -> None:
        self._session = session

    def record(self, actor, action, entity_type, entity_id, before, after) -> None:
        raise OperationalError("INSERT INTO audit_log", {}, Exception("disk I/O error"))


class TestRoundTrip:

    def test_create_and_show(self, container):
        order = _place_order(container, ("100", "12.25"))
        dto = ShowOrderHandler(container.unit_of_work).handle(order.id)
        assert dto.status == "pending"
        assert [i.quantity for i in dto.items] == ["100.00", "12.25"]
        assert dto.items[1].unit == "feet"
        assert dto.customer_name == "ABC Manufacturing"

    def test_partial_then_final_shipment(self, container):
        order = _place_order(container, ("100",))
        item_id = order.items[0].id
        ship = ShipLineItemHandler(container.unit_of_work)

        first = ship.handle(order.id, item_id, "40", ship_date="2024-09-10")
        assert first.remaining_quantity == "60.00"
        assert first.order_status == "production"

        final = ship.handle(order.id, item_id, "60", ship_date="2024-09-12")
        assert final.order_status == "shipped"
        assert final.line_item.date_shipped == "2024-09-12"

        dto = ShowOrderHandler(container.unit_of_work).handle(order.id)
        assert dto.items[0].shipped_quantity == "100.00"
        assert [s.quantity for s in dto.items[0].shipments] == ["60.00", "40.00"]

    def test_shipment_rows_sum_to_ledger(self, container):
        order = _place_order(container, ("1",))
        item_id = order.items[0].id
        ship = ShipLineItemHandler(container.unit_of_work)
        for qty in ("0.10", "0.20", "0.70"):
            ship.handle(order.id, item_id, qty)

        with container.unit_of_work() as uow:
            total = uow.shipments.total_for_line_item(item_id)
            item = uow.orders.get_by_id(order.id).line_item(item_id)
        assert total == item.shipped_quantity == Decimal("1.00")
        assert item.date_shipped == date.today()

    def test_largest_quantity_ships_exactly(self, container):
        order = _place_order(container, ("99999999.99",))
        item_id = order.items[0].id
        ship = ShipLineItemHandler(container.unit_of_work)

        ship.handle(order.id, item_id, "0.01")
        result = ship.handle(order.id, item_id, "99999999.98")

        assert result.remaining_quantity == "0.00"
        assert result.order_status == "shipped"
        dto = ShowOrderHandler(container.unit_of_work).handle(order.id)
        assert dto.items[0].quantity == "99999999.99"
        assert dto.items[0].shipped_quantity == "99999999.99"

    def test_audit_rows_are_written(self, container):
        order = _place_order(container)
        ShipLineItemHandler(container.unit_of_work).handle(order.id, order.items[0].id, "5")

        with container.session_factory()() as session:
            actions = session.scalars(
                select(AuditLogRecord.action).order_by(AuditLogRecord.id)
            ).all()
            ship_row = session.scalars(
                select(AuditLogRecord).where(AuditLogRecord.action == AuditAction.SHIP_ITEM)
            ).one()
        assert actions == [
            AuditAction.CREATE_CUSTOMER,
            AuditAction.CREATE_ORDER,
            AuditAction.SHIP_ITEM,
        ]
        assert ship_row.table_name == "order_line_items"
        assert ship_row.old_values["shipped_quantity"] == "0.00"
        assert ship_row.new_values["shipped_quantity"] == "5.00"

    def test_cancelled_and_stats(self, container):
        order = _place_order(container, ("3",))
        ShipLineItemHandler(container.unit_of_work).handle(order.id, order.items[0].id, "3")
        stats = DashboardStatsHandler(container.unit_of_work).handle()
        assert stats.total_orders == 1
        assert stats.shipped_this_month == 1

        CancelOrderHandler(container.unit_of_work).handle(order.id)
        stats = DashboardStatsHandler(container.unit_of_work).handle()
        assert stats.total_orders == 0
        assert stats.shipped_this_month == 0
        assert ShowOrderHandler(container.unit_of_work).handle(order.id).status == "cancelled"


class TestAtomicity:

    def test_duplicate_po_writes_no_rows(self, container):
        order = _place_order(container)
        handler = CreateOrderHandler(container.unit_of_work)
        with pytest.raises(ConflictError):
            handler.handle(
                order.customer_id, "PO-1001", [LineItemSpec("A", "A", "1", "pieces")]
            )
        assert _count(container, OrderRecord) == 1
        assert _count(container, LineItemRecord) == 1

    def test_over_shipment_writes_no_rows(self, container):
        order = _place_order(container, ("10",))
        with pytest.raises(OverShipmentError):
            ShipLineItemHandler(container.unit_of_work).handle(
                order.id, order.items[0].id, "10.01"
            )
        assert _count(container, ShipmentRecord) == 0

    def test_audit_failure_rolls_back_the_shipment(self, container):
        order = _place_order(container, ("10",))
        handler = ShipLineItemHandler(
            lambda: SqlAlchemyUnitOfWork(container.session_factory(), _BrokenAuditSink)
        )
        with pytest.raises(TransactionFailure, match="nothing was saved"):
            handler.handle(order.id, order.items[0].id, "4")

        assert _count(container, ShipmentRecord) == 0
        dto = ShowOrderHandler(container.unit_of_work).handle(order.id)
        assert dto.items[0].shipped_quantity == "0.00"
        assert dto.status == "pending"

    def test_check_constraint_blocks_oversell_at_the_store(self, container):
        order = _place_order(container, ("10",))
        with container.session_factory()() as session:
            with pytest.raises(IntegrityError, match="CHECK constraint failed"):
                session.execute(
                    text("UPDATE order_line_items SET shipped_quantity = 11 WHERE id = :id"),
                    {"id": order.items[0].id},
                )


class TestTranslateStoreError:

    def test_unique_violation_is_conflict(self):
        exc = IntegrityError(
            "INSERT INTO orders",
            {},
            sqlite3.IntegrityError("UNIQUE constraint failed: orders.customer_id, orders.po_number"),
        )
        assert isinstance(translate_store_error(exc), ConflictError)

    def test_other_integrity_error_is_transaction_failure(self):
        exc = IntegrityError(
            "UPDATE order_line_items", {}, sqlite3.IntegrityError("CHECK constraint failed")
        )
        assert isinstance(translate_store_error(exc), TransactionFailure)

    def test_operational_error_is_transaction_failure(self):
        exc = OperationalError("SELECT 1", {}, sqlite3.OperationalError("database is locked"))
        error = translate_store_error(exc)
        assert isinstance(error, TransactionFailure)
        assert "locked" not in str(error)
