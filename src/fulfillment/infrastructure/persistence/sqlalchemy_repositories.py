"""SQLAlchemy-backed implementations of the domain repositories.

Each repository is bound to the Session of one unit of work and never
commits on its own.  ``flush()`` is called after writes so constraint
violations surface inside the unit of work that caused them.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.model.customer import Customer
from fulfillment.domain.model.line_item import LineItem, Unit
from fulfillment.domain.model.order import Order, OrderStatus
from fulfillment.domain.model.part import Part
from fulfillment.domain.model.shipment import Shipment
from fulfillment.domain.model.value_objects import QUANTITY_PLACES, Quantity
from fulfillment.domain.repository.customer_repository import CustomerRepository
from fulfillment.domain.repository.order_repository import OrderRepository
from fulfillment.domain.repository.part_repository import PartRepository
from fulfillment.domain.repository.shipment_repository import ShipmentRepository
from fulfillment.infrastructure.persistence.models import (
    CustomerRecord,
    LineItemRecord,
    OrderRecord,
    PartRecord,
    ShipmentRecord,
)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _as_decimal(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(QUANTITY_PLACES)


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> None:
        row = OrderRecord(
            customer_id=order.customer_id,
            po_number=order.po_number,
            due_date=order.due_date,
            quoted_ship_date=order.quoted_ship_date,
            status=order.status.value,
            notes=order.notes,
            created_by=order.created_by,
            created_at=order.created_at,
            updated_at=order.updated_at,
            line_items=[self._item_to_row(item) for item in order.items],
        )
        self._session.add(row)
        self._session.flush()

        order.id = row.id
        for item, item_row in zip(order.items, row.line_items):
            item.id = item_row.id

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.get(OrderRecord, order_id)
        return self._to_domain(row) if row is not None else None

    def get_for_update(self, order_id: int) -> Order | None:
        # Lock order first, then its items, always in that order, so two
        # writers on the same order cannot deadlock.
        row = self._session.scalars(
            select(OrderRecord)
            .where(OrderRecord.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).one_or_none()
        if row is None:
            return None
        self._session.scalars(
            select(LineItemRecord)
            .where(LineItemRecord.order_id == order_id)
            .order_by(LineItemRecord.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).all()
        return self._to_domain(row)

    def po_number_taken(
        self,
        customer_id: int,
        po_number: str,
        exclude_order_id: int | None = None,
    ) -> bool:
        stmt = select(OrderRecord.id).where(
            OrderRecord.customer_id == customer_id,
            OrderRecord.po_number == po_number,
        )
        if exclude_order_id is not None:
            stmt = stmt.where(OrderRecord.id != exclude_order_id)
        return self._session.scalars(stmt.limit(1)).first() is not None

    def count_by_status(self) -> dict[OrderStatus, int]:
        rows = self._session.execute(
            select(OrderRecord.status, func.count(OrderRecord.id)).group_by(
                OrderRecord.status
            )
        ).all()
        return {OrderStatus(status): count for status, count in rows}

    def count_shipped_since(self, since: datetime) -> int:
        return self._session.scalar(
            select(func.count(OrderRecord.id)).where(
                OrderRecord.status == OrderStatus.SHIPPED.value,
                OrderRecord.updated_at >= since,
            )
        ) or 0

    def _persist(self, order: Order) -> None:
        row = self._session.get(OrderRecord, order.id)
        if row is None:
            raise EntityNotFoundError(f"Order #{order.id} not found")

        row.po_number = order.po_number
        row.due_date = order.due_date
        row.quoted_ship_date = order.quoted_ship_date
        row.notes = order.notes
        row.status = order.status.value
        row.updated_at = order.updated_at

        rows_by_id = {item_row.id: item_row for item_row in row.line_items}
        for item in order.items:
            item_row = rows_by_id.get(item.id)  # type: ignore[arg-type]
            if item_row is None:
                raise EntityNotFoundError(f"Line item #{item.id} not found")
            item_row.in_production = item.in_production
            item_row.shipped_quantity = item.shipped_quantity
            item_row.date_shipped = item.date_shipped
            item_row.updated_at = item.updated_at

        self._session.flush()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _item_to_row(item: LineItem) -> LineItemRecord:
        return LineItemRecord(
            part_id=item.part_id,
            part_number=item.part_number,
            description=item.description,
            colors=item.colors,
            quantity=item.quantity.value,
            unit=item.unit.value,
            in_production=item.in_production,
            shipped_quantity=item.shipped_quantity,
            date_shipped=item.date_shipped,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    @staticmethod
    def _item_to_domain(row: LineItemRecord) -> LineItem:
        return LineItem(
            id=row.id,
            part_id=row.part_id,
            part_number=row.part_number,
            description=row.description,
            colors=row.colors,
            quantity=Quantity(_as_decimal(row.quantity)),
            unit=Unit(row.unit),
            in_production=row.in_production,
            shipped_quantity=_as_decimal(row.shipped_quantity),
            date_shipped=row.date_shipped,
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )

    def _to_domain(self, row: OrderRecord) -> Order:
        return Order(
            id=row.id,
            customer_id=row.customer_id,
            po_number=row.po_number,
            items=[self._item_to_domain(item_row) for item_row in row.line_items],
            due_date=row.due_date,
            quoted_ship_date=row.quoted_ship_date,
            notes=row.notes,
            status=OrderStatus(row.status),
            created_by=row.created_by,
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )


class SqlAlchemyShipmentRepository(ShipmentRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, shipment: Shipment) -> Shipment:
        row = ShipmentRecord(
            line_item_id=shipment.line_item_id,
            quantity=shipment.quantity.value,
            ship_date=shipment.ship_date,
            tracking_number=shipment.tracking_number,
            notes=shipment.notes,
            created_by=shipment.created_by,
            created_at=shipment.created_at,
        )
        self._session.add(row)
        self._session.flush()
        return dataclasses.replace(shipment, id=row.id)

    def list_for_line_item(self, line_item_id: int) -> list[Shipment]:
        rows = self._session.scalars(
            select(ShipmentRecord)
            .where(ShipmentRecord.line_item_id == line_item_id)
            .order_by(ShipmentRecord.ship_date.desc(), ShipmentRecord.id.desc())
        ).all()
        return [self._to_domain(row) for row in rows]

    def total_for_line_item(self, line_item_id: int) -> Decimal:
        total = self._session.scalar(
            select(func.sum(ShipmentRecord.quantity)).where(
                ShipmentRecord.line_item_id == line_item_id
            )
        )
        return _as_decimal(total)

    @staticmethod
    def _to_domain(row: ShipmentRecord) -> Shipment:
        return Shipment(
            id=row.id,
            line_item_id=row.line_item_id,
            quantity=Quantity(_as_decimal(row.quantity)),
            ship_date=row.ship_date,
            tracking_number=row.tracking_number,
            notes=row.notes,
            created_by=row.created_by,
            created_at=_as_utc(row.created_at),
        )


class SqlAlchemyCustomerRepository(CustomerRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, customer_id: int) -> Customer | None:
        row = self._session.get(CustomerRecord, customer_id)
        return self._to_domain(row) if row is not None else None

    def add(self, customer: Customer) -> None:
        row = CustomerRecord(
            name=customer.name,
            contact_person=customer.contact_person,
            email=customer.email,
            phone=customer.phone,
            address=customer.address,
            active=customer.active,
            created_by=customer.created_by,
            created_at=customer.created_at,
        )
        self._session.add(row)
        self._session.flush()
        customer.id = row.id

    def save(self, customer: Customer) -> None:
        row = self._session.get(CustomerRecord, customer.id)
        if row is None:
            raise EntityNotFoundError(f"Customer #{customer.id} not found")
        row.name = customer.name
        row.contact_person = customer.contact_person
        row.email = customer.email
        row.phone = customer.phone
        row.address = customer.address
        row.active = customer.active
        self._session.flush()

    @staticmethod
    def _to_domain(row: CustomerRecord) -> Customer:
        return Customer(
            id=row.id,
            name=row.name,
            contact_person=row.contact_person,
            email=row.email,
            phone=row.phone,
            address=row.address,
            active=row.active,
            created_by=row.created_by,
            created_at=_as_utc(row.created_at),
        )


class SqlAlchemyPartRepository(PartRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, part_id: int) -> Part | None:
        row = self._session.get(PartRecord, part_id)
        return self._to_domain(row) if row is not None else None

    def get_by_part_number(self, part_number: str) -> Part | None:
        row = self._session.scalars(
            select(PartRecord).where(PartRecord.part_number == part_number)
        ).one_or_none()
        return self._to_domain(row) if row is not None else None

    def add(self, part: Part) -> None:
        row = PartRecord(
            part_number=part.part_number,
            description=part.description,
            colors=part.colors,
            active=part.active,
            created_by=part.created_by,
            created_at=part.created_at,
        )
        self._session.add(row)
        self._session.flush()
        part.id = row.id

    @staticmethod
    def _to_domain(row: PartRecord) -> Part:
        return Part(
            id=row.id,
            part_number=row.part_number,
            description=row.description,
            colors=row.colors,
            active=row.active,
            created_by=row.created_by,
            created_at=_as_utc(row.created_at),
        )
