"""Unit of Work port.

One unit of work is one database transaction.  Application handlers open
one per call::

    with self._uow_factory() as uow:
        ...
        uow.commit()

Leaving the block without ``commit()`` (including by exception) rolls
everything back, so multi-step mutations are all-or-nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fulfillment.domain.repository.audit_sink import AuditSink
from fulfillment.domain.repository.customer_repository import CustomerRepository
from fulfillment.domain.repository.order_repository import OrderRepository
from fulfillment.domain.repository.part_repository import PartRepository
from fulfillment.domain.repository.shipment_repository import ShipmentRepository


class UnitOfWork(ABC):

    orders: OrderRepository
    shipments: ShipmentRepository
    customers: CustomerRepository
    parts: PartRepository
    audit: AuditSink

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # No-op after a successful commit.
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change in this unit of work durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted change."""
