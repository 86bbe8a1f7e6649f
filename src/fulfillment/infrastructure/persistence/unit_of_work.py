"""SQLAlchemy Unit of Work: one Session, one transaction.

Store errors never leave a unit of work raw.  A unique-constraint
violation becomes ConflictError (the PO/part-number check lost a race
with a concurrent insert); anything else is logged with full context
and surfaced as a generic TransactionFailure.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from fulfillment.domain.exceptions import ConflictError, DomainException, TransactionFailure
from fulfillment.domain.repository.audit_sink import AuditSink
from fulfillment.domain.repository.unit_of_work import UnitOfWork
from fulfillment.infrastructure.persistence.audit_sink import SqlAlchemyAuditSink
from fulfillment.infrastructure.persistence.sqlalchemy_repositories import (
    SqlAlchemyCustomerRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyPartRepository,
    SqlAlchemyShipmentRepository,
)

logger = structlog.get_logger(__name__)

_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "pgcode", None) == _UNIQUE_VIOLATION:
        return True
    return "unique" in str(exc.orig).lower()


def translate_store_error(exc: SQLAlchemyError) -> DomainException:
    if isinstance(exc, IntegrityError) and _is_unique_violation(exc):
        return ConflictError("A record with the same unique key already exists")
    logger.error("transaction_failure", error=str(exc), exc_info=exc)
    return TransactionFailure("The operation could not be completed; nothing was saved")


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        audit_factory: Callable[[Session], AuditSink] = SqlAlchemyAuditSink,
    ) -> None:
        self._session_factory = session_factory
        self._audit_factory = audit_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.orders = SqlAlchemyOrderRepository(self._session)
        self.shipments = SqlAlchemyShipmentRepository(self._session)
        self.customers = SqlAlchemyCustomerRepository(self._session)
        self.parts = SqlAlchemyPartRepository(self._session)
        self.audit = self._audit_factory(self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._session.close()  # type: ignore[union-attr]
            self._session = None
        if isinstance(exc, SQLAlchemyError):
            raise translate_store_error(exc) from exc

    def commit(self) -> None:
        try:
            self._session.commit()  # type: ignore[union-attr]
        except SQLAlchemyError as exc:
            self._session.rollback()  # type: ignore[union-attr]
            raise translate_store_error(exc) from exc

    def rollback(self) -> None:
        self._session.rollback()  # type: ignore[union-attr]
