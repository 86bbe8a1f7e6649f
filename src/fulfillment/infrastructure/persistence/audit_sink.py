"""Audit sink that writes to the ``audit_log`` table.

Bound to the unit of work's Session, so the audit row commits or rolls
back together with the mutation it describes.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from fulfillment.domain.repository.audit_sink import AuditSink
from fulfillment.infrastructure.persistence.models import AuditLogRecord


class SqlAlchemyAuditSink(AuditSink):

    def __init__(self, session: Session) -> None:
        self._session = session

    def record(
        self,
        actor: str | None,
        action: str,
        entity_type: str,
        entity_id: int | None,
        before: dict[str, Any] | None,
        after: dict[str, Any] | None,
    ) -> None:
        self._session.add(
            AuditLogRecord(
                actor=actor,
                action=action,
                table_name=entity_type,
                record_id=entity_id,
                old_values=before,
                new_values=after,
            )
        )
        self._session.flush()
