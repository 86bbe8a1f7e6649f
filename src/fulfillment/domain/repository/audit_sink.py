"""Audit sink port.

The core calls ``record()`` inside the same unit of work as the mutation
it describes.  The policy is fail-closed: if the sink raises, the unit
of work rolls back and the mutation never happens.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AuditSink(ABC):

    @abstractmethod
    def record(
        self,
        actor: str | None,
        action: str,
        entity_type: str,
        entity_id: int | None,
        before: dict[str, Any] | None,
        after: dict[str, Any] | None,
    ) -> None:
        """Store one before/after snapshot of a mutation."""


class AuditAction:
    CREATE_ORDER = "CREATE_ORDER"
    UPDATE_ORDER = "UPDATE_ORDER"
    SET_PRODUCTION = "SET_PRODUCTION"
    SHIP_ITEM = "SHIP_ITEM"
    DELETE_ORDER = "DELETE_ORDER"
    CREATE_PART = "CREATE_PART"
    CREATE_CUSTOMER = "CREATE_CUSTOMER"
    DEACTIVATE_CUSTOMER = "DEACTIVATE_CUSTOMER"
