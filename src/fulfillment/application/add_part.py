"""Application service: Add Part use case."""

from __future__ import annotations

from collections.abc import Callable

from fulfillment.application.dto import PartDTO, part_to_dto
from fulfillment.domain.exceptions import ConflictError
from fulfillment.domain.model.part import Part
from fulfillment.domain.repository.audit_sink import AuditAction
from fulfillment.domain.repository.unit_of_work import UnitOfWork


class AddPartHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        part_number: str,
        description: str,
        colors: str | None = None,
        actor: str | None = None,
    ) -> PartDTO:
        """Add a new part to the catalog.  Part numbers are unique."""
        part = Part.create(part_number, description, colors, created_by=actor)

        with self._uow_factory() as uow:
            if uow.parts.get_by_part_number(part.part_number) is not None:
                raise ConflictError(f"Part number '{part.part_number}' already exists")
            uow.parts.add(part)
            uow.audit.record(
                actor, AuditAction.CREATE_PART, "parts", part.id, None, part.snapshot()
            )
            uow.commit()

        return part_to_dto(part)
