"""Abstract repository for the Part aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (SQL, in-memory) live in the
infrastructure layer and the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fulfillment.domain.model.part import Part


class PartRepository(ABC):

    @abstractmethod
    def get_by_id(self, part_id: int) -> Part | None:
        """Return a part by its ID, or None if not found."""

    @abstractmethod
    def get_by_part_number(self, part_number: str) -> Part | None:
        """Return a part by its exact part number, or None if not found."""

    @abstractmethod
    def add(self, part: Part) -> None:
        """Persist a new part, assigning its id."""

    def exists(self, part_id: int) -> bool:
        return self.get_by_id(part_id) is not None
