"""Part aggregate.

Parts live independently of orders.  Line items copy the part number,
description and colors at order time, so later catalog edits never
reach existing orders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from fulfillment.domain.exceptions import ValidationError


@dataclass
class Part:
    """A part in the catalog."""

    id: int | None
    part_number: str
    description: str
    colors: str | None = None
    active: bool = True
    created_by: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        part_number: str,
        description: str,
        colors: str | None = None,
        created_by: str | None = None,
    ) -> Part:
        if not part_number or not part_number.strip():
            raise ValidationError("Part number is required")
        if not description or not description.strip():
            raise ValidationError("Part description is required")
        return Part(
            id=None,
            part_number=part_number.strip(),
            description=description.strip(),
            colors=colors.strip() if colors and colors.strip() else None,
            created_by=created_by,
        )

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "part_number": self.part_number,
            "description": self.description,
            "colors": self.colors,
            "active": self.active,
        }
