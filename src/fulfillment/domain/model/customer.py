"""Customer aggregate.

Only the pieces order placement relies on: identity, a display name and
the ``active`` flag.  Inactive customers keep their history but cannot
place new orders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from fulfillment.domain.exceptions import ValidationError


@dataclass
class Customer:

    id: int | None
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    active: bool = True
    created_by: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        name: str,
        contact_person: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        address: str | None = None,
        created_by: str | None = None,
    ) -> Customer:
        if not name or not name.strip():
            raise ValidationError("Customer name is required")
        return Customer(
            id=None,
            name=name.strip(),
            contact_person=contact_person,
            email=email,
            phone=phone,
            address=address,
            created_by=created_by,
        )

    def deactivate(self) -> bool:
        """Returns False if the customer was already inactive."""
        if not self.active:
            return False
        self.active = False
        return True

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "contact_person": self.contact_person,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "active": self.active,
        }
