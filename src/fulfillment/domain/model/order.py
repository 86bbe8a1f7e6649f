"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items.  Its status is
never assigned by callers: it is re-derived from the line items every time
the order is saved (see ``fulfillment.domain.service.order_status``).  The
one exception is ``cancel()``, which is terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from fulfillment.domain.exceptions import EntityNotFoundError, ValidationError
from fulfillment.domain.model.line_item import LineItem


class OrderStatus(Enum):
    PENDING = "pending"
    PRODUCTION = "production"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 200
MAX_PO_NUMBER_LENGTH = 100


@dataclass
class Order:
    """Aggregate root for customer purchase orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  ``__init__`` does no validation; the repository uses
    it to reconstitute persisted orders.
    """

    id: int | None
    customer_id: int
    po_number: str
    items: list[LineItem]
    due_date: date | None = None
    quoted_ship_date: date | None = None
    notes: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    created_by: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_id: int,
        po_number: str,
        items: list[LineItem],
        due_date: date | None = None,
        quoted_ship_date: date | None = None,
        notes: str | None = None,
        created_by: str | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        po_number = _clean_po_number(po_number)

        if not items:
            raise ValidationError("Order must contain at least one line item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} line items per order")

        return Order(
            id=None,
            customer_id=customer_id,
            po_number=po_number,
            items=list(items),
            due_date=due_date,
            quoted_ship_date=quoted_ship_date,
            notes=notes or None,
            created_by=created_by,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def is_cancelled(self) -> bool:
        return self.status is OrderStatus.CANCELLED

    def line_item(self, line_item_id: int) -> LineItem:
        """Return the line item owned by this order, or raise.

        A line item id that exists but belongs to another order is
        reported exactly like a missing one.
        """
        for item in self.items:
            if item.id == line_item_id:
                return item
        raise EntityNotFoundError(
            f"Line item #{line_item_id} not found on order #{self.id}"
        )

    # --- State transitions ----------------------------------------------------

    def update_details(
        self,
        po_number: str | None = None,
        due_date: date | None = None,
        quoted_ship_date: date | None = None,
        notes: str | None = None,
    ) -> None:
        """Change header fields.  ``None`` means "leave as is".

        Notes are stripped; blank notes clear the field.
        """
        if po_number is not None:
            self.po_number = _clean_po_number(po_number)
        if due_date is not None:
            self.due_date = due_date
        if quoted_ship_date is not None:
            self.quoted_ship_date = quoted_ship_date
        if notes is not None:
            self.notes = notes.strip() or None
        self.touch()

    def cancel(self) -> bool:
        """Transition any state -> CANCELLED.

        Returns False when the order was already cancelled, so callers
        can skip the audit entry for a no-op.
        """
        if self.is_cancelled:
            return False
        self.status = OrderStatus.CANCELLED
        self.touch()
        return True

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    # --- Audit ----------------------------------------------------------------

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "po_number": self.po_number,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "quoted_ship_date": (
                self.quoted_ship_date.isoformat() if self.quoted_ship_date else None
            ),
            "status": self.status.value,
            "notes": self.notes,
        }


def _clean_po_number(po_number: str | None) -> str:
    if not po_number or not po_number.strip():
        raise ValidationError("PO number is required")
    po_number = po_number.strip()
    if len(po_number) > MAX_PO_NUMBER_LENGTH:
        raise ValidationError(
            f"PO number may be at most {MAX_PO_NUMBER_LENGTH} characters"
        )
    return po_number
