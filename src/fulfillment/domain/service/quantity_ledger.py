"""Domain service: Quantity Ledger.

Tracks ordered vs. shipped quantity per line item and enforces the
non-oversell invariant ``0 <= shipped_quantity <= quantity``.

The ledger works on a line item that the caller has already locked for
the current unit of work (``OrderRepository.get_for_update``); the
remaining-quantity check is only race-free under that lock.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from fulfillment.domain.exceptions import OverShipmentError
from fulfillment.domain.model.line_item import LineItem
from fulfillment.domain.model.value_objects import Quantity

logger = structlog.get_logger(__name__)


class QuantityLedger:

    def consume(self, item: LineItem, quantity: Quantity) -> Decimal:
        """Move *quantity* from remaining to shipped.

        All or nothing: a request larger than the remaining quantity is
        rejected whole and the item is left untouched.

        Returns the new ``shipped_quantity``.
        """
        remaining = item.remaining_quantity
        if quantity.value > remaining:
            logger.info(
                "over_shipment_rejected",
                line_item_id=item.id,
                requested=str(quantity),
                remaining=f"{remaining:.2f}",
            )
            raise OverShipmentError(
                f"Cannot ship {quantity} {item.unit.value} of {item.part_number} "
                f"- only {remaining:.2f} remaining"
            )
        item.shipped_quantity = item.shipped_quantity + quantity.value
        item.touch()
        return item.shipped_quantity
