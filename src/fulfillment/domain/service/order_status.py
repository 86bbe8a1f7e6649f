"""Domain service: Order Status Aggregator.

Order status is derived state.  ``derive_order_status`` is a pure function
of the current line items; ``recompute_order_status`` applies it to an
order unless the order is cancelled, which is terminal.

    pending ──► production ──► shipped
       └───────────┴─────────────┴──► cancelled (explicit only)
"""

from __future__ import annotations

from collections.abc import Iterable

from fulfillment.domain.model.line_item import LineItem
from fulfillment.domain.model.order import Order, OrderStatus
from fulfillment.domain.model.value_objects import ZERO


def derive_order_status(items: Iterable[LineItem]) -> OrderStatus:
    """Rules, first match wins:

    1. every line item fully shipped            -> SHIPPED
    2. any item in production or partly shipped -> PRODUCTION
    3. otherwise (including no items at all)    -> PENDING

    Never returns CANCELLED.
    """
    items = list(items)
    if not items:
        return OrderStatus.PENDING
    if all(item.is_fully_shipped for item in items):
        return OrderStatus.SHIPPED
    if any(item.in_production or item.shipped_quantity > ZERO for item in items):
        return OrderStatus.PRODUCTION
    return OrderStatus.PENDING


def recompute_order_status(order: Order) -> bool:
    """Re-derive ``order.status`` in place.  Returns True if it changed."""
    if order.is_cancelled:
        return False
    status = derive_order_status(order.items)
    if status is order.status:
        return False
    order.status = status
    order.touch()
    return True
