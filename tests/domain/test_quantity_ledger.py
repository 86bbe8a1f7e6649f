"""Unit tests for the Quantity Ledger."""

from decimal import Decimal

import pytest

from fulfillment.domain.exceptions import OverShipmentError
from fulfillment.domain.model.line_item import LineItem
from fulfillment.domain.model.value_objects import Quantity
from fulfillment.domain.service.quantity_ledger import QuantityLedger


def _item(qty: str) -> LineItem:
    item = LineItem.create("WG-001", "Wire Guard", qty, "feet")
    item.id = 1
    return item


class TestConsume:

    def test_increments_shipped_quantity(self):
        item = _item("100")
        assert QuantityLedger().consume(item, Quantity.of("40")) == Decimal("40.00")
        assert item.remaining_quantity == Decimal("60.00")

    def test_consume_exact_remaining(self):
        item = _item("100")
        ledger = QuantityLedger()
        ledger.consume(item, Quantity.of("40"))
        ledger.consume(item, Quantity.of("60"))
        assert item.remaining_quantity == Decimal("0.00")

    def test_over_shipment_rejected_whole(self):
        item = _item("10")
        QuantityLedger().consume(item, Quantity.of("7"))
        with pytest.raises(OverShipmentError, match="only 3.00 remaining"):
            QuantityLedger().consume(item, Quantity.of("4"))
        assert item.shipped_quantity == Decimal("7.00")

    def test_decimal_arithmetic_is_exact(self):
        item = _item("0.30")
        ledger = QuantityLedger()
        ledger.consume(item, Quantity.of("0.10"))
        ledger.consume(item, Quantity.of("0.20"))
        assert item.remaining_quantity == Decimal("0")
        with pytest.raises(OverShipmentError):
            ledger.consume(item, Quantity.of("0.01"))
