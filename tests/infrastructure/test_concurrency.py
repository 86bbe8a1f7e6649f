"""Competing writers against one SQLite file.

Every unit of work opens with BEGIN IMMEDIATE, so the second writer
waits for the first to commit and then sees the updated ledger.
"""

import threading
from decimal import Decimal

from fulfillment.application.create_order import CreateOrderHandler
from fulfillment.application.dto import LineItemSpec
from fulfillment.application.manage_customer import AddCustomerHandler
from fulfillment.application.set_in_production import SetInProductionHandler
from fulfillment.application.ship_line_item import ShipLineItemHandler
from fulfillment.application.show_order import ShowOrderHandler
from fulfillment.domain.exceptions import DomainException, OverShipmentError


def _run_concurrently(*calls):
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def run(index, call):
        barrier.wait()
        try:
            outcomes[index] = call()
        except DomainException as exc:
            outcomes[index] = exc

    threads = [threading.Thread(target=run, args=(i, c)) for i, c in enumerate(calls)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return outcomes


def _place_order(container, quantities):
    customer = AddCustomerHandler(container.unit_of_work).handle("ABC Manufacturing")
    specs = [LineItemSpec(f"P-{n}", "Part", q, "pieces") for n, q in enumerate(quantities)]
    return CreateOrderHandler(container.unit_of_work).handle(customer.id, "PO-1", specs)


class TestConcurrentWriters:

    def test_exactly_one_of_two_oversized_shipments_succeeds(self, container):
        order = _place_order(container, ["10"])
        item_id = order.items[0].id
        ship = ShipLineItemHandler(container.unit_of_work)

        outcomes = _run_concurrently(
            lambda: ship.handle(order.id, item_id, "7"),
            lambda: ship.handle(order.id, item_id, "7"),
        )

        failures = [o for o in outcomes if isinstance(o, OverShipmentError)]
        successes = [o for o in outcomes if not isinstance(o, DomainException)]
        assert len(failures) == 1
        assert len(successes) == 1

        dto = ShowOrderHandler(container.unit_of_work).handle(order.id)
        assert dto.items[0].shipped_quantity == "7.00"
        assert len(dto.items[0].shipments) == 1

    def test_shipments_on_sibling_items_both_count(self, container):
        order = _place_order(container, ["5", "5"])
        ship = ShipLineItemHandler(container.unit_of_work)

        outcomes = _run_concurrently(
            lambda: ship.handle(order.id, order.items[0].id, "5"),
            lambda: ship.handle(order.id, order.items[1].id, "5"),
        )

        assert not any(isinstance(o, DomainException) for o in outcomes)
        dto = ShowOrderHandler(container.unit_of_work).handle(order.id)
        assert dto.status == "shipped"

    def test_production_flag_and_shipment_do_not_lose_updates(self, container):
        order = _place_order(container, ["5", "5"])
        outcomes = _run_concurrently(
            lambda: SetInProductionHandler(container.unit_of_work).handle(
                order.id, order.items[0].id
            ),
            lambda: ShipLineItemHandler(container.unit_of_work).handle(
                order.id, order.items[1].id, "2.5"
            ),
        )

        assert not any(isinstance(o, DomainException) for o in outcomes)
        dto = ShowOrderHandler(container.unit_of_work).handle(order.id)
        assert dto.items[0].in_production is True
        assert Decimal(dto.items[1].shipped_quantity) == Decimal("2.50")
        assert dto.status == "production"
