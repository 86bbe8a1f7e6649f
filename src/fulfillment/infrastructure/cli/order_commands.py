"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from fulfillment.application.cancel_order import CancelOrderHandler
from fulfillment.application.create_order import CreateOrderHandler
from fulfillment.application.dashboard_stats import DashboardStatsHandler
from fulfillment.application.dto import LineItemDTO, LineItemSpec, OrderDTO
from fulfillment.application.set_in_production import SetInProductionHandler
from fulfillment.application.ship_line_item import ShipLineItemHandler
from fulfillment.application.show_order import ShowOrderHandler
from fulfillment.application.update_order import UpdateOrderHandler
from fulfillment.domain.exceptions import DomainException
from fulfillment.infrastructure.bootstrap import Container
from fulfillment.infrastructure.cli.errors import to_click_error


def _parse_item(raw: str) -> LineItemSpec:
    """Parse 'WG-001:Wire Guard Standard:100:pieces' into a LineItemSpec.

    The description may itself contain colons; part number is taken from
    the left, quantity and unit from the right.
    """
    if raw.count(":") < 3:
        raise click.BadParameter(
            f"Invalid item format '{raw}'. Expected 'PartNumber:Description:Qty:Unit'."
        )
    part_number, rest = raw.split(":", 1)
    description, quantity, unit = rest.rsplit(":", 2)
    return LineItemSpec(
        part_number=part_number.strip(),
        description=description.strip(),
        quantity=quantity.strip(),
        unit=unit.strip(),
    )


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  PO {dto.po_number}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name or dto.customer_id}")
    if dto.due_date:
        click.echo(f"Due:      {dto.due_date}")
    if dto.quoted_ship_date:
        click.echo(f"Quoted:   {dto.quoted_ship_date}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()

    click.echo(
        f"  {'#':>4} {'Part':<12} {'Qty':>10} {'Unit':<7} {'Shipped':>10} "
        f"{'Remaining':>10} {'State':<18} {'Prod':<4}"
    )
    click.echo(f"  {'-'*82}")
    for item in dto.items:
        _display_item_row(item)
        for s in item.shipments:
            tracking = f"  tracking {s.tracking_number}" if s.tracking_number else ""
            click.echo(f"       shipped {s.quantity} on {s.ship_date}{tracking}")
    click.echo(f"  {'-'*82}")


def _display_item_row(item: LineItemDTO) -> None:
    click.echo(
        f"  {item.id:>4} {item.part_number:<12} {item.quantity:>10} {item.unit:<7} "
        f"{item.shipped_quantity:>10} {item.remaining_quantity:>10} "
        f"{item.shipment_state:<18} {'yes' if item.in_production else '':<4}"
    )


@click.command("create")
@click.option("--customer", "customer_id", required=True, type=int, help="Customer ID.")
@click.option("--po", "po_number", required=True, help="Purchase order number.")
@click.option(
    "--item",
    "items",
    required=True,
    multiple=True,
    help="Line item as 'PartNumber:Description:Qty:Unit'. Repeatable.",
)
@click.option("--due", "due_date", default=None, help="Due date (YYYY-MM-DD).")
@click.option("--quoted", "quoted_ship_date", default=None, help="Quoted ship date (YYYY-MM-DD).")
@click.option("--notes", default=None)
@click.pass_obj
def order_create(
    container: Container,
    customer_id: int,
    po_number: str,
    items: tuple[str, ...],
    due_date: str | None,
    quoted_ship_date: str | None,
    notes: str | None,
) -> None:
    """Create a new order with its line items."""
    specs = [_parse_item(raw) for raw in items]
    handler = CreateOrderHandler(container.unit_of_work)

    try:
        dto = handler.handle(
            customer_id=customer_id,
            po_number=po_number,
            line_items=specs,
            due_date=due_date,
            quoted_ship_date=quoted_ship_date,
            notes=notes,
            actor=container.settings.actor,
        )
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    click.echo()
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(container: Container, order_id: int) -> None:
    """Show an order with its line items and shipment history."""
    handler = ShowOrderHandler(container.unit_of_work)

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise to_click_error(exc)

    _display_order(dto)


@click.command("update")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--po", "po_number", default=None, help="New PO number.")
@click.option("--due", "due_date", default=None, help="Due date (YYYY-MM-DD).")
@click.option("--quoted", "quoted_ship_date", default=None, help="Quoted ship date (YYYY-MM-DD).")
@click.option("--notes", default=None)
@click.pass_obj
def order_update(
    container: Container,
    order_id: int,
    po_number: str | None,
    due_date: str | None,
    quoted_ship_date: str | None,
    notes: str | None,
) -> None:
    """Change an order's PO number, dates or notes."""
    handler = UpdateOrderHandler(container.unit_of_work)

    try:
        dto = handler.handle(
            order_id,
            po_number=po_number,
            due_date=due_date,
            quoted_ship_date=quoted_ship_date,
            notes=notes,
            actor=container.settings.actor,
        )
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{dto.id} updated.")


@click.command("produce")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--item", "line_item_id", required=True, type=int, help="Line item ID.")
@click.pass_obj
def order_produce(container: Container, order_id: int, line_item_id: int) -> None:
    """Mark a line item as in production."""
    handler = SetInProductionHandler(container.unit_of_work)

    try:
        handler.handle(order_id, line_item_id, actor=container.settings.actor)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Line item #{line_item_id} of order #{order_id} is in production.")


@click.command("ship")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--item", "line_item_id", required=True, type=int, help="Line item ID.")
@click.option("--qty", "quantity", required=True, help="Quantity to ship (e.g. 40 or 12.50).")
@click.option("--date", "ship_date", default=None, help="Ship date (YYYY-MM-DD), default today.")
@click.option("--tracking", "tracking_number", default=None, help="Carrier tracking number.")
@click.option("--notes", default=None)
@click.pass_obj
def order_ship(
    container: Container,
    order_id: int,
    line_item_id: int,
    quantity: str,
    ship_date: str | None,
    tracking_number: str | None,
    notes: str | None,
) -> None:
    """Ship part or all of a line item."""
    handler = ShipLineItemHandler(container.unit_of_work)

    try:
        result = handler.handle(
            order_id,
            line_item_id,
            quantity,
            ship_date=ship_date,
            tracking_number=tracking_number,
            notes=notes,
            actor=container.settings.actor,
        )
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(
        f"Shipped {result.shipped_quantity} {result.line_item.unit} of "
        f"{result.line_item.part_number}, {result.remaining_quantity} remaining "
        f"(order status={result.order_status})"
    )


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.pass_obj
def order_cancel(container: Container, order_id: int) -> None:
    """Cancel an order.  Rows are kept; the status becomes 'cancelled'."""
    handler = CancelOrderHandler(container.unit_of_work)

    try:
        handler.handle(order_id, actor=container.settings.actor)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{order_id} cancelled.")


@click.command("stats")
@click.pass_obj
def stats(container: Container) -> None:
    """Dashboard counts over non-cancelled orders."""
    handler = DashboardStatsHandler(container.unit_of_work)

    try:
        dto = handler.handle()
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Total orders:        {dto.total_orders}")
    click.echo(f"Pending:             {dto.pending_orders}")
    click.echo(f"In production:       {dto.production_orders}")
    click.echo(f"Shipped this month:  {dto.shipped_this_month}")
