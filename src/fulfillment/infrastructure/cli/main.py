import click

from fulfillment.domain.exceptions import DomainException
from fulfillment.infrastructure.bootstrap import Container
from fulfillment.infrastructure.cli.catalog_commands import (
    customer_add,
    customer_deactivate,
    part_add,
)
from fulfillment.infrastructure.cli.errors import to_click_error
from fulfillment.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_produce,
    order_ship,
    order_show,
    order_update,
    stats,
)
from fulfillment.infrastructure.config import Settings
from fulfillment.infrastructure.logging_setup import configure_logging
from fulfillment.infrastructure.persistence.database import create_schema


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Order fulfillment tracker"""
    try:
        settings = Settings.from_env()
    except DomainException as exc:
        raise to_click_error(exc)
    configure_logging(settings)
    container = Container(settings)
    ctx.obj = container
    ctx.call_on_close(container.dispose)


@cli.group()
def order() -> None:
    """Manage orders and shipments."""


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.group()
def part() -> None:
    """Manage the parts catalog."""


@cli.group()
def db() -> None:
    """Database maintenance."""


@db.command("init")
@click.pass_obj
def db_init(container: Container) -> None:
    """Create any missing tables."""
    create_schema(container.engine)
    click.echo("Database schema is up to date.")


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_produce)
order.add_command(order_ship)
order.add_command(order_show)
order.add_command(order_update)
customer.add_command(customer_add)
customer.add_command(customer_deactivate)
part.add_command(part_add)
cli.add_command(stats)
