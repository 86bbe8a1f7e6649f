"""CLI commands for customers and parts."""

from __future__ import annotations

import click

from fulfillment.application.add_part import AddPartHandler
from fulfillment.application.manage_customer import (
    AddCustomerHandler,
    DeactivateCustomerHandler,
)
from fulfillment.domain.exceptions import DomainException
from fulfillment.infrastructure.bootstrap import Container
from fulfillment.infrastructure.cli.errors import to_click_error


@click.command("add")
@click.option("--name", required=True, help="Customer name.")
@click.option("--contact", default=None, help="Contact person.")
@click.option("--email", default=None)
@click.option("--phone", default=None)
@click.option("--address", default=None)
@click.pass_obj
def customer_add(
    container: Container,
    name: str,
    contact: str | None,
    email: str | None,
    phone: str | None,
    address: str | None,
) -> None:
    """Register a new customer."""
    handler = AddCustomerHandler(container.unit_of_work)

    try:
        dto = handler.handle(
            name,
            contact_person=contact,
            email=email,
            phone=phone,
            address=address,
            actor=container.settings.actor,
        )
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Customer #{dto.id} '{dto.name}' added")


@click.command("deactivate")
@click.option("--id", "customer_id", required=True, type=int, help="Customer ID.")
@click.pass_obj
def customer_deactivate(container: Container, customer_id: int) -> None:
    """Stop a customer from placing new orders."""
    handler = DeactivateCustomerHandler(container.unit_of_work)

    try:
        handler.handle(customer_id, actor=container.settings.actor)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Customer #{customer_id} deactivated.")


@click.command("add")
@click.option("--number", "part_number", required=True, help="Part number (unique).")
@click.option("--description", required=True)
@click.option("--colors", default=None, help="Available colors, free text.")
@click.pass_obj
def part_add(
    container: Container, part_number: str, description: str, colors: str | None
) -> None:
    """Add a new part to the catalog."""
    handler = AddPartHandler(container.unit_of_work)

    try:
        dto = handler.handle(
            part_number, description, colors, actor=container.settings.actor
        )
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Part #{dto.id} '{dto.part_number}' added")
