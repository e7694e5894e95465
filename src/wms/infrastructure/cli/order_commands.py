"""CLI commands for sales orders."""

from __future__ import annotations

from pathlib import Path

import click

from wms.domain.exceptions import DomainException
from wms.domain.model.order import SalesOrder
from wms.infrastructure.bootstrap import WarehouseContext, build_context
from wms.infrastructure.cli.inventory_commands import display_inventory
from wms.infrastructure.cli.scenario import load_scenario


def _display_order(order: SalesOrder) -> None:
    click.echo(f"Order {order.order_number}  (status={order.status.value})")
    click.echo(f"Tenant: {order.tenant_id}  Customer: {order.customer_name}  Date: {order.order_date}")
    click.echo(f"  {'SKU':<20} {'Ordered':>8} {'Shipped':>8} {'Status':>8}")
    click.echo(f"  {'-'*47}")
    for line in order.lines:
        click.echo(
            f"  {line.sku:<20} {line.ordered_qty:>8} {line.shipped_qty:>8} {line.status.value:>8}"
        )


def _replay(scenario: Path, echo: bool) -> WarehouseContext:
    """Seed a fresh context from the scenario and create its orders in turn."""
    context = build_context()
    try:
        loaded = load_scenario(scenario)
        context.ledger.seed(loaded.inventory)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    create = context.create_sales_order()
    for index, order_input in enumerate(loaded.orders, start=1):
        try:
            order = create.handle(order_input)
        except DomainException as exc:
            if echo:
                click.echo(f"Order #{index} rejected: {exc}")
            continue
        if echo:
            _display_order(order)
            click.echo()
    return context


@click.command("replay")
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def order_replay(scenario: Path) -> None:
    """Create every order in a scenario file and show the resulting inventory."""
    context = _replay(scenario, echo=True)
    display_inventory(context.show_inventory().handle())


@click.command("next-number")
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--tenant", "tenant_id", default=None, help="Tenant id (default tenant if omitted).")
@click.option("--date", "order_date", default=None, help="Order date, YYYY-MM-DD or ISO-8601.")
def order_next_number(scenario: Path, tenant_id: str | None, order_date: str | None) -> None:
    """Preview the next order number after replaying a scenario."""
    context = _replay(scenario, echo=False)
    try:
        preview = context.peek_sales_order_number().handle(tenant_id, order_date)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(preview.order_number)
