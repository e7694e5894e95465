"""CLI commands for inventory."""

from __future__ import annotations

from pathlib import Path

import click

from wms.application.dto import InventoryReportDTO
from wms.domain.exceptions import DomainException
from wms.infrastructure.bootstrap import build_context
from wms.infrastructure.cli.scenario import load_scenario


def display_inventory(report: InventoryReportDTO) -> None:
    """Shared formatting for the inventory table."""
    if not report.lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'SKU':<20} {'On hand':>8} {'Reserved':>10} {'Available':>10}")
    click.echo("-" * 51)
    for line in report.lines:
        click.echo(f"{line.sku:<20} {line.total:>8} {line.reserved:>10} {line.available:>10}")
    click.echo("-" * 51)
    click.echo(
        f"{'Total':<20} {report.overall.on_hand:>8} "
        f"{report.overall.reserved:>10} {report.overall.available:>10}"
    )
    click.echo()
    click.echo(f"{'Warehouse':<20} {'On hand':>8} {'Reserved':>10}")
    click.echo("-" * 40)
    for wh in report.warehouses:
        click.echo(f"{wh.warehouse_code:<20} {wh.on_hand:>8} {wh.reserved:>10}")


@click.command("show")
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inventory_show(scenario: Path) -> None:
    """Show inventory levels seeded from a scenario file."""
    context = build_context()
    try:
        context.ledger.seed(load_scenario(scenario).inventory)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_inventory(context.show_inventory().handle())
