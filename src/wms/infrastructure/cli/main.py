import click

from wms.infrastructure.cli.inventory_commands import inventory_show
from wms.infrastructure.cli.order_commands import order_next_number, order_replay
from wms.infrastructure.config import get_settings
from wms.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """WMS: inventory reservation and sales-order numbering"""
    configure_logging(get_settings())


@cli.group()
def order() -> None:
    """Replay and inspect sales orders."""


@cli.group()
def inventory() -> None:
    """Inspect inventory."""


# Register subcommands
order.add_command(order_replay)
order.add_command(order_next_number)
inventory.add_command(inventory_show)
