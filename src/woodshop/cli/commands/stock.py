"""Stock movement commands."""

import click
from woodshop.domain.stock import StockService


@click.group()
def stock_group():
    """Inspect stock movements."""
    pass


@stock_group.command("list")
@click.pass_context
def list_movements(ctx):
    """List stock movements in the order they happened."""
    db = ctx.obj["db"]
    service = StockService(db)

    movements = service.list_stock_movements()
    if not movements:
        click.echo("No stock movements found.")
        return

    click.echo("\nStock movements:")
    click.echo("-" * 80)
    for m in movements:
        source = f" | {m.project_title}" if m.project_title else ""
        click.echo(f"{m.date} | {m.type.value:3s} | {m.quantity:>10} | {m.material_name}{source}")


def register_commands(cli):
    """Register stock commands with main CLI."""
    cli.add_command(stock_group, name="stock")
