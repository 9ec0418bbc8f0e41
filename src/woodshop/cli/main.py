"""Main CLI entry point."""

import logging
from datetime import datetime, UTC

import click
from woodshop.database.factories import create_memory_database
from woodshop.domain.seed import seed_sample_data
from woodshop.utils.date_parser import parse_date

# Import and register all commands at module level
from woodshop.cli.commands import (
    client,
    dashboard,
    material,
    product,
    project,
    stock,
    transaction,
)


@click.group()
@click.option(
    "--seed/--no-seed",
    default=True,
    envvar="WOODSHOP_SEED",
    show_default=True,
    help="Load the sample shop before running the command",
)
@click.option(
    "--today",
    envvar="WOODSHOP_TODAY",
    help="Run as if today were this date (YYYY-MM-DD or relative like 'last month')",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="WOODSHOP_LOG_LEVEL",
    show_default=True,
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, seed: bool, today: str | None, log_level: str):
    """Woodshop - workshop management for a furniture shop.

    Tracks clients, materials, products, projects, payments and stock.
    Everything is kept in memory for the duration of a single command.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    clock = None
    if today:
        try:
            as_of = parse_date(today)
        except ValueError as e:
            click.echo(f"Error: Invalid --today: {e}", err=True)
            ctx.exit(1)

        def clock() -> datetime:
            return datetime.combine(as_of, datetime.now(UTC).timetz())

    # Initialize the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_memory_database(clock=clock)
        if seed:
            seed_sample_data(db)
        ctx.obj["db"] = db


# Register all commands
client.register_commands(cli)
dashboard.register_commands(cli)
material.register_commands(cli)
product.register_commands(cli)
project.register_commands(cli)
stock.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
