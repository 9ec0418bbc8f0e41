"""Client commands."""

import click
from woodshop.domain.client import ClientService


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("list")
@click.pass_context
def list_clients(ctx):
    """List all clients with their project totals."""
    db = ctx.obj["db"]
    service = ClientService(db)

    clients = service.list_clients()
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 80)
    for c in clients:
        tax_id = f"{c.tax_id_kind} {c.tax_id}" if c.tax_id else "-"
        click.echo(
            f"{c.name:25s} | {tax_id:22s} | Projects: {c.total_projects:3d} | "
            f"Total: {c.total_value:,.2f}"
        )


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
