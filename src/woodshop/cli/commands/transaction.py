"""Transaction commands."""

import click
from woodshop.cli.project_resolution import resolve_project_or_exit
from woodshop.domain.entities import TransactionType
from woodshop.domain.project import ProjectService
from woodshop.domain.transaction import TransactionService


@click.group()
def transaction_group():
    """Inspect financial transactions."""
    pass


@transaction_group.command("list")
@click.option("--project", "project_number", type=int, help="Only show transactions of this project number")
@click.pass_context
def list_transactions(ctx, project_number: int | None):
    """List transactions in the order they were recorded."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    project_id = None
    if project_number is not None:
        project_id = resolve_project_or_exit(ctx, ProjectService(db), project_number).id

    transactions = service.list_transactions(project_id=project_id)
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo("\nTransactions:")
    click.echo("-" * 80)
    for txn in transactions:
        sign = "+" if txn.type == TransactionType.INFLOW else "-"
        click.echo(
            f"{txn.date} | {sign}{txn.amount:>12,.2f} | {txn.category:15s} | {txn.description}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
