"""Dashboard command."""

import click
from woodshop.domain.dashboard import DashboardService


@click.command("dashboard")
@click.pass_context
def show_dashboard(ctx):
    """Show shop figures and recent activity."""
    db = ctx.obj["db"]
    service = DashboardService(db)
    stats = service.compute_stats()

    click.echo("\nDashboard:")
    click.echo("-" * 60)
    click.echo(f"Clients:          {stats.total_clients}")
    click.echo(f"Active projects:  {stats.active_projects}")
    click.echo(f"Monthly revenue:  {stats.monthly_revenue:,.2f}")
    click.echo(f"Pending payments: {stats.pending_payments:,.2f}")
    click.echo(f"Low stock items:  {stats.low_stock_items}")

    click.echo("\nRecent activity:")
    if not stats.recent_activity:
        click.echo("  No activity yet.")
    for entry in stats.recent_activity:
        click.echo(f"  {entry.created_at:%Y-%m-%d %H:%M} | {entry.message}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(show_dashboard)
