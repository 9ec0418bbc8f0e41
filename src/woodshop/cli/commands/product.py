"""Product commands."""

import click
from woodshop.domain.product import ProductService


@click.group()
def product_group():
    """Manage products."""
    pass


@product_group.command("list")
@click.pass_context
def list_products(ctx):
    """List products with their bill of materials."""
    db = ctx.obj["db"]
    service = ProductService(db)

    products = service.list_products()
    if not products:
        click.echo("No products found.")
        return

    click.echo("\nProducts:")
    click.echo("-" * 60)
    for p in products:
        click.echo(f"{p.name} [{p.category or 'Uncategorized'}] ({p.unit})")
        for c in p.components:
            click.echo(f"    {c.quantity} {c.unit} x {c.material_name}")


def register_commands(cli):
    """Register product commands with main CLI."""
    cli.add_command(product_group, name="product")
