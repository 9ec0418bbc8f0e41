"""Material commands."""

import click
from woodshop.cli.error_handling import handle_domain_error
from woodshop.domain.entities import PriceVariation
from woodshop.domain.errors import DomainError, NotFoundError
from woodshop.domain.material import MaterialService
from woodshop.utils.amount_parser import parse_amount


@click.group()
def material_group():
    """Manage materials."""
    pass


@material_group.command("list")
@click.option("--low-stock", is_flag=True, help="Only show materials at or below their minimum stock")
@click.pass_context
def list_materials(ctx, low_stock: bool):
    """List materials with stock and price."""
    db = ctx.obj["db"]
    service = MaterialService(db)

    materials = service.list_low_stock_materials() if low_stock else service.list_materials()
    if not materials:
        click.echo("No materials found.")
        return

    click.echo("\nMaterials:")
    click.echo("-" * 80)
    for m in materials:
        flag = " LOW" if m.is_low_stock else ""
        click.echo(
            f"{m.name:25s} | Stock: {m.current_stock:>10} {m.unit:3s} (min {m.min_stock}) | "
            f"Price: {m.current_price:,.2f}{format_variation(m.price_variation)}{flag}"
        )


def format_variation(variation: PriceVariation | None) -> str:
    """Render a price change as `` (+5.15%)``, or nothing without one."""
    if variation is None:
        return ""
    if variation.percentage is None:
        return " (was 0.00)"
    sign = "+" if variation.is_increase else ""
    return f" ({sign}{variation.percentage}%)"


@material_group.command("price")
@click.argument("name", metavar="MATERIAL_NAME")
@click.argument("price")
@click.option("--supplier", help="Supplier quoting the new price")
@click.pass_context
def change_price(ctx, name: str, price: str, supplier: str | None):
    """Change a material's price and show its price history.

    Examples:
        woodshop material price "MDF 15mm" 89.90
        woodshop material price "Hinge 35mm" "R$ 13.00" --supplier "Ferragens SP"
    """
    db = ctx.obj["db"]
    service = MaterialService(db)

    matches = [m for m in service.list_materials() if m.name == name]
    if not matches:
        handle_domain_error(ctx, NotFoundError(f"Material '{name}' not found"))

    try:
        material = service.update_material(
            matches[0].id, current_price=parse_amount(price), supplier=supplier
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nPrice history for '{material.name}':")
    for entry in material.price_history:
        source = f" ({entry.supplier})" if entry.supplier else ""
        click.echo(f"  {entry.date} | {entry.price:,.2f}{source}")


def register_commands(cli):
    """Register material commands with main CLI."""
    cli.add_command(material_group, name="material")
