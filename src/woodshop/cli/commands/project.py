"""Project commands."""

import click
from woodshop.cli.error_handling import handle_domain_error
from woodshop.cli.project_resolution import resolve_project_or_exit
from woodshop.domain.document import CompanyInfo, DocumentService, ProjectDocument
from woodshop.domain.entities import ProjectStatus
from woodshop.domain.errors import DomainError
from woodshop.domain.project import ProjectService

PAGE_LINES = 40


@click.group()
def project_group():
    """Manage projects."""
    pass


@project_group.command("list")
@click.pass_context
def list_projects(ctx):
    """List all projects."""
    db = ctx.obj["db"]
    service = ProjectService(db)

    projects = service.list_projects()
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 90)
    for p in projects:
        click.echo(
            f"#{p.number:04d} | {p.title:25s} | {p.client_name:20s} | "
            f"{p.type.value:5s} | {p.status.value:13s} | {p.budget:>12,.2f}"
        )


@project_group.command("show")
@click.argument("number", type=int)
@click.pass_context
def show_project(ctx, number: int):
    """Show a project with its line items and payment terms."""
    db = ctx.obj["db"]
    service = ProjectService(db)
    project = resolve_project_or_exit(ctx, service, number)

    click.echo(f"\nProject #{project.number:04d}: {project.title}")
    click.echo(f"  Client: {project.client_name}")
    click.echo(f"  Type: {project.type.value}   Status: {project.status.value}")
    click.echo(f"  Budget: {project.budget:,.2f}")
    if project.start_date or project.end_date:
        click.echo(f"  Schedule: {project.start_date or '?'} -> {project.end_date or '?'}")
    if project.description:
        click.echo(f"  Description: {project.description}")
    for item in project.line_items:
        click.echo(
            f"    {item.quantity} x {item.product_name} @ {item.unit_price:,.2f} = {item.total_price:,.2f}"
        )
    terms = project.payment_terms
    if terms is not None:
        click.echo(
            f"  Payment: {terms.installments}x {terms.installment_value:,.2f} "
            f"({terms.payment_method.value}, {terms.discount_percentage}% off, "
            f"total {terms.total_with_discount:,.2f})"
        )


@project_group.command("status")
@click.argument("number", type=int)
@click.argument("status", type=click.Choice([s.value for s in ProjectStatus]))
@click.pass_context
def change_status(ctx, number: int, status: str):
    """Move a project to a new status and show its transactions.

    Examples:
        woodshop project status 1 completed
    """
    db = ctx.obj["db"]
    service = ProjectService(db)
    project = resolve_project_or_exit(ctx, service, number)

    try:
        project = service.update_project(project.id, status=status)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Project #{project.number:04d} is now {project.status.value}")
    for txn in service.transactions.list_transactions(project_id=project.id):
        click.echo(f"  {txn.date} | {txn.category:15s} | {txn.amount:>12,.2f}")


@project_group.command("delete")
@click.argument("number", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_project(ctx, number: int, yes: bool):
    """Delete a project with its transactions and stock movements."""
    db = ctx.obj["db"]
    service = ProjectService(db)
    project = resolve_project_or_exit(ctx, service, number)

    if not yes and not click.confirm(f"Are you sure you want to delete project #{number} '{project.title}'?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_project(project.id)
    click.echo(f"Deleted project #{number} '{project.title}'")


def render_document(document: ProjectDocument, page_lines: int = PAGE_LINES) -> list[str]:
    """Lay a document out as plain text pages."""
    header = [
        document.company.name,
        f"{document.company.phone} | {document.company.email} | {document.company.website}",
        "=" * 72,
        f"{document.title:<60}No. {document.number}",
        "",
    ]
    body = [
        "CLIENT",
        f"  Client: {document.client_name}",
        f"  Date: {document.issue_date:%d/%m/%Y}",
        "",
        "PROJECT",
        f"  {document.project_title}",
    ]
    if document.description:
        body.append(f"  {document.description}")
    body.append("")

    if document.line_items:
        body.append("ITEMS")
        body.append(f"  {'Item':<36}{'Qty':>8}{'Unit':>12}{'Total':>14}")
        body.append("  " + "-" * 70)
        for item in document.line_items:
            body.append(
                f"  {item.product_name:<36}{item.quantity:>8}"
                f"{item.unit_price:>12,.2f}{item.total_price:>14,.2f}"
            )
        body.append("")

    body.append("PAYMENT TERMS")
    terms = document.payment_terms
    if terms is not None:
        body.append(f"  Payment method: {document.payment_method_label}")
        body.append(f"  Installments: {terms.installments}x")
        if terms.discount_percentage > 0:
            body.append(f"  Discount: {terms.discount_percentage}%")
        if terms.installment_value:
            body.append(f"  Installment value: {terms.installment_value:,.2f}")
    body.append("")
    body.append(f"TOTAL: {document.total:,.2f}")

    usable = max(page_lines - len(header) - len(document.footer) - 1, 1)
    chunks = [body[i:i + usable] for i in range(0, len(body), usable)] or [[]]
    pages = []
    for index, chunk in enumerate(chunks, start=1):
        lines = header + chunk + [""] + list(document.footer)
        lines.append(f"Page {index}/{len(chunks)}".rjust(72))
        pages.append("\n".join(lines))
    return pages


@project_group.command("document")
@click.argument("number", type=int)
@click.option("--company-name", envvar="WOODSHOP_COMPANY_NAME", help="Company name in the header")
@click.option("--company-phone", envvar="WOODSHOP_COMPANY_PHONE", help="Company phone in the header")
@click.option("--company-email", envvar="WOODSHOP_COMPANY_EMAIL", help="Company email in the header")
@click.option("--company-website", envvar="WOODSHOP_COMPANY_WEBSITE", help="Company website in the header")
@click.pass_context
def project_document(
    ctx,
    number: int,
    company_name: str | None,
    company_phone: str | None,
    company_email: str | None,
    company_website: str | None,
):
    """Print the quote or commercial proposal for a project."""
    db = ctx.obj["db"]
    project = resolve_project_or_exit(ctx, ProjectService(db), number)

    defaults = CompanyInfo()
    company = CompanyInfo(
        name=company_name or defaults.name,
        phone=company_phone or defaults.phone,
        email=company_email or defaults.email,
        website=company_website or defaults.website,
    )
    document = DocumentService(db, company=company).build_document(project.id)

    for page in render_document(document):
        click.echo(page)
        click.echo("\f")
    click.echo(f"Suggested file name: {document.filename}")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
