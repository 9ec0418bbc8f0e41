"""Turning domain failures into CLI output."""

import logging

import click

from woodshop.domain.errors import DomainError, NotFoundError

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print ``Error: ...`` on stderr and stop the command with exit code 1."""
    kind = "missing record" if isinstance(error, NotFoundError) else "rejected input"
    logger.debug("Command %s failed (%s): %s", ctx.command_path, kind, error)
    click.secho(f"Error: {error}", fg="red", err=True)
    ctx.exit(EXIT_FAILURE)
