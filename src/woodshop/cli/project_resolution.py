"""CLI helpers for project resolution."""

from __future__ import annotations

import click
from woodshop.cli.error_handling import handle_domain_error
from woodshop.domain.entities import Project
from woodshop.domain import errors
from woodshop.domain.project import ProjectService


def resolve_project_or_exit(
    ctx: click.Context, project_service: ProjectService, number: int
) -> Project:
    """Look up a project by its number, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    project = project_service.get_project_by_number(number)
    if project is None:
        handle_domain_error(ctx, errors.NotFoundError(errors.project_number_not_found(number)))
    return project
