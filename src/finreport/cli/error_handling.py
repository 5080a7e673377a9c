"""CLI error handling helpers."""

import click

from finreport.domain.entity import EntityService
from finreport.domain.errors import DomainError
from finreport.utils.entity_resolver import resolve_entity


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def resolve_entity_or_exit(ctx: click.Context, entity: str) -> int:
    """Resolve entity name or ID, or exit with a CLI error."""
    try:
        return resolve_entity(EntityService(ctx.obj["db"]), entity)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
