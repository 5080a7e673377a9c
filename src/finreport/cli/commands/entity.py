"""Entity management commands."""

import click
from finreport.cli.error_handling import handle_domain_error, resolve_entity_or_exit
from finreport.domain.entity import EntityService
from finreport.domain.errors import DomainError


@click.group()
def entity_group():
    """Manage reporting entities."""
    pass


@entity_group.command("create")
@click.argument("name", metavar="ENTITY_NAME")
@click.option("--tax-number", help="Tax number of the entity")
@click.option("--separator", default=".", show_default=True, help="Account code segment separator")
@click.pass_context
def create_entity(ctx, name: str, tax_number: str | None, separator: str):
    """Create a new entity.

    Examples:
        finreport entity create "Acme Ltd"
        finreport entity create "Acme Ltd" --tax-number 1234567890 --separator -
    """
    service = EntityService(ctx.obj["db"])

    try:
        entity_id = service.create_entity(
            name=name, tax_number=tax_number, account_code_separator=separator
        )
        click.echo(f"Created entity '{name.strip()}' (ID: {entity_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entity_group.command("list")
@click.pass_context
def list_entities(ctx):
    """List all entities."""
    service = EntityService(ctx.obj["db"])

    entities = service.list_entities()
    if not entities:
        click.echo("No entities found.")
        return

    click.echo("\nEntities:")
    click.echo("-" * 60)
    for ent in entities:
        tax = ent.tax_number or "-"
        click.echo(f"ID: {ent.id:3d} | {ent.name:30s} | Tax: {tax} | Sep: {ent.account_code_separator}")


@entity_group.command("properties")
@click.argument("entity", metavar="ENTITY")
@click.argument("names", nargs=-1, metavar="[NAME]...")
@click.pass_context
def set_properties(ctx, entity: str, names: tuple[str, ...]):
    """Show or set the display names of the five account properties.

    ENTITY can be an entity name or ID. Without NAMEs the current names
    are shown.

    Examples:
        finreport entity properties "Acme Ltd"
        finreport entity properties 1 Department Region "" Product
    """
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    if names:
        try:
            service.set_property_names(entity_id, list(names))
        except DomainError as e:
            handle_domain_error(ctx, e)

    ent = service.get_entity(entity_id)
    for index in range(1, 6):
        click.echo(f"Property {index}: {ent.property_name(index)}")


def register_commands(cli):
    """Register entity commands with main CLI."""
    cli.add_command(entity_group, name="entity")
