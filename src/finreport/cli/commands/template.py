"""Report template commands."""

import click
from finreport.cli.commands.report import read_groups_file
from finreport.cli.error_handling import handle_domain_error, resolve_entity_or_exit
from finreport.domain.errors import DomainError
from finreport.domain.grouped_report import ReportTemplateService
from finreport.schemas import dump_report_groups


@click.group()
def template_group():
    """Manage saved grouped report templates."""
    pass


@template_group.command("save")
@click.argument("entity", metavar="ENTITY")
@click.argument("name")
@click.argument("groups_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def save_template(ctx, entity: str, name: str, groups_file: str):
    """Save groups from a JSON file as a template.

    A template with the same name is overwritten.
    """
    service = ReportTemplateService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        template_id = service.save(entity_id, name, read_groups_file(groups_file))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Saved template '{name.strip()}' (ID: {template_id})")


@template_group.command("list")
@click.argument("entity", metavar="ENTITY")
@click.pass_context
def list_templates(ctx, entity: str):
    """List templates, most recently updated first."""
    service = ReportTemplateService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        templates = service.list_templates(entity_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not templates:
        click.echo("No templates found.")
        return
    for tpl in templates:
        click.echo(f"ID: {tpl.id:3d} | {tpl.name:30s} | Updated: {tpl.updated_at:%Y-%m-%d %H:%M}")


@template_group.command("show")
@click.argument("template_id", type=int)
@click.pass_context
def show_template(ctx, template_id: int):
    """Print the groups of a template as JSON."""
    service = ReportTemplateService(ctx.obj["db"])

    try:
        template = service.load(template_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(dump_report_groups(list(template.groups)))


@template_group.command("delete")
@click.argument("template_id", type=int)
@click.pass_context
def delete_template(ctx, template_id: int):
    """Delete a template."""
    service = ReportTemplateService(ctx.obj["db"])

    try:
        service.delete(template_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted template {template_id}")


def register_commands(cli):
    """Register template commands with main CLI."""
    cli.add_command(template_group, name="template")
