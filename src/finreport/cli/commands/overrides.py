"""Override rule commands."""

from pathlib import Path

import click
import pydantic
from finreport.cli.error_handling import handle_domain_error, resolve_entity_or_exit
from finreport.domain.errors import DomainError, ValidationError
from finreport.domain.overrides import OverrideService
from finreport.schemas import RowPreviewResponse, dump_override_rules, load_override_rules


def _echo_rules(rules) -> None:
    click.echo(f"{'Key':<8} {'Section':<12} {'Order':>5}  {'Label':<40} Prefixes")
    click.echo("-" * 90)
    for rule in rules:
        prefixes = ", ".join(rule.prefixes) or "-"
        click.echo(
            f"{rule.grouping_key:<8} {rule.section.value:<12} {rule.display_order:>5}  "
            f"{rule.label[:40]:<40} {prefixes}"
        )


@click.group()
def overrides_group():
    """Manage balance sheet row overrides."""
    pass


@overrides_group.command("show")
@click.argument("entity", metavar="ENTITY")
@click.option("--json", "as_json", is_flag=True, help="Print the rules as JSON")
@click.pass_context
def show_rules(ctx, entity: str, as_json: bool):
    """Show the override rules in effect for an entity."""
    service = OverrideService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        rules = service.get_rules(entity_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(dump_override_rules(rules))
        return
    _echo_rules(rules)


@overrides_group.command("replace")
@click.argument("entity", metavar="ENTITY")
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def replace_rules(ctx, entity: str, rules_file: str):
    """Replace the override rules of an entity with a JSON rule list.

    Each rule has grouping_key, section (assets, liabilities or income),
    label, and optionally display_order and prefixes.

    Examples:
        finreport overrides replace "Acme Ltd" rules.json
    """
    service = OverrideService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        try:
            rules = load_override_rules(Path(rules_file).read_text(encoding="utf-8"))
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid rules file '{rules_file}': {e.error_count()} error(s)"
            ) from e
        service.replace_rules(entity_id, rules)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Stored {len(rules)} override rules")


@overrides_group.command("reset")
@click.argument("entity", metavar="ENTITY")
@click.pass_context
def reset_rules(ctx, entity: str):
    """Replace the override rules of an entity with the default set."""
    service = OverrideService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        rules = service.reset_to_defaults(entity_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored {len(rules)} default override rules")


@overrides_group.command("preview")
@click.argument("entity", metavar="ENTITY")
@click.option("--year", type=int, help="Year whose accounts are previewed")
@click.option("--json", "as_json", is_flag=True, help="Print the preview as JSON")
@click.pass_context
def preview_rows(ctx, entity: str, year: int | None, as_json: bool):
    """Show the balance sheet rows the current rules produce."""
    service = OverrideService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        preview = service.preview_rows(entity_id, year)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(RowPreviewResponse.from_domain(preview).model_dump_json(indent=2))
        return
    if preview.year == 0:
        click.echo("No balances recorded.")
        return

    for title, rows in (("ASSETS", preview.asset_rows), ("LIABILITIES AND EQUITY", preview.liability_rows)):
        click.echo(title)
        for row in rows:
            key = row.grouping_key or "-"
            click.echo(f"  {key:<6} {row.label:<40} [{row.source}] {', '.join(row.prefixes)}")
        click.echo()


def register_commands(cli):
    """Register override commands with main CLI."""
    cli.add_command(overrides_group, name="overrides")
