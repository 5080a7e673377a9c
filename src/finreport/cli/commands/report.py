"""Report commands."""

from pathlib import Path

import click
import pydantic
from finreport.cli.error_handling import handle_domain_error, resolve_entity_or_exit
from finreport.cli.formatting import echo_header, echo_line, echo_rows
from finreport.domain.balance_sheet import BalanceSheetService
from finreport.domain.drilldown import RowDetailService
from finreport.domain.entities import ReportScope
from finreport.domain.errors import DomainError, ValidationError
from finreport.domain.grouped_report import GroupedReportService, ReportTemplateService
from finreport.domain.income_statement import IncomeStatementService
from finreport.schemas import (
    BalanceSheetResponse,
    GroupedReportResponse,
    IncomeStatementResponse,
    RowDetailResponse,
    load_report_groups,
)

SCOPES = {"revenue": ReportScope.REVENUE, "expense": ReportScope.EXPENSE}


def _no_data(year: int) -> bool:
    if year == 0:
        click.echo("No balances recorded.")
        return True
    return False


@click.group()
def report_group():
    """Build financial reports."""
    pass


@report_group.command("balance-sheet")
@click.argument("entity", metavar="ENTITY")
@click.option("--year", type=int, help="Report year (defaults to the latest year with data)")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.pass_context
def balance_sheet(ctx, entity: str, year: int | None, as_json: bool):
    """Show the balance sheet of an entity.

    Examples:
        finreport report balance-sheet "Acme Ltd"
        finreport report balance-sheet 1 --year 2024 --json
    """
    service = BalanceSheetService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        sheet = service.build(entity_id, year)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(BalanceSheetResponse.from_domain(sheet).model_dump_json(indent=2))
        return
    if _no_data(sheet.year):
        return

    echo_header(sheet.periods, f"BALANCE SHEET {sheet.year}")
    click.echo("ASSETS")
    echo_rows(sheet.asset_rows, sheet.periods)
    click.echo()
    click.echo("LIABILITIES AND EQUITY")
    echo_rows(sheet.liability_rows, sheet.periods)


@report_group.command("income-statement")
@click.argument("entity", metavar="ENTITY")
@click.option("--year", type=int, help="Report year (defaults to the latest year with data)")
@click.option("--summary", is_flag=True, help="Only show the category and total rows")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.pass_context
def income_statement(ctx, entity: str, year: int | None, summary: bool, as_json: bool):
    """Show the income statement of an entity."""
    service = IncomeStatementService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        statement = service.build(entity_id, year, detailed=not summary)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(IncomeStatementResponse.from_domain(statement).model_dump_json(indent=2))
        return
    if _no_data(statement.year):
        return

    echo_header(statement.periods, f"INCOME STATEMENT {statement.year}")
    echo_rows(statement.rows, statement.periods)


@report_group.command("details")
@click.argument("entity", metavar="ENTITY")
@click.argument("grouping_key")
@click.option("--year", type=int, help="Report year (defaults to the latest year with data)")
@click.option("--json", "as_json", is_flag=True, help="Print the details as JSON")
@click.pass_context
def row_details(ctx, entity: str, grouping_key: str, year: int | None, as_json: bool):
    """List the leaf accounts behind a report row.

    GROUPING_KEY is the row key shown in the report, e.g. 10 or 632.
    """
    service = RowDetailService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        detail = service.details(entity_id, grouping_key, year)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(RowDetailResponse.from_domain(detail).model_dump_json(indent=2))
        return
    if _no_data(detail.year):
        return
    if not detail.accounts:
        click.echo(f"No accounts found for row {detail.grouping_key}.")
        return

    echo_header(detail.periods, f"ROW {detail.grouping_key} {detail.year}")
    for account in detail.accounts:
        echo_line(f"{account.account_code} {account.account_name}", account.values, detail.periods)


@report_group.command("grouped")
@click.argument("entity", metavar="ENTITY")
@click.option(
    "--scope",
    type=click.Choice(sorted(SCOPES), case_sensitive=False),
    default="expense",
    show_default=True,
    help="Account range to report on",
)
@click.option(
    "--groups",
    "groups_file",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file with the group definitions",
)
@click.option("--template", "template_id", type=int, help="Use the groups of a saved template")
@click.option("--year", type=int, help="Report year (defaults to the latest year with data)")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.pass_context
def grouped_report(
    ctx,
    entity: str,
    scope: str,
    groups_file: str | None,
    template_id: int | None,
    year: int | None,
    as_json: bool,
):
    """Build an ad-hoc grouped revenue or expense report.

    Groups come from a JSON file (--groups) or a saved template (--template).

    Examples:
        finreport report grouped "Acme Ltd" --scope expense --groups groups.json
        finreport report grouped 1 --template 3 --json
    """
    db = ctx.obj["db"]
    entity_id = resolve_entity_or_exit(ctx, entity)

    if (groups_file is None) == (template_id is None):
        click.echo("Error: Provide exactly one of --groups or --template", err=True)
        ctx.exit(1)

    try:
        if groups_file is not None:
            groups = read_groups_file(groups_file)
        else:
            groups = list(ReportTemplateService(db).load(template_id).groups)
        report = GroupedReportService(db).build(entity_id, SCOPES[scope.lower()], groups, year)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(GroupedReportResponse.from_domain(report).model_dump_json(indent=2))
        return
    if _no_data(report.year):
        return

    echo_header(report.periods, f"{scope.upper()} REPORT {report.year}")
    for group in report.groups:
        click.echo(group.name)
        for item in group.items:
            echo_line(item.label, item.values, report.periods, indent=2)
        echo_line(f"TOTAL {group.name}", group.total, report.periods)
        click.echo()


@report_group.command("properties")
@click.argument("entity", metavar="ENTITY")
@click.option(
    "--scope",
    type=click.Choice(sorted(SCOPES), case_sensitive=False),
    default="expense",
    show_default=True,
)
@click.pass_context
def list_properties(ctx, entity: str, scope: str):
    """List property values usable as grouped report filters."""
    service = GroupedReportService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        options = service.available_properties(entity_id, SCOPES[scope.lower()])
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not options:
        click.echo("No property values found.")
        return
    for option in options:
        click.echo(f"[{option.index}] {option.name}: {', '.join(option.values)}")


@report_group.command("accounts")
@click.argument("entity", metavar="ENTITY")
@click.option(
    "--scope",
    type=click.Choice(sorted(SCOPES), case_sensitive=False),
    default="expense",
    show_default=True,
)
@click.option("--search", help="Code prefix or part of the account name")
@click.option("--limit", type=int, default=100, show_default=True)
@click.pass_context
def search_accounts(ctx, entity: str, scope: str, search: str | None, limit: int):
    """Find leaf accounts to use as grouped report items."""
    service = GroupedReportService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        accounts = service.search_accounts(entity_id, SCOPES[scope.lower()], search, limit)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not accounts:
        click.echo("No accounts found.")
        return
    for acc in accounts:
        click.echo(f"{acc.code:<20} {acc.name}")


def read_groups_file(path: str) -> list:
    """Read report groups from a JSON file.

    Raises:
        ValidationError: If the file is not a valid group list
    """
    try:
        return load_report_groups(Path(path).read_text(encoding="utf-8"))
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid groups file '{path}': {e.error_count()} error(s)") from e


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
