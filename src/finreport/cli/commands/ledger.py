"""Ledger (trial balance) commands."""

import click
from finreport.cli.error_handling import handle_domain_error, resolve_entity_or_exit
from finreport.domain.account_plan import AccountPlanService
from finreport.domain.errors import DomainError
from finreport.domain.ledger import LedgerService


def _format_amount(value) -> str:
    return f"{value:,.2f}"


@click.group()
def ledger_group():
    """Record and inspect monthly trial balances."""
    pass


@ledger_group.command("add")
@click.argument("entity", metavar="ENTITY")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--year", type=int, required=True, help="Period year")
@click.option("--month", type=int, required=True, help="Period month (1-12)")
@click.pass_context
def add_period(ctx, entity: str, csv_file: str, year: int, month: int):
    """Record the trial balance of one month from a CSV file.

    ENTITY can be an entity name or ID. Balances already stored for the
    month are replaced.

    The CSV file needs a header row with account_code and account_name and
    may carry debit, credit, debit_balance, credit_balance and cost_center.

    Examples:
        finreport ledger add "Acme Ltd" mizan-2024-03.csv --year 2024 --month 3
    """
    service = LedgerService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        result = service.import_csv(entity_id, year, month, csv_file)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded {result.rows_processed} rows for {year}/{month:02d}")
    if result.accounts_added:
        click.echo(f"Added {result.accounts_added} new accounts")
    if result.accounts_renamed:
        click.echo(f"Renamed {result.accounts_renamed} accounts")


@ledger_group.command("periods")
@click.argument("entity", metavar="ENTITY")
@click.option("--year", type=int, help="Only list periods of this year")
@click.pass_context
def list_periods(ctx, entity: str, year: int | None):
    """List recorded periods, most recent first."""
    service = LedgerService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        periods = service.list_periods(entity_id, year)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not periods:
        click.echo("No periods found.")
        return
    for period in periods:
        click.echo(f"{period.year}/{period.month:02d}")


@ledger_group.command("balances")
@click.argument("entity", metavar="ENTITY")
@click.option("--year", type=int, required=True, help="Period year")
@click.option("--month", type=int, required=True, help="Period month (1-12)")
@click.option("--leaves-only", is_flag=True, help="Only show leaf accounts")
@click.pass_context
def show_balances(ctx, entity: str, year: int, month: int, leaves_only: bool):
    """Show the stored trial balance of one month."""
    service = LedgerService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        balances = service.period_balances(entity_id, year, month)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if leaves_only:
        balances = [b for b in balances if b.is_leaf]
    if not balances:
        click.echo("No balances found.")
        return

    click.echo(
        f"{'Code':<16} {'Name':<30} {'Debit':>16} {'Credit':>16} {'Debit Bal.':>16} {'Credit Bal.':>16}"
    )
    click.echo("-" * 115)
    for b in balances:
        click.echo(
            f"{b.account_code:<16} {b.account_name[:30]:<30} "
            f"{_format_amount(b.debit):>16} {_format_amount(b.credit):>16} "
            f"{_format_amount(b.debit_balance):>16} {_format_amount(b.credit_balance):>16}"
        )


@ledger_group.command("delete-period")
@click.argument("entity", metavar="ENTITY")
@click.option("--year", type=int, required=True, help="Period year")
@click.option("--month", type=int, required=True, help="Period month (1-12)")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_period(ctx, entity: str, year: int, month: int, yes: bool):
    """Delete the trial balance of one month."""
    service = LedgerService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    if not yes and not click.confirm(f"Are you sure you want to delete {year}/{month:02d}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        deleted = service.delete_period(entity_id, year, month)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {deleted} balance rows for {year}/{month:02d}")


@ledger_group.command("accounts")
@click.argument("entity", metavar="ENTITY")
@click.option("--leaves-only", is_flag=True, help="Only show leaf accounts")
@click.pass_context
def list_accounts(ctx, entity: str, leaves_only: bool):
    """List the account plan of an entity."""
    service = AccountPlanService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        accounts = service.list_accounts(entity_id, leaves_only=leaves_only)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not accounts:
        click.echo("No accounts found.")
        return
    for acc in accounts:
        indent = "  " * (acc.level - 1)
        props = " / ".join(p for p in acc.properties if p)
        marker = "" if acc.is_leaf else " +"
        line = f"ID: {acc.id:4d} | {indent}{acc.code} {acc.name}{marker}"
        if acc.cost_center:
            line += f" ({acc.cost_center})"
        if props:
            line += f" [{props}]"
        click.echo(line)


@ledger_group.command("assign-property")
@click.argument("account_id", type=int)
@click.option("--index", type=int, help="Property slot 1-5; omit to clear the assignment")
@click.option("--value", help="Value to write; defaults to the account name")
@click.pass_context
def assign_property(ctx, account_id: int, index: int | None, value: str | None):
    """Assign the property an account writes for itself and its sub-accounts."""
    service = AccountPlanService(ctx.obj["db"])

    try:
        service.assign_property(account_id, index, value)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if index is None:
        click.echo(f"Cleared property assignment of account {account_id}")
    else:
        click.echo(f"Account {account_id} now assigns property {index}")


@ledger_group.command("recalculate")
@click.argument("entity", metavar="ENTITY")
@click.pass_context
def recalculate(ctx, entity: str):
    """Recompute account levels, parents and properties."""
    service = AccountPlanService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, entity)

    try:
        count = service.recalculate(entity_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recalculated {count} accounts")


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
