"""Main CLI entry point."""

import click
from finreport.database.factories import create_sqlite_database
from finreport.logger import configure_logging

# Import and register all commands at module level
from finreport.cli.commands import (
    entity,
    ledger,
    report,
    overrides,
    template,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINREPORT_DB_PATH environment variable)",
    envvar="FINREPORT_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for diagnostics written to stderr",
    envvar="FINREPORT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Finreport - Financial statements from monthly trial balances.

    Record trial balances per company and month, then build balance sheets,
    income statements and grouped revenue/expense reports from them.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
entity.register_commands(cli)
ledger.register_commands(cli)
report.register_commands(cli)
overrides.register_commands(cli)
template.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
