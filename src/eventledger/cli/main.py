"""Main CLI entry point."""

import click

from eventledger.config import load_settings
from eventledger.database.factories import create_sqlite_database
from eventledger.logger import configure_logging

# Import and register all commands at module level
from eventledger.cli.commands import (
    account,
    bank,
    event,
    ledger,
    match,
    plan,
    reconcile,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides EVENTLEDGER_DB_PATH environment variable)",
    envvar="EVENTLEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for messages on stderr (default: EVENTLEDGER_LOG_LEVEL or WARNING)",
)
@click.option("--user", help="Name recorded in audit fields (default: EVENTLEDGER_USER or 'cli')")
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None, user: str | None):
    """Eventledger - event account reconciliation.

    Record planned items and ledger entries for event accounts, link them to
    bank transactions automatically or by hand, and compare forecast with
    actual figures.
    """
    ctx.ensure_object(dict)
    settings = load_settings()

    configure_logging(level=log_level or settings.log_level, json_output=settings.log_json)
    ctx.obj["user"] = user or settings.user

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(
            database_path=db_path,
            read_retries=settings.read_retries,
            read_backoff=settings.read_backoff,
        )
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
event.register_commands(cli)
plan.register_commands(cli)
ledger.register_commands(cli)
bank.register_commands(cli)
reconcile.register_commands(cli)
report.register_commands(cli)
match.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
