"""Main CLI entry point."""

import logging

import click
from ledgerbook.config import load_settings
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.errors import ValidationError
from ledgerbook.logging_config import configure_logging

# Import and register all commands at module level
from ledgerbook.cli.commands import account, entry, journal, ledger, reconcile, report, subsidiary


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Ledgerbook - double-entry general ledger.

    Post balanced journal entries in USD or ARS, browse the journal and
    account ledgers, and produce income statements, balance sheets, trial
    balances and cash reconciliations.
    """
    ctx.ensure_object(dict)

    if verbose:
        configure_logging(level=logging.DEBUG)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            ctx.obj["settings"] = load_settings()
        except ValidationError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
entry.register_commands(cli)
journal.register_commands(cli)
ledger.register_commands(cli)
report.register_commands(cli)
reconcile.register_commands(cli)
subsidiary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
