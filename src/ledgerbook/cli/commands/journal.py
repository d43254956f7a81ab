"""Journal (Libro Diario) listing command."""

import click
from ledgerbook.cli.commands.entry import echo_entry
from ledgerbook.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.journal import JournalService


@click.command("journal")
@period_options
@click.option("--search", help="Only entries whose description or notes contain this text")
@click.option("--posted-only", is_flag=True, help="Hide entries that were superseded by corrections")
@click.pass_context
def journal(ctx, search, posted_only, start_date, end_date, **flags):
    """List journal entries in date and number order.

    Examples:
        ledgerbook journal --this-month
        ledgerbook journal --start-date 2024-01-01 --end-date 2024-03-31
        ledgerbook journal --search rent --posted-only
    """
    db = ctx.obj["db"]
    service = JournalService(db, ctx.obj["settings"])

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(flags)
    )

    try:
        entries = service.list_entries(
            start_date=start, end_date=end, include_superseded=not posted_only, search=search
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No journal entries found.")
        return

    for entry in entries:
        echo_entry(db, entry)
        click.echo()
    click.echo(f"{len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")


def register_commands(cli):
    """Register journal command with main CLI."""
    cli.add_command(journal)
