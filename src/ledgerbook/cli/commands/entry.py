"""Journal entry commands: post, show, correct, history."""

from datetime import date

import click
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.movements import movement_options, parse_movements_or_exit, parse_rate_or_exit
from ledgerbook.domain.correction import CorrectionService
from ledgerbook.domain.entities import EntryKind, JournalEntry
from ledgerbook.domain.journal import JournalService


def echo_entry(db, entry: JournalEntry) -> None:
    """Print an entry header and its movements."""
    accounts = {acc.id: acc for acc in db.list_accounts(include_inactive=True)}

    status = "" if entry.is_posted else " [SUPERSEDED]"
    kind = " (closing)" if entry.kind is EntryKind.CLOSING else ""
    click.echo(f"#{entry.number} {entry.entry_date} {entry.description}{kind}{status}")
    if entry.notes:
        click.echo(f"    Notes: {entry.notes}")
    for movement in entry.movements:
        account = accounts.get(movement.account_id)
        label = f"{account.code} {account.name}" if account else str(movement.account_id)
        native = ""
        if movement.native_amount is not None:
            native = f"  ({account.currency} {movement.native_amount:,.2f} @ {movement.exchange_rate})"
        debit = f"{movement.debit:,.2f}" if movement.debit else ""
        credit = f"{movement.credit:,.2f}" if movement.credit else ""
        click.echo(f"    {label:40s} {debit:>14s} {credit:>14s}{native}")
    click.echo(f"    {'Total':40s} {entry.total_debit:>14,.2f} {entry.total_credit:>14,.2f}")


@click.group()
def entry_group():
    """Post, inspect and correct journal entries."""
    pass


@entry_group.command("post")
@click.option("--date", "entry_date", help="Entry date (YYYY-MM-DD or relative like 'today'), defaults to today")
@click.option("--description", "-d", required=True, help="Entry description")
@movement_options
@click.option("--rate", help="Exchange rate for secondary-currency movements without their own rate")
@click.option("--notes", help="Optional notes")
@click.option("--closing", is_flag=True, help="Mark as a closing entry (left out of the income statement)")
@click.pass_context
def post_entry(ctx, entry_date, description, debits, credits, rate, notes, closing):
    """Post a balanced journal entry.

    Amounts are in each account's own currency; secondary-currency amounts
    are converted with the movement rate (CODE=AMOUNT@RATE) or --rate.

    Examples:
        ledgerbook entry post -d "Cash sale" --debit 1.1.01=100 --credit 4.1.01=100
        ledgerbook entry post -d "ARS sale" --debit 1.1.02=150000@1500 --credit 4.1.01=100
    """
    db = ctx.obj["db"]
    service = JournalService(db, ctx.obj["settings"])

    day = parse_date_or_exit(ctx, entry_date, "date") or date.today()
    movements = parse_movements_or_exit(ctx, debits, credits)
    rate = parse_rate_or_exit(ctx, rate)

    try:
        entry = service.post_entry(
            entry_date=day,
            description=description,
            movements=movements,
            notes=notes,
            exchange_rate=rate,
            kind=EntryKind.CLOSING if closing else EntryKind.REGULAR,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Posted entry #{entry.number}")
    echo_entry(db, entry)


@entry_group.command("show")
@click.argument("number", type=int)
@click.pass_context
def show_entry(ctx, number: int):
    """Show a journal entry by number."""
    db = ctx.obj["db"]
    settings = ctx.obj["settings"]

    try:
        entry = JournalService(db, settings).get_entry_by_number(number)
    except ValueError as e:
        handle_domain_error(ctx, e)

    echo_entry(db, entry)
    if entry.average_rate is not None:
        click.echo(f"    Average rate: {entry.average_rate}")

    window = CorrectionService(db, settings).edit_window(entry.id)
    if not entry.is_posted:
        click.echo("Superseded by a correction.")
    elif window.editable:
        click.echo(f"Editable ({window.days_remaining} days remaining)")
    else:
        click.echo(f"Not editable ({window.days_elapsed} days elapsed, limit: {window.window_days})")


@entry_group.command("correct")
@click.argument("number", type=int)
@movement_options
@click.option("--date", "entry_date", help="New entry date (defaults to the original)")
@click.option("--description", "-d", help="New description (defaults to the original)")
@click.option("--notes", help="New notes (defaults to the original)")
@click.option("--rate", help="New entry-level exchange rate")
@click.option("--override", is_flag=True, help="Allow correcting entries outside the correction window")
@click.pass_context
def correct_entry(ctx, number, debits, credits, entry_date, description, notes, rate, override):
    """Replace an entry with corrected movements.

    The original stays in the journal marked as superseded; the correction
    gets a new number.

    Examples:
        ledgerbook entry correct 12 --debit 1.1.01=120 --credit 4.1.01=120
    """
    db = ctx.obj["db"]
    settings = ctx.obj["settings"]

    new_date = parse_date_or_exit(ctx, entry_date, "date")
    movements = parse_movements_or_exit(ctx, debits, credits)
    rate = parse_rate_or_exit(ctx, rate)

    try:
        original = JournalService(db, settings).get_entry_by_number(number)
        corrected = CorrectionService(db, settings).correct_entry(
            original.id,
            movements,
            entry_date=new_date,
            description=description,
            notes=notes,
            exchange_rate=rate,
            override=override,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Entry #{original.number} superseded by #{corrected.number}")
    echo_entry(db, corrected)


@entry_group.command("history")
@click.argument("number", type=int)
@click.pass_context
def entry_history(ctx, number: int):
    """Show every version of a corrected entry, oldest first."""
    db = ctx.obj["db"]
    settings = ctx.obj["settings"]

    try:
        entry = JournalService(db, settings).get_entry_by_number(number)
        chain = CorrectionService(db, settings).history(entry.id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    for version in chain:
        echo_entry(db, version)


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
