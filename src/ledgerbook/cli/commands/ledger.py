"""Ledger (Libro Mayor) command."""

import click
from ledgerbook.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.ledger import LedgerService


@click.command("ledger")
@click.argument("code", metavar="ACCOUNT_CODE")
@period_options
@click.option("--newest-first", is_flag=True, help="Show the most recent movement first")
@click.pass_context
def ledger(ctx, code, newest_first, start_date, end_date, **flags):
    """Show an account's movements with running balance.

    For a category account the movements of all its sub-accounts are
    included.

    Examples:
        ledgerbook ledger 1.1.01
        ledgerbook ledger 1.1 --last-month
    """
    settings = ctx.obj["settings"]
    service = LedgerService(ctx.obj["db"], settings)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(flags)
    )

    try:
        report = service.get_ledger(code, start_date=start, end_date=end, most_recent_first=newest_first)
    except ValueError as e:
        handle_domain_error(ctx, e)

    account = report.account
    click.echo(f"\nLedger: {account.code} {account.name} ({settings.reporting_currency})")
    if start or end:
        click.echo(f"Period: {start or '...'} to {end or '...'}")
    click.echo("-" * 100)
    click.echo(f"{'Opening balance':64s} {report.opening_balance:>14,.2f}")
    for line in report.lines:
        text = f"{line.entry_date} #{line.entry_number} {line.description or line.entry_description}"
        debit = f"{line.debit:,.2f}" if line.debit else ""
        credit = f"{line.credit:,.2f}" if line.credit else ""
        click.echo(f"{text[:40]:40s} {debit:>11s} {credit:>11s} {line.balance:>14,.2f}")
    click.echo("-" * 100)
    click.echo(f"{'Totals':40s} {report.total_debit:>11,.2f} {report.total_credit:>11,.2f}")
    click.echo(f"{'Closing balance':64s} {report.closing_balance:>14,.2f}")
    if report.is_abnormal:
        click.echo(f"Warning: balance is opposite to the account's {account.nature.value} nature")


def register_commands(cli):
    """Register ledger command with main CLI."""
    cli.add_command(ledger)
