"""Cash/bank reconciliation commands."""

from datetime import date

import click
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.movements import parse_rate_or_exit
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import ReconciliationStatus
from ledgerbook.domain.reconciliation import ReconciliationService
from ledgerbook.utils.amount_parser import parse_amount


@click.group()
def reconcile_group():
    """Compare counted cash or bank balances with the books."""
    pass


@reconcile_group.command("run")
@click.argument("code", metavar="ACCOUNT_CODE")
@click.argument("counted", metavar="COUNTED_BALANCE")
@click.option("--as-of", help="Count date (defaults to today)")
@click.option("--rate", help="Exchange rate, required for secondary-currency accounts")
@click.option("--notes", help="Optional notes")
@click.option("--operator", help="Who counted (defaults to LEDGERBOOK_OPERATOR)")
@click.pass_context
def run_reconciliation(ctx, code, counted, as_of, rate, notes, operator):
    """Reconcile an account against a counted balance.

    COUNTED_BALANCE is in the account's own currency.

    Examples:
        ledgerbook reconcile run 1.1.01 1000.50
        ledgerbook reconcile run 1.1.02 1500000 --rate 1500
    """
    service = ReconciliationService(ctx.obj["db"], ctx.obj["settings"])
    day = parse_date_or_exit(ctx, as_of, "as-of date") or date.today()
    rate = parse_rate_or_exit(ctx, rate)

    try:
        record = service.reconcile(
            code,
            day,
            parse_amount(counted),
            exchange_rate=rate,
            notes=notes,
            operator=operator,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Book balance:     {record.book_balance:>14,.2f}")
    click.echo(f"Counted balance:  {record.physical_balance:>14,.2f}")
    click.echo(f"Difference:       {record.difference:>14,.2f}")
    if record.physical_native is not None:
        currency = ctx.obj["settings"].secondary_currency
        click.echo(f"Book in {currency}:      {record.book_native:>14,.2f}")
        click.echo(f"Counted in {currency}:   {record.physical_native:>14,.2f}  @ {record.exchange_rate}")
    if record.status is ReconciliationStatus.RECONCILED:
        click.echo("Status: reconciled")
    else:
        click.echo("Status: variance")


@reconcile_group.command("list")
@click.argument("code", metavar="ACCOUNT_CODE", required=False)
@click.pass_context
def list_reconciliations(ctx, code):
    """List past reconciliations, newest first."""
    db = ctx.obj["db"]
    settings = ctx.obj["settings"]

    try:
        records = ReconciliationService(db, settings).list_reconciliations(code)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not records:
        click.echo("No reconciliations found.")
        return

    accounts = {acc.id: acc for acc in AccountService(db, settings).list_accounts(include_inactive=True)}
    for record in records:
        account = accounts[record.account_id]
        click.echo(
            f"ID: {record.id:3d} | {record.as_of} | {account.code:10s} | "
            f"book {record.book_balance:>12,.2f} | counted {record.physical_balance:>12,.2f} | "
            f"diff {record.difference:>10,.2f} | {record.status.value} | {record.operator or ''}"
        )


def register_commands(cli):
    """Register reconciliation commands with main CLI."""
    cli.add_command(reconcile_group, name="reconcile")
