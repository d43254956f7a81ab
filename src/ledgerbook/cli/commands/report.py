"""Financial statement commands."""

from datetime import date

import click
from ledgerbook.cli.date_filters import (
    parse_date_or_exit,
    period_options,
    pop_period_flags,
    resolve_cli_date_range,
)
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.entities import StatementSection
from ledgerbook.domain.statements import StatementService
from ledgerbook.utils.account_codes import code_sort_key
from ledgerbook.utils.date_parser import get_date_range


def _echo_section(section: StatementSection, show_subtotals: bool) -> None:
    click.echo(f"\n{section.name}")
    rows = list(section.lines)
    if show_subtotals:
        rows = sorted(rows + list(section.subtotals), key=lambda line: code_sort_key(line.code))
    subtotal_ids = {line.account_id for line in section.subtotals}
    for line in rows:
        indent = "  " * line.code.count(".")
        label = f"{indent}{line.code} {line.name}"
        if line.account_id in subtotal_ids:
            label = click.style(label, bold=True)
        click.echo(f"  {label:60s} {line.amount:>14,.2f}")
    click.echo(f"  {'Total ' + section.name:60s} {section.total:>14,.2f}")


@click.group()
def report_group():
    """Financial statements."""
    pass


@report_group.command("income")
@period_options
@click.option("--expand", is_flag=True, help="Show category subtotals")
@click.pass_context
def income_statement(ctx, expand, start_date, end_date, **flags):
    """Income statement (defaults to the current month).

    Closing entries are not counted.
    """
    service = StatementService(ctx.obj["db"], ctx.obj["settings"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(flags),
        default_range=get_date_range("this-month"),
    )
    start = start or date.min
    end = end or date.today()

    try:
        statement = service.income_statement(start, end)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nIncome statement {statement.start_date} to {statement.end_date}")
    click.echo("=" * 78)
    for section in (statement.revenue, statement.cost, statement.expense):
        _echo_section(section, expand)
    click.echo("-" * 78)
    click.echo(f"  {'Gross result':60s} {statement.gross_result:>14,.2f}")
    click.echo(f"  {'Net result':60s} {statement.net_result:>14,.2f}")


@report_group.command("balance")
@click.option("--as-of", help="Balance sheet date (defaults to today)")
@click.option("--expand", is_flag=True, help="Show category subtotals")
@click.pass_context
def balance_sheet(ctx, as_of, expand):
    """Balance sheet: assets = liabilities + equity."""
    service = StatementService(ctx.obj["db"], ctx.obj["settings"])
    day = parse_date_or_exit(ctx, as_of, "as-of date") or date.today()

    sheet = service.balance_sheet(day)

    click.echo(f"\nBalance sheet as of {sheet.as_of}")
    click.echo("=" * 78)
    for section in (sheet.assets, sheet.liabilities, sheet.equity):
        _echo_section(section, expand)
    click.echo(f"  {'Result of the period (not closed)':60s} {sheet.period_result:>14,.2f}")
    click.echo("-" * 78)
    click.echo(f"  {'Total assets':60s} {sheet.total_assets:>14,.2f}")
    click.echo(f"  {'Total liabilities + equity':60s} {sheet.total_liabilities + sheet.total_equity:>14,.2f}")
    if sheet.equation_holds:
        click.echo("Equation holds.")
    else:
        click.echo(f"Warning: equation does not hold (difference {sheet.difference:,.2f})")


@report_group.command("trial")
@period_options
@click.pass_context
def trial_balance(ctx, start_date, end_date, **flags):
    """Trial balance (sums and balances) per account."""
    service = StatementService(ctx.obj["db"], ctx.obj["settings"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(flags)
    )

    try:
        trial = service.trial_balance(start, end)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not trial.rows:
        click.echo("No movements found.")
        return

    click.echo(f"\n{'Account':36s} {'Opening':>12s} {'Debit':>12s} {'Credit':>12s} {'Debtor':>12s} {'Creditor':>12s}")
    click.echo("-" * 102)
    for row in trial.rows:
        label = f"{row.account.code} {row.account.name}"[:36]
        debtor = f"{row.closing_debit - row.closing_credit:,.2f}" if row.is_debtor else ""
        creditor = f"{row.closing_credit - row.closing_debit:,.2f}" if row.is_creditor else ""
        click.echo(
            f"{label:36s} {row.opening_balance:>12,.2f} {row.period_debit:>12,.2f} "
            f"{row.period_credit:>12,.2f} {debtor:>12s} {creditor:>12s}"
        )
    click.echo("-" * 102)
    click.echo(
        f"{'Totals':36s} {'':>12s} {trial.total_debit:>12,.2f} {trial.total_credit:>12,.2f} "
        f"{trial.total_debtor_balances:>12,.2f} {trial.total_creditor_balances:>12,.2f}"
    )
    click.echo(f"Debits = credits: {'yes' if trial.debit_credit_match else 'NO'}")
    click.echo(f"Debtor = creditor balances: {'yes' if trial.balances_match else 'NO'}")


@report_group.command("ratios")
@click.option("--as-of", help="Date (defaults to today)")
@click.pass_context
def liquidity_ratios(ctx, as_of):
    """Liquidity ratios: current ratio, quick ratio, working capital."""
    service = StatementService(ctx.obj["db"], ctx.obj["settings"])
    day = parse_date_or_exit(ctx, as_of, "as-of date") or date.today()

    ratios = service.liquidity_ratios(day)

    def fmt(value):
        return "n/a" if value is None else f"{value:,.2f}"

    click.echo(f"\nLiquidity as of {ratios.as_of}")
    click.echo(f"  Current assets:      {ratios.current_assets:>14,.2f}")
    click.echo(f"  Inventory:           {ratios.inventory:>14,.2f}")
    click.echo(f"  Current liabilities: {ratios.current_liabilities:>14,.2f}")
    click.echo(f"  Working capital:     {ratios.working_capital:>14,.2f}")
    click.echo(f"  Current ratio:       {fmt(ratios.current_ratio):>14s}")
    click.echo(f"  Quick ratio:         {fmt(ratios.quick_ratio):>14s}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
