"""Subsidiary ledger commands."""

import click
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.subsidiary import SubsidiaryLedgerService
from ledgerbook.utils.amount_parser import parse_amount


def _echo_balance(check) -> None:
    state = "balanced" if check.is_balanced else "UNBALANCED"
    click.echo(
        f"ID: {check.ledger.id:3d} | {check.account.code:10s} | {check.ledger.name[:24]:24s} | "
        f"book {check.book_balance:>12,.2f} | items {check.item_total:>12,.2f} | "
        f"diff {check.difference:>10,.2f} | {state}"
    )


@click.group()
def subsidiary_group():
    """Break accounts down into detail items and check them against the books."""
    pass


@subsidiary_group.command("create")
@click.argument("code", metavar="ACCOUNT_CODE")
@click.argument("name", metavar="NAME")
@click.option("--description", help="Optional description")
@click.pass_context
def create_ledger(ctx, code, name, description):
    """Create a subsidiary ledger for an account.

    Examples:
        ledgerbook subsidiary create 1.1.04 "Stock detail"
    """
    service = SubsidiaryLedgerService(ctx.obj["db"], ctx.obj["settings"])

    try:
        ledger = service.create_ledger(code, name, description=description)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created subsidiary ledger '{ledger.name}' for {code} (ID: {ledger.id})")


@subsidiary_group.command("add-item")
@click.argument("ledger_id", type=int)
@click.argument("description")
@click.argument("unit_value", metavar="UNIT_VALUE")
@click.option("--quantity", default="1", help="Quantity (defaults to 1)")
@click.option("--date", "item_date", help="Item date (defaults to today)")
@click.pass_context
def add_item(ctx, ledger_id, description, unit_value, quantity, item_date):
    """Add a detail item valued at QUANTITY x UNIT_VALUE.

    Examples:
        ledgerbook subsidiary add-item 1 "Phone X" 250 --quantity 4
    """
    service = SubsidiaryLedgerService(ctx.obj["db"], ctx.obj["settings"])
    day = parse_date_or_exit(ctx, item_date, "date")

    try:
        item = service.add_item(
            ledger_id,
            description,
            parse_amount(unit_value),
            quantity=parse_amount(quantity),
            item_date=day,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added item {item.id}: {item.description} ({item.total_value:,.2f})")


@subsidiary_group.command("remove-item")
@click.argument("item_id", type=int)
@click.pass_context
def remove_item(ctx, item_id):
    """Remove a detail item."""
    service = SubsidiaryLedgerService(ctx.obj["db"], ctx.obj["settings"])

    try:
        service.remove_item(item_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Removed item {item_id}")


@subsidiary_group.command("show")
@click.argument("ledger_id", type=int)
@click.option("--as-of", help="Book balance date (defaults to all movements)")
@click.pass_context
def show_ledger(ctx, ledger_id, as_of):
    """Show a subsidiary ledger's items and its balance check."""
    service = SubsidiaryLedgerService(ctx.obj["db"], ctx.obj["settings"])
    day = parse_date_or_exit(ctx, as_of, "as-of date")

    try:
        check = service.balance(ledger_id, day)
    except ValueError as e:
        handle_domain_error(ctx, e)

    ledger = check.ledger
    click.echo(f"\n{ledger.name} ({check.account.code} {check.account.name})")
    if ledger.description:
        click.echo(f"  {ledger.description}")
    click.echo("-" * 80)
    for item in ledger.items:
        click.echo(
            f"{item.id:4d} {item.item_date} {item.description[:30]:30s} "
            f"{item.quantity:>8} x {item.unit_value:>12,.2f} = {item.total_value:>12,.2f}"
        )
    click.echo("-" * 80)
    click.echo(f"Item total:   {check.item_total:>14,.2f}")
    click.echo(f"Book balance: {check.book_balance:>14,.2f}")
    click.echo(f"Difference:   {check.difference:>14,.2f}")
    click.echo(f"Status: {check.status.value}")


@subsidiary_group.command("list")
@click.option("--as-of", help="Book balance date (defaults to all movements)")
@click.pass_context
def list_ledgers(ctx, as_of):
    """List active subsidiary ledgers with their balance check."""
    service = SubsidiaryLedgerService(ctx.obj["db"], ctx.obj["settings"])
    day = parse_date_or_exit(ctx, as_of, "as-of date")

    checks = service.balances(day)
    if not checks:
        click.echo("No subsidiary ledgers found.")
        return

    for check in checks:
        _echo_balance(check)


@subsidiary_group.command("deactivate")
@click.argument("ledger_id", type=int)
@click.pass_context
def deactivate_ledger(ctx, ledger_id):
    """Hide a subsidiary ledger (its items are kept)."""
    service = SubsidiaryLedgerService(ctx.obj["db"], ctx.obj["settings"])

    try:
        service.deactivate_ledger(ledger_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deactivated subsidiary ledger {ledger_id}")


def register_commands(cli):
    """Register subsidiary ledger commands with main CLI."""
    cli.add_command(subsidiary_group, name="subsidiary")
