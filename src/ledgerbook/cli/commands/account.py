"""Chart of accounts commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import AccountNature, AccountType
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.utils.account_codes import code_depth


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType]),
    help="Account type (defaults to the parent's type)",
)
@click.option("--category", is_flag=True, help="Create a category that groups sub-accounts (not imputable)")
@click.option("--currency", help="Account currency (defaults to the reporting currency)")
@click.option(
    "--nature",
    type=click.Choice([n.value for n in AccountNature]),
    help="Override the type's usual nature (contra accounts)",
)
@click.pass_context
def create_account(ctx, code: str, name: str, account_type, category: bool, currency, nature):
    """Create a new account.

    The parent is taken from the code: 1.1.04 lives under 1.1.

    Examples:
        ledgerbook account create 1 "Assets" --type asset --category
        ledgerbook account create 1.1 "Current Assets" --category
        ledgerbook account create 1.1.01 "Cash USD"
        ledgerbook account create 1.1.02 "Cash ARS" --currency ARS
    """
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    try:
        account_id = service.create_account(
            code=code,
            name=name,
            account_type=account_type,
            imputable=not category,
            currency=currency,
            nature=nature,
        )
        click.echo(f"Created account {code} '{name}' (ID: {account_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List the chart of accounts."""
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    accounts = service.list_accounts(include_inactive=include_inactive)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nChart of accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        indent = "  " * (code_depth(acc.code) - 1)
        label = f"{indent}{acc.code} {acc.name}"
        flags = []
        if not acc.imputable:
            flags.append("category")
        if acc.requires_rate:
            flags.append(acc.currency)
        if not acc.active:
            flags.append("inactive")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"{label:50s} {acc.account_type.value:10s} {acc.nature.value:6s}{suffix}")


@account_group.command("show")
@click.argument("code", metavar="CODE")
@click.pass_context
def show_account(ctx, code: str):
    """Show an account with its path and current balance."""
    settings = ctx.obj["settings"]
    service = AccountService(ctx.obj["db"], settings)

    try:
        account = service.resolve(code)
        balance = LedgerService(ctx.obj["db"], settings).get_balance(code)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Account:  {account.code} {account.name}")
    click.echo(f"Path:     {' > '.join(a.name for a in service.account_path(account))}")
    click.echo(f"Type:     {account.account_type.value} ({account.nature.value} nature)")
    click.echo(f"Kind:     {'imputable' if account.imputable else 'category'}")
    click.echo(f"Currency: {account.currency}")
    click.echo(f"Status:   {'active' if account.active else 'inactive'}")
    click.echo(f"Balance:  {balance:,.2f} {settings.reporting_currency}")


@account_group.command("deactivate")
@click.argument("code", metavar="CODE")
@click.pass_context
def deactivate_account(ctx, code: str):
    """Stop an account from receiving new movements."""
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    try:
        service.deactivate_account(code)
        click.echo(f"Deactivated account {code}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("code", metavar="CODE")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, code: str, yes: bool):
    """Delete an account.

    Only accounts without movements or sub-accounts can be deleted; use
    'account deactivate' for the others.
    """
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    try:
        account = service.resolve(code)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete account {account.code} '{account.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(code)
        click.echo(f"Deleted account {account.code} '{account.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
