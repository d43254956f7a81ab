"""CLI helpers for --debit/--credit movement options."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.entities import ProposedMovement, Side
from ledgerbook.utils.amount_parser import parse_amount, parse_movement_spec

MOVEMENT_HELP = "CODE=AMOUNT or CODE=AMOUNT@RATE, amount in the account's currency (repeatable)"


def movement_options(command):
    """Add repeatable --debit and --credit options to a command."""
    command = click.option("--credit", "credits", multiple=True, metavar="CODE=AMOUNT[@RATE]", help=MOVEMENT_HELP)(command)
    command = click.option("--debit", "debits", multiple=True, metavar="CODE=AMOUNT[@RATE]", help=MOVEMENT_HELP)(command)
    return command


def parse_movements_or_exit(
    ctx: click.Context, debits: tuple[str, ...], credits: tuple[str, ...]
) -> list[ProposedMovement]:
    """Turn --debit/--credit values into proposed movements, or exit with a CLI error."""
    proposed = []
    try:
        for side, specs in ((Side.DEBIT, debits), (Side.CREDIT, credits)):
            for spec in specs:
                parsed = parse_movement_spec(spec)
                proposed.append(ProposedMovement(parsed.account_code, side, parsed.amount, parsed.rate))
    except ValueError as e:
        handle_domain_error(ctx, e)
    return proposed


def parse_rate_or_exit(ctx: click.Context, rate: str | None):
    """Parse an optional --rate value, or exit with a CLI error."""
    if rate is None:
        return None
    try:
        return parse_amount(rate)
    except ValueError as e:
        handle_domain_error(ctx, e)
