"""CLI error handling helpers."""

import click

from ledgerbook.domain.errors import DomainError, EntryLocked, UnbalancedEntry

HINTS = {
    EntryLocked: "Use 'entry correct --override' to correct it anyway.",
    UnbalancedEntry: "Check the --debit and --credit amounts; entries are never adjusted automatically.",
}


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error, with a hint where one applies, and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    for error_type, hint in HINTS.items():
        if isinstance(error, error_type):
            click.echo(f"Hint: {hint}", err=True)
            break
    ctx.exit(1)
