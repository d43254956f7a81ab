"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class StateError(DomainError):
    """Workflow precondition failed for the current state of an entity."""


class UnknownAccount(NotFoundError):
    """No account exists with the requested code."""

    def __init__(self, code: str):
        super().__init__(account_not_found(code))
        self.code = code


class NotImputable(ValidationError):
    """Movement targets a category (non-imputable) account."""

    def __init__(self, code: str):
        super().__init__(account_not_imputable(code))
        self.code = code


class AccountInactive(ValidationError):
    """Movement targets a deactivated account."""

    def __init__(self, code: str):
        super().__init__(f"Account '{code}' is inactive and cannot receive movements")
        self.code = code


class MissingExchangeRate(ValidationError):
    """Account requires a rate and none was supplied."""

    def __init__(self, code: str):
        super().__init__(missing_exchange_rate(code))
        self.code = code


class InvalidRate(ValidationError):
    """Exchange rate is zero or negative."""

    def __init__(self, rate: Optional[Decimal]):
        super().__init__(f"Invalid exchange rate {rate}: must be greater than 0")
        self.rate = rate


class UnbalancedEntry(ValidationError):
    """Debits and credits differ by more than the balance tolerance."""

    def __init__(self, difference: Decimal, total_debit: Decimal, total_credit: Decimal):
        super().__init__(unbalanced_entry(difference, total_debit, total_credit))
        self.difference = difference
        self.total_debit = total_debit
        self.total_credit = total_credit


class EntryLocked(StateError):
    """Entry is outside its correction window."""

    def __init__(self, number: int, days_elapsed: int, window_days: int):
        super().__init__(
            f"Entry #{number} can no longer be corrected "
            f"({days_elapsed} days elapsed, limit: {window_days})"
        )
        self.number = number
        self.days_elapsed = days_elapsed
        self.window_days = window_days


class AlreadySuperseded(StateError):
    """Entry has already been replaced by a correction."""

    def __init__(self, number: int):
        super().__init__(f"Entry #{number} has already been superseded")
        self.number = number


def account_not_found(code: str) -> str:
    """Return message for missing account."""
    return f"Account '{code}' not found"


def account_not_imputable(code: str) -> str:
    """Return message for a posting against a category account."""
    return f"Account '{code}' is a category and cannot receive movements"


def missing_exchange_rate(code: str) -> str:
    """Return message for a foreign-currency movement without a rate."""
    return f"Account '{code}' requires an exchange rate"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def unbalanced_entry(difference: Decimal, total_debit: Decimal, total_credit: Decimal) -> str:
    """Return message for an entry whose sides do not match."""
    return (
        f"Entry is not balanced. Debit: {total_debit:,.2f}, "
        f"Credit: {total_credit:,.2f}, Difference: {difference:,.2f}"
    )


def account_delete_blocked(code: str, movement_count: int, child_count: int) -> str:
    """Return message when an account has movements or sub-accounts."""
    parts = []
    if movement_count > 0:
        parts.append(f"{movement_count} movement{'s' if movement_count != 1 else ''}")
    if child_count > 0:
        parts.append(f"{child_count} sub-account{'s' if child_count != 1 else ''}")
    return (
        f"Cannot delete account '{code}': it has {', '.join(parts)}. "
        "Deactivate it instead."
    )
