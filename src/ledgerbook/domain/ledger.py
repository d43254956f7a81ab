"""Ledger engine (Libro Mayor): running balances per account."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.config import LedgerSettings, load_settings
from ledgerbook.database.base import Database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.currency import ZERO, round_amount
from ledgerbook.domain.entities import Account, LedgerLine, LedgerReport, PostedMovement
from ledgerbook.domain.errors import ValidationError
from ledgerbook.logging_config import get_logger

logger = get_logger("ledger")


def compute_ledger(
    account: Account,
    prior: Iterable[PostedMovement],
    period: Iterable[PostedMovement],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    most_recent_first: bool = False,
) -> LedgerReport:
    """Build a ledger report from already-fetched movements.

    Args:
        account: Account whose nature decides the sign of every balance
        prior: Movements dated before the period (opening balance)
        period: Movements inside the period, in chronological order
        start_date: Period start, echoed in the report
        end_date: Period end, echoed in the report
        most_recent_first: Reverse the presentation order of the lines

    Returns:
        LedgerReport with running balances computed chronologically
    """
    prior_debit = ZERO
    prior_credit = ZERO
    for movement in prior:
        prior_debit += movement.debit
        prior_credit += movement.credit
    opening = round_amount(account.balance(prior_debit, prior_credit))

    running = opening
    total_debit = ZERO
    total_credit = ZERO
    lines = []
    for movement in period:
        running = round_amount(running + account.balance(movement.debit, movement.credit))
        total_debit += movement.debit
        total_credit += movement.credit
        lines.append(
            LedgerLine(
                entry_number=movement.entry_number,
                entry_date=movement.entry_date,
                entry_description=movement.entry_description,
                account_id=movement.account_id,
                debit=movement.debit,
                credit=movement.credit,
                balance=running,
                native_amount=movement.native_amount,
                exchange_rate=movement.exchange_rate,
                description=movement.description,
            )
        )

    if most_recent_first:
        lines.reverse()

    total_debit = round_amount(total_debit)
    total_credit = round_amount(total_credit)
    return LedgerReport(
        account=account,
        start_date=start_date,
        end_date=end_date,
        opening_balance=opening,
        lines=tuple(lines),
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=round_amount(opening + account.balance(total_debit, total_credit)),
    )


class LedgerService:
    """Service computing account ledgers and balances from posted movements.

    Nothing is cached: every call recomputes from the movement history.
    """

    def __init__(self, db: Database, settings: Optional[LedgerSettings] = None):
        self.db = db
        self.settings = settings or load_settings()
        self.accounts = AccountService(db, self.settings)

    def _ledger_account_ids(self, account: Account) -> list[int]:
        if account.imputable:
            return [account.id]
        return [acc.id for acc in self.accounts.imputable_descendants_of(account)]

    def get_ledger(
        self,
        account_code: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        most_recent_first: bool = False,
    ) -> LedgerReport:
        """Get the ledger of an account over an optional inclusive date range.

        For a category account the report covers all its imputable
        descendants, signed by the category's nature.

        Args:
            account_code: Account code
            start_date: Optional inclusive start date (opening balance covers earlier movements)
            end_date: Optional inclusive end date
            most_recent_first: Present the newest line first

        Returns:
            LedgerReport

        Raises:
            UnknownAccount: If account code does not exist
            ValidationError: If start_date is after end_date
        """
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")

        account = self.accounts.resolve(account_code)
        account_ids = self._ledger_account_ids(account)

        prior: list[PostedMovement] = []
        if start_date is not None:
            prior = self.db.list_posted_movements(account_ids=account_ids, before=start_date)
        period = self.db.list_posted_movements(
            account_ids=account_ids, start_date=start_date, end_date=end_date
        )

        report = compute_ledger(account, prior, period, start_date, end_date, most_recent_first)
        if report.is_abnormal:
            logger.warning(
                "Abnormal balance",
                extra={"code": account.code, "balance": f"{report.closing_balance:.2f}"},
            )
        return report

    def get_balance(self, account_code: str, as_of: Optional[date] = None) -> Decimal:
        """Get an account's balance including every posted movement up to as_of.

        Raises:
            UnknownAccount: If account code does not exist
        """
        account = self.accounts.resolve(account_code)
        movements = self.db.list_posted_movements(
            account_ids=self._ledger_account_ids(account), end_date=as_of
        )
        return compute_ledger(account, [], movements).closing_balance
