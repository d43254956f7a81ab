"""Cash/bank reconciliation against the book balance."""

from datetime import date
from typing import Optional

from ledgerbook.config import LedgerSettings, load_settings
from ledgerbook.database.base import Database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.currency import Number, round_amount, round_rate, to_decimal, to_reporting_currency
from ledgerbook.domain.entities import NewReconciliation, Reconciliation, ReconciliationStatus
from ledgerbook.domain.errors import (
    InvalidRate,
    MissingExchangeRate,
    NotFoundError,
    NotImputable,
)
from ledgerbook.domain.journal import Clock, utc_now
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.logging_config import get_logger

logger = get_logger("reconciliation")


class ReconciliationService:
    """Service comparing counted cash or bank balances to the books.

    Reconciliations are append-only records; they never post or change
    ledger data.
    """

    def __init__(
        self,
        db: Database,
        settings: Optional[LedgerSettings] = None,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.settings = settings or load_settings()
        self.clock = clock or utc_now
        self.accounts = AccountService(db, self.settings)
        self.ledger = LedgerService(db, self.settings)

    def reconcile(
        self,
        account_code: str,
        as_of: date,
        physical_balance: Number,
        exchange_rate: Optional[Number] = None,
        notes: Optional[str] = None,
        operator: Optional[str] = None,
    ) -> Reconciliation:
        """Record a reconciliation of an account's counted balance.

        For an account in the secondary currency the counted figure is in
        that currency and is converted with exchange_rate.

        Args:
            account_code: Imputable account code
            as_of: Date the balance was counted
            physical_balance: Counted balance
            exchange_rate: Rate for secondary-currency accounts
            notes: Optional notes
            operator: Who counted (defaults to the configured operator)

        Returns:
            The stored Reconciliation

        Raises:
            UnknownAccount: If account code does not exist
            NotImputable: If the account is a category
            MissingExchangeRate: If a secondary-currency account has no rate
            InvalidRate: If the rate is zero or negative
        """
        account = self.accounts.resolve(account_code)
        if not account.imputable:
            raise NotImputable(account.code)

        counted = to_decimal(physical_balance)
        physical_native = None
        rate = None
        if account.requires_rate:
            if exchange_rate is None:
                raise MissingExchangeRate(account.code)
            rate = round_rate(exchange_rate)
            if rate <= 0:
                raise InvalidRate(rate)
            physical_native = round_amount(counted)
            counted = to_reporting_currency(physical_native, rate)
        counted = round_amount(counted)

        book_balance = self.ledger.get_balance(account.code, as_of)
        difference = round_amount(counted - book_balance)
        status = (
            ReconciliationStatus.RECONCILED
            if abs(difference) <= self.settings.reconciliation_tolerance
            else ReconciliationStatus.VARIANCE
        )

        record = self.db.create_reconciliation(
            NewReconciliation(
                account_id=account.id,
                as_of=as_of,
                book_balance=book_balance,
                physical_balance=counted,
                difference=difference,
                status=status,
                created_at=self.clock(),
                physical_native=physical_native,
                exchange_rate=rate,
                notes=notes,
                operator=operator or self.settings.default_operator,
            )
        )

        extra = {"code": account.code, "as_of": as_of.isoformat(), "difference": f"{difference:.2f}"}
        if status is ReconciliationStatus.VARIANCE:
            logger.warning("Reconciliation variance", extra=extra)
        else:
            logger.info("Account reconciled", extra=extra)
        return record

    def get_reconciliation(self, reconciliation_id: int) -> Reconciliation:
        record = self.db.get_reconciliation(reconciliation_id)
        if record is None:
            raise NotFoundError(f"Reconciliation {reconciliation_id} not found")
        return record

    def list_reconciliations(self, account_code: Optional[str] = None) -> list[Reconciliation]:
        """List reconciliations newest first, optionally for one account."""
        account_id = None
        if account_code is not None:
            account_id = self.accounts.resolve(account_code).id
        return self.db.list_reconciliations(account_id=account_id)
