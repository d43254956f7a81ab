"""Subsidiary ledgers: detail items that must add up to an account's balance."""

from datetime import date
from typing import Optional

from ledgerbook.config import LedgerSettings, load_settings
from ledgerbook.database.base import Database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.currency import CENT, Number, round_amount, to_decimal
from ledgerbook.domain.entities import (
    NewSubsidiaryItem,
    SubsidiaryBalance,
    SubsidiaryItem,
    SubsidiaryLedger,
    SubsidiaryStatus,
)
from ledgerbook.domain.errors import ConflictError, NotFoundError, NotImputable, ValidationError
from ledgerbook.domain.journal import Clock, utc_now
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.logging_config import get_logger

logger = get_logger("subsidiary")


class SubsidiaryLedgerService:
    """Service for subsidiary ledgers (cuentas auxiliares).

    A subsidiary ledger breaks one imputable account down into detail
    items, valued in the reporting currency. The items never post to the
    journal; they are only compared with the account's book balance.
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

    def create_ledger(
        self, account_code: str, name: str, description: Optional[str] = None
    ) -> SubsidiaryLedger:
        """Create a subsidiary ledger for an account.

        Args:
            account_code: Imputable account the items break down
            name: Ledger name
            description: Optional description

        Returns:
            The new SubsidiaryLedger

        Raises:
            UnknownAccount: If account code does not exist
            NotImputable: If the account is a category
            ValidationError: If the name is empty
            ConflictError: If the account already has an active subsidiary ledger
        """
        account = self.accounts.resolve(account_code)
        if not account.imputable:
            raise NotImputable(account.code)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Subsidiary ledger name cannot be empty")
        if self.db.list_subsidiary_ledgers(account_id=account.id):
            raise ConflictError(f"Account '{account.code}' already has a subsidiary ledger")

        description = (description or "").strip() or None
        return self.db.create_subsidiary_ledger(account.id, name, self.clock(), description)

    def get_ledger(self, ledger_id: int) -> SubsidiaryLedger:
        ledger = self.db.get_subsidiary_ledger(ledger_id)
        if ledger is None:
            raise NotFoundError(f"Subsidiary ledger {ledger_id} not found")
        return ledger

    def list_ledgers(self, include_inactive: bool = False) -> list[SubsidiaryLedger]:
        return self.db.list_subsidiary_ledgers(include_inactive=include_inactive)

    def deactivate_ledger(self, ledger_id: int) -> None:
        """Hide a subsidiary ledger; its items are kept."""
        self.get_ledger(ledger_id)
        self.db.set_subsidiary_ledger_active(ledger_id, False)

    def add_item(
        self,
        ledger_id: int,
        description: str,
        unit_value: Number,
        quantity: Number = 1,
        item_date: Optional[date] = None,
    ) -> SubsidiaryItem:
        """Add a detail item; its total is quantity times unit value, in cents.

        Raises:
            NotFoundError: If the ledger does not exist
            ValidationError: If the ledger is inactive, the description is
                empty or the quantity is not positive
        """
        ledger = self.get_ledger(ledger_id)
        if not ledger.active:
            raise ValidationError(f"Subsidiary ledger {ledger_id} is inactive")
        description = (description or "").strip()
        if not description:
            raise ValidationError("Item description cannot be empty")
        quantity = to_decimal(quantity)
        if quantity <= 0:
            raise ValidationError("Item quantity must be greater than 0")
        unit_value = round_amount(unit_value)

        return self.db.add_subsidiary_item(
            NewSubsidiaryItem(
                ledger_id=ledger.id,
                description=description,
                quantity=quantity,
                unit_value=unit_value,
                total_value=round_amount(quantity * unit_value),
                item_date=item_date or self.clock().date(),
                created_at=self.clock(),
            )
        )

    def remove_item(self, item_id: int) -> None:
        if self.db.get_subsidiary_item(item_id) is None:
            raise NotFoundError(f"Subsidiary item {item_id} not found")
        self.db.delete_subsidiary_item(item_id)

    def balance(self, ledger_id: int, as_of: Optional[date] = None) -> SubsidiaryBalance:
        """Compare a subsidiary ledger's item total with the account's book balance.

        The difference is book balance minus item total. The ledger is
        balanced only when they agree to the cent.

        Raises:
            NotFoundError: If the ledger does not exist
        """
        ledger = self.get_ledger(ledger_id)
        account = self.accounts.get_account(ledger.account_id)
        book_balance = self.ledger.get_balance(account.code, as_of)
        item_total = ledger.item_total
        difference = round_amount(book_balance - item_total)
        status = SubsidiaryStatus.BALANCED if abs(difference) < CENT else SubsidiaryStatus.UNBALANCED

        if status is SubsidiaryStatus.UNBALANCED:
            logger.warning(
                "Subsidiary ledger out of balance",
                extra={"ledger": ledger.id, "code": account.code, "difference": f"{difference:.2f}"},
            )
        return SubsidiaryBalance(
            ledger=ledger,
            account=account,
            as_of=as_of,
            book_balance=book_balance,
            item_total=item_total,
            difference=difference,
            status=status,
        )

    def balances(self, as_of: Optional[date] = None) -> list[SubsidiaryBalance]:
        """Balance check of every active subsidiary ledger."""
        return [self.balance(ledger.id, as_of) for ledger in self.list_ledgers()]
