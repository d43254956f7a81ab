"""Journal entry validation, conversion and posting (Libro Diario)."""

from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from ledgerbook.config import LedgerSettings, load_settings
from ledgerbook.database.base import Database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.currency import (
    ZERO,
    Number,
    round_amount,
    round_rate,
    to_decimal,
    to_reporting_currency,
)
from ledgerbook.domain.entities import (
    EntryKind,
    JournalEntry,
    NewJournalEntry,
    NewMovement,
    ProposedMovement,
    Side,
)
from ledgerbook.domain.errors import (
    AccountInactive,
    InvalidRate,
    MissingExchangeRate,
    NotFoundError,
    NotImputable,
    UnbalancedEntry,
    ValidationError,
    entry_not_found,
)
from ledgerbook.logging_config import get_logger

logger = get_logger("journal")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class JournalService:
    """Service for posting and listing journal entries."""

    def __init__(
        self,
        db: Database,
        settings: Optional[LedgerSettings] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize journal service.

        Args:
            db: Database instance
            settings: Ledger settings (defaults to load_settings())
            clock: Callable returning the current UTC time, stamped as created_at
        """
        self.db = db
        self.settings = settings or load_settings()
        self.clock = clock or utc_now
        self.accounts = AccountService(db, self.settings)

    def build_movements(
        self,
        movements: Sequence[ProposedMovement],
        exchange_rate: Optional[Number] = None,
    ) -> tuple[NewMovement, ...]:
        """Resolve accounts and convert proposed movements to the reporting currency.

        A movement-level rate takes precedence over the entry-level
        ``exchange_rate``. Accounts in the reporting currency ignore rates.

        Args:
            movements: Proposed movements, amounts in each account's own currency
            exchange_rate: Optional entry-level rate

        Returns:
            Converted movements ready to persist

        Raises:
            ValidationError: If there are no movements or an amount is not positive
            UnknownAccount: If an account code does not exist
            NotImputable: If an account is a category
            AccountInactive: If an account is deactivated
            MissingExchangeRate: If a secondary-currency account has no rate
            InvalidRate: If the applicable rate is zero or negative
        """
        if not movements:
            raise ValidationError("Entry must have at least one movement")

        built = []
        for proposed in movements:
            amount = to_decimal(proposed.amount)
            if amount <= 0:
                raise ValidationError(
                    f"Movement amount for account '{proposed.account_code}' must be greater than 0"
                )

            account = self.accounts.resolve(proposed.account_code)
            if not self.accounts.is_imputable(account):
                raise NotImputable(account.code)
            if not account.active:
                raise AccountInactive(account.code)

            native_amount = None
            rate = None
            if account.requires_rate:
                rate = proposed.rate if proposed.rate is not None else exchange_rate
                if rate is None:
                    raise MissingExchangeRate(account.code)
                rate = round_rate(rate)
                if rate <= 0:
                    raise InvalidRate(rate)
                native_amount = round_amount(amount)
                converted = to_reporting_currency(native_amount, rate)
            else:
                converted = round_amount(amount)

            if converted == 0:
                raise ValidationError(
                    f"Movement amount for account '{account.code}' rounds to 0.00 "
                    f"in {self.settings.reporting_currency}"
                )

            built.append(
                NewMovement(
                    account_id=account.id,
                    debit=converted if proposed.side is Side.DEBIT else ZERO,
                    credit=converted if proposed.side is Side.CREDIT else ZERO,
                    native_amount=native_amount,
                    exchange_rate=rate,
                    description=proposed.description,
                )
            )
        return tuple(built)

    def validate_balance(self, movements: Iterable[NewMovement]) -> tuple[Decimal, Decimal]:
        """Check that rounded debits and credits match within the balance tolerance.

        Returns:
            Tuple of (total_debit, total_credit)

        Raises:
            UnbalancedEntry: If the sides differ by more than the tolerance
        """
        movements = list(movements)
        total_debit = round_amount(sum((m.debit for m in movements), ZERO))
        total_credit = round_amount(sum((m.credit for m in movements), ZERO))
        difference = round_amount(total_debit - total_credit)
        if abs(difference) > self.settings.balance_tolerance:
            raise UnbalancedEntry(difference, total_debit, total_credit)
        return total_debit, total_credit

    def prepare_entry(
        self,
        entry_date: date,
        description: str,
        movements: Sequence[ProposedMovement],
        notes: Optional[str] = None,
        exchange_rate: Optional[Number] = None,
        kind: EntryKind = EntryKind.REGULAR,
    ) -> NewJournalEntry:
        """Validate and convert an entry without persisting it."""
        if entry_date is None:
            raise ValidationError("Entry date is required")
        description = (description or "").strip()
        if not description:
            raise ValidationError("Entry description cannot be empty")
        if exchange_rate is not None:
            exchange_rate = round_rate(exchange_rate)
            if exchange_rate <= 0:
                raise InvalidRate(exchange_rate)

        built = self.build_movements(movements, exchange_rate)
        self.validate_balance(built)

        return NewJournalEntry(
            entry_date=entry_date,
            description=description,
            movements=built,
            created_at=self.clock(),
            notes=notes,
            exchange_rate=exchange_rate,
            kind=EntryKind(kind),
        )

    def post_entry(
        self,
        entry_date: date,
        description: str,
        movements: Sequence[ProposedMovement],
        notes: Optional[str] = None,
        exchange_rate: Optional[Number] = None,
        kind: EntryKind = EntryKind.REGULAR,
    ) -> JournalEntry:
        """Validate, convert and persist a journal entry.

        The entry number is allocated and the entry written with all its
        movements in one transaction; nothing is stored on failure.

        Args:
            entry_date: Accounting date of the entry
            description: Entry description
            movements: Proposed movements
            notes: Optional free-text notes
            exchange_rate: Optional entry-level rate for secondary-currency accounts
            kind: Regular or closing entry

        Returns:
            The posted JournalEntry with its number and movements

        Raises:
            ValidationError: Or one of its subclasses when the entry is rejected
            UnknownAccount: If an account code does not exist
        """
        new_entry = self.prepare_entry(entry_date, description, movements, notes, exchange_rate, kind)
        entry = self.db.create_journal_entry(new_entry)
        logger.info(
            "Journal entry posted",
            extra={
                "number": entry.number,
                "entry_date": entry.entry_date.isoformat(),
                "total": f"{entry.total_debit:.2f}",
            },
        )
        return entry

    def get_entry(self, entry_id: int) -> JournalEntry:
        """Get journal entry by ID.

        Raises:
            NotFoundError: If entry not found
        """
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def get_entry_by_number(self, number: int) -> JournalEntry:
        entry = self.db.get_journal_entry_by_number(number)
        if entry is None:
            raise NotFoundError(f"Journal entry #{number} not found")
        return entry

    def list_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_superseded: bool = True,
        search: Optional[str] = None,
    ) -> list[JournalEntry]:
        """List entries (Libro Diario) ordered by date then number.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            include_superseded: Whether corrected entries are listed too
            search: Optional text matched against description and notes

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")
        return self.db.list_journal_entries(
            start_date=start_date,
            end_date=end_date,
            include_superseded=include_superseded,
            search=search,
        )
