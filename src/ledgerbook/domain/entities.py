"""Domain model entities for ledgerbook.

These are pure data classes representing accounting concepts, independent of
database schema. Services and reports only ever see these types; the ORM
layer converts to them through ``ledgerbook.database.mappers``.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from ledgerbook.domain.currency import ZERO, from_reporting_currency, round_amount, weighted_average_rate


class AccountNature(str, Enum):
    """Side on which an account increases."""

    DEBIT = "debit"
    CREDIT = "credit"

    def signed_balance(self, debit: Decimal, credit: Decimal) -> Decimal:
        """Balance of debit/credit totals under this nature's sign convention."""
        if self is AccountNature.DEBIT:
            return debit - credit
        return credit - debit


class AccountType(str, Enum):
    """Statement classification of an account."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    COST = "cost"
    EXPENSE = "expense"

    @property
    def default_nature(self) -> AccountNature:
        if self in (AccountType.ASSET, AccountType.COST, AccountType.EXPENSE):
            return AccountNature.DEBIT
        return AccountNature.CREDIT

    @property
    def is_result(self) -> bool:
        """True for income-statement accounts."""
        return self in (AccountType.REVENUE, AccountType.COST, AccountType.EXPENSE)


class Side(str, Enum):
    """Side of a movement."""

    DEBIT = "debit"
    CREDIT = "credit"


class EntryStatus(str, Enum):
    POSTED = "posted"
    SUPERSEDED = "superseded"


class EntryKind(str, Enum):
    REGULAR = "regular"
    CLOSING = "closing"


class ReconciliationStatus(str, Enum):
    RECONCILED = "reconciled"
    VARIANCE = "variance"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    id: int
    code: str
    name: str
    account_type: AccountType
    nature: AccountNature
    imputable: bool
    parent_id: Optional[int]
    currency: str
    requires_rate: bool
    active: bool
    created_at: datetime

    def balance(self, debit: Decimal, credit: Decimal) -> Decimal:
        """Signed balance for the given totals."""
        return self.nature.signed_balance(debit, credit)


@dataclass(frozen=True)
class Movement:
    """One debit or credit line of a journal entry."""

    id: int
    entry_id: int
    account_id: int
    debit: Decimal
    credit: Decimal
    native_amount: Optional[Decimal] = None
    exchange_rate: Optional[Decimal] = None
    description: Optional[str] = None

    @property
    def side(self) -> Side:
        return Side.DEBIT if self.debit != 0 else Side.CREDIT

    @property
    def amount(self) -> Decimal:
        return self.debit if self.debit != 0 else self.credit


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry (asiento) with its movements."""

    id: int
    number: int
    entry_date: date
    description: str
    notes: Optional[str]
    exchange_rate: Optional[Decimal]
    kind: EntryKind
    status: EntryStatus
    created_at: datetime
    supersedes_id: Optional[int] = None
    superseded_by_id: Optional[int] = None
    movements: tuple[Movement, ...] = ()

    @property
    def total_debit(self) -> Decimal:
        return round_amount(sum((m.debit for m in self.movements), ZERO))

    @property
    def total_credit(self) -> Decimal:
        return round_amount(sum((m.credit for m in self.movements), ZERO))

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def average_rate(self) -> Optional[Decimal]:
        """Native-amount weighted average of the movement rates."""
        return weighted_average_rate(
            (m.native_amount, m.exchange_rate)
            for m in self.movements
            if m.native_amount is not None and m.exchange_rate is not None
        )

    @property
    def is_posted(self) -> bool:
        return self.status is EntryStatus.POSTED


@dataclass(frozen=True)
class ProposedMovement:
    """Caller input for one movement, in the account's own currency."""

    account_code: str
    side: Side
    amount: Decimal
    rate: Optional[Decimal] = None
    description: Optional[str] = None

    @classmethod
    def debit(cls, account_code: str, amount, rate=None, description=None) -> "ProposedMovement":
        return cls(account_code, Side.DEBIT, Decimal(str(amount)),
                   None if rate is None else Decimal(str(rate)), description)

    @classmethod
    def credit(cls, account_code: str, amount, rate=None, description=None) -> "ProposedMovement":
        return cls(account_code, Side.CREDIT, Decimal(str(amount)),
                   None if rate is None else Decimal(str(rate)), description)


@dataclass(frozen=True)
class NewMovement:
    """Validated, converted movement ready to be persisted."""

    account_id: int
    debit: Decimal
    credit: Decimal
    native_amount: Optional[Decimal] = None
    exchange_rate: Optional[Decimal] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class NewJournalEntry:
    """Validated entry ready to be persisted."""

    entry_date: date
    description: str
    movements: tuple[NewMovement, ...]
    created_at: datetime
    notes: Optional[str] = None
    exchange_rate: Optional[Decimal] = None
    kind: EntryKind = EntryKind.REGULAR


@dataclass(frozen=True)
class PostedMovement:
    """Movement of a posted entry, joined with its entry header."""

    movement_id: int
    entry_id: int
    entry_number: int
    entry_date: date
    entry_description: str
    entry_kind: EntryKind
    account_id: int
    debit: Decimal
    credit: Decimal
    native_amount: Optional[Decimal] = None
    exchange_rate: Optional[Decimal] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class LedgerLine:
    """Ledger movement annotated with the running balance after it."""

    entry_number: int
    entry_date: date
    entry_description: str
    account_id: int
    debit: Decimal
    credit: Decimal
    balance: Decimal
    native_amount: Optional[Decimal] = None
    exchange_rate: Optional[Decimal] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class LedgerReport:
    """Libro Mayor for one account over an optional date range."""

    account: Account
    start_date: Optional[date]
    end_date: Optional[date]
    opening_balance: Decimal
    lines: tuple[LedgerLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal

    @property
    def is_abnormal(self) -> bool:
        """True when the closing balance sits on the side opposite the nature."""
        return self.closing_balance < 0


@dataclass(frozen=True)
class AccountTotals:
    """Debit and credit totals of one account over some range."""

    account: Account
    debit: Decimal
    credit: Decimal

    @property
    def balance(self) -> Decimal:
        return self.account.balance(self.debit, self.credit)


@dataclass(frozen=True)
class StatementLine:
    account_id: int
    code: str
    name: str
    amount: Decimal


@dataclass(frozen=True)
class StatementSection:
    """Group of statement lines with category subtotals."""

    name: str
    lines: tuple[StatementLine, ...]
    subtotals: tuple[StatementLine, ...]
    total: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    start_date: date
    end_date: date
    revenue: StatementSection
    cost: StatementSection
    expense: StatementSection
    revenue_total: Decimal
    cost_total: Decimal
    expense_total: Decimal
    net_result: Decimal

    @property
    def gross_result(self) -> Decimal:
        return self.revenue_total - self.cost_total


@dataclass(frozen=True)
class BalanceSheet:
    as_of: date
    assets: StatementSection
    liabilities: StatementSection
    equity: StatementSection
    period_result: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    difference: Decimal
    equation_holds: bool


@dataclass(frozen=True)
class TrialBalanceRow:
    """One account in the Balance de Sumas y Saldos."""

    account: Account
    opening_debit: Decimal
    opening_credit: Decimal
    period_debit: Decimal
    period_credit: Decimal

    @property
    def opening_balance(self) -> Decimal:
        return self.account.balance(self.opening_debit, self.opening_credit)

    @property
    def closing_debit(self) -> Decimal:
        return self.opening_debit + self.period_debit

    @property
    def closing_credit(self) -> Decimal:
        return self.opening_credit + self.period_credit

    @property
    def closing_balance(self) -> Decimal:
        return self.account.balance(self.closing_debit, self.closing_credit)

    @property
    def is_debtor(self) -> bool:
        """True when the closing position is a net debit."""
        return self.closing_debit > self.closing_credit

    @property
    def is_creditor(self) -> bool:
        return self.closing_credit > self.closing_debit


@dataclass(frozen=True)
class TrialBalance:
    start_date: Optional[date]
    end_date: Optional[date]
    rows: tuple[TrialBalanceRow, ...]
    total_debit: Decimal
    total_credit: Decimal
    total_debtor_balances: Decimal
    total_creditor_balances: Decimal
    debit_credit_match: bool
    balances_match: bool


@dataclass(frozen=True)
class LiquidityRatios:
    as_of: date
    current_assets: Decimal
    current_liabilities: Decimal
    inventory: Decimal
    working_capital: Decimal
    current_ratio: Optional[Decimal]
    quick_ratio: Optional[Decimal]


@dataclass(frozen=True)
class EditWindow:
    """Whether an entry can still be corrected."""

    editable: bool
    days_elapsed: int
    days_remaining: Optional[int]
    window_days: int


@dataclass(frozen=True)
class Reconciliation:
    """Comparison of a book balance against a counted balance."""

    id: int
    account_id: int
    as_of: date
    book_balance: Decimal
    physical_balance: Decimal
    difference: Decimal
    status: ReconciliationStatus
    created_at: datetime
    physical_native: Optional[Decimal] = None
    exchange_rate: Optional[Decimal] = None
    notes: Optional[str] = None
    operator: Optional[str] = None

    @property
    def book_native(self) -> Optional[Decimal]:
        """Book balance expressed in the native currency at the counting rate."""
        if self.exchange_rate is None:
            return None
        return from_reporting_currency(self.book_balance, self.exchange_rate)


@dataclass(frozen=True)
class NewReconciliation:
    account_id: int
    as_of: date
    book_balance: Decimal
    physical_balance: Decimal
    difference: Decimal
    status: ReconciliationStatus
    created_at: datetime
    physical_native: Optional[Decimal] = None
    exchange_rate: Optional[Decimal] = None
    notes: Optional[str] = None
    operator: Optional[str] = None


class SubsidiaryStatus(str, Enum):
    BALANCED = "balanced"
    UNBALANCED = "unbalanced"


@dataclass(frozen=True)
class SubsidiaryItem:
    """Detail line backing part of an account's balance."""

    id: int
    ledger_id: int
    description: str
    quantity: Decimal
    unit_value: Decimal
    total_value: Decimal
    item_date: date
    created_at: datetime


@dataclass(frozen=True)
class SubsidiaryLedger:
    """Detail breakdown (cuenta auxiliar) of one imputable account."""

    id: int
    account_id: int
    name: str
    description: Optional[str]
    active: bool
    created_at: datetime
    items: tuple[SubsidiaryItem, ...] = ()

    @property
    def item_total(self) -> Decimal:
        return round_amount(sum((item.total_value for item in self.items), ZERO))


@dataclass(frozen=True)
class NewSubsidiaryItem:
    ledger_id: int
    description: str
    quantity: Decimal
    unit_value: Decimal
    total_value: Decimal
    item_date: date
    created_at: datetime


@dataclass(frozen=True)
class SubsidiaryBalance:
    """Book balance of an account compared with its subsidiary detail."""

    ledger: SubsidiaryLedger
    account: Account
    as_of: Optional[date]
    book_balance: Decimal
    item_total: Decimal
    difference: Decimal
    status: SubsidiaryStatus

    @property
    def is_balanced(self) -> bool:
        return self.status is SubsidiaryStatus.BALANCED
