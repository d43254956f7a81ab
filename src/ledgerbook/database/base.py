"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional
from datetime import date, datetime

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    Account,
    AccountNature,
    AccountType,
    JournalEntry,
    NewJournalEntry,
    NewReconciliation,
    NewSubsidiaryItem,
    PostedMovement,
    Reconciliation,
    SubsidiaryItem,
    SubsidiaryLedger,
)


class Database(ABC):
    """Abstract persistence repository for ledgerbook.

    Implementations must make ``create_journal_entry`` and ``supersede_entry``
    atomic: the entry number is allocated, and every row is written, inside a
    single transaction that is rolled back as a whole on failure.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        nature: AccountNature,
        imputable: bool,
        currency: str,
        requires_rate: bool,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by code."""
        pass

    @abstractmethod
    def list_accounts(self, include_inactive: bool = True) -> list[Account]:
        """List accounts ordered by code."""
        pass

    @abstractmethod
    def set_account_active(self, account_id: int, active: bool) -> None:
        """Activate or deactivate an account."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_movement_count(self, account_id: int) -> int:
        """Count movements (of any entry status) on an account."""
        pass

    @abstractmethod
    def get_child_count(self, account_id: int) -> int:
        """Count direct sub-accounts of an account."""
        pass

    # Journal entry operations
    @abstractmethod
    def create_journal_entry(self, entry: NewJournalEntry) -> JournalEntry:
        """Allocate the next entry number and persist entry and movements atomically."""
        pass

    @abstractmethod
    def supersede_entry(self, entry_id: int, replacement: NewJournalEntry) -> JournalEntry:
        """Mark a posted entry superseded and persist its replacement atomically.

        Raises:
            NotFoundError: If the entry does not exist
            AlreadySuperseded: If the entry is no longer posted
        """
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry (with movements) by ID."""
        pass

    @abstractmethod
    def get_journal_entry_by_number(self, number: int) -> Optional[JournalEntry]:
        """Get journal entry (with movements) by sequential number."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_superseded: bool = True,
        search: Optional[str] = None,
    ) -> list[JournalEntry]:
        """List entries ordered by date then number.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            include_superseded: If False, only posted entries are returned
            search: Optional case-insensitive text matched against description and notes
        """
        pass

    # Movement queries
    @abstractmethod
    def list_posted_movements(
        self,
        account_ids: Optional[Iterable[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        before: Optional[date] = None,
        exclude_closing: bool = False,
    ) -> list[PostedMovement]:
        """List movements of posted entries in chronological order.

        Ordering is entry date, then entry number, then movement ID.

        Args:
            account_ids: Optional accounts to restrict to
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            before: Optional exclusive upper bound (for opening balances)
            exclude_closing: If True, skip movements of closing entries
        """
        pass

    # Reconciliation operations
    @abstractmethod
    def create_reconciliation(self, reconciliation: NewReconciliation) -> Reconciliation:
        """Persist a reconciliation record."""
        pass

    @abstractmethod
    def get_reconciliation(self, reconciliation_id: int) -> Optional[Reconciliation]:
        """Get reconciliation by ID."""
        pass

    @abstractmethod
    def list_reconciliations(self, account_id: Optional[int] = None) -> list[Reconciliation]:
        """List reconciliations, newest first, optionally for one account."""
        pass

    # Subsidiary ledger operations
    @abstractmethod
    def create_subsidiary_ledger(
        self,
        account_id: int,
        name: str,
        created_at: datetime,
        description: Optional[str] = None,
    ) -> SubsidiaryLedger:
        """Create a subsidiary ledger for an account."""
        pass

    @abstractmethod
    def get_subsidiary_ledger(self, ledger_id: int) -> Optional[SubsidiaryLedger]:
        """Get subsidiary ledger (with items) by ID."""
        pass

    @abstractmethod
    def list_subsidiary_ledgers(
        self, account_id: Optional[int] = None, include_inactive: bool = False
    ) -> list[SubsidiaryLedger]:
        """List subsidiary ledgers ordered by ID, optionally for one account."""
        pass

    @abstractmethod
    def set_subsidiary_ledger_active(self, ledger_id: int, active: bool) -> None:
        """Activate or deactivate a subsidiary ledger."""
        pass

    @abstractmethod
    def add_subsidiary_item(self, item: NewSubsidiaryItem) -> SubsidiaryItem:
        """Persist a subsidiary ledger item."""
        pass

    @abstractmethod
    def get_subsidiary_item(self, item_id: int) -> Optional[SubsidiaryItem]:
        """Get subsidiary item by ID."""
        pass

    @abstractmethod
    def delete_subsidiary_item(self, item_id: int) -> None:
        """Delete a subsidiary item."""
        pass
