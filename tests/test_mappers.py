"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from ledgerbook.database.models import (
    Account as ORMAccount,
    JournalEntry as ORMJournalEntry,
    Movement as ORMMovement,
    Reconciliation as ORMReconciliation,
    SubsidiaryItem as ORMSubsidiaryItem,
    SubsidiaryLedger as ORMSubsidiaryLedger,
)
from ledgerbook.database.mappers import (
    account_to_domain,
    journal_entry_to_domain,
    movement_to_domain,
    posted_movement_to_domain,
    reconciliation_to_domain,
    subsidiary_ledger_to_domain,
)
from ledgerbook.domain.entities import (
    Account,
    AccountNature,
    AccountType,
    EntryKind,
    EntryStatus,
    JournalEntry,
    PostedMovement,
    Reconciliation,
    ReconciliationStatus,
    SubsidiaryLedger,
)


def _orm_entry() -> ORMJournalEntry:
    entry = ORMJournalEntry(
        id=7,
        number=3,
        entry_date=date(2024, 3, 5),
        description="ARS sale",
        notes=None,
        exchange_rate=None,
        kind="regular",
        status="superseded",
        created_at=datetime(2024, 3, 5, 9, 0),
        supersedes_id=None,
        superseded_by_id=9,
    )
    entry.movements = [
        ORMMovement(
            id=1,
            entry_id=7,
            account_id=4,
            debit=Decimal("100.00"),
            credit=Decimal("0.00"),
            native_amount=Decimal("150000.00"),
            exchange_rate=Decimal("1500"),
        ),
        ORMMovement(id=2, entry_id=7, account_id=20, debit=Decimal("0.00"), credit=Decimal("100.00")),
    ]
    return entry


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            id=1,
            code="1.2.02",
            name="Accumulated Depreciation",
            account_type="asset",
            nature="credit",
            imputable=True,
            parent_id=6,
            currency="USD",
            requires_rate=False,
            active=True,
            created_at=datetime.now(UTC),
        )
        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.code == "1.2.02"
        assert account.account_type is AccountType.ASSET
        assert account.nature is AccountNature.CREDIT
        assert account.parent_id == 6
        assert account.created_at == orm_account.created_at


class TestJournalEntryMapper:
    """Tests for JournalEntry and Movement mappers."""

    def test_journal_entry_to_domain(self):
        entry = journal_entry_to_domain(_orm_entry())

        assert isinstance(entry, JournalEntry)
        assert entry.number == 3
        assert entry.kind is EntryKind.REGULAR
        assert entry.status is EntryStatus.SUPERSEDED
        assert entry.superseded_by_id == 9
        assert isinstance(entry.movements, tuple)
        assert entry.total_debit == entry.total_credit == Decimal("100.00")

    def test_movement_to_domain_keeps_native_amount(self):
        movement = movement_to_domain(_orm_entry().movements[0])
        assert movement.native_amount == Decimal("150000.00")
        assert movement.exchange_rate == Decimal("1500")

    def test_posted_movement_carries_entry_header(self):
        orm_entry = _orm_entry()
        posted = posted_movement_to_domain(orm_entry.movements[1], orm_entry)

        assert isinstance(posted, PostedMovement)
        assert posted.entry_number == 3
        assert posted.entry_date == date(2024, 3, 5)
        assert posted.entry_kind is EntryKind.REGULAR
        assert posted.credit == Decimal("100.00")
        assert posted.native_amount is None


class TestReconciliationMapper:
    def test_reconciliation_to_domain(self):
        orm_rec = ORMReconciliation(
            id=2,
            account_id=3,
            as_of=date(2024, 3, 31),
            book_balance=Decimal("1000.00"),
            physical_balance=Decimal("1005.00"),
            difference=Decimal("5.00"),
            status="variance",
            operator="admin",
            created_at=datetime.now(UTC),
        )
        record = reconciliation_to_domain(orm_rec)

        assert isinstance(record, Reconciliation)
        assert record.status is ReconciliationStatus.VARIANCE
        assert record.difference == Decimal("5.00")
        assert record.physical_native is None


class TestSubsidiaryMapper:
    def test_subsidiary_ledger_to_domain_with_items(self):
        orm_ledger = ORMSubsidiaryLedger(
            id=1,
            account_id=4,
            name="Stock detail",
            description=None,
            active=True,
            created_at=datetime.now(UTC),
        )
        orm_ledger.items = [
            ORMSubsidiaryItem(
                id=10,
                ledger_id=1,
                description="Phone X",
                quantity=Decimal("4"),
                unit_value=Decimal("250.00"),
                total_value=Decimal("1000.00"),
                item_date=date(2024, 3, 1),
                created_at=datetime.now(UTC),
            )
        ]
        ledger = subsidiary_ledger_to_domain(orm_ledger)

        assert isinstance(ledger, SubsidiaryLedger)
        assert isinstance(ledger.items, tuple)
        assert ledger.items[0].description == "Phone X"
        assert ledger.item_total == Decimal("1000.00")
