"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so that enum columns stored as
plain strings and nullable numeric columns reach the domain already typed.
"""

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    JournalEntry as ORMJournalEntry,
    Movement as ORMMovement,
    Reconciliation as ORMReconciliation,
    SubsidiaryItem as ORMSubsidiaryItem,
    SubsidiaryLedger as ORMSubsidiaryLedger,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        nature=domain.AccountNature(orm_account.nature),
        imputable=orm_account.imputable,
        parent_id=orm_account.parent_id,
        currency=orm_account.currency,
        requires_rate=orm_account.requires_rate,
        active=orm_account.active,
        created_at=orm_account.created_at,
    )


def movement_to_domain(orm_movement: ORMMovement) -> domain.Movement:
    """Convert SQLAlchemy Movement model to domain Movement entity."""
    return domain.Movement(
        id=orm_movement.id,
        entry_id=orm_movement.entry_id,
        account_id=orm_movement.account_id,
        debit=orm_movement.debit,
        credit=orm_movement.credit,
        native_amount=orm_movement.native_amount,
        exchange_rate=orm_movement.exchange_rate,
        description=orm_movement.description,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with movements) to domain entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        number=orm_entry.number,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        notes=orm_entry.notes,
        exchange_rate=orm_entry.exchange_rate,
        kind=domain.EntryKind(orm_entry.kind),
        status=domain.EntryStatus(orm_entry.status),
        created_at=orm_entry.created_at,
        supersedes_id=orm_entry.supersedes_id,
        superseded_by_id=orm_entry.superseded_by_id,
        movements=tuple(movement_to_domain(m) for m in orm_entry.movements),
    )


def posted_movement_to_domain(
    orm_movement: ORMMovement, orm_entry: ORMJournalEntry
) -> domain.PostedMovement:
    """Convert a movement row and its entry header to a PostedMovement."""
    return domain.PostedMovement(
        movement_id=orm_movement.id,
        entry_id=orm_entry.id,
        entry_number=orm_entry.number,
        entry_date=orm_entry.entry_date,
        entry_description=orm_entry.description,
        entry_kind=domain.EntryKind(orm_entry.kind),
        account_id=orm_movement.account_id,
        debit=orm_movement.debit,
        credit=orm_movement.credit,
        native_amount=orm_movement.native_amount,
        exchange_rate=orm_movement.exchange_rate,
        description=orm_movement.description,
    )


def reconciliation_to_domain(orm_rec: ORMReconciliation) -> domain.Reconciliation:
    """Convert SQLAlchemy Reconciliation model to domain Reconciliation entity."""
    return domain.Reconciliation(
        id=orm_rec.id,
        account_id=orm_rec.account_id,
        as_of=orm_rec.as_of,
        book_balance=orm_rec.book_balance,
        physical_balance=orm_rec.physical_balance,
        difference=orm_rec.difference,
        status=domain.ReconciliationStatus(orm_rec.status),
        created_at=orm_rec.created_at,
        physical_native=orm_rec.physical_native,
        exchange_rate=orm_rec.exchange_rate,
        notes=orm_rec.notes,
        operator=orm_rec.operator,
    )


def subsidiary_item_to_domain(orm_item: ORMSubsidiaryItem) -> domain.SubsidiaryItem:
    """Convert SQLAlchemy SubsidiaryItem model to domain SubsidiaryItem entity."""
    return domain.SubsidiaryItem(
        id=orm_item.id,
        ledger_id=orm_item.ledger_id,
        description=orm_item.description,
        quantity=orm_item.quantity,
        unit_value=orm_item.unit_value,
        total_value=orm_item.total_value,
        item_date=orm_item.item_date,
        created_at=orm_item.created_at,
    )


def subsidiary_ledger_to_domain(orm_ledger: ORMSubsidiaryLedger) -> domain.SubsidiaryLedger:
    """Convert SQLAlchemy SubsidiaryLedger model (with items) to domain entity."""
    return domain.SubsidiaryLedger(
        id=orm_ledger.id,
        account_id=orm_ledger.account_id,
        name=orm_ledger.name,
        description=orm_ledger.description,
        active=orm_ledger.active,
        created_at=orm_ledger.created_at,
        items=tuple(subsidiary_item_to_domain(item) for item in orm_ledger.items),
    )
