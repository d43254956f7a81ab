"""SQLAlchemy models for the ledgerbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    BigInteger,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    CheckConstraint,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

AMOUNT = Numeric(18, 2)
RATE = Numeric(18, 6)


class Account(Base):
    """Chart of accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    nature = Column(String, nullable=False)
    imputable = Column(Boolean, default=True, nullable=False)
    parent_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    currency = Column(String, nullable=False)
    requires_rate = Column(Boolean, default=False, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="children")
    movements = relationship("Movement", back_populates="account")


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    number = Column(BigInteger, unique=True, nullable=False)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    exchange_rate = Column(RATE, nullable=True)
    kind = Column(String, default="regular", nullable=False)
    status = Column(String, default="posted", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    supersedes_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=True)
    superseded_by_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=True)

    __table_args__ = (Index("ix_journal_entries_date_number", "entry_date", "number"),)

    # Relationships
    movements = relationship(
        "Movement",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="Movement.id",
    )


class Movement(Base):
    """Movement (debit or credit line) model."""

    __tablename__ = "movements"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    debit = Column(AMOUNT, default=0, nullable=False)
    credit = Column(AMOUNT, default=0, nullable=False)
    native_amount = Column(AMOUNT, nullable=True)
    exchange_rate = Column(RATE, nullable=True)
    description = Column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("debit >= 0 AND credit >= 0", name="ck_movement_non_negative"),
        CheckConstraint("debit = 0 OR credit = 0", name="ck_movement_one_side"),
        Index("ix_movements_account_id", "account_id"),
    )

    # Relationships
    entry = relationship("JournalEntry", back_populates="movements")
    account = relationship("Account", back_populates="movements")


class SequenceCounter(Base):
    """Named monotonic counter; the locked row is the only source of numbers."""

    __tablename__ = "sequence_counters"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)
    current_value = Column(BigInteger, default=0, nullable=False)


class Reconciliation(Base):
    """Cash/bank reconciliation model."""

    __tablename__ = "reconciliations"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    as_of = Column(Date, nullable=False)
    book_balance = Column(AMOUNT, nullable=False)
    physical_balance = Column(AMOUNT, nullable=False)
    physical_native = Column(AMOUNT, nullable=True)
    exchange_rate = Column(RATE, nullable=True)
    difference = Column(AMOUNT, nullable=False)
    status = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    operator = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account")


class SubsidiaryLedger(Base):
    """Subsidiary ledger (detail breakdown) of one chart account."""

    __tablename__ = "subsidiary_ledgers"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account")
    items = relationship(
        "SubsidiaryItem",
        back_populates="ledger",
        cascade="all, delete-orphan",
        order_by="SubsidiaryItem.id",
    )


class SubsidiaryItem(Base):
    """Detail item of a subsidiary ledger."""

    __tablename__ = "subsidiary_items"

    id = Column(Integer, primary_key=True)
    ledger_id = Column(Integer, ForeignKey("subsidiary_ledgers.id"), nullable=False)
    description = Column(String, nullable=False)
    quantity = Column(Numeric(18, 4), default=1, nullable=False)
    unit_value = Column(AMOUNT, nullable=False)
    total_value = Column(AMOUNT, nullable=False)
    item_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_subsidiary_item_quantity"),)

    # Relationships
    ledger = relationship("SubsidiaryLedger", back_populates="items")

def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
