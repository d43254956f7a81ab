"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
import pytest

from ledgerbook.config import LedgerSettings
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.correction import CorrectionService
from ledgerbook.domain.journal import JournalService
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.reconciliation import ReconciliationService
from ledgerbook.domain.statements import StatementService
from ledgerbook.domain.subsidiary import SubsidiaryLedgerService

# (code, name, type, imputable, currency, nature)
SAMPLE_CHART = [
    ("1", "Assets", "asset", False, None, None),
    ("1.1", "Current Assets", None, False, None, None),
    ("1.1.01", "Cash USD", None, True, None, None),
    ("1.1.02", "Cash ARS", None, True, "ARS", None),
    ("1.1.03", "Bank USD", None, True, None, None),
    ("1.1.04", "Merchandise", None, True, None, None),
    ("1.2", "Non-current Assets", None, False, None, None),
    ("1.2.01", "Vehicles", None, True, None, None),
    ("1.2.02", "Accumulated Depreciation", None, True, None, "credit"),
    ("2", "Liabilities", "liability", False, None, None),
    ("2.1", "Current Liabilities", None, False, None, None),
    ("2.1.01", "Suppliers", None, True, None, None),
    ("2.2", "Non-current Liabilities", None, False, None, None),
    ("2.2.01", "Bank Loans", None, True, None, None),
    ("3", "Equity", "equity", False, None, None),
    ("3.1", "Capital", None, True, None, None),
    ("3.2", "Retained Earnings", None, True, None, None),
    ("4", "Revenue", "revenue", False, None, None),
    ("4.1", "Sales", None, False, None, None),
    ("4.1.01", "Merchandise Sales", None, True, None, None),
    ("5", "Costs", "cost", False, None, None),
    ("5.1", "Cost of Goods Sold", None, True, None, None),
    ("6", "Expenses", "expense", False, None, None),
    ("6.1", "Rent", None, True, None, None),
    ("6.2", "Salaries", None, True, None, None),
]


class FakeClock:
    """Settable clock for services that stamp created_at."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def settings():
    """Default settings, independent of the test environment."""
    return LedgerSettings()


@pytest.fixture
def clock():
    """Clock fixed at 2024-03-01 12:00 UTC."""
    return FakeClock(datetime(2024, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def account_service(temp_db, settings):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, settings)


@pytest.fixture
def journal_service(temp_db, settings, clock):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db, settings, clock)


@pytest.fixture
def ledger_service(temp_db, settings):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db, settings)


@pytest.fixture
def correction_service(temp_db, settings, clock):
    """Create a CorrectionService with a temporary database."""
    return CorrectionService(temp_db, settings, clock)


@pytest.fixture
def statement_service(temp_db, settings):
    """Create a StatementService with a temporary database."""
    return StatementService(temp_db, settings)


@pytest.fixture
def reconciliation_service(temp_db, settings, clock):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db, settings, clock)


@pytest.fixture
def subsidiary_service(temp_db, settings, clock):
    """Create a SubsidiaryLedgerService with a temporary database."""
    return SubsidiaryLedgerService(temp_db, settings, clock)


@pytest.fixture
def sample_chart(account_service):
    """Seed a small chart of accounts and return account IDs by code."""
    account_ids = {}
    for code, name, account_type, imputable, currency, nature in SAMPLE_CHART:
        account_ids[code] = account_service.create_account(
            code=code,
            name=name,
            account_type=account_type,
            imputable=imputable,
            currency=currency,
            nature=nature,
        )
    return account_ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
