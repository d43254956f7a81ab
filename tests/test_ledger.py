"""Tests for the ledger engine (Libro Mayor)."""

import pytest
from datetime import date
from decimal import Decimal

from ledgerbook.domain.entities import EntryKind, PostedMovement, ProposedMovement
from ledgerbook.domain.errors import UnknownAccount, ValidationError
from ledgerbook.domain.ledger import compute_ledger

D = ProposedMovement.debit
C = ProposedMovement.credit


@pytest.fixture
def history(journal_service, sample_chart):
    """Cash movements across February and March 2024."""
    journal_service.post_entry(date(2024, 2, 10), "Capital", [D("1.1.01", 1000), C("3.1", 1000)])
    journal_service.post_entry(date(2024, 3, 1), "Sale", [D("1.1.01", 200), C("4.1.01", 200)])
    journal_service.post_entry(date(2024, 3, 15), "Rent", [D("6.1", 300), C("1.1.01", 300)])
    journal_service.post_entry(date(2024, 3, 31), "Sale", [D("1.1.01", 50), C("4.1.01", 50)])
    journal_service.post_entry(date(2024, 4, 2), "Rent", [D("6.1", 300), C("1.1.01", 300)])


class TestGetLedger:
    def test_full_history(self, ledger_service, history):
        report = ledger_service.get_ledger("1.1.01")
        assert report.opening_balance == Decimal("0.00")
        assert [line.balance for line in report.lines] == [
            Decimal("1000.00"),
            Decimal("1200.00"),
            Decimal("900.00"),
            Decimal("950.00"),
            Decimal("650.00"),
        ]
        assert report.total_debit == Decimal("1250.00")
        assert report.total_credit == Decimal("600.00")
        assert report.closing_balance == Decimal("650.00")
        assert not report.is_abnormal

    def test_period_with_opening_balance(self, ledger_service, history):
        report = ledger_service.get_ledger("1.1.01", date(2024, 3, 1), date(2024, 3, 31))
        assert report.opening_balance == Decimal("1000.00")
        assert len(report.lines) == 3
        assert report.lines[0].entry_date == date(2024, 3, 1)
        assert report.lines[-1].entry_date == date(2024, 3, 31)
        assert report.closing_balance == Decimal("950.00")

    def test_closing_equals_opening_plus_signed_sum(self, ledger_service, history):
        report = ledger_service.get_ledger("1.1.01", date(2024, 3, 2), date(2024, 4, 30))
        signed = report.total_debit - report.total_credit
        assert report.closing_balance == report.opening_balance + signed

    def test_boundary_dates_counted_once(self, ledger_service, history):
        march = ledger_service.get_ledger("1.1.01", date(2024, 3, 1), date(2024, 3, 31))
        april = ledger_service.get_ledger("1.1.01", date(2024, 4, 1), date(2024, 4, 30))
        assert april.opening_balance == march.closing_balance

    def test_credit_nature_account(self, ledger_service, history):
        report = ledger_service.get_ledger("4.1.01")
        assert report.closing_balance == Decimal("250.00")

    def test_category_aggregates_descendants(self, ledger_service, history, journal_service, sample_chart):
        journal_service.post_entry(date(2024, 4, 3), "Deposit", [D("1.1.03", 100), C("1.1.01", 100)])
        report = ledger_service.get_ledger("1.1")
        assert report.closing_balance == Decimal("650.00")
        assert {line.account_id for line in report.lines} == {sample_chart["1.1.01"], sample_chart["1.1.03"]}
        assert len(report.lines) == 7

    def test_most_recent_first_only_reverses_presentation(self, ledger_service, history):
        forward = ledger_service.get_ledger("1.1.01")
        backward = ledger_service.get_ledger("1.1.01", most_recent_first=True)
        assert backward.lines == tuple(reversed(forward.lines))
        assert backward.closing_balance == forward.closing_balance

    def test_same_day_ordered_by_entry_number(self, ledger_service, journal_service, sample_chart):
        journal_service.post_entry(date(2024, 3, 1), "First", [D("1.1.01", 10), C("4.1.01", 10)])
        journal_service.post_entry(date(2024, 3, 1), "Second", [D("1.1.01", 20), C("4.1.01", 20)])
        report = ledger_service.get_ledger("1.1.01")
        assert [line.entry_number for line in report.lines] == [1, 2]

    def test_repeated_calls_are_equal(self, ledger_service, history):
        assert ledger_service.get_ledger("1.1.01") == ledger_service.get_ledger("1.1.01")

    def test_abnormal_balance_reported(self, ledger_service, journal_service, sample_chart):
        journal_service.post_entry(date(2024, 3, 1), "Overdraft", [D("6.1", 50), C("1.1.03", 50)])
        report = ledger_service.get_ledger("1.1.03")
        assert report.closing_balance == Decimal("-50.00")
        assert report.is_abnormal

    def test_unknown_account(self, ledger_service, sample_chart):
        with pytest.raises(UnknownAccount):
            ledger_service.get_ledger("9.9")

    def test_invalid_range(self, ledger_service, sample_chart):
        with pytest.raises(ValidationError):
            ledger_service.get_ledger("1.1.01", date(2024, 4, 1), date(2024, 3, 1))


class TestGetBalance:
    def test_as_of(self, ledger_service, history):
        assert ledger_service.get_balance("1.1.01", date(2024, 2, 28)) == Decimal("1000.00")
        assert ledger_service.get_balance("1.1.01", date(2024, 3, 15)) == Decimal("900.00")
        assert ledger_service.get_balance("1.1.01") == Decimal("650.00")

    def test_no_movements(self, ledger_service, sample_chart):
        assert ledger_service.get_balance("1.1.04") == Decimal("0.00")


def _movement(number, day, debit="0", credit="0"):
    return PostedMovement(
        movement_id=number,
        entry_id=number,
        entry_number=number,
        entry_date=day,
        entry_description=f"Entry {number}",
        entry_kind=EntryKind.REGULAR,
        account_id=1,
        debit=Decimal(debit),
        credit=Decimal(credit),
    )


def test_compute_ledger_is_pure(account_service, sample_chart):
    cash = account_service.resolve("1.1.01")
    prior = [_movement(1, date(2024, 1, 1), debit="100")]
    period = [_movement(2, date(2024, 2, 1), credit="30"), _movement(3, date(2024, 2, 2), debit="5")]

    report = compute_ledger(cash, prior, period, date(2024, 2, 1), date(2024, 2, 28))

    assert report.opening_balance == Decimal("100.00")
    assert [line.balance for line in report.lines] == [Decimal("70.00"), Decimal("75.00")]
    assert report.closing_balance == Decimal("75.00")
    assert report.start_date == date(2024, 2, 1)
