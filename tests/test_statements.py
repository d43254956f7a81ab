"""Tests for financial statements."""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from ledgerbook.domain.entities import AccountTotals, EntryKind, ProposedMovement
from ledgerbook.domain.errors import ValidationError
from ledgerbook.domain.statements import build_balance_sheet, build_income_statement

D = ProposedMovement.debit
C = ProposedMovement.credit

MARCH = (date(2024, 3, 1), date(2024, 3, 31))


@pytest.fixture
def march_books(journal_service, sample_chart):
    """A month of activity: capital, purchases, sales, expenses, a loan."""
    post = journal_service.post_entry
    post(date(2024, 2, 28), "Capital", [D("1.1.01", 5000), C("3.1", 5000)])
    post(date(2024, 3, 1), "Merchandise on credit", [D("1.1.04", 1000), C("2.1.01", 1000)])
    post(date(2024, 3, 5), "Sale", [D("1.1.01", 800), C("4.1.01", 800)])
    post(date(2024, 3, 5), "Cost of sale", [D("5.1", 400), C("1.1.04", 400)])
    post(date(2024, 3, 10), "Rent", [D("6.1", 150), C("1.1.01", 150)])
    post(date(2024, 3, 20), "Salaries", [D("6.2", 50), C("1.1.01", 50)])
    post(date(2024, 3, 25), "Loan", [D("1.1.03", 2000), C("2.2.01", 2000)])
    post(date(2024, 3, 28), "Truck", [D("1.2.01", 3000), C("1.1.03", 2000), C("2.1.01", 1000)])
    post(date(2024, 3, 31), "Depreciation", [D("6.2", 100), C("1.2.02", 100)])
    post(date(2024, 4, 2), "April sale", [D("1.1.01", 70), C("4.1.01", 70)])


class TestIncomeStatement:
    def test_march(self, statement_service, march_books):
        statement = statement_service.income_statement(*MARCH)
        assert statement.revenue_total == Decimal("800.00")
        assert statement.cost_total == Decimal("400.00")
        assert statement.expense_total == Decimal("300.00")
        assert statement.gross_result == Decimal("400.00")
        assert statement.net_result == Decimal("100.00")

    def test_lines_and_subtotals(self, statement_service, march_books):
        statement = statement_service.income_statement(*MARCH)
        assert [(line.code, line.amount) for line in statement.expense.lines] == [
            ("6.1", Decimal("150.00")),
            ("6.2", Decimal("150.00")),
        ]
        assert [(line.code, line.amount) for line in statement.revenue.subtotals] == [
            ("4", Decimal("800.00")),
            ("4.1", Decimal("800.00")),
        ]

    def test_empty_period(self, statement_service, march_books):
        statement = statement_service.income_statement(date(2023, 1, 1), date(2023, 12, 31))
        assert statement.net_result == Decimal("0.00")
        assert statement.revenue.lines == ()

    def test_closing_entries_excluded(self, statement_service, journal_service, march_books):
        journal_service.post_entry(
            date(2024, 3, 31),
            "Close revenue",
            [D("4.1.01", 800), C("3.2", 800)],
            kind=EntryKind.CLOSING,
        )
        statement = statement_service.income_statement(*MARCH)
        assert statement.revenue_total == Decimal("800.00")

    def test_superseded_entries_excluded(self, statement_service, journal_service, correction_service, march_books):
        rent = journal_service.list_entries(search="Rent")[0]
        correction_service.correct_entry(rent.id, [D("6.1", 200), C("1.1.01", 200)])
        statement = statement_service.income_statement(*MARCH)
        assert statement.expense_total == Decimal("350.00")

    def test_invalid_range(self, statement_service, sample_chart):
        with pytest.raises(ValidationError):
            statement_service.income_statement(date(2024, 4, 1), date(2024, 3, 1))


class TestBalanceSheet:
    def test_equation_holds(self, statement_service, march_books):
        sheet = statement_service.balance_sheet(date(2024, 3, 31))
        # cash 5000 + 800 - 150 - 50, merchandise 600, truck 3000, depreciation -100
        assert sheet.total_assets == Decimal("9100.00")
        assert sheet.total_liabilities == Decimal("4000.00")
        assert sheet.period_result == Decimal("100.00")
        assert sheet.total_equity == Decimal("5100.00")
        assert sheet.difference == Decimal("0.00")
        assert sheet.equation_holds

    def test_contra_account_reduces_assets(self, statement_service, march_books):
        sheet = statement_service.balance_sheet(date(2024, 3, 31))
        lines = {line.code: line.amount for line in sheet.assets.lines}
        assert lines["1.2.02"] == Decimal("-100.00")
        subtotals = {line.code: line.amount for line in sheet.assets.subtotals}
        assert subtotals["1.2"] == Decimal("2900.00")
        assert subtotals["1"] == sheet.total_assets

    def test_as_of_excludes_later_entries(self, statement_service, march_books):
        sheet = statement_service.balance_sheet(date(2024, 2, 29))
        assert sheet.total_assets == Decimal("5000.00")
        assert sheet.total_equity == Decimal("5000.00")
        assert sheet.equation_holds

    def test_closing_entries_move_result_into_equity(self, statement_service, journal_service, march_books):
        journal_service.post_entry(
            date(2024, 3, 31),
            "Close results",
            [D("4.1.01", 800), C("5.1", 400), C("6.1", 150), C("6.2", 150), C("3.2", 100)],
            kind=EntryKind.CLOSING,
        )
        sheet = statement_service.balance_sheet(date(2024, 3, 31))
        assert sheet.period_result == Decimal("0.00")
        assert sheet.equity.total == Decimal("5100.00")
        assert sheet.equation_holds


class TestPureBuilders:
    @pytest.fixture
    def totals(self, account_service, sample_chart):
        return [
            AccountTotals(account_service.resolve("1.1.01"), Decimal("500"), Decimal("0")),
            AccountTotals(account_service.resolve("2.1.01"), Decimal("0"), Decimal("200")),
            AccountTotals(account_service.resolve("3.1"), Decimal("0"), Decimal("300")),
        ]

    def test_balanced_sheet(self, totals):
        sheet = build_balance_sheet(date(2024, 3, 31), totals)
        assert sheet.total_assets == Decimal("500.00")
        assert sheet.total_liabilities == Decimal("200.00")
        assert sheet.total_equity == Decimal("300.00")
        assert sheet.equation_holds

    def test_perturbed_liability_breaks_equation(self, totals):
        totals[1] = replace(totals[1], credit=Decimal("201"))
        sheet = build_balance_sheet(date(2024, 3, 31), totals)
        assert sheet.equation_holds is False
        assert sheet.difference == Decimal("1.00")

    def test_cost_counts_by_absolute_value(self, account_service, sample_chart):
        totals = [
            AccountTotals(account_service.resolve("4.1.01"), Decimal("0"), Decimal("100")),
            AccountTotals(account_service.resolve("5.1"), Decimal("0"), Decimal("30")),
        ]
        statement = build_income_statement(*MARCH, totals)
        assert statement.cost.lines[0].amount == Decimal("-30.00")
        assert statement.cost_total == Decimal("30.00")
        assert statement.net_result == Decimal("70.00")


class TestTrialBalance:
    def test_totals_match(self, statement_service, march_books):
        trial = statement_service.trial_balance(*MARCH)
        assert trial.total_debit == trial.total_credit
        assert trial.debit_credit_match
        assert trial.balances_match
        assert trial.total_debtor_balances == trial.total_creditor_balances

    def test_opening_sums_from_before_period(self, statement_service, march_books):
        trial = statement_service.trial_balance(*MARCH)
        cash = next(row for row in trial.rows if row.account.code == "1.1.01")
        assert cash.opening_debit == Decimal("5000.00")
        assert cash.period_debit == Decimal("800.00")
        assert cash.period_credit == Decimal("200.00")
        assert cash.closing_balance == Decimal("5600.00")
        assert cash.is_debtor

    def test_creditor_classification(self, statement_service, march_books):
        trial = statement_service.trial_balance(*MARCH)
        suppliers = next(row for row in trial.rows if row.account.code == "2.1.01")
        assert suppliers.is_creditor
        assert not suppliers.is_debtor

    def test_rows_ordered_by_code(self, statement_service, march_books):
        trial = statement_service.trial_balance()
        codes = [row.account.code for row in trial.rows]
        assert codes == sorted(codes, key=lambda c: [int(s) for s in c.split(".")])

    def test_empty(self, statement_service, sample_chart):
        trial = statement_service.trial_balance()
        assert trial.rows == ()
        assert trial.debit_credit_match and trial.balances_match


class TestLiquidityRatios:
    def test_ratios(self, statement_service, march_books):
        ratios = statement_service.liquidity_ratios(date(2024, 3, 31))
        # cash 5600, merchandise 600, bank 0
        assert ratios.current_assets == Decimal("6200.00")
        assert ratios.inventory == Decimal("600.00")
        assert ratios.current_liabilities == Decimal("2000.00")
        assert ratios.working_capital == Decimal("4200.00")
        assert ratios.current_ratio == Decimal("3.10")
        assert ratios.quick_ratio == Decimal("2.80")

    def test_no_current_liabilities(self, statement_service, journal_service, sample_chart):
        journal_service.post_entry(date(2024, 3, 1), "Capital", [D("1.1.01", 100), C("3.1", 100)])
        ratios = statement_service.liquidity_ratios(date(2024, 3, 31))
        assert ratios.current_ratio is None
        assert ratios.quick_ratio is None
        assert ratios.working_capital == Decimal("100.00")
