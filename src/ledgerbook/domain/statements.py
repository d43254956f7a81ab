"""Financial statement aggregation.

The ``build_*`` functions are pure: they take per-account debit/credit
totals and return finished statements. ``StatementService`` only fetches
posted movements and folds them into ``AccountTotals`` rows.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.config import LedgerSettings, load_settings
from ledgerbook.database.base import Database
from ledgerbook.domain.currency import ZERO, round_amount
from ledgerbook.domain.entities import (
    Account,
    AccountNature,
    AccountTotals,
    AccountType,
    BalanceSheet,
    IncomeStatement,
    LiquidityRatios,
    PostedMovement,
    StatementLine,
    StatementSection,
    TrialBalance,
    TrialBalanceRow,
)
from ledgerbook.domain.errors import ValidationError
from ledgerbook.logging_config import get_logger
from ledgerbook.utils.account_codes import code_sort_key, has_prefix

logger = get_logger("statements")

DEFAULT_TOLERANCE = Decimal("0.01")

SECTION_NATURE = {
    AccountType.ASSET: AccountNature.DEBIT,
    AccountType.LIABILITY: AccountNature.CREDIT,
    AccountType.EQUITY: AccountNature.CREDIT,
    AccountType.REVENUE: AccountNature.CREDIT,
    AccountType.COST: AccountNature.DEBIT,
    AccountType.EXPENSE: AccountNature.DEBIT,
}


def build_section(
    name: str,
    totals: Iterable[AccountTotals],
    nature: AccountNature,
    hierarchy: Iterable[Account] = (),
    absolute: bool = False,
) -> StatementSection:
    """Build one statement section with category subtotals.

    Each line is the account's balance oriented to the section's nature, so
    a contra account (opposite nature) shows with inverted sign.

    Args:
        name: Section name
        totals: Debit/credit totals of the section's accounts
        nature: Normal nature of the section
        hierarchy: Accounts used to roll line amounts up into parent subtotals
        absolute: Count normal-nature accounts by absolute value
    """
    by_id = {acc.id: acc for acc in hierarchy}
    lines = []
    subtotals: dict[int, Decimal] = defaultdict(lambda: ZERO)
    total = ZERO

    for row in sorted(totals, key=lambda t: code_sort_key(t.account.code)):
        account = row.account
        amount = round_amount(nature.signed_balance(row.debit, row.credit))
        lines.append(StatementLine(account.id, account.code, account.name, amount))

        contribution = abs(amount) if absolute and account.nature is nature else amount
        total += contribution

        parent_id = account.parent_id
        seen = set()
        while parent_id is not None and parent_id in by_id and parent_id not in seen:
            seen.add(parent_id)
            subtotals[parent_id] += contribution
            parent_id = by_id[parent_id].parent_id

    subtotal_lines = sorted(
        (
            StatementLine(by_id[acc_id].id, by_id[acc_id].code, by_id[acc_id].name, round_amount(amount))
            for acc_id, amount in subtotals.items()
        ),
        key=lambda line: code_sort_key(line.code),
    )
    return StatementSection(name, tuple(lines), tuple(subtotal_lines), round_amount(total))


def _of_type(totals: Iterable[AccountTotals], account_type: AccountType) -> list[AccountTotals]:
    return [row for row in totals if row.account.account_type is account_type]


def build_income_statement(
    start_date: date,
    end_date: date,
    totals: Iterable[AccountTotals],
    hierarchy: Iterable[Account] = (),
) -> IncomeStatement:
    """Build an income statement from result-account totals.

    Revenue is summed signed; cost and expense accounts count by absolute
    value. Totals of non-result accounts are ignored.
    """
    totals = list(totals)
    hierarchy = list(hierarchy)

    revenue = build_section(
        "Revenue", _of_type(totals, AccountType.REVENUE), AccountNature.CREDIT, hierarchy
    )
    cost = build_section(
        "Cost", _of_type(totals, AccountType.COST), AccountNature.DEBIT, hierarchy, absolute=True
    )
    expense = build_section(
        "Expense", _of_type(totals, AccountType.EXPENSE), AccountNature.DEBIT, hierarchy, absolute=True
    )

    return IncomeStatement(
        start_date=start_date,
        end_date=end_date,
        revenue=revenue,
        cost=cost,
        expense=expense,
        revenue_total=revenue.total,
        cost_total=cost.total,
        expense_total=expense.total,
        net_result=round_amount(revenue.total - cost.total - expense.total),
    )


def build_balance_sheet(
    as_of: date,
    totals: Iterable[AccountTotals],
    hierarchy: Iterable[Account] = (),
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> BalanceSheet:
    """Build a balance sheet and check assets = liabilities + equity.

    Result accounts not yet closed into equity contribute ``period_result``
    (credits minus debits), which is part of the equity total.
    ``difference`` is (liabilities + equity) - assets; a mismatch is
    reported, never adjusted.
    """
    totals = list(totals)
    hierarchy = list(hierarchy)

    assets = build_section("Assets", _of_type(totals, AccountType.ASSET), AccountNature.DEBIT, hierarchy)
    liabilities = build_section(
        "Liabilities", _of_type(totals, AccountType.LIABILITY), AccountNature.CREDIT, hierarchy
    )
    equity = build_section("Equity", _of_type(totals, AccountType.EQUITY), AccountNature.CREDIT, hierarchy)

    period_result = round_amount(
        sum(
            (
                AccountNature.CREDIT.signed_balance(row.debit, row.credit)
                for row in totals
                if row.account.account_type.is_result
            ),
            ZERO,
        )
    )

    total_equity = round_amount(equity.total + period_result)
    difference = round_amount(liabilities.total + total_equity - assets.total)

    return BalanceSheet(
        as_of=as_of,
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        period_result=period_result,
        total_assets=assets.total,
        total_liabilities=liabilities.total,
        total_equity=total_equity,
        difference=difference,
        equation_holds=abs(difference) <= tolerance,
    )


def build_trial_balance(
    start_date: Optional[date],
    end_date: Optional[date],
    accounts: Iterable[Account],
    prior: Iterable[PostedMovement],
    period: Iterable[PostedMovement],
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> TrialBalance:
    """Build the Balance de Sumas y Saldos.

    Debit and credit totals are the period's sums; debtor and creditor
    totals come from each account's closing position.
    """
    by_id = {acc.id: acc for acc in accounts}
    opening: dict[int, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    moves: dict[int, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])

    for movement in prior:
        opening[movement.account_id][0] += movement.debit
        opening[movement.account_id][1] += movement.credit
    for movement in period:
        moves[movement.account_id][0] += movement.debit
        moves[movement.account_id][1] += movement.credit

    rows = []
    for account_id in set(opening) | set(moves):
        rows.append(
            TrialBalanceRow(
                account=by_id[account_id],
                opening_debit=round_amount(opening[account_id][0]),
                opening_credit=round_amount(opening[account_id][1]),
                period_debit=round_amount(moves[account_id][0]),
                period_credit=round_amount(moves[account_id][1]),
            )
        )
    rows.sort(key=lambda row: code_sort_key(row.account.code))

    total_debit = round_amount(sum((row.period_debit for row in rows), ZERO))
    total_credit = round_amount(sum((row.period_credit for row in rows), ZERO))
    debtor = round_amount(
        sum((row.closing_debit - row.closing_credit for row in rows if row.is_debtor), ZERO)
    )
    creditor = round_amount(
        sum((row.closing_credit - row.closing_debit for row in rows if row.is_creditor), ZERO)
    )

    return TrialBalance(
        start_date=start_date,
        end_date=end_date,
        rows=tuple(rows),
        total_debit=total_debit,
        total_credit=total_credit,
        total_debtor_balances=debtor,
        total_creditor_balances=creditor,
        debit_credit_match=abs(total_debit - total_credit) <= tolerance,
        balances_match=abs(debtor - creditor) <= tolerance,
    )


def _ratio(numerator: Decimal, denominator: Decimal) -> Optional[Decimal]:
    if denominator == 0:
        return None
    return round_amount(numerator / denominator)


class StatementService:
    """Service for income statement, balance sheet, trial balance and ratios."""

    def __init__(self, db: Database, settings: Optional[LedgerSettings] = None):
        """Initialize statement service.

        Args:
            db: Database instance
            settings: Ledger settings (defaults to load_settings())
        """
        self.db = db
        self.settings = settings or load_settings()

    def _account_totals(self, movements: Iterable[PostedMovement]) -> list[AccountTotals]:
        by_id = {acc.id: acc for acc in self.db.list_accounts(include_inactive=True)}
        sums: dict[int, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
        for movement in movements:
            sums[movement.account_id][0] += movement.debit
            sums[movement.account_id][1] += movement.credit
        return [
            AccountTotals(by_id[account_id], round_amount(debit), round_amount(credit))
            for account_id, (debit, credit) in sums.items()
        ]

    def income_statement(self, start_date: date, end_date: date) -> IncomeStatement:
        """Build the income statement for an inclusive date range.

        Closing entries are left out so that a closed period still shows
        its result.

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date > end_date:
            raise ValidationError("Start date must be on or before end date")

        movements = self.db.list_posted_movements(
            start_date=start_date, end_date=end_date, exclude_closing=True
        )
        return build_income_statement(
            start_date,
            end_date,
            self._account_totals(movements),
            self.db.list_accounts(include_inactive=True),
        )

    def balance_sheet(self, as_of: date) -> BalanceSheet:
        """Build the balance sheet with every posted movement up to as_of."""
        movements = self.db.list_posted_movements(end_date=as_of)
        sheet = build_balance_sheet(
            as_of,
            self._account_totals(movements),
            self.db.list_accounts(include_inactive=True),
            self.settings.balance_tolerance,
        )
        if not sheet.equation_holds:
            logger.warning(
                "Balance sheet equation does not hold",
                extra={"as_of": as_of.isoformat(), "difference": f"{sheet.difference:.2f}"},
            )
        return sheet

    def trial_balance(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> TrialBalance:
        """Build the Balance de Sumas y Saldos for an optional date range.

        Movements before start_date make up each account's opening sums.

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")

        prior: list[PostedMovement] = []
        if start_date is not None:
            prior = self.db.list_posted_movements(before=start_date)
        period = self.db.list_posted_movements(start_date=start_date, end_date=end_date)

        trial = build_trial_balance(
            start_date,
            end_date,
            self.db.list_accounts(include_inactive=True),
            prior,
            period,
            self.settings.balance_tolerance,
        )
        if not (trial.debit_credit_match and trial.balances_match):
            logger.warning(
                "Trial balance does not match",
                extra={
                    "total_debit": f"{trial.total_debit:.2f}",
                    "total_credit": f"{trial.total_credit:.2f}",
                },
            )
        return trial

    def liquidity_ratios(self, as_of: date) -> LiquidityRatios:
        """Compute current ratio, quick ratio and working capital as of a date.

        Current assets, current liabilities and inventory are selected by the
        configured code prefixes. Ratios are None when there are no current
        liabilities.
        """
        totals = self._account_totals(self.db.list_posted_movements(end_date=as_of))

        def section_sum(prefix: str, account_type: AccountType) -> Decimal:
            nature = SECTION_NATURE[account_type]
            return round_amount(
                sum(
                    (
                        nature.signed_balance(row.debit, row.credit)
                        for row in totals
                        if row.account.account_type is account_type
                        and has_prefix(row.account.code, prefix)
                    ),
                    ZERO,
                )
            )

        current_assets = section_sum(self.settings.current_asset_prefix, AccountType.ASSET)
        current_liabilities = section_sum(self.settings.current_liability_prefix, AccountType.LIABILITY)
        inventory = section_sum(self.settings.inventory_prefix, AccountType.ASSET)

        return LiquidityRatios(
            as_of=as_of,
            current_assets=current_assets,
            current_liabilities=current_liabilities,
            inventory=inventory,
            working_capital=round_amount(current_assets - current_liabilities),
            current_ratio=_ratio(current_assets, current_liabilities),
            quick_ratio=_ratio(current_assets - inventory, current_liabilities),
        )
