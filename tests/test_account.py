"""Tests for the chart of accounts service and commands."""

import pytest
from datetime import date

from ledgerbook.cli.main import cli
from ledgerbook.domain.entities import AccountNature, AccountType, ProposedMovement
from ledgerbook.domain.errors import (
    ConflictError,
    DependencyError,
    UnknownAccount,
    ValidationError,
)


class TestAccountService:
    def test_resolve(self, account_service, sample_chart):
        account = account_service.resolve("1.1.01")
        assert account.id == sample_chart["1.1.01"]
        assert account.name == "Cash USD"
        assert account.account_type is AccountType.ASSET
        assert account.nature is AccountNature.DEBIT
        assert account.imputable
        assert account.currency == "USD"
        assert not account.requires_rate

    def test_resolve_unknown(self, account_service, sample_chart):
        with pytest.raises(UnknownAccount) as excinfo:
            account_service.resolve("9.9.99")
        assert excinfo.value.code == "9.9.99"

    def test_child_inherits_type_and_parent(self, account_service, sample_chart):
        account = account_service.resolve("2.1.01")
        assert account.account_type is AccountType.LIABILITY
        assert account.nature is AccountNature.CREDIT
        assert account.parent_id == sample_chart["2.1"]

    def test_secondary_currency_requires_rate(self, account_service, sample_chart):
        account = account_service.resolve("1.1.02")
        assert account.currency == "ARS"
        assert account.requires_rate

    def test_contra_account_nature(self, account_service, sample_chart):
        account = account_service.resolve("1.2.02")
        assert account.account_type is AccountType.ASSET
        assert account.nature is AccountNature.CREDIT

    def test_is_imputable(self, account_service, sample_chart):
        assert account_service.is_imputable(account_service.resolve("1.1.01"))
        assert not account_service.is_imputable(account_service.resolve("1.1"))

    def test_descendants_of(self, account_service, sample_chart):
        assets = account_service.resolve("1")
        codes = {acc.code for acc in account_service.descendants_of(assets)}
        assert codes == {"1.1", "1.1.01", "1.1.02", "1.1.03", "1.1.04", "1.2", "1.2.01", "1.2.02"}

    def test_descendants_of_leaf_is_empty(self, account_service, sample_chart):
        assert account_service.descendants_of(account_service.resolve("1.1.01")) == set()

    def test_imputable_descendants_of(self, account_service, sample_chart):
        assets = account_service.resolve("1")
        codes = {acc.code for acc in account_service.imputable_descendants_of(assets)}
        assert "1.1" not in codes
        assert "1.1.01" in codes
        assert len(codes) == 6

    def test_account_path(self, account_service, sample_chart):
        path = account_service.account_path(account_service.resolve("1.1.04"))
        assert [acc.code for acc in path] == ["1", "1.1", "1.1.04"]

    def test_list_accounts_ordered_by_code(self, account_service, sample_chart):
        account_service.create_account("1.1.10", "Petty Cash")
        codes = [acc.code for acc in account_service.list_accounts()]
        assert codes.index("1.1.04") < codes.index("1.1.10") < codes.index("1.2")

    def test_duplicate_code_rejected(self, account_service, sample_chart):
        with pytest.raises(ConflictError):
            account_service.create_account("1.1.01", "Another Cash")

    def test_unknown_parent_rejected(self, account_service, sample_chart):
        with pytest.raises(UnknownAccount):
            account_service.create_account("7.1", "Orphan", account_type="expense")

    def test_imputable_parent_rejected(self, account_service, sample_chart):
        with pytest.raises(ValidationError, match="imputable"):
            account_service.create_account("1.1.01.01", "Sub cash")

    def test_parent_code_must_match(self, account_service, sample_chart):
        with pytest.raises(ValidationError):
            account_service.create_account("1.1.05", "Receivables", parent_code="1.2")

    def test_root_requires_type(self, account_service):
        with pytest.raises(ValidationError, match="type is required"):
            account_service.create_account("1", "Assets", imputable=False)

    @pytest.mark.parametrize("code", ["", "1.", "A.1", "1..2"])
    def test_malformed_code_rejected(self, account_service, code):
        with pytest.raises(ValidationError):
            account_service.create_account(code, "Bad", account_type="asset")

    def test_unsupported_currency_rejected(self, account_service, sample_chart):
        with pytest.raises(ValidationError, match="Unsupported currency"):
            account_service.create_account("1.1.05", "Cash EUR", currency="EUR")

    def test_deactivate_hides_from_default_list(self, account_service, sample_chart):
        account_service.deactivate_account("1.1.03")
        assert not account_service.resolve("1.1.03").active
        assert "1.1.03" not in [acc.code for acc in account_service.list_accounts()]
        assert "1.1.03" in [acc.code for acc in account_service.list_accounts(include_inactive=True)]

    def test_reactivate(self, account_service, sample_chart):
        account_service.deactivate_account("1.1.03")
        account_service.reactivate_account("1.1.03")
        assert account_service.resolve("1.1.03").active

    def test_delete_unused_account(self, account_service, sample_chart):
        account_service.delete_account("1.1.03")
        with pytest.raises(UnknownAccount):
            account_service.resolve("1.1.03")

    def test_delete_blocked_by_children(self, account_service, sample_chart):
        with pytest.raises(DependencyError, match="sub-account"):
            account_service.delete_account("1.1")

    def test_delete_blocked_by_movements(self, account_service, journal_service, sample_chart):
        journal_service.post_entry(
            date(2024, 3, 1),
            "Sale",
            [ProposedMovement.debit("1.1.01", 100), ProposedMovement.credit("4.1.01", 100)],
        )
        with pytest.raises(DependencyError, match="1 movement"):
            account_service.delete_account("1.1.01")


class TestAccountCommands:
    def test_create_and_list(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "account", "create", "1", "Assets", "--type", "asset", "--category"]
        )
        assert result.exit_code == 0
        assert "Created account 1 'Assets'" in result.output

        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "account", "create", "1.1", "Cash ARS", "--currency", "ARS"]
        )
        assert result.exit_code == 0

        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])
        assert result.exit_code == 0
        assert "1 Assets" in result.output
        assert "category" in result.output
        assert "1.1 Cash ARS" in result.output
        assert "ARS" in result.output

    def test_list_empty(self, cli_runner, temp_db):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])
        assert result.exit_code == 0
        assert "No accounts found" in result.output

    def test_create_error(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "account", "create", "1.1", "Orphan"]
        )
        assert result.exit_code == 1
        assert "Error: Account '1' not found" in result.output

    def test_show(self, cli_runner, temp_db, sample_chart):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "show", "1.1.04"])
        assert result.exit_code == 0
        assert "Assets > Current Assets > Merchandise" in result.output
        assert "Balance:  0.00 USD" in result.output

    def test_deactivate(self, cli_runner, temp_db, sample_chart, account_service):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "deactivate", "1.1.03"])
        assert result.exit_code == 0
        assert not account_service.resolve("1.1.03").active

    def test_delete_with_confirmation(self, cli_runner, temp_db, sample_chart, account_service):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "account", "delete", "1.1.03"], input="y\n"
        )
        assert result.exit_code == 0
        assert "Deleted account 1.1.03" in result.output
        with pytest.raises(UnknownAccount):
            account_service.resolve("1.1.03")

    def test_delete_cancelled(self, cli_runner, temp_db, sample_chart, account_service):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "account", "delete", "1.1.03"], input="n\n"
        )
        assert result.exit_code == 0
        assert "Deletion cancelled" in result.output
        assert account_service.resolve("1.1.03")

    def test_delete_category_blocked(self, cli_runner, temp_db, sample_chart):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "account", "delete", "1.1", "--yes"]
        )
        assert result.exit_code == 1
        assert "Deactivate it instead" in result.output
