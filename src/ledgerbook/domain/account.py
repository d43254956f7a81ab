"""Chart of accounts domain service."""

from collections import defaultdict
from typing import Optional, Union

from ledgerbook.config import LedgerSettings, load_settings
from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Account, AccountNature, AccountType
from ledgerbook.domain.errors import (
    ConflictError,
    DependencyError,
    UnknownAccount,
    ValidationError,
    account_delete_blocked,
)
from ledgerbook.logging_config import get_logger
from ledgerbook.utils.account_codes import is_valid_code, parent_code as derive_parent_code

logger = get_logger("accounts")


class AccountService:
    """Service for the chart of accounts.

    Lookups (``resolve``, ``is_imputable``, ``descendants_of``) are
    side-effect free; the administration methods are used to seed and
    maintain the chart.
    """

    def __init__(self, db: Database, settings: Optional[LedgerSettings] = None):
        """Initialize account service.

        Args:
            db: Database instance
            settings: Ledger settings (defaults to load_settings())
        """
        self.db = db
        self.settings = settings or load_settings()

    def resolve(self, code: str) -> Account:
        """Get an account by code.

        Raises:
            UnknownAccount: If no account has this code
        """
        account = self.db.get_account_by_code(code.strip())
        if account is None:
            raise UnknownAccount(code)
        return account

    def get_account(self, account_id: int) -> Optional[Account]:
        return self.db.get_account(account_id)

    def is_imputable(self, account: Account) -> bool:
        """Return True if the account can receive movements."""
        return account.imputable

    def list_accounts(self, include_inactive: bool = False) -> list[Account]:
        """List accounts ordered by code."""
        return self.db.list_accounts(include_inactive=include_inactive)

    def _children_index(self) -> dict[Optional[int], list[Account]]:
        index: dict[Optional[int], list[Account]] = defaultdict(list)
        for acc in self.db.list_accounts(include_inactive=True):
            index[acc.parent_id].append(acc)
        return index

    def descendants_of(self, account: Account) -> set[Account]:
        """Return every account below the given one (the account itself excluded)."""
        index = self._children_index()
        result: set[Account] = set()
        stack = list(index.get(account.id, []))
        while stack:
            child = stack.pop()
            if child in result:
                continue
            result.add(child)
            stack.extend(index.get(child.id, []))
        return result

    def imputable_descendants_of(self, account: Account) -> set[Account]:
        """Return the imputable accounts whose movements make up a category's balance."""
        return {acc for acc in self.descendants_of(account) if acc.imputable}

    def account_path(self, account: Account) -> list[Account]:
        """Return the chain of accounts from the root down to this account."""
        by_id = {acc.id: acc for acc in self.db.list_accounts(include_inactive=True)}
        path = [account]
        seen = {account.id}
        current = account
        while current.parent_id is not None and current.parent_id not in seen:
            current = by_id[current.parent_id]
            seen.add(current.id)
            path.append(current)
        path.reverse()
        return path

    def create_account(
        self,
        code: str,
        name: str,
        account_type: Union[AccountType, str, None] = None,
        imputable: bool = True,
        parent_code: Optional[str] = None,
        currency: Optional[str] = None,
        nature: Union[AccountNature, str, None] = None,
    ) -> int:
        """Create a new account.

        The parent is the account one code segment up (``1.1`` for
        ``1.1.04``). Type defaults to the parent's type, nature to the
        type's usual nature, currency to the reporting currency.

        Args:
            code: Dot-segmented account code
            name: Account name
            account_type: Statement classification (required for root accounts)
            imputable: Whether the account receives movements (False for categories)
            parent_code: Optional explicit parent code; must match the code prefix
            currency: Reporting or secondary currency code
            nature: Override for contra accounts

        Returns:
            Account ID

        Raises:
            ValidationError: If code, name, currency or hierarchy are invalid
            ConflictError: If the code already exists
            UnknownAccount: If the parent account does not exist
        """
        code = code.strip()
        name = name.strip()
        if not is_valid_code(code):
            raise ValidationError(f"Invalid account code '{code}'. Use digits separated by dots, e.g. 1.1.04")
        if not name:
            raise ValidationError("Account name cannot be empty")
        if self.db.get_account_by_code(code) is not None:
            raise ConflictError(f"Account with code '{code}' already exists")

        expected_parent = derive_parent_code(code)
        if parent_code is not None and parent_code.strip() != expected_parent:
            raise ValidationError(
                f"Account code '{code}' must extend its parent code '{parent_code}' by one segment"
            )

        parent = None
        if expected_parent is not None:
            parent = self.resolve(expected_parent)
            if parent.imputable:
                raise ValidationError(
                    f"Parent account '{parent.code}' is imputable and cannot have sub-accounts"
                )

        if account_type is None:
            if parent is None:
                raise ValidationError(f"Account type is required for root account '{code}'")
            account_type = parent.account_type
        account_type = AccountType(account_type)
        nature = AccountNature(nature) if nature is not None else account_type.default_nature

        currency = (currency or self.settings.reporting_currency).strip().upper()
        if currency not in (self.settings.reporting_currency, self.settings.secondary_currency):
            raise ValidationError(
                f"Unsupported currency '{currency}'. Use {self.settings.reporting_currency} "
                f"or {self.settings.secondary_currency}"
            )

        account_id = self.db.create_account(
            code=code,
            name=name,
            account_type=account_type,
            nature=nature,
            imputable=imputable,
            currency=currency,
            requires_rate=currency != self.settings.reporting_currency,
            parent_id=parent.id if parent else None,
        )
        logger.info("Account created", extra={"code": code, "account_type": account_type.value})
        return account_id

    def deactivate_account(self, code: str) -> None:
        """Stop an account from receiving new movements. History is kept."""
        account = self.resolve(code)
        self.db.set_account_active(account.id, False)
        logger.info("Account deactivated", extra={"code": account.code})

    def reactivate_account(self, code: str) -> None:
        account = self.resolve(code)
        self.db.set_account_active(account.id, True)

    def delete_account(self, code: str) -> None:
        """Delete an account that was never used.

        Raises:
            UnknownAccount: If account not found
            DependencyError: If the account has movements or sub-accounts
        """
        account = self.resolve(code)

        movement_count = self.db.get_account_movement_count(account.id)
        child_count = self.db.get_child_count(account.id)
        if movement_count > 0 or child_count > 0:
            raise DependencyError(account_delete_blocked(account.code, movement_count, child_count))

        self.db.delete_account(account.id)
        logger.info("Account deleted", extra={"code": account.code})
