"""Ledger settings loaded from the environment."""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from ledgerbook.domain.errors import ValidationError

ENV_PREFIX = "LEDGERBOOK_"


@dataclass(frozen=True)
class LedgerSettings:
    """Tunable constants of the ledger engine.

    Tolerances are per operation: ``balance_tolerance`` guards entry balance
    and statement equations, ``reconciliation_tolerance`` decides whether a
    counted cash balance matches the books.
    """

    reporting_currency: str = "USD"
    secondary_currency: str = "ARS"
    correction_window_days: int = 30
    balance_tolerance: Decimal = Decimal("0.01")
    reconciliation_tolerance: Decimal = Decimal("1")
    current_asset_prefix: str = "1.1"
    current_liability_prefix: str = "2.1"
    inventory_prefix: str = "1.1.04"
    default_operator: str = "admin"


def _decimal_setting(name: str, raw: str) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValidationError(f"{ENV_PREFIX}{name} must be a number, got '{raw}'")
    if value < 0:
        raise ValidationError(f"{ENV_PREFIX}{name} must not be negative")
    return value


def _int_setting(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{ENV_PREFIX}{name} must be an integer, got '{raw}'")
    if value < 0:
        raise ValidationError(f"{ENV_PREFIX}{name} must not be negative")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> LedgerSettings:
    """Build settings from LEDGERBOOK_* environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        LedgerSettings with overrides applied

    Raises:
        ValidationError: If a variable holds an invalid value
    """
    env = os.environ if environ is None else environ
    overrides = {}

    for name in (
        "reporting_currency",
        "secondary_currency",
        "current_asset_prefix",
        "current_liability_prefix",
        "inventory_prefix",
    ):
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw:
            overrides[name] = raw.strip()

    raw = env.get(f"{ENV_PREFIX}OPERATOR")
    if raw:
        overrides["default_operator"] = raw.strip()

    raw = env.get(f"{ENV_PREFIX}CORRECTION_WINDOW_DAYS")
    if raw:
        overrides["correction_window_days"] = _int_setting("CORRECTION_WINDOW_DAYS", raw)

    for name in ("balance_tolerance", "reconciliation_tolerance"):
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw:
            overrides[name] = _decimal_setting(name.upper(), raw)

    settings = LedgerSettings(**overrides)
    if settings.reporting_currency == settings.secondary_currency:
        raise ValidationError("Reporting and secondary currency must differ")
    return settings
