"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date
from ledgerbook.utils.amount_parser import parse_amount, parse_movement_spec
from ledgerbook.utils.account_codes import code_sort_key, is_valid_code, parent_code

__all__ = [
    "parse_date",
    "parse_amount",
    "parse_movement_spec",
    "code_sort_key",
    "is_valid_code",
    "parent_code",
]
