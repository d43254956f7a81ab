"""Helpers for dot-segmented account codes such as ``1.1.04.02``."""

import re
from typing import Optional

_CODE_PATTERN = re.compile(r"^\d+(\.\d+)*$")


def is_valid_code(code: str) -> bool:
    """Return True if code is one or more dot-separated digit groups."""
    return bool(code) and _CODE_PATTERN.match(code) is not None


def split_code(code: str) -> list[str]:
    return code.split(".")


def parent_code(code: str) -> Optional[str]:
    """Return the code one level up, or None for a root code."""
    segments = split_code(code)
    if len(segments) == 1:
        return None
    return ".".join(segments[:-1])


def code_depth(code: str) -> int:
    """Return the nesting level of a code (roots are level 1)."""
    return len(split_code(code))


def code_sort_key(code: str) -> tuple:
    """Sort key that orders ``1.2`` before ``1.10``."""
    return tuple(int(seg) if seg.isdigit() else seg for seg in split_code(code))


def has_prefix(code: str, prefix: str) -> bool:
    """Return True if code equals prefix or lies beneath it in the hierarchy.

    ``1.10`` is not beneath ``1.1``; matching is per segment.
    """
    if not prefix:
        return True
    return code == prefix or code.startswith(prefix + ".")
