"""Small text helpers shared by the catalog and export layers."""

from __future__ import annotations

import re
from typing import Any, List

_WHITESPACE_RE = re.compile(r"\s+")


def norm_space(value: Any) -> str:
    """Collapse runs of whitespace to single spaces and strip the ends."""
    if value is None:
        return ""
    return _WHITESPACE_RE.sub(" ", str(value)).strip()


def answer_letter(index: int) -> str:
    """Letter label for an answer position (0 -> "A")."""
    return chr(65 + index)


def normalize_indices(values: Any) -> List[int]:
    """
    Coerce an index list to sorted unique ints.

    Non-list input gives an empty list; entries that are not integral
    (``"x"``, ``1.5``, ``True``) are dropped.
    """
    if not isinstance(values, (list, tuple)):
        return []
    out = set()
    for value in values:
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            out.add(value)
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if number.is_integer():
            out.add(int(number))
    return sorted(out)
