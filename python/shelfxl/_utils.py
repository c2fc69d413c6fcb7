"""Coordinate conversion helpers (1-based rows and columns)."""

from __future__ import annotations

import re
from typing import Any

_A1_RE = re.compile(r"^\$?([A-Za-z]{1,3})\$?(\d+)$")


def column_letter(index: int) -> str:
    """1 -> 'A', 27 -> 'AA'."""
    if index < 1:
        raise ValueError(f"Column index must be >= 1, got {index}")
    letters = ""
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def column_index(letters: str) -> int:
    """'A' -> 1, 'AA' -> 27."""
    result = 0
    for ch in letters.upper():
        if not "A" <= ch <= "Z":
            raise ValueError(f"Invalid column letters: {letters!r}")
        result = result * 26 + (ord(ch) - ord("A") + 1)
    return result


def a1_to_rowcol(ref: str) -> tuple[int, int]:
    """'B3' -> (3, 2)."""
    m = _A1_RE.match(ref.strip())
    if not m:
        raise ValueError(f"Invalid A1 reference: {ref!r}")
    return int(m.group(2)), column_index(m.group(1))


def rowcol_to_a1(row: int, col: int) -> str:
    """(3, 2) -> 'B3'."""
    return f"{column_letter(col)}{row}"


def is_blank(value: Any) -> bool:
    """A cell counts as empty when it holds None or an empty string."""
    return value is None or value == ""
