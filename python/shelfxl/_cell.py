"""Cell: a single value slot of an in-memory Worksheet."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from shelfxl._utils import is_blank, rowcol_to_a1

if TYPE_CHECKING:
    from shelfxl._address import Direction
    from shelfxl._worksheet import Worksheet


class Cell:
    """openpyxl-style cell with ``value``, ``number_format`` and ``coordinate``."""

    __slots__ = ("_worksheet", "_row", "_col", "_value", "_number_format")

    def __init__(self, worksheet: Worksheet, row: int, col: int, value: Any = None) -> None:
        self._worksheet = worksheet
        self._row = row
        self._col = col
        self._value = value
        self._number_format: str | None = None

    @property
    def row(self) -> int:
        return self._row

    @property
    def column(self) -> int:
        return self._col

    @property
    def coordinate(self) -> str:
        return rowcol_to_a1(self._row, self._col)

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self._value = value

    @property
    def number_format(self) -> str | None:
        return self._number_format

    @number_format.setter
    def number_format(self, value: str | None) -> None:
        self._number_format = value

    @property
    def is_blank(self) -> bool:
        return is_blank(self._value)

    def next_populated_cell(self, direction: Direction) -> Cell:
        """Ctrl+Arrow from this cell. See ``Worksheet.next_populated``."""
        row, col = self._worksheet.next_populated(self._row, self._col, direction)
        return self._worksheet.cell(row, col)

    def _move(self, row: int, col: int) -> None:
        self._row = row
        self._col = col

    def __repr__(self) -> str:
        return f"<Cell [{self._worksheet.title}].{self.coordinate}>"
