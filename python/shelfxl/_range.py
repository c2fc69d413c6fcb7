"""Range: rectangular handle onto an in-memory Worksheet."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from shelfxl._address import Dimension, RangeAddress

if TYPE_CHECKING:
    from shelfxl._worksheet import Worksheet


class Range:
    """A bounds-checked block of cells. Created by ``Worksheet.range_at``."""

    __slots__ = ("_worksheet", "_address")

    def __init__(self, worksheet: Worksheet, address: RangeAddress) -> None:
        self._worksheet = worksheet
        self._address = address

    @property
    def worksheet(self) -> Worksheet:
        return self._worksheet

    @property
    def address(self) -> RangeAddress:
        return self._address

    @property
    def row(self) -> int:
        return self._address.start_row

    @property
    def column(self) -> int:
        return self._address.start_column

    @property
    def num_rows(self) -> int:
        return self._address.row_count

    @property
    def num_columns(self) -> int:
        return self._address.column_count

    @property
    def a1(self) -> str:
        return self._address.a1

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def get_values(self) -> list[list[Any]]:
        """Return a fresh 2D list of the block's values (None for empty cells)."""
        a = self._address
        ws = self._worksheet
        return [
            [ws.value_at(r, c) for c in range(a.start_column, a.end_column + 1)]
            for r in range(a.start_row, a.end_row + 1)
        ]

    def set_values(self, values: list[list[Any]]) -> Range:
        """Overwrite the block. *values* must match the range's shape exactly."""
        a = self._address
        if len(values) != a.row_count:
            raise ValueError(
                f"Data has {len(values)} rows but range {a.a1} has {a.row_count}"
            )
        for row_vals in values:
            if len(row_vals) != a.column_count:
                raise ValueError(
                    f"Data has {len(row_vals)} columns but range {a.a1} has {a.column_count}"
                )
        ws = self._worksheet
        for ri, row_vals in enumerate(values):
            for ci, val in enumerate(row_vals):
                ws.cell(a.start_row + ri, a.start_column + ci).value = val
        return self

    def get_value(self) -> Any:
        """Value of the top-left cell."""
        return self._worksheet.value_at(self.row, self.column)

    def set_value(self, value: Any) -> Range:
        """Write *value* into every cell of the block."""
        return self.set_values([[value] * self.num_columns for _ in range(self.num_rows)])

    def set_number_format(self, number_format: str) -> Range:
        a = self._address
        for r in range(a.start_row, a.end_row + 1):
            for c in range(a.start_column, a.end_column + 1):
                self._worksheet.cell(r, c).number_format = number_format
        return self

    def insert_checkboxes(self) -> Range:
        """Turn every cell into an unchecked checkbox (boolean ``False``)."""
        return self.set_value(False)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def insert_cells(self, dimension: Dimension) -> Range:
        """Shift cells at and after this block down (ROWS) or right (COLUMNS).

        Only the rows (for COLUMNS) or columns (for ROWS) the block spans are
        shifted. The sheet grows so no value falls off its edge. Returns the
        freed block, which has the same address as this one.
        """
        self._worksheet.shift_cells(self._address, dimension)
        return self

    def __repr__(self) -> str:
        return f"<Range [{self._worksheet.title}]!{self.a1}>"
