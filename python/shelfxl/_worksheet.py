"""Worksheet: in-memory grid with a fixed physical size.

Cells live in a sparse ``(row, col) -> Cell`` dict. The physical size
(``max_rows()`` x ``max_columns()``) is tracked separately, the way a hosted
spreadsheet keeps empty rows and columns around, so edge-of-sheet behaviour
of ``next_populated`` matches what a Ctrl+Arrow jump does there.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from shelfxl._address import Dimension, Direction, RangeAddress
from shelfxl._cell import Cell
from shelfxl._errors import ResourceBoundsError
from shelfxl._range import Range
from shelfxl._utils import a1_to_rowcol, is_blank

if TYPE_CHECKING:
    from shelfxl._workbook import Workbook

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 1000
DEFAULT_MAX_COLUMNS = 26


class Worksheet:
    """A single sheet of a Workbook."""

    __slots__ = ("_workbook", "_title", "_cells", "_max_rows", "_max_columns")

    def __init__(
        self,
        workbook: Workbook,
        title: str,
        max_rows: int = DEFAULT_MAX_ROWS,
        max_columns: int = DEFAULT_MAX_COLUMNS,
    ) -> None:
        if max_rows < 1 or max_columns < 1:
            raise ValueError(f"Sheet size must be at least 1x1, got {max_rows}x{max_columns}")
        self._workbook = workbook
        self._title = title
        self._cells: dict[tuple[int, int], Cell] = {}
        self._max_rows = max_rows
        self._max_columns = max_columns

    @property
    def workbook(self) -> Workbook:
        return self._workbook

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        """Rename this worksheet, keeping the workbook's index in sync."""
        wb = self._workbook
        old = self._title
        if old == value:
            return
        if not value:
            raise ValueError("Sheet name must not be empty")
        if value in wb._sheets:  # noqa: SLF001
            raise ValueError(f"Sheet '{value}' already exists")
        idx = wb._sheet_names.index(old)  # noqa: SLF001
        wb._sheet_names[idx] = value  # noqa: SLF001
        wb._sheets[value] = wb._sheets.pop(old)  # noqa: SLF001
        self._title = value

    @property
    def name(self) -> str:
        return self._title

    @name.setter
    def name(self, value: str) -> None:
        self.title = value

    def max_rows(self) -> int:
        return self._max_rows

    def max_columns(self) -> int:
        return self._max_columns

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Cell:
        """``ws['A1']`` -> Cell."""
        row, col = a1_to_rowcol(key)
        return self.cell(row, col)

    def __setitem__(self, key: str, value: Any) -> None:
        """``ws['A1'] = 42`` — shorthand for setting a cell's value."""
        self[key].value = value

    def cell(self, row: int, column: int, value: Any = None) -> Cell:
        """Get or create a cell by 1-based (row, column). Matches openpyxl API."""
        self._check_bounds(row, column)
        c = self._get_or_create_cell(row, column)
        if value is not None:
            c.value = value
        return c

    def cell_at(self, row: int, column: int) -> Cell:
        return self.cell(row, column)

    def value_at(self, row: int, column: int) -> Any:
        """Read a value without materializing a Cell."""
        self._check_bounds(row, column)
        c = self._cells.get((row, column))
        return None if c is None else c.value

    def _get_or_create_cell(self, row: int, col: int) -> Cell:
        key = (row, col)
        if key not in self._cells:
            self._cells[key] = Cell(self, row, col)
        return self._cells[key]

    def _check_bounds(self, row: int, col: int) -> None:
        if not (1 <= row <= self._max_rows and 1 <= col <= self._max_columns):
            raise ResourceBoundsError(
                f"Cell ({row}, {col}) is outside sheet '{self._title}' "
                f"({self._max_rows}x{self._max_columns})"
            )

    def _filled(self, row: int, col: int) -> bool:
        c = self._cells.get((row, col))
        return c is not None and not is_blank(c.value)

    # ------------------------------------------------------------------
    # Ranges
    # ------------------------------------------------------------------

    def range_at(
        self, row: int, column: int, row_count: int = 1, column_count: int = 1,
    ) -> Range:
        """Return a bounds-checked Range handle."""
        if row_count < 1 or column_count < 1:
            raise ResourceBoundsError(
                f"Range size must be at least 1x1, got {row_count}x{column_count}"
            )
        address = RangeAddress(row, column, row_count, column_count)
        self._check_bounds(row, column)
        self._check_bounds(address.end_row, address.end_column)
        return Range(self, address)

    def next_populated(self, row: int, col: int, direction: Direction) -> tuple[int, int]:
        """Ctrl+Arrow jump from (row, col).

        Inside a populated run the jump stops at the run's last cell.
        Otherwise it lands on the next populated cell, or on the sheet edge
        when none is ahead (the edge cell may be empty).
        """
        self._check_bounds(row, col)
        dr, dc = direction.step

        def inside(r: int, c: int) -> bool:
            return 1 <= r <= self._max_rows and 1 <= c <= self._max_columns

        nr, nc = row + dr, col + dc
        if not inside(nr, nc):
            return row, col
        if self._filled(row, col) and self._filled(nr, nc):
            while inside(nr + dr, nc + dc) and self._filled(nr + dr, nc + dc):
                nr, nc = nr + dr, nc + dc
            return nr, nc
        while not self._filled(nr, nc) and inside(nr + dr, nc + dc):
            nr, nc = nr + dr, nc + dc
        return nr, nc

    def shift_cells(self, address: RangeAddress, dimension: Dimension) -> None:
        """Move cells out of *address* to make room (see ``Range.insert_cells``)."""
        moved: dict[tuple[int, int], Cell] = {}
        for (r, c), cell in self._cells.items():
            if dimension is Dimension.ROWS:
                if address.start_column <= c <= address.end_column and r >= address.start_row:
                    r += address.row_count
            elif address.start_row <= r <= address.end_row and c >= address.start_column:
                c += address.column_count
            cell._move(r, c)  # noqa: SLF001
            moved[(r, c)] = cell
        self._cells = moved
        if dimension is Dimension.ROWS:
            self._max_rows += address.row_count
        else:
            self._max_columns += address.column_count
        logger.debug(
            "Inserted %s at %s in '%s' (now %dx%d)",
            dimension.value, address.a1, self._title, self._max_rows, self._max_columns,
        )

    # ------------------------------------------------------------------
    # Bulk writes
    # ------------------------------------------------------------------

    def append(self, iterable: Iterable[Any]) -> None:
        """Write a row of values below the last used row, starting at column A."""
        row = self._max_used_row() + 1 if any(not c.is_blank for c in self._cells.values()) else 1
        for c, val in enumerate(iterable, start=1):
            self.cell(row, c).value = val

    def write_rows(
        self,
        rows: list[list[Any]],
        start_row: int = 1,
        start_col: int = 1,
    ) -> None:
        """Bulk-write a 2D grid of values starting at (start_row, start_col).

        Rows may be ragged; ``None`` entries leave the target cell untouched.
        """
        for ri, row in enumerate(rows):
            for ci, val in enumerate(row):
                if val is not None:
                    self.cell(start_row + ri, start_col + ci).value = val

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def iter_rows(
        self,
        min_row: int | None = None,
        max_row: int | None = None,
        min_col: int | None = None,
        max_col: int | None = None,
        values_only: bool = False,
    ) -> Iterator[tuple[Any, ...]]:
        """Iterate over rows in a range. Matches openpyxl's iter_rows API.

        Bounds default to the used extent, not the physical size.
        """
        r_min = min_row or 1
        r_max = max_row or self._max_used_row()
        c_min = min_col or 1
        c_max = max_col or self._max_used_col()

        for r in range(r_min, r_max + 1):
            if values_only:
                yield tuple(self.value_at(r, c) for c in range(c_min, c_max + 1))
            else:
                yield tuple(self.cell(r, c) for c in range(c_min, c_max + 1))

    def _max_used_row(self) -> int:
        used = [k[0] for k, c in self._cells.items() if not c.is_blank]
        return max(used, default=1)

    def _max_used_col(self) -> int:
        used = [k[1] for k, c in self._cells.items() if not c.is_blank]
        return max(used, default=1)

    # ------------------------------------------------------------------
    # Copy
    # ------------------------------------------------------------------

    def copy_to(self, workbook: Workbook) -> Worksheet:
        """Copy values and number formats into *workbook* as "Copy of <title>"."""
        base = f"Copy of {self._title}"
        title = base
        n = 2
        while title in workbook:
            title = f"{base} {n}"
            n += 1
        target = workbook.insert_sheet(title, self._max_rows, self._max_columns)
        for (r, c), cell in self._cells.items():
            new = target.cell(r, c)
            new.value = cell.value
            new.number_format = cell.number_format
        logger.info("Copied sheet '%s' to '%s' in %r", self._title, title, workbook)
        return target

    def __repr__(self) -> str:
        return f"<Worksheet [{self._title}]>"
