"""SheetController — header-addressed data region inside one sheet.

The controller caches two groups of facts about the sheet:

* the last data row and the data row count, found by a Ctrl+Up jump from the
  bottom of the key column;
* the last header column, the column count and the header values, found by a
  Ctrl+Right jump along the header row.

Both groups are recomputed whenever the configuration changes in any way
(see ``_recompute_if_needed``), and individually after writes made through
``write_header`` / ``write_data_area``. Changes made to the sheet behind the
controller's back are not detected; call ``refresh()`` after them.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from shelfxl._address import Direction, RangeAddress
from shelfxl._config import (
    Invalidation,
    RegionConfig,
    SheetControllerParam,
    diff_config,
    resolve_config,
)
from shelfxl._errors import ColumnNotFoundError, ResourceOpenError, SheetCopyError
from shelfxl._protocol import Book, BookProvider, RangeHandle, Sheet
from shelfxl._utils import is_blank

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionSnapshot:
    """Configuration and cached boundaries at one point in time."""

    sheet_name: str
    header_row: int
    data_start_row: int
    start_column: int
    key_column: int
    last_row: int
    last_column: int
    row_count: int
    column_count: int
    header: tuple[Any, ...]


def _merge_param(
    param: SheetControllerParam | None, changes: Mapping[str, Any],
) -> SheetControllerParam:
    param = param or SheetControllerParam()
    if changes:
        param = dataclasses.replace(param, **changes)
    return param


# ======================================================================
# Boundary scans
# ======================================================================


def _scan_last_row(sheet: Sheet, config: RegionConfig) -> int:
    """Last data row, found by a Ctrl+Up jump from the bottom of the key column.

    When the bottom cell is populated and the jump comes out at or above the
    header row, the key column runs to the sheet's last row. The same holds
    when the jump stops on the data start row because the bottom cell sits
    in one unbroken run reaching up to it (the header's key cell is empty).
    """
    header_row = config.header_row
    key_column = config.key_column
    bottom = sheet.cell_at(sheet.max_rows(), key_column)
    landed = bottom.next_populated_cell(Direction.UP)
    found = landed.row if not is_blank(landed.value) else header_row

    if is_blank(bottom.value):
        last_row = max(found, header_row)
    elif found <= header_row:
        last_row = bottom.row
    elif found == config.data_start_row and _run_above(sheet, bottom.row, key_column):
        last_row = bottom.row
    else:
        last_row = found
    logger.debug(
        "'%s' key column %d: last row %d", config.sheet_name, key_column, last_row,
    )
    return last_row


def _run_above(sheet: Sheet, row: int, column: int) -> bool:
    """True when the cell above (row, column) is populated."""
    return row > 1 and not is_blank(sheet.cell_at(row - 1, column).value)


def _scan_last_column(sheet: Sheet, config: RegionConfig) -> tuple[int, tuple[Any, ...]]:
    """Last header column and the header values, by a Ctrl+Right jump."""
    start_column = config.start_column
    start = sheet.cell_at(config.header_row, start_column)
    landed = start.next_populated_cell(Direction.NEXT)
    if not is_blank(landed.value):
        last_column = landed.column
    elif not is_blank(start.value):
        last_column = start_column
    else:
        last_column = start_column - 1

    column_count = last_column - start_column + 1
    header: tuple[Any, ...] = ()
    if column_count > 0:
        cells = sheet.range_at(config.header_row, start_column, 1, column_count)
        header = tuple(cells.get_values()[0])
    logger.debug(
        "'%s' header row %d: last column %d, header %r",
        config.sheet_name, config.header_row, last_column, header,
    )
    return last_column, header


class SheetController:
    """Tracks the data area below a header row of a single sheet.

    Parameters
    ----------
    provider : BookProvider
        Opens books by id and supplies the active book used when the
        configuration names no ``book_id``.
    param : SheetControllerParam, optional
        Initial configuration. Unset fields take their defaults: header row 1,
        start column 1, key column equal to the start column, and the book's
        first sheet.

    Raises ``ResourceOpenError`` when the book cannot be opened.
    """

    def __init__(
        self,
        provider: BookProvider,
        param: SheetControllerParam | None = None,
        **changes: Any,
    ) -> None:
        self._provider = provider
        book, sheet, config = self._bind(_merge_param(param, changes), None)
        self._recompute_if_needed(diff_config(None, config), sheet, config)
        self._book: Book = book
        self._sheet: Sheet = sheet
        self._config: RegionConfig = config

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def update(self, param: SheetControllerParam | None = None, **changes: Any) -> Invalidation:
        """Merge a partial configuration and refresh stale boundaries.

        Keyword arguments are shorthand for ``SheetControllerParam`` fields
        and override *param*. Returns the set of reasons the cache was
        recomputed for (``Invalidation.NONE`` when nothing changed).

        Nothing is committed when opening, binding or scanning fails; the
        controller keeps its previous configuration and boundaries.
        """
        current = (self._book, self._sheet, self._config)
        book, sheet, config = self._bind(_merge_param(param, changes), current)
        reasons = diff_config(self._config, config)
        self._recompute_if_needed(reasons, sheet, config)
        self._book = book
        self._sheet = sheet
        self._config = config
        return reasons

    def _bind(
        self,
        param: SheetControllerParam,
        current: tuple[Book, Sheet, RegionConfig] | None,
    ) -> tuple[Book, Sheet, RegionConfig]:
        """Resolve book, sheet and configuration for *param* without committing."""
        if param.book_id is not None:
            book = self._open_book(param.book_id)
        elif current is not None:
            book = current[0]
        else:
            book = self._open_active()

        if param.sheet_name is not None:
            sheet_name = param.sheet_name
        elif current is not None:
            sheet_name = current[2].sheet_name
        else:
            names = book.sheet_names()
            if not names:
                raise ResourceOpenError(f"Book '{book.id}' has no sheets")
            sheet_name = names[0]

        if current is not None and book is current[0] and sheet_name == current[2].sheet_name:
            sheet = current[1]
        else:
            sheet = self._bind_sheet(book, sheet_name)

        previous = current[2] if current is not None else None
        return book, sheet, resolve_config(previous, param, book.id, sheet_name)

    def _open_book(self, book_id: str) -> Book:
        try:
            return self._provider.open_by_id(book_id)
        except ResourceOpenError:
            raise
        except Exception as e:
            raise ResourceOpenError(f"Book '{book_id}' could not be opened") from e

    def _open_active(self) -> Book:
        try:
            return self._provider.get_active()
        except ResourceOpenError:
            raise
        except Exception as e:
            raise ResourceOpenError("The active book could not be opened") from e

    @staticmethod
    def _bind_sheet(book: Book, sheet_name: str) -> Sheet:
        sheet = book.get_sheet_by_name(sheet_name)
        if sheet is None:
            sheet = book.insert_sheet(sheet_name)
            logger.info("Inserted sheet '%s' into book %s", sheet_name, book.id)
        return sheet

    def _recompute_if_needed(
        self, reasons: Invalidation, sheet: Sheet, config: RegionConfig,
    ) -> None:
        """Rescan both boundaries of *sheet* under *config* if any reason is set.

        Both scans run before any cached value is replaced, so a failing scan
        leaves the cache untouched.
        """
        if not reasons:
            return
        logger.debug("Recomputing boundaries of '%s': %s", config.sheet_name, reasons)
        last_row = _scan_last_row(sheet, config)
        last_column, header = _scan_last_column(sheet, config)
        self._store_rows(config, last_row)
        self._store_columns(config, last_column, header)

    def _store_rows(self, config: RegionConfig, last_row: int) -> None:
        self._last_row = last_row
        self._row_count = last_row - config.data_start_row + 1

    def _store_columns(
        self, config: RegionConfig, last_column: int, header: tuple[Any, ...],
    ) -> None:
        self._last_column = last_column
        self._column_count = last_column - config.start_column + 1
        self._header = header

    # ------------------------------------------------------------------
    # Boundary scans
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Rescan both the last row and the last column."""
        self.refresh_last_row()
        self.refresh_last_column()

    def refresh_last_row(self) -> None:
        """Find the last data row from the bottom of the key column."""
        self._store_rows(self._config, _scan_last_row(self._sheet, self._config))

    def refresh_last_column(self) -> None:
        """Find the last header column and reload the header values.

        Unlike ``refresh_last_row`` there is no correction for a header that
        runs into the sheet's last column; the jump lands on that column
        anyway because the run has no gap.
        """
        self._store_columns(self._config, *_scan_last_column(self._sheet, self._config))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def provider(self) -> BookProvider:
        return self._provider

    @property
    def book(self) -> Book:
        return self._book

    @property
    def sheet(self) -> Sheet:
        return self._sheet

    @property
    def config(self) -> RegionConfig:
        return self._config

    @property
    def sheet_name(self) -> str:
        return self.config.sheet_name

    @property
    def header_row(self) -> int:
        return self.config.header_row

    @property
    def data_start_row(self) -> int:
        return self.config.data_start_row

    @property
    def start_column(self) -> int:
        return self.config.start_column

    @property
    def key_column(self) -> int:
        return self.config.key_column

    @property
    def last_row(self) -> int:
        return self._last_row

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def last_column(self) -> int:
        return self._last_column

    @property
    def column_count(self) -> int:
        return self._column_count

    @property
    def header(self) -> tuple[Any, ...]:
        return self._header

    def snapshot(self) -> RegionSnapshot:
        return RegionSnapshot(
            sheet_name=self.sheet_name,
            header_row=self.header_row,
            data_start_row=self.data_start_row,
            start_column=self.start_column,
            key_column=self.key_column,
            last_row=self._last_row,
            last_column=self._last_column,
            row_count=self._row_count,
            column_count=self._column_count,
            header=self._header,
        )

    # ------------------------------------------------------------------
    # Ranges
    # ------------------------------------------------------------------

    def range(self, address: RangeAddress | Mapping[str, Any]) -> RangeHandle:
        """Range at *address*; row and column counts default to 1."""
        a = RangeAddress.coerce(address)
        return self.sheet.range_at(a.start_row, a.start_column, a.row_count, a.column_count)

    def row_range(self, start_row: int, row_count: int = 1, whole_row: bool = False) -> RangeHandle:
        """Rows of the data area, or of the whole sheet width with *whole_row*.

        Without *whole_row* the width is the cached column count, so an empty
        header row (``column_count == 0``) raises ``ResourceBoundsError``.
        """
        if whole_row:
            start_column, column_count = 1, self.sheet.max_columns()
        else:
            start_column, column_count = self.start_column, self._column_count
        return self.range(RangeAddress(start_row, start_column, row_count, column_count))

    def column_range(
        self, start_column: int, column_count: int = 1, whole_column: bool = False,
    ) -> RangeHandle:
        """Columns of the data area, or of the whole sheet height with *whole_column*.

        Without *whole_column* an empty data area (``row_count == 0``) raises
        ``ResourceBoundsError``.
        """
        if whole_column:
            start_row, row_count = 1, self.sheet.max_rows()
        else:
            start_row, row_count = self.data_start_row, self._row_count
        return self.range(RangeAddress(start_row, start_column, row_count, column_count))

    def header_range(self) -> RangeHandle:
        """Header cells; raises ``ResourceBoundsError`` while ``column_count == 0``."""
        return self.range(RangeAddress(self.header_row, self.start_column, 1, self._column_count))

    def data_area_range(self) -> RangeHandle:
        """Data block; raises ``ResourceBoundsError`` while either count is 0."""
        return self.range(
            RangeAddress(self.data_start_row, self.start_column, self._row_count, self._column_count)
        )

    def write_header(self, values: Sequence[Any]) -> RangeHandle:
        """Write *values* into the header row and rescan the last column."""
        values = list(values)
        if not values:
            raise ValueError("Header values must not be empty")
        target = self.range(RangeAddress(self.header_row, self.start_column, 1, len(values)))
        target.set_values([values])
        self.refresh_last_column()
        return target

    def write_data_area(self, rows: Sequence[Sequence[Any]]) -> RangeHandle:
        """Write a rectangular block from the data start row and rescan the last row."""
        grid = [list(row) for row in rows]
        if not grid or not grid[0]:
            raise ValueError("Data area values must contain at least one cell")
        target = self.range(
            RangeAddress(self.data_start_row, self.start_column, len(grid), len(grid[0]))
        )
        target.set_values(grid)
        self.refresh_last_row()
        return target

    # ------------------------------------------------------------------
    # Header lookup
    # ------------------------------------------------------------------

    def header_index_of(self, column_name: str) -> int:
        """0-based position of *column_name* in the cached header."""
        try:
            return self._header.index(column_name)
        except ValueError:
            raise ColumnNotFoundError(column_name) from None

    def header_column_of(self, column_name: str) -> int:
        """Sheet column number of *column_name* in the cached header."""
        return self.header_index_of(column_name) + self.start_column

    # ------------------------------------------------------------------
    # Copy
    # ------------------------------------------------------------------

    def copy_to_book(self, book_id: str, sheet_name: str | None = None) -> SheetController:
        """Copy the bound sheet into another book and return its controller.

        The copy keeps this controller's header row, start column and key
        column. *sheet_name* defaults to the current sheet name.
        """
        name = sheet_name or self.sheet_name
        try:
            target_book = self._provider.open_by_id(book_id)
            copied = self.sheet.copy_to(target_book)
            copied.name = name
            param = dataclasses.replace(self.config.to_param(), book_id=book_id, sheet_name=name)
            controller = SheetController(self._provider, param)
        except Exception as e:
            raise SheetCopyError(
                f"Copying sheet '{self.sheet_name}' to book '{book_id}' failed"
            ) from e
        logger.info("Copied sheet '%s' to book %s as '%s'", self.sheet_name, book_id, name)
        return controller

    def __repr__(self) -> str:
        return (
            f"<SheetController [{self.sheet_name}] header_row={self.header_row} "
            f"start_column={self.start_column} rows={self._row_count} "
            f"columns={self._column_count}>"
        )
