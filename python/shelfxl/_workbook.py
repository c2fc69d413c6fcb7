"""Workbook — in-memory book of named Worksheets.

New books (``Workbook()``) start with a single "Sheet1".
Existing .xlsx files are imported with ``Workbook._from_xlsx(path)`` and
exported with ``wb.save(path)``; both go through openpyxl.
"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from shelfxl._worksheet import DEFAULT_MAX_COLUMNS, DEFAULT_MAX_ROWS, Worksheet

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Sheet1"


class Workbook:
    """A book of sheets addressable by name, with a stable id."""

    def __init__(self, name: str = "Untitled", book_id: str | None = None) -> None:
        self._id = book_id or uuid.uuid4().hex
        self._name = name
        self._sheet_names: list[str] = []
        self._sheets: dict[str, Worksheet] = {}
        self.folder_id: str | None = None
        self.sharing: tuple[str, str] | None = None
        self.insert_sheet(DEFAULT_SHEET_NAME)

    @classmethod
    def _from_xlsx(cls, path: str, book_id: str | None = None) -> Workbook:
        """Import every sheet's values and number formats from an .xlsx file."""
        from openpyxl import load_workbook as load_xlsx

        src = load_xlsx(path)
        wb = object.__new__(cls)
        wb._id = book_id or uuid.uuid4().hex
        wb._name = Path(path).stem
        wb._sheet_names = []
        wb._sheets = {}
        wb.folder_id = None
        wb.sharing = None
        try:
            for xs in src.worksheets:
                ws = wb.insert_sheet(
                    xs.title,
                    max(xs.max_row, DEFAULT_MAX_ROWS),
                    max(xs.max_column, DEFAULT_MAX_COLUMNS),
                )
                for row in xs.iter_rows():
                    for xc in row:
                        if xc.value is None:
                            continue
                        cell = ws.cell(xc.row, xc.column)
                        cell.value = xc.value
                        if xc.number_format and xc.number_format != "General":
                            cell.number_format = xc.number_format
        finally:
            src.close()
        logger.info("Loaded %s with sheets %s", path, wb._sheet_names)
        return wb

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if not value:
            raise ValueError("Book name must not be empty")
        self._name = value

    # ------------------------------------------------------------------
    # Sheet access
    # ------------------------------------------------------------------

    @property
    def sheetnames(self) -> list[str]:
        return list(self._sheet_names)

    def sheet_names(self) -> list[str]:
        return list(self._sheet_names)

    @property
    def active(self) -> Worksheet | None:
        """Return the first sheet, or None if no sheets exist."""
        if self._sheet_names:
            return self._sheets[self._sheet_names[0]]
        return None

    def get_sheet_by_name(self, name: str) -> Worksheet | None:
        return self._sheets.get(name)

    def __getitem__(self, name: str) -> Worksheet:
        if name not in self._sheets:
            raise KeyError(f"Worksheet '{name}' does not exist")
        return self._sheets[name]

    def __contains__(self, name: str) -> bool:
        return name in self._sheets

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self._sheet_names)

    def insert_sheet(
        self,
        name: str,
        max_rows: int = DEFAULT_MAX_ROWS,
        max_columns: int = DEFAULT_MAX_COLUMNS,
    ) -> Worksheet:
        """Add a new empty sheet at the end of the book."""
        if not name:
            raise ValueError("Sheet name must not be empty")
        if name in self._sheets:
            raise ValueError(f"Sheet '{name}' already exists")
        ws = Worksheet(self, name, max_rows, max_columns)
        self._sheet_names.append(name)
        self._sheets[name] = ws
        return ws

    def copy(self, name: str | None = None, book_id: str | None = None) -> Workbook:
        """Deep-copy every sheet into a new book with a fresh id."""
        target = object.__new__(Workbook)
        target._id = book_id or uuid.uuid4().hex
        target._name = name or f"Copy of {self._name}"
        target._sheet_names = []
        target._sheets = {}
        target.folder_id = self.folder_id
        target.sharing = None
        for sheet_name in self._sheet_names:
            copied = self._sheets[sheet_name].copy_to(target)
            copied.title = sheet_name
        return target

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, filename: str | os.PathLike[str]) -> None:
        """Write every sheet's values and number formats to an .xlsx file."""
        from openpyxl import Workbook as XlsxWorkbook

        out = XlsxWorkbook()
        out.remove(out.active)
        for sheet_name in self._sheet_names:
            ws = self._sheets[sheet_name]
            xs = out.create_sheet(title=sheet_name)
            for (r, c), cell in sorted(ws._cells.items()):  # noqa: SLF001
                if cell.is_blank and cell.number_format is None:
                    continue
                xc = xs.cell(row=r, column=c, value=None if cell.is_blank else cell.value)
                if cell.number_format is not None:
                    xc.number_format = cell.number_format
        out.save(str(filename))
        logger.info("Saved %r to %s", self, filename)

    # ------------------------------------------------------------------
    # Context manager + cleanup
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release sheets."""
        self._sheets = {}
        self._sheet_names = []

    def __enter__(self) -> Workbook:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Workbook [{self._name}] id={self._id} sheets={self._sheet_names}>"
