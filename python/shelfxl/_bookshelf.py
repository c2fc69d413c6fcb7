"""BookShelfSheet — the "Book List" sheet layout.

Layout of the sheet::

    B3   root folder URL (books are created below this folder)
    B6   template book URL
    row 13           header; column A is the checkbox column, column B the
                     key column, book columns start at C
    rows 14..        one row per entry, checked rows are selected
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from shelfxl._address import Dimension, RangeAddress
from shelfxl._book import BookController, extract_book_id_from_url, extract_folder_id_from_url
from shelfxl._config import SheetControllerParam
from shelfxl._controller import SheetController
from shelfxl._errors import ResourceOpenError
from shelfxl._registry import BookRegistry, Folder

logger = logging.getLogger(__name__)


class AddPosition(Enum):
    """Where a new row or column goes in its area."""

    FIRST = "first"
    LAST = "last"


@dataclass(frozen=True)
class RenameParam:
    """Replacement values for the placeholders of a template book name."""

    yyyy: str | None = None
    mm: str | None = None
    dd: str | None = None
    suffix: str | None = None


class BookShelfSheet:
    """Manages the book list sheet of the registry's active book."""

    SHEET_NAME = "Book List"
    HEADER_ROW = 13
    KEY_COLUMN = 2
    CHECKBOX_COLUMN = 1

    TEMPLATE_MARKER = "[Template]"
    YEAR_MARKER = "[yyyy]"
    MONTH_MARKER = "[mm]"
    DAY_MARKER = "[dd]"

    def __init__(
        self,
        registry: BookRegistry,
        book_list_area_start_column: int | None = None,
        root_folder_url_cell: RangeAddress | Mapping[str, Any] | None = None,
        template_book_url_cell: RangeAddress | Mapping[str, Any] | None = None,
    ) -> None:
        self._registry = registry
        self._controller = SheetController(
            registry,
            SheetControllerParam(
                sheet_name=self.SHEET_NAME,
                header_row=self.HEADER_ROW,
                key_column=self.KEY_COLUMN,
            ),
        )
        self._book_list_area_start_column = book_list_area_start_column or self.KEY_COLUMN + 1
        self.root_folder_url_cell = RangeAddress.coerce(
            root_folder_url_cell or RangeAddress(start_row=3, start_column=2)
        )
        self.template_book_url_cell = RangeAddress.coerce(
            template_book_url_cell or RangeAddress(start_row=6, start_column=2)
        )

    @property
    def sheet_controller(self) -> SheetController:
        return self._controller

    @property
    def book_list_area_start_column(self) -> int:
        return self._book_list_area_start_column

    # ------------------------------------------------------------------
    # Folders and books
    # ------------------------------------------------------------------

    def root_folder(self) -> Folder:
        url = self._controller.range(self.root_folder_url_cell).get_value()
        folder_id = extract_folder_id_from_url(url)
        if folder_id is None:
            raise ResourceOpenError(f"Root folder URL {url!r} is not a folder URL")
        return self._registry.get_folder_by_id(folder_id)

    def template_book_controller(self) -> BookController:
        url = self._controller.range(self.template_book_url_cell).get_value()
        book_id = extract_book_id_from_url(url)
        if book_id is None:
            raise ResourceOpenError(f"Template book URL {url!r} is not a spreadsheet URL")
        return BookController(self._registry, book_id=book_id)

    def create_book_controller_from_template(
        self, book_name: str | None = None, folder_url: str | None = None,
    ) -> BookController:
        """Copy the template book into *folder_url* (default: the root folder)."""
        if folder_url:
            folder_id = extract_folder_id_from_url(folder_url)
            if folder_id is None:
                raise ResourceOpenError(f"{folder_url!r} is not a folder URL")
        else:
            folder_id = self.root_folder().id
        template = self.template_book_controller()
        return BookController.create_book_from_another_book(
            self._registry, template.book.id, book_name=book_name, folder_id=folder_id,
        )

    def create_folder_in_root_folder(self, folder_name: str) -> Folder:
        """Child folder of the root folder, created unless it already exists."""
        if not folder_name:
            raise ValueError("Folder name is empty; give a valid folder name")
        root = self.root_folder()
        existing = self._registry.find_folders(root.id, folder_name)
        if existing:
            return existing[0]
        return self._registry.create_folder(folder_name, root.id)

    # ------------------------------------------------------------------
    # Data area
    # ------------------------------------------------------------------

    def checked_data_area_rows(self) -> list[int]:
        """Sheet rows whose checkbox is ticked."""
        c = self._controller
        if c.row_count < 1:
            return []
        values = c.column_range(self.CHECKBOX_COLUMN).get_values()
        return [c.data_start_row + i for i, (checked,) in enumerate(values) if checked]

    def add_row_in_data_area(self, position: AddPosition = AddPosition.FIRST) -> int:
        """Insert an empty row with a checkbox at the top (or bottom) of the data area.

        The inserted row spans the header's columns, so the header row must
        not be empty.
        """
        c = self._controller
        if c.column_count < 1:
            raise ValueError(
                f"Header row {c.header_row} of '{c.sheet_name}' is empty; cannot add a row"
            )
        if position is AddPosition.LAST:
            add_row = c.last_row + 1
        else:
            add_row = c.data_start_row

        new_row = c.row_range(add_row).insert_cells(Dimension.ROWS).row
        c.range(RangeAddress(new_row, self.CHECKBOX_COLUMN)).insert_checkboxes()
        c.refresh_last_row()
        logger.debug("Added row %d to '%s'", new_row, c.sheet_name)
        return new_row

    def add_column_in_book_area(
        self,
        column_name: str,
        position: AddPosition = AddPosition.FIRST,
        column_url: str | None = None,
    ) -> int:
        """Insert a named column at the start (or end) of the book list area.

        When *column_url* is an https URL the header becomes a HYPERLINK formula.
        """
        c = self._controller
        if position is AddPosition.LAST:
            add_column = c.last_column + 1
        else:
            add_column = self._book_list_area_start_column

        new_column = (
            c.column_range(add_column, whole_column=True).insert_cells(Dimension.COLUMNS).column
        )

        value = column_name
        if column_url and column_url.startswith("https://"):
            value = f'=HYPERLINK("{column_url}", "{column_name}")'
        c.range(RangeAddress(c.header_row, new_column)).set_value(value)
        c.refresh_last_column()
        logger.debug("Added column %d (%s) to '%s'", new_column, column_name, c.sheet_name)
        return new_column

    # ------------------------------------------------------------------
    # Template names
    # ------------------------------------------------------------------

    @staticmethod
    def create_rename_param_from_exec_date(
        years_ago: int = 0,
        months_ago: int = 0,
        days_ago: int = 0,
        today: datetime.date | None = None,
    ) -> RenameParam:
        """Date placeholders for *today* shifted back by the given amounts.

        Months are shifted first, then days are counted from the first of the
        resulting month, so Mar 31 minus one month lands on Mar 3 (or Mar 2 in
        a leap year), the way calendar arithmetic overflows into the next month.
        """
        today = today or datetime.date.today()
        month_index = today.year * 12 + (today.month - 1) - years_ago * 12 - months_ago
        year, month0 = divmod(month_index, 12)
        target = datetime.date(year, month0 + 1, 1) + datetime.timedelta(
            days=today.day - 1 - days_ago
        )
        return RenameParam(
            yyyy=str(target.year),
            mm=f"{target.month:02d}",
            dd=f"{target.day:02d}",
        )

    @classmethod
    def rename_template_book_name(
        cls, template_name: str, rename_param: RenameParam | None = None,
    ) -> str:
        """Drop the template marker and fill the date placeholders."""
        name = template_name.replace(cls.TEMPLATE_MARKER, "", 1)
        if rename_param is None:
            return name
        if rename_param.yyyy:
            name = name.replace(cls.YEAR_MARKER, rename_param.yyyy, 1)
        if rename_param.mm:
            name = name.replace(cls.MONTH_MARKER, rename_param.mm, 1)
        if rename_param.dd:
            name = name.replace(cls.DAY_MARKER, rename_param.dd, 1)
        if rename_param.suffix:
            name = f"{name}_{rename_param.suffix}"
        return name
