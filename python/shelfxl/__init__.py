"""shelfxl — header-addressed data regions inside spreadsheet sheets.

Usage::

    from shelfxl import BookRegistry, SheetController, SheetControllerParam

    registry = BookRegistry()
    registry.create("Inventory")            # first book becomes the active one
    sc = SheetController(registry, SheetControllerParam(sheet_name="Items"))
    sc.write_header(["Name", "Qty"])
    sc.write_data_area([["bolt", 10], ["nut", 25]])
    print(sc.row_count, sc.header_column_of("Qty"))   # 2 2

    sc.update(header_row=3)                 # boundaries are rescanned
"""

import os

from shelfxl._address import Dimension, Direction, RangeAddress
from shelfxl._book import BookController, extract_book_id_from_url, extract_folder_id_from_url
from shelfxl._bookshelf import AddPosition, BookShelfSheet, RenameParam
from shelfxl._cell import Cell
from shelfxl._config import Invalidation, RegionConfig, SheetControllerParam
from shelfxl._controller import RegionSnapshot, SheetController
from shelfxl._errors import (
    ColumnNotFoundError,
    ResourceBoundsError,
    ResourceOpenError,
    SheetCopyError,
    ShelfError,
)
from shelfxl._formats import (
    NUMBER_FORMAT_CURRENCY_DEFAULT,
    NUMBER_FORMAT_NONE,
    NUMBER_FORMAT_NUMBER_DEFAULT,
    NUMBER_FORMAT_PERCENT,
    number_format_currency,
    number_format_number,
)
from shelfxl._range import Range
from shelfxl._registry import BookRegistry, Folder
from shelfxl._workbook import Workbook
from shelfxl._worksheet import Worksheet

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AddPosition",
    "BookController",
    "BookRegistry",
    "BookShelfSheet",
    "Cell",
    "ColumnNotFoundError",
    "Dimension",
    "Direction",
    "Folder",
    "Invalidation",
    "NUMBER_FORMAT_CURRENCY_DEFAULT",
    "NUMBER_FORMAT_NONE",
    "NUMBER_FORMAT_NUMBER_DEFAULT",
    "NUMBER_FORMAT_PERCENT",
    "Range",
    "RangeAddress",
    "RegionConfig",
    "RegionSnapshot",
    "RenameParam",
    "ResourceBoundsError",
    "ResourceOpenError",
    "SheetController",
    "SheetControllerParam",
    "SheetCopyError",
    "ShelfError",
    "Workbook",
    "Worksheet",
    "extract_book_id_from_url",
    "extract_folder_id_from_url",
    "load_workbook",
    "number_format_currency",
    "number_format_number",
]


def load_workbook(
    filename: str | os.PathLike[str],
    book_id: str | None = None,
) -> Workbook:
    """Import an .xlsx file into an in-memory Workbook.

    Every sheet keeps at least the default physical size (1000 rows x 26
    columns), so boundary scans behave the same as on a fresh sheet.
    """
    return Workbook._from_xlsx(str(filename), book_id)  # noqa: SLF001
