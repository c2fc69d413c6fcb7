"""Tabular resource protocols consumed by SheetController.

Any backend that satisfies these protocols can be driven by the controller.
The in-memory ``Workbook`` in this package is one such backend.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shelfxl._address import Dimension, Direction


@runtime_checkable
class CellHandle(Protocol):
    """A single cell of a sheet."""

    @property
    def row(self) -> int: ...

    @property
    def column(self) -> int: ...

    @property
    def value(self) -> Any: ...

    def next_populated_cell(self, direction: Direction) -> CellHandle:
        """Jump to the next populated cell in *direction* (Ctrl+Arrow).

        Returns the sheet-edge cell when nothing populated lies ahead.
        """
        ...


@runtime_checkable
class RangeHandle(Protocol):
    """A rectangular block of cells."""

    @property
    def row(self) -> int: ...

    @property
    def column(self) -> int: ...

    @property
    def num_rows(self) -> int: ...

    @property
    def num_columns(self) -> int: ...

    def get_values(self) -> list[list[Any]]: ...

    def set_values(self, values: list[list[Any]]) -> RangeHandle: ...

    def insert_cells(self, dimension: Dimension) -> RangeHandle:
        """Shift existing cells away along *dimension* and return the freed range."""
        ...


@runtime_checkable
class Sheet(Protocol):
    """A named grid with a fixed physical size."""

    name: str

    def max_rows(self) -> int: ...

    def max_columns(self) -> int: ...

    def cell_at(self, row: int, column: int) -> CellHandle: ...

    def range_at(
        self, row: int, column: int, row_count: int = 1, column_count: int = 1,
    ) -> RangeHandle: ...

    def copy_to(self, book: Book) -> Sheet:
        """Copy this sheet into *book* under a generated name."""
        ...


@runtime_checkable
class Book(Protocol):
    """A workbook holding named sheets."""

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    def get_sheet_by_name(self, name: str) -> Sheet | None: ...

    def insert_sheet(self, name: str) -> Sheet: ...

    def sheet_names(self) -> list[str]: ...


@runtime_checkable
class BookProvider(Protocol):
    """Resolves books by id and supplies the default book."""

    def open_by_id(self, book_id: str) -> Book:
        """Return the book with *book_id*; raise ResourceOpenError if unknown."""
        ...

    def get_active(self) -> Book:
        """Return the book used when no explicit id is given."""
        ...
