"""Exception types raised by shelfxl."""

from __future__ import annotations


class ShelfError(Exception):
    """Base class for every error raised by shelfxl."""


class ResourceOpenError(ShelfError):
    """A book, folder or sheet could not be opened or bound."""


class ColumnNotFoundError(ShelfError, LookupError):
    """A column name is not present in the cached header."""

    def __init__(self, column_name: str) -> None:
        super().__init__(f"Column '{column_name}' does not exist in the header")
        self.column_name = column_name


class ResourceBoundsError(ShelfError, IndexError):
    """Coordinates fall outside the physical dimensions of a sheet."""


class SheetCopyError(ShelfError):
    """Copying a sheet or a book to another book failed."""
