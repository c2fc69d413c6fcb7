"""BookRegistry — in-memory book store and folder tree.

Implements the ``BookProvider`` protocol so it can be handed to a
SheetController as the source of books and of the default (active) book.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from shelfxl._errors import ResourceOpenError
from shelfxl._workbook import Workbook

logger = logging.getLogger(__name__)


@dataclass
class Folder:
    """A folder holding books and child folders."""

    id: str
    name: str
    parent_id: str | None = None


class BookRegistry:
    """Books by id, a folder tree rooted at "My Drive", and an active book."""

    def __init__(self) -> None:
        self._books: dict[str, Workbook] = {}
        self._folders: dict[str, Folder] = {}
        self._active_id: str | None = None
        root = Folder(id=uuid.uuid4().hex, name="My Drive")
        self._folders[root.id] = root
        self._root_id = root.id

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    def add(self, book: Workbook, folder_id: str | None = None) -> Workbook:
        """Register an existing book. The first book added becomes active."""
        if book.id in self._books:
            raise ValueError(f"Book '{book.id}' is already registered")
        book.folder_id = folder_id or book.folder_id or self._root_id
        self._books[book.id] = book
        if self._active_id is None:
            self._active_id = book.id
        return book

    def create(self, name: str) -> Workbook:
        book = self.add(Workbook(name))
        logger.info("Created book '%s' (%s)", name, book.id)
        return book

    def open_by_id(self, book_id: str) -> Workbook:
        try:
            return self._books[book_id]
        except KeyError:
            raise ResourceOpenError(f"Book '{book_id}' could not be opened") from None

    def get_active(self) -> Workbook:
        if self._active_id is None:
            raise ResourceOpenError("No active book")
        return self._books[self._active_id]

    def set_active(self, book_id: str) -> None:
        self.open_by_id(book_id)
        self._active_id = book_id

    def make_copy(self, book_id: str, name: str | None = None) -> Workbook:
        """Copy a book (all sheets) into the same folder as the original."""
        source = self.open_by_id(book_id)
        copied = self.add(source.copy(name), folder_id=source.folder_id)
        logger.info("Copied book %s to %s", book_id, copied.id)
        return copied

    def books_in_folder(self, folder_id: str) -> list[Workbook]:
        return [b for b in self._books.values() if b.folder_id == folder_id]

    def set_sharing(self, book_id: str, access: str, permission: str) -> None:
        self.open_by_id(book_id).sharing = (access, permission)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    @property
    def root_folder(self) -> Folder:
        return self._folders[self._root_id]

    def get_folder_by_id(self, folder_id: str | None) -> Folder:
        folder = self._folders.get(folder_id) if folder_id else None
        if folder is None:
            raise ResourceOpenError(f"Folder '{folder_id}' could not be opened")
        return folder

    def create_folder(self, name: str, parent_id: str | None = None) -> Folder:
        parent = self.get_folder_by_id(parent_id or self._root_id)
        folder = Folder(id=uuid.uuid4().hex, name=name, parent_id=parent.id)
        self._folders[folder.id] = folder
        logger.info("Created folder '%s' in '%s'", name, parent.name)
        return folder

    def find_folders(self, parent_id: str, name: str) -> list[Folder]:
        """Child folders of *parent_id* called *name*."""
        return [
            f for f in self._folders.values() if f.parent_id == parent_id and f.name == name
        ]

    def move_book(self, book_id: str, folder_id: str) -> Folder:
        folder = self.get_folder_by_id(folder_id)
        self.open_by_id(book_id).folder_id = folder.id
        return folder
