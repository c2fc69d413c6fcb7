"""BookController — open/create a book, place it in a folder, copy sheets in."""

from __future__ import annotations

import dataclasses
import logging
import re

from shelfxl._config import SheetControllerParam
from shelfxl._controller import SheetController
from shelfxl._errors import ResourceOpenError, SheetCopyError
from shelfxl._registry import BookRegistry, Folder
from shelfxl._workbook import Workbook

logger = logging.getLogger(__name__)

ACCESS_DOMAIN_WITH_LINK = "DOMAIN_WITH_LINK"
PERMISSION_VIEW = "VIEW"

_FOLDER_URL_RE = re.compile(r"https://drive\.google\.com/drive/folders/([^/?#]+)")
_BOOK_URL_RE = re.compile(r"https://docs\.google\.com/spreadsheets/d/([^/]+)/")


def extract_folder_id_from_url(folder_url: str | None) -> str | None:
    """Folder id from a Drive folder URL, or None if the URL does not match."""
    if not folder_url:
        return None
    m = _FOLDER_URL_RE.search(folder_url)
    return m.group(1) if m else None


def extract_book_id_from_url(book_url: str | None) -> str | None:
    """Spreadsheet id from a ``/spreadsheets/d/<id>/`` URL, or None."""
    if not book_url:
        return None
    m = _BOOK_URL_RE.search(book_url)
    return m.group(1) if m else None


class BookController:
    """One book of a BookRegistry together with the folder it lives in.

    Opens the book when *book_id* is given, otherwise creates a new book
    called *book_name*. A given *book_name* also renames an opened book, and
    a given *folder_id* moves the book into that folder.
    """

    def __init__(
        self,
        registry: BookRegistry,
        book_id: str | None = None,
        folder_id: str | None = None,
        book_name: str | None = None,
    ) -> None:
        self._registry = registry
        if book_id:
            self._book = registry.open_by_id(book_id)
        elif book_name:
            self._book = registry.create(book_name)
        else:
            raise ValueError("BookController requires a book_id or a book_name")

        if book_name:
            self._book.name = book_name

        self._folder: Folder | None
        if folder_id:
            self._folder = registry.move_book(self._book.id, folder_id)
        elif self._book.folder_id:
            self._folder = registry.get_folder_by_id(self._book.folder_id)
        else:
            self._folder = None

    @classmethod
    def create_book_from_another_book(
        cls,
        registry: BookRegistry,
        copy_from_book_id: str,
        book_name: str | None = None,
        folder_id: str | None = None,
    ) -> BookController:
        """Copy a whole book and wrap the copy. The name defaults to the source's."""
        try:
            source = registry.open_by_id(copy_from_book_id)
            copied = registry.make_copy(copy_from_book_id)
            return cls(
                registry,
                book_id=copied.id,
                book_name=book_name or source.name,
                folder_id=folder_id,
            )
        except Exception as e:
            raise SheetCopyError(f"Copying book '{copy_from_book_id}' failed") from e

    @property
    def registry(self) -> BookRegistry:
        return self._registry

    @property
    def book(self) -> Workbook:
        return self._book

    @property
    def folder(self) -> Folder | None:
        return self._folder

    def move_folder(self, folder_id: str) -> Folder:
        self._folder = self._registry.move_book(self._book.id, folder_id)
        return self._folder

    def set_sharing_domain_view(self) -> None:
        """Anyone in the domain with the link may view the book."""
        self._registry.set_sharing(self._book.id, ACCESS_DOMAIN_WITH_LINK, PERMISSION_VIEW)

    def sheet_controller(self, param: SheetControllerParam | None = None) -> SheetController:
        """SheetController bound to this book."""
        param = dataclasses.replace(param or SheetControllerParam(), book_id=self._book.id)
        return SheetController(self._registry, param)

    def fetch_sheet_from_another_book(
        self,
        fetch_book_id: str,
        fetch_sheet_name: str,
        param: SheetControllerParam | None = None,
    ) -> SheetController:
        """Copy a sheet of another book into this one and return its controller.

        The copied sheet is named ``param.sheet_name`` when given, else keeps
        *fetch_sheet_name*.
        """
        param = param or SheetControllerParam()
        try:
            source = self._registry.open_by_id(fetch_book_id)
            sheet = source.get_sheet_by_name(fetch_sheet_name)
            if sheet is None:
                raise ResourceOpenError(
                    f"Sheet '{fetch_sheet_name}' not found in book '{fetch_book_id}'"
                )
            created = sheet.copy_to(self._book)
            sheet_name = param.sheet_name or fetch_sheet_name
            created.name = sheet_name
            controller = SheetController(
                self._registry,
                dataclasses.replace(param, book_id=self._book.id, sheet_name=sheet_name),
            )
        except Exception as e:
            raise SheetCopyError(
                f"Fetching sheet '{fetch_sheet_name}' from book '{fetch_book_id}' failed"
            ) from e
        logger.info(
            "Fetched sheet '%s' from %s into %s", fetch_sheet_name, fetch_book_id, self._book.id,
        )
        return controller

    def __repr__(self) -> str:
        folder = self._folder.name if self._folder else None
        return f"<BookController [{self._book.name}] folder={folder}>"
