"""Region configuration: partial updates, merge rules and change detection."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Flag, auto

DEFAULT_HEADER_ROW = 1
DEFAULT_START_COLUMN = 1


@dataclass(frozen=True)
class SheetControllerParam:
    """Partial configuration. ``None`` means "keep the current value"."""

    book_id: str | None = None
    sheet_name: str | None = None
    header_row: int | None = None
    start_column: int | None = None
    key_column: int | None = None

    def __post_init__(self) -> None:
        for name in ("header_row", "start_column", "key_column"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 1):
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.sheet_name == "":
            raise ValueError("sheet_name must not be empty")


@dataclass(frozen=True)
class RegionConfig:
    """Fully resolved configuration of a SheetController."""

    book_id: str
    sheet_name: str
    header_row: int = DEFAULT_HEADER_ROW
    start_column: int = DEFAULT_START_COLUMN
    key_column: int = DEFAULT_START_COLUMN

    @property
    def data_start_row(self) -> int:
        return self.header_row + 1

    def to_param(self) -> SheetControllerParam:
        """Explicit partial config carrying every field of this one."""
        return SheetControllerParam(**{f.name: getattr(self, f.name) for f in fields(self)})


class Invalidation(Flag):
    """Why cached boundaries went stale."""

    NONE = 0
    BOOK = auto()
    SHEET = auto()
    HEADER_ROW = auto()
    START_COLUMN = auto()
    KEY_COLUMN = auto()

    @classmethod
    def everything(cls) -> Invalidation:
        return cls.BOOK | cls.SHEET | cls.HEADER_ROW | cls.START_COLUMN | cls.KEY_COLUMN


def resolve_config(
    current: RegionConfig | None,
    param: SheetControllerParam,
    book_id: str,
    sheet_name: str,
) -> RegionConfig:
    """Merge *param* over *current* for the bound book and sheet.

    Binding a different book or sheet starts from defaults instead of the
    previous values: header row 1, start column 1, key column following the
    start column. Otherwise omitted fields keep their value, and the key
    column follows the start column only when the start column changes and
    no key column is given.
    """
    if current is None or current.book_id != book_id or current.sheet_name != sheet_name:
        header_row = param.header_row or DEFAULT_HEADER_ROW
        start_column = param.start_column or DEFAULT_START_COLUMN
        key_column = param.key_column or start_column
    else:
        header_row = param.header_row or current.header_row
        start_column = param.start_column or current.start_column
        if param.key_column is not None:
            key_column = param.key_column
        elif start_column != current.start_column:
            key_column = start_column
        else:
            key_column = current.key_column
    return RegionConfig(
        book_id=book_id,
        sheet_name=sheet_name,
        header_row=header_row,
        start_column=start_column,
        key_column=key_column,
    )


def diff_config(old: RegionConfig | None, new: RegionConfig) -> Invalidation:
    """Compare two configurations field by field."""
    if old is None:
        return Invalidation.everything()
    reasons = Invalidation.NONE
    if old.book_id != new.book_id:
        reasons |= Invalidation.BOOK
    if old.sheet_name != new.sheet_name:
        reasons |= Invalidation.SHEET
    if old.header_row != new.header_row:
        reasons |= Invalidation.HEADER_ROW
    if old.start_column != new.start_column:
        reasons |= Invalidation.START_COLUMN
    if old.key_column != new.key_column:
        reasons |= Invalidation.KEY_COLUMN
    return reasons
