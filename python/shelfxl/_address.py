"""Range addresses and the direction/dimension enums used by the grid API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from shelfxl._utils import rowcol_to_a1


class Direction(Enum):
    """Scan direction for ``next_populated_cell``."""

    UP = (-1, 0)
    DOWN = (1, 0)
    NEXT = (0, 1)
    PREVIOUS = (0, -1)

    @property
    def step(self) -> tuple[int, int]:
        return self.value


class Dimension(Enum):
    """Axis along which ``insert_cells`` shifts existing cells."""

    ROWS = "rows"
    COLUMNS = "columns"


@dataclass(frozen=True)
class RangeAddress:
    """A rectangular sub-region request, 1-based and inclusive of its start."""

    start_row: int
    start_column: int
    row_count: int = 1
    column_count: int = 1
    name: str | None = None

    @classmethod
    def coerce(cls, address: RangeAddress | Mapping[str, Any]) -> RangeAddress:
        """Accept a ``RangeAddress`` or a mapping with the same keys.

        Missing or falsy ``row_count``/``column_count`` become 1.
        """
        if isinstance(address, RangeAddress):
            return address
        return cls(
            start_row=address["start_row"],
            start_column=address["start_column"],
            row_count=address.get("row_count") or 1,
            column_count=address.get("column_count") or 1,
            name=address.get("name"),
        )

    @property
    def end_row(self) -> int:
        return self.start_row + self.row_count - 1

    @property
    def end_column(self) -> int:
        return self.start_column + self.column_count - 1

    @property
    def a1(self) -> str:
        start = rowcol_to_a1(self.start_row, self.start_column)
        if self.row_count == 1 and self.column_count == 1:
            return start
        return f"{start}:{rowcol_to_a1(self.end_row, self.end_column)}"
