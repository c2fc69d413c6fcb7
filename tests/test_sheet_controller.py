"""Tests for SheetController: configuration, boundary scans and ranges."""

from __future__ import annotations

import pytest

from shelfxl import (
    BookRegistry,
    ColumnNotFoundError,
    Invalidation,
    RangeAddress,
    ResourceBoundsError,
    ResourceOpenError,
    SheetController,
    SheetControllerParam,
    SheetCopyError,
    Workbook,
)


def _registry(*names: str) -> tuple[BookRegistry, list[Workbook]]:
    registry = BookRegistry()
    books = [registry.create(name) for name in names or ("Book",)]
    return registry, books


def _seeded() -> tuple[BookRegistry, Workbook]:
    """Sheet "Data": header id/name/qty in B3:D3, five data rows in B4:D8."""
    registry, (book,) = _registry("Book")
    ws = book.insert_sheet("Data")
    ws.write_rows(
        [
            ["id", "name", "qty"],
            [1, "a", 10],
            [2, "b", 20],
            [3, "c", 30],
            [4, "d", 40],
            [5, "e", 50],
        ],
        start_row=3,
        start_col=2,
    )
    return registry, book


def _assert_boundaries_consistent(sc: SheetController) -> None:
    assert sc.row_count == sc.last_row - sc.data_start_row + 1
    assert sc.column_count == sc.last_column - sc.start_column + 1
    assert len(sc.header) == sc.column_count
    assert sc.data_start_row == sc.header_row + 1


class _BrokenProvider:
    def open_by_id(self, book_id: str) -> Workbook:
        raise RuntimeError("backend unavailable")

    def get_active(self) -> Workbook:
        raise RuntimeError("backend unavailable")


# ======================================================================
# Initialization
# ======================================================================


class TestInitialize:
    def test_empty_sheet(self) -> None:
        registry, _ = _registry()
        sc = SheetController(
            registry, SheetControllerParam(sheet_name="Sheet1", header_row=1, start_column=1),
        )
        assert sc.data_start_row == 2
        assert sc.key_column == 1
        assert sc.row_count == 0
        assert sc.column_count == 0
        assert sc.header == ()
        _assert_boundaries_consistent(sc)

    def test_defaults_without_param(self) -> None:
        registry, (book,) = _registry()
        sc = SheetController(registry)
        assert sc.book is book
        assert sc.sheet_name == "Sheet1"
        assert (sc.header_row, sc.start_column, sc.key_column) == (1, 1, 1)

    def test_missing_sheet_is_inserted(self) -> None:
        registry, (book,) = _registry()
        sc = SheetController(registry, sheet_name="Items")
        assert "Items" in book
        assert sc.sheet is book["Items"]

    def test_explicit_book_id(self) -> None:
        registry, (_, second) = _registry("One", "Two")
        sc = SheetController(registry, SheetControllerParam(book_id=second.id))
        assert sc.book is second

    def test_unknown_book_raises(self) -> None:
        registry, _ = _registry()
        with pytest.raises(ResourceOpenError):
            SheetController(registry, SheetControllerParam(book_id="nope"))

    def test_no_active_book_raises(self) -> None:
        with pytest.raises(ResourceOpenError, match="No active book"):
            SheetController(BookRegistry())

    def test_provider_failures_are_wrapped(self) -> None:
        with pytest.raises(ResourceOpenError) as excinfo:
            SheetController(_BrokenProvider(), SheetControllerParam(book_id="x"))
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        with pytest.raises(ResourceOpenError):
            SheetController(_BrokenProvider())

    def test_start_column_sets_key_column(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry, SheetControllerParam(start_column=3))
        assert sc.key_column == 3


# ======================================================================
# Updates and invalidation
# ======================================================================


class TestUpdate:
    def test_merge_keeps_unset_fields(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry, SheetControllerParam(start_column=4))
        sc.update(SheetControllerParam(header_row=5))
        assert sc.start_column == 4
        assert sc.header_row == 5
        assert sc.data_start_row == 6

    def test_key_column_tracks_start_column(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry, SheetControllerParam(start_column=3))
        assert sc.key_column == 3
        sc.update(SheetControllerParam(start_column=7))
        assert sc.key_column == 7
        sc.update(SheetControllerParam(header_row=2))
        assert sc.key_column == 7

    def test_explicit_key_column_is_sticky(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry, SheetControllerParam(key_column=4))
        assert (sc.start_column, sc.key_column) == (1, 4)
        sc.update(header_row=2)
        assert sc.key_column == 4
        sc.update(start_column=1)
        assert sc.key_column == 4
        sc.update(start_column=3)
        assert sc.key_column == 3

    def test_keyword_shorthand(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry, header_row=2)
        sc.update(SheetControllerParam(header_row=3), start_column=2)
        assert (sc.header_row, sc.start_column) == (3, 2)

    def test_reasons_come_from_config_diff(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry)
        assert sc.update(header_row=5) == Invalidation.HEADER_ROW
        assert sc.update(header_row=5) == Invalidation.NONE
        assert sc.update(key_column=2) == Invalidation.KEY_COLUMN
        reasons = sc.update(start_column=3)
        assert Invalidation.START_COLUMN in reasons
        assert Invalidation.KEY_COLUMN in reasons

    def test_changing_book_starts_fresh(self) -> None:
        registry, (_, second) = _registry("One", "Two")
        sc = SheetController(
            registry,
            SheetControllerParam(sheet_name="Items", header_row=5, start_column=3, key_column=4),
        )
        reasons = sc.update(book_id=second.id)
        assert sc.book is second
        assert sc.sheet is second["Items"]
        assert (sc.header_row, sc.start_column, sc.key_column) == (1, 1, 1)
        assert Invalidation.BOOK in reasons
        assert Invalidation.SHEET not in reasons

    def test_changing_sheet_starts_fresh(self) -> None:
        registry, (book,) = _registry()
        book.insert_sheet("Other")
        sc = SheetController(registry, SheetControllerParam(header_row=4, start_column=2))
        sc.update(sheet_name="Other", start_column=5)
        assert sc.sheet is book["Other"]
        assert (sc.header_row, sc.start_column, sc.key_column) == (1, 5, 5)

    def test_invalid_values_rejected(self) -> None:
        with pytest.raises(ValueError, match="header_row"):
            SheetControllerParam(header_row=0)
        with pytest.raises(ValueError, match="sheet_name"):
            SheetControllerParam(sheet_name="")

    def test_failed_update_keeps_state(self) -> None:
        registry, (book,) = _registry()
        sc = SheetController(registry, header_row=2)
        with pytest.raises(ResourceOpenError):
            sc.update(book_id="missing", header_row=9)
        assert sc.book is book
        assert sc.header_row == 2

    def test_failed_scan_keeps_state(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry)
        sc.write_header(["a", "b"])
        before = sc.snapshot()
        with pytest.raises(ResourceBoundsError):
            sc.update(start_column=30)
        assert sc.snapshot() == before
        assert (sc.start_column, sc.key_column) == (1, 1)
        _assert_boundaries_consistent(sc)
        assert sc.update(header_row=1) == Invalidation.NONE


# ======================================================================
# Boundary scans
# ======================================================================


class TestBoundaries:
    def test_seeded_region(self) -> None:
        registry, _ = _seeded()
        sc = SheetController(
            registry, SheetControllerParam(sheet_name="Data", header_row=3, start_column=2),
        )
        assert sc.key_column == 2
        assert (sc.last_row, sc.row_count) == (8, 5)
        assert (sc.last_column, sc.column_count) == (4, 3)
        assert sc.header == ("id", "name", "qty")
        _assert_boundaries_consistent(sc)

    def test_invariants_hold_across_updates(self) -> None:
        registry, _ = _seeded()
        sc = SheetController(
            registry, SheetControllerParam(sheet_name="Data", header_row=3, start_column=2),
        )
        for change in (
            SheetControllerParam(header_row=4),
            SheetControllerParam(header_row=3, start_column=3),
            SheetControllerParam(key_column=4),
            SheetControllerParam(header_row=10),
            SheetControllerParam(start_column=2, header_row=3),
        ):
            sc.update(change)
            _assert_boundaries_consistent(sc)

    def test_header_row_moved_into_data(self) -> None:
        registry, _ = _seeded()
        sc = SheetController(
            registry, SheetControllerParam(sheet_name="Data", header_row=3, start_column=2),
        )
        sc.update(header_row=4)
        assert (sc.last_row, sc.row_count) == (8, 4)
        assert sc.header == (1, "a", 10)

    def test_column_filled_to_last_physical_row(self) -> None:
        registry, (book,) = _registry()
        ws = book["Sheet1"]
        ws["A1"] = "key"
        for r in range(2, ws.max_rows() + 1):
            ws.cell(r, 1).value = r
        sc = SheetController(registry)
        assert sc.last_row == ws.max_rows()
        assert sc.row_count == ws.max_rows() - 1

    def test_data_filled_to_last_row_without_header_value(self) -> None:
        registry, (book,) = _registry()
        ws = book["Sheet1"]
        for r in range(2, ws.max_rows() + 1):
            ws.cell(r, 1).value = "x"
        sc = SheetController(registry)
        assert sc.last_row == ws.max_rows()

    def test_gap_before_bottom_value(self) -> None:
        registry, (book,) = _registry()
        ws = book["Sheet1"]
        ws["A1"] = "h"
        ws["A2"] = 1
        ws["A1000"] = "x"
        sc = SheetController(registry)
        assert (sc.last_row, sc.row_count) == (2, 1)
        ws["A3"] = 2
        sc.refresh_last_row()
        assert (sc.last_row, sc.row_count) == (3, 2)

    def test_bottom_value_alone_counts_to_last_row(self) -> None:
        registry, (book,) = _registry()
        ws = book["Sheet1"]
        ws["A1000"] = "x"
        sc = SheetController(registry)
        assert sc.last_row == ws.max_rows()

    def test_gap_under_empty_header_key_cell(self) -> None:
        registry, (book,) = _registry()
        ws = book["Sheet1"]
        ws["A2"] = 1
        ws["A1000"] = "x"
        sc = SheetController(registry)
        assert sc.last_row == 2

    def test_values_above_header_do_not_count(self) -> None:
        registry, (book,) = _registry()
        book["Sheet1"]["B3"] = "https://example.com"
        sc = SheetController(registry, SheetControllerParam(header_row=13, key_column=2))
        assert sc.last_row == 13
        assert sc.row_count == 0

    def test_header_spanning_full_sheet_width(self) -> None:
        # No edge correction is applied to the column scan; a header with no
        # gap still lands on the last physical column.
        registry, (book,) = _registry()
        ws = book["Sheet1"]
        ws.write_rows([[f"h{c}" for c in range(1, ws.max_columns() + 1)]])
        sc = SheetController(registry)
        assert sc.last_column == ws.max_columns()
        assert sc.column_count == ws.max_columns()
        assert len(sc.header) == sc.column_count

    def test_single_header_cell(self) -> None:
        registry, (book,) = _registry()
        book["Sheet1"]["A1"] = "Only"
        sc = SheetController(registry)
        assert sc.last_column == 1
        assert sc.header == ("Only",)

    def test_leading_header_gap_is_included(self) -> None:
        registry, (book,) = _registry()
        book["Sheet1"]["C1"] = "x"
        sc = SheetController(registry)
        assert sc.last_column == 3
        assert sc.header == (None, None, "x")

    def test_cache_is_not_revalidated_on_read(self) -> None:
        registry, (book,) = _registry()
        sc = SheetController(registry)
        sc.write_header(["Name"])
        book["Sheet1"]["A2"] = "behind the controller's back"
        assert sc.row_count == 0
        assert sc.update(header_row=1) == Invalidation.NONE
        assert sc.row_count == 0
        sc.refresh()
        assert sc.row_count == 1


# ======================================================================
# Writes and header lookup
# ======================================================================


class TestWrites:
    def test_header_and_data_round_trip(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry)
        sc.write_header(["A", "B"])
        assert sc.header_range().get_values() == [["A", "B"]]
        sc.write_data_area([[1, 2], [3, 4]])
        assert sc.data_area_range().get_values() == [[1, 2], [3, 4]]
        assert sc.row_count == 2

    def test_write_header_refreshes_columns_only(self) -> None:
        registry, (book,) = _registry()
        ws = book["Sheet1"]
        sc = SheetController(registry)
        ws["A2"] = "row"
        written = sc.write_header(["x", "y", "z"])
        assert written.num_columns == 3
        assert sc.column_count == 3
        assert len(sc.header) == sc.column_count
        assert sc.row_count == 0

    def test_write_data_area_refreshes_rows_only(self) -> None:
        registry, (book,) = _registry()
        sc = SheetController(registry)
        book["Sheet1"]["A1"] = "late header"
        sc.write_data_area([["v"]])
        assert sc.row_count == 1
        assert sc.column_count == 0

    def test_empty_writes_rejected(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry)
        with pytest.raises(ValueError):
            sc.write_header([])
        with pytest.raises(ValueError):
            sc.write_data_area([])

    def test_header_lookup(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry, SheetControllerParam(start_column=2))
        sc.write_header(["Name", "Age", "City"])
        assert sc.header_index_of("Age") == 1
        assert sc.header_column_of("Age") == 3
        with pytest.raises(ColumnNotFoundError, match="Missing"):
            sc.header_index_of("Missing")
        with pytest.raises(LookupError):
            sc.header_column_of("Missing")

    def test_header_lookup_uses_cache(self) -> None:
        registry, (book,) = _registry()
        sc = SheetController(registry)
        sc.write_header(["Name"])
        book["Sheet1"]["B1"] = "Added"
        with pytest.raises(ColumnNotFoundError):
            sc.header_index_of("Added")
        sc.refresh_last_column()
        assert sc.header_column_of("Added") == 2


# ======================================================================
# Ranges
# ======================================================================


class TestRanges:
    def _controller(self) -> SheetController:
        registry, _ = _seeded()
        return SheetController(
            registry, SheetControllerParam(sheet_name="Data", header_row=3, start_column=2),
        )

    def test_range_defaults_to_single_cell(self) -> None:
        sc = self._controller()
        rng = sc.range({"start_row": 4, "start_column": 3})
        assert (rng.num_rows, rng.num_columns) == (1, 1)
        assert rng.get_values() == [["a"]]
        assert sc.range(RangeAddress(4, 2, 2, 3)).get_values() == [[1, "a", 10], [2, "b", 20]]

    def test_row_range(self) -> None:
        sc = self._controller()
        rng = sc.row_range(5)
        assert (rng.row, rng.column, rng.num_rows, rng.num_columns) == (5, 2, 1, 3)
        whole = sc.row_range(5, 2, whole_row=True)
        assert (whole.column, whole.num_rows, whole.num_columns) == (1, 2, 26)

    def test_column_range(self) -> None:
        sc = self._controller()
        rng = sc.column_range(4)
        assert (rng.row, rng.num_rows) == (4, 5)
        assert rng.get_values() == [[10], [20], [30], [40], [50]]
        whole = sc.column_range(4, whole_column=True)
        assert (whole.row, whole.num_rows) == (1, 1000)

    def test_header_and_data_area(self) -> None:
        sc = self._controller()
        assert sc.header_range().get_values() == [["id", "name", "qty"]]
        area = sc.data_area_range()
        assert (area.row, area.column, area.num_rows, area.num_columns) == (4, 2, 5, 3)

    def test_out_of_bounds_surfaces(self) -> None:
        sc = self._controller()
        with pytest.raises(ResourceBoundsError):
            sc.range(RangeAddress(1001, 1))

    def test_zero_sized_ranges_on_empty_sheet(self) -> None:
        registry, _ = _registry()
        sc = SheetController(registry)
        assert (sc.row_count, sc.column_count) == (0, 0)
        with pytest.raises(ResourceBoundsError):
            sc.header_range()
        with pytest.raises(ResourceBoundsError):
            sc.data_area_range()
        with pytest.raises(ResourceBoundsError):
            sc.row_range(2)
        with pytest.raises(ResourceBoundsError):
            sc.column_range(1)
        assert sc.row_range(2, whole_row=True).num_columns == 26
        assert sc.column_range(1, whole_column=True).num_rows == 1000

    def test_snapshot(self) -> None:
        snap = self._controller().snapshot()
        assert snap.sheet_name == "Data"
        assert (snap.header_row, snap.data_start_row) == (3, 4)
        assert (snap.last_row, snap.row_count) == (8, 5)
        assert snap.header == ("id", "name", "qty")


# ======================================================================
# Copy to another book
# ======================================================================


class TestCopyToBook:
    def test_copy_keeps_configuration(self) -> None:
        registry, book = _seeded()
        other = registry.create("Other")
        sc = SheetController(
            registry,
            SheetControllerParam(sheet_name="Data", header_row=3, start_column=2, key_column=3),
        )
        copy = sc.copy_to_book(other.id)
        assert copy is not sc
        assert copy.book is other
        assert copy.sheet is other["Data"]
        assert (copy.header_row, copy.start_column, copy.key_column) == (3, 2, 3)
        assert copy.row_count == sc.row_count
        assert copy.header == sc.header
        assert sc.book is book

    def test_copy_with_new_name(self) -> None:
        registry, _ = _seeded()
        other = registry.create("Other")
        sc = SheetController(registry, SheetControllerParam(sheet_name="Data", header_row=3))
        copy = sc.copy_to_book(other.id, "Archive")
        assert copy.sheet_name == "Archive"
        assert "Archive" in other

    def test_copy_to_unknown_book(self) -> None:
        registry, _ = _seeded()
        sc = SheetController(registry, SheetControllerParam(sheet_name="Data"))
        with pytest.raises(SheetCopyError) as excinfo:
            sc.copy_to_book("missing")
        assert isinstance(excinfo.value.__cause__, ResourceOpenError)
