"""Tests for the workbook reader."""

import re
import tempfile
import zipfile
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path

import pytest
from openpyxl import Workbook

from gh_sheet_import import spreadsheet
from gh_sheet_import.exceptions import SpreadsheetError
from gh_sheet_import.spreadsheet import (
    cell_text,
    iter_issue_rows,
    last_used_row,
    open_issue_rows,
)


class TestCellText:
    """Tests for cell value coercion."""

    def test_none_is_empty(self) -> None:
        assert cell_text(None) == ""

    def test_string_unchanged(self) -> None:
        assert cell_text("  Bug A ") == "  Bug A "

    def test_whole_float_drops_fraction(self) -> None:
        assert cell_text(42.0) == "42"

    def test_fractional_float(self) -> None:
        assert cell_text(1.5) == "1.5"

    def test_int(self) -> None:
        assert cell_text(7) == "7"

    def test_bool(self) -> None:
        assert cell_text(True) == "True"

    def test_dates_are_iso(self) -> None:
        assert cell_text(date(2024, 1, 15)) == "2024-01-15"
        assert cell_text(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00"


class TestIterIssueRows:
    """Tests for row iteration over raw cell values."""

    def test_skips_header(self) -> None:
        rows = [("Title", "Body"), ("Bug A", "desc A"), ("Bug B", "desc B")]
        issue_rows = list(iter_issue_rows(rows))

        assert [r.title for r in issue_rows] == ["Bug A", "Bug B"]
        assert [r.body for r in issue_rows] == ["desc A", "desc B"]
        assert [r.row_index for r in issue_rows] == [2, 3]

    def test_header_only(self) -> None:
        assert list(iter_issue_rows([("Title", "Body")])) == []

    def test_no_rows(self) -> None:
        assert list(iter_issue_rows([])) == []

    def test_trailing_blank_rows_dropped(self) -> None:
        rows = [("Title", "Body"), ("Bug A", None), (None, None), ("", None)]
        issue_rows = list(iter_issue_rows(rows))

        assert len(issue_rows) == 1
        assert issue_rows[0].body == ""

    def test_inner_blank_row_kept(self) -> None:
        rows = [("Title", "Body"), ("Bug A", "a"), (None, None), ("Bug C", "c")]
        issue_rows = list(iter_issue_rows(rows))

        assert [r.title for r in issue_rows] == ["Bug A", "", "Bug C"]
        assert [r.row_index for r in issue_rows] == [2, 3, 4]

    def test_short_rows(self) -> None:
        rows = [("Title",), ("Only a title",)]
        issue_rows = list(iter_issue_rows(rows))

        assert issue_rows[0].title == "Only a title"
        assert issue_rows[0].body == ""

    def test_last_used_row_looks_past_column_b(self) -> None:
        rows = [("Title", "Body", "Notes"), (None, None, "note")]
        assert last_used_row(rows) == 2


class TestOpenIssueRows:
    """Tests for reading real workbooks."""

    def test_reads_first_sheet(self, two_row_workbook: Path) -> None:
        with open_issue_rows(two_row_workbook) as rows:
            issue_rows = list(rows)

        assert [(r.title, r.body) for r in issue_rows] == [
            ("Bug A", "desc A"),
            ("Bug B", "desc B"),
        ]

    def test_numeric_cells(self, make_workbook: Callable[..., Path]) -> None:
        path = make_workbook([(1234, 5.0)])

        with open_issue_rows(path) as rows:
            (row,) = list(rows)

        assert row.title == "1234"
        assert row.body == "5"

    def test_header_only_sheet(self, make_workbook: Callable[..., Path]) -> None:
        path = make_workbook([])

        with open_issue_rows(path) as rows:
            assert list(rows) == []

    def test_named_sheet(self, tmp_path: Path) -> None:
        workbook = Workbook()
        workbook.active.title = "Notes"
        workbook.active.append(("ignored", "sheet"))
        sprint = workbook.create_sheet("Sprint1")
        sprint.append(("Title", "Body"))
        sprint.append(("Sprint bug", "body"))
        path = tmp_path / "multi.xlsx"
        workbook.save(path)

        with open_issue_rows(path, sheet="Sprint1") as rows:
            assert [r.title for r in rows] == ["Sprint bug"]

    def test_missing_sheet(self, two_row_workbook: Path) -> None:
        with pytest.raises(SpreadsheetError, match="no worksheet named 'Nope'"):
            with open_issue_rows(two_row_workbook, sheet="Nope"):
                pass

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SpreadsheetError, match="file not found"):
            with open_issue_rows(tmp_path / "missing.xlsx"):
                pass

    def test_not_a_workbook(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.xlsx"
        path.write_text("not a zip file")

        with pytest.raises(SpreadsheetError):
            with open_issue_rows(path):
                pass

    def test_temporary_copy_removed(
        self,
        two_row_workbook: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        monkeypatch.setattr(tempfile, "tempdir", str(scratch))

        with open_issue_rows(two_row_workbook, copy=True) as rows:
            assert len(list(scratch.iterdir())) == 1
            list(rows)

        assert list(scratch.iterdir()) == []
        assert two_row_workbook.exists()

    def test_no_copy_reads_in_place(
        self,
        two_row_workbook: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        monkeypatch.setattr(tempfile, "tempdir", str(scratch))

        with open_issue_rows(two_row_workbook, copy=False) as rows:
            assert list(scratch.iterdir()) == []
            assert len(list(rows)) == 2

    def test_stale_dimension_ignored(
        self, make_workbook: Callable[..., Path], tmp_path: Path
    ) -> None:
        source = make_workbook([("Bug A", "a"), ("Bug B", "b"), ("Bug C", "c")])
        stale = tmp_path / "stale.xlsx"

        with zipfile.ZipFile(source) as src, zipfile.ZipFile(stale, "w") as dst:
            for item in src.infolist():
                content = src.read(item.filename)
                if item.filename == "xl/worksheets/sheet1.xml":
                    content = re.sub(
                        rb'<dimension ref="[^"]*"', b'<dimension ref="A1:A2"', content
                    )
                    assert b'<dimension ref="A1:A2"' in content
                dst.writestr(item, content)

        with open_issue_rows(stale) as rows:
            issue_rows = list(rows)

        assert [(r.title, r.body) for r in issue_rows] == [
            ("Bug A", "a"),
            ("Bug B", "b"),
            ("Bug C", "c"),
        ]

    def test_workbook_closed_when_reader_raises(
        self, two_row_workbook: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        real_load = spreadsheet.load_workbook
        closed: list[bool] = []

        def _load(*args: object, **kwargs: object) -> object:
            workbook = real_load(*args, **kwargs)
            real_close = workbook.close

            def _close() -> None:
                closed.append(True)
                real_close()

            workbook.close = _close
            return workbook

        monkeypatch.setattr(spreadsheet, "load_workbook", _load)

        with pytest.raises(RuntimeError):
            with open_issue_rows(two_row_workbook) as rows:
                next(rows)
                raise RuntimeError("batch aborted")

        assert closed == [True]
