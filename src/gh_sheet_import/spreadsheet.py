"""
Workbook reader for issue rows.

Row 1 of the worksheet is a header and is skipped. Column A holds the
issue title, column B the body. Rows are read up to the last row that
has any value in it.
"""

import logging
import os
import shutil
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, time
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .exceptions import SpreadsheetError
from .models import IssueRow

logger = logging.getLogger(__name__)

HEADER_ROW = 1
TITLE_COLUMN = 0
BODY_COLUMN = 1


def cell_text(value: Any) -> str:
    """
    Render a cell value as issue text.

    Empty cells become an empty string and whole-number floats lose their
    trailing ``.0``, so a numeric title of 42 stays "42".
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def _is_used(values: tuple[Any, ...]) -> bool:
    return any(v is not None and v != "" for v in values)


def last_used_row(rows: list[tuple[Any, ...]]) -> int:
    """Return the 1-based index of the last row with a value, 0 if none."""
    for index in range(len(rows), 0, -1):
        if _is_used(rows[index - 1]):
            return index
    return 0


def iter_issue_rows(rows: list[tuple[Any, ...]]) -> Iterator[IssueRow]:
    """
    Yield an IssueRow for every data row, header excluded.

    Blank rows between data rows are still yielded; only trailing blank
    rows are dropped.
    """
    last = last_used_row(rows)
    for row_index in range(HEADER_ROW + 1, last + 1):
        values = rows[row_index - 1]
        title = values[TITLE_COLUMN] if len(values) > TITLE_COLUMN else None
        body = values[BODY_COLUMN] if len(values) > BODY_COLUMN else None
        yield IssueRow(
            title=cell_text(title),
            body=cell_text(body),
            row_index=row_index,
        )


@contextmanager
def _readable_copy(path: Path, copy: bool) -> Iterator[Path]:
    """
    Yield a path to read the workbook from.

    With ``copy`` set the workbook is first copied to a temporary file,
    which lets us read files Excel still has open. The copy is removed
    afterwards.
    """
    if not copy:
        yield path
        return

    fd, temp_name = tempfile.mkstemp(suffix=".xlsx")
    os.close(fd)
    temp_path = Path(temp_name)
    try:
        try:
            shutil.copyfile(path, temp_path)
        except OSError as e:
            raise SpreadsheetError(str(path), str(e)) from e
        logger.debug(f"Copied {path} to temporary file {temp_path}")
        yield temp_path
    finally:
        temp_path.unlink(missing_ok=True)


@contextmanager
def open_issue_rows(
    path: str | Path,
    sheet: str | None = None,
    copy: bool = True,
) -> Iterator[Iterator[IssueRow]]:
    """
    Open a workbook read-only and yield an iterator over its issue rows.

    The workbook stays open for as long as the context is active.

    Args:
        path: Path to the .xlsx workbook
        sheet: Worksheet name; None selects the first worksheet
        copy: Read from a temporary copy instead of the file itself

    Raises:
        SpreadsheetError: If the file is missing, unreadable or lacks the sheet
    """
    path = Path(path)
    if not path.is_file():
        raise SpreadsheetError(str(path), "file not found")

    with _readable_copy(path, copy) as readable:
        try:
            workbook = load_workbook(readable, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError) as e:
            raise SpreadsheetError(str(path), str(e)) from e

        try:
            if sheet is None:
                worksheet = workbook.worksheets[0]
            elif sheet in workbook.sheetnames:
                worksheet = workbook[sheet]
            else:
                raise SpreadsheetError(str(path), f"no worksheet named '{sheet}'")

            # The stored <dimension> can be stale; scan the actual cells.
            worksheet.reset_dimensions()
            rows = list(worksheet.iter_rows(values_only=True))
            logger.info(
                f"Read worksheet '{worksheet.title}' from {path.name}: "
                f"{max(last_used_row(rows) - HEADER_ROW, 0)} data rows"
            )
            yield iter_issue_rows(rows)
        finally:
            workbook.close()
