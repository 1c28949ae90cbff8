"""Write export rows to an XLSX workbook."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ctfexport.exceptions import WorkbookError

logger = logging.getLogger(__name__)

Row = dict[str, str]

MAX_COLUMN_WIDTH = 200
LOCKED_FILE_POLL_S = 2.0


def adjust_column_width(worksheet: Worksheet, max_column_width: int = MAX_COLUMN_WIDTH) -> None:
    """Size each column to its longest value, capped at ``max_column_width``.

    The header row gets six extra characters of padding.
    """
    for column in worksheet.iter_cols():
        header, *cells = column
        widths = [len(str(cell.value)) for cell in cells if cell.value is not None]
        widths.append(len(str(header.value or "")) + 6)
        letter = get_column_letter(header.column)
        worksheet.column_dimensions[letter].width = min(max_column_width, max(widths))


def create_workbook(sheets: Mapping[str, Sequence[Row]]) -> Workbook:
    """Create a workbook with one sheet per entry of ``sheets``.

    Columns are the union of the row keys in first-seen order; the first row
    of each sheet holds the column names.
    """
    workbook = Workbook()
    workbook.remove(workbook.active)

    for name, rows in sheets.items():
        columns: list[str] = []
        for row in rows:
            columns.extend(key for key in row if key not in columns)

        worksheet = workbook.create_sheet(title=name)
        worksheet.append(columns)
        for row in rows:
            worksheet.append([row.get(column) for column in columns])
        adjust_column_width(worksheet)

    return workbook


def wait_until_writeable(path: Path, poll_interval: float = LOCKED_FILE_POLL_S) -> None:
    """Block while another application (usually Excel) holds ``path`` open."""
    while True:
        if not path.exists():
            return
        try:
            with path.open("r+b"):
                return
        except PermissionError:
            logger.warning("  File %s is locked. Please close excel.", path)
        time.sleep(poll_interval)


def save_workbook(workbook: Workbook, filename: str | Path, verbose: bool = True) -> Path:
    """Save a workbook, waiting until the target file can be written."""
    path = Path(filename)
    wait_until_writeable(path)
    try:
        workbook.save(path)
    except OSError as exc:
        raise WorkbookError(f"Unable to write workbook {path}: {exc}") from exc
    if verbose:
        logger.info("workbook saved %s", path)
    return path
