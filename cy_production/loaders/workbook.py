"""
Spreadsheet codec: turn uploaded .xlsx bytes into plain row dicts.

A parsed workbook is a dict of sheet name -> list of row dicts, in sheet
order. The first row of each sheet is the header.
"""

import io
import logging
from typing import Any

import openpyxl

logger = logging.getLogger(__name__)

Workbook = dict[str, list[dict[str, Any]]]


class WorkbookReadError(Exception):
    """Raised when a file cannot be parsed as a spreadsheet workbook."""


def _header_names(raw_header: tuple) -> list[str]:
    """Name header cells, filling blanks and de-duplicating repeats."""
    names: list[str] = []
    seen: dict[str, int] = {}
    empty_count = 0

    for cell in raw_header:
        if cell is None or str(cell).strip() == "":
            name = "__EMPTY" if empty_count == 0 else f"__EMPTY_{empty_count}"
            empty_count += 1
        else:
            name = str(cell)

        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        names.append(name)

    return names


def sheet_to_records(ws) -> list[dict[str, Any]]:
    """Read an openpyxl worksheet into row dicts keyed by header.

    Blank cells come back as None; rows with no values at all are skipped.
    """
    rows_iter = ws.iter_rows(values_only=True)
    try:
        raw_header = next(rows_iter)
    except StopIteration:
        return []

    header = _header_names(raw_header)
    records = []
    for values in rows_iter:
        if values is None or all(v is None or v == "" for v in values):
            continue
        record = {name: None for name in header}
        for name, value in zip(header, values):
            record[name] = value
        records.append(record)

    return records


def read_workbook(data: bytes, name: str = "") -> Workbook:
    """Parse .xlsx bytes into ``{sheet_name: [row, ...]}``.

    Raises WorkbookReadError when openpyxl cannot open the file.
    """
    try:
        wb = openpyxl.load_workbook(io.BytesIO(data), data_only=True, read_only=True)
    except Exception as exc:
        logger.exception("Failed to open workbook: %s", name or "<bytes>")
        raise WorkbookReadError(f"{name or 'workbook'}: {exc}") from exc

    try:
        sheets = {ws.title: sheet_to_records(ws) for ws in wb.worksheets}
    except Exception as exc:
        logger.exception("Failed to read sheets from workbook: %s", name or "<bytes>")
        raise WorkbookReadError(f"{name or 'workbook'}: {exc}") from exc
    finally:
        wb.close()

    logger.info(
        "Read %d sheet(s) from %s: %s",
        len(sheets), name or "<bytes>", ", ".join(sheets),
    )
    return sheets
