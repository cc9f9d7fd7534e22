"""
Export: serialise a derived table to a single-sheet .xlsx workbook.
"""

import io
import logging

import pandas as pd

logger = logging.getLogger(__name__)


def to_xlsx_bytes(df: pd.DataFrame, sheet_name: str = "Sheet1") -> bytes | None:
    """Write ``df`` to an in-memory workbook with one sheet.

    Returns None for an empty table; an empty workbook is never produced.
    """
    if df is None or df.empty:
        logger.warning("Nothing to export for sheet '%s'", sheet_name)
        return None

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)

    payload = buffer.getvalue()
    logger.info("Exported %d rows to sheet '%s' (%d bytes)", len(df), sheet_name, len(payload))
    return payload
