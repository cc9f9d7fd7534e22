"""
Front-end entry points.

These wrap ingestion, transforms and export into the actions a Streamlit
page (or the CLI) performs, and turn every outcome into a status string.
File-level failures are caught here; nothing below this module swallows
exceptions.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

import pandas as pd

from .config import (
    COMPARATIVE_YIELD_SHEET,
    PRODUCTION_FILENAME,
    PRODUCTION_SHEET,
    TEMPLATE_FILENAME,
    TEMPLATE_SHEET,
)
from .export import to_xlsx_bytes
from .loaders import WorkbookReadError, read_workbook
from .session import Session, ingest_calibration_workbook, ingest_yield_workbook
from .transforms import build_production_template, compute_production

logger = logging.getLogger(__name__)

UploadedFiles = Iterable[tuple[str, bytes]]


@dataclass
class UploadResult:
    status: str
    total_rows: int
    skipped_files: list[str] = field(default_factory=list)
    error: str | None = None


@dataclass
class ExportResult:
    status: str
    payload: bytes | None = None
    filename: str = ""
    sheet_name: str = ""
    rows_exported: int = 0
    missing_kas: list = field(default_factory=list)
    # the table that was (or would have been) written, and the fitted slopes
    table: pd.DataFrame | None = None
    slopes: dict = field(default_factory=dict)


def upload_raw_files(session: Session, files: UploadedFiles) -> UploadResult:
    """Add the Comparative Yield rows of each RAW export, in order.

    Files without a Comparative Yield sheet are skipped with a warning. An
    unreadable file stops the batch; files before it stay loaded.
    """
    files = list(files)
    if not files:
        return UploadResult(status="No files selected.", total_rows=len(session.cy_rows))

    skipped = []
    for name, data in files:
        try:
            workbook = read_workbook(data, name)
        except WorkbookReadError as exc:
            logger.error("Aborting RAW upload at %s", name)
            return UploadResult(
                status=f"Error reading RAW files: {exc}",
                total_rows=len(session.cy_rows),
                skipped_files=skipped,
                error=str(exc),
            )

        if COMPARATIVE_YIELD_SHEET not in workbook:
            skipped.append(name)
        ingest_yield_workbook(session, workbook, name)

    status = f"Loaded {len(session.cy_rows)} Comparative Yield rows."
    if skipped:
        status += f" Skipped (no '{COMPARATIVE_YIELD_SHEET}' sheet): {', '.join(skipped)}"
    return UploadResult(status=status, total_rows=len(session.cy_rows), skipped_files=skipped)


def upload_production_files(session: Session, files: UploadedFiles) -> UploadResult:
    """Add the first-sheet rows of each filled production file, in order."""
    files = list(files)
    if not files:
        return UploadResult(status="No files selected.", total_rows=len(session.prod_rows))

    for name, data in files:
        try:
            workbook = read_workbook(data, name)
        except WorkbookReadError as exc:
            logger.error("Aborting production upload at %s", name)
            return UploadResult(
                status=f"Error reading production files: {exc}",
                total_rows=len(session.prod_rows),
                error=str(exc),
            )
        ingest_calibration_workbook(session, workbook, name)

    return UploadResult(
        status=f"Loaded {len(session.prod_rows)} production rows.",
        total_rows=len(session.prod_rows),
    )


def export_template(session: Session) -> ExportResult:
    """Build the 3-row-per-site production template workbook."""
    if not session.cy_rows:
        return ExportResult(status="No Comparative Yield data loaded.")

    template = build_production_template(session.cy_rows)
    payload = to_xlsx_bytes(template, TEMPLATE_SHEET)
    if payload is None:
        return ExportResult(status="Nothing to export.", table=template)

    return ExportResult(
        status=f"Exported template with {len(template)} rows.",
        payload=payload,
        filename=TEMPLATE_FILENAME,
        sheet_name=TEMPLATE_SHEET,
        rows_exported=len(template),
        table=template,
    )


def export_production(session: Session) -> ExportResult:
    """Compute and export Production (lbs/acre) per site visit."""
    if not session.cy_rows:
        return ExportResult(status="No Comparative Yield data loaded.")
    if not session.prod_rows:
        return ExportResult(status="No production (Bag / NET WT.) data loaded.")

    result = compute_production(session.cy_rows, session.prod_rows)
    if result.rows.empty:
        return ExportResult(
            status=(
                "No Production rows could be computed. "
                "Check that KAs match between CY and production files."
            ),
            missing_kas=result.missing_kas,
            table=result.rows,
            slopes=result.slopes,
        )

    payload = to_xlsx_bytes(result.rows, PRODUCTION_SHEET)
    n = len(result.rows)
    if result.missing_kas:
        status = (
            f"Exported {n} rows. Note: no calibration found for KAs: "
            f"{', '.join(map(str, result.missing_kas))}"
        )
    else:
        status = f"Exported {n} rows (Production lbs/acre)."

    return ExportResult(
        status=status,
        payload=payload,
        filename=PRODUCTION_FILENAME,
        sheet_name=PRODUCTION_SHEET,
        rows_exported=n,
        missing_kas=result.missing_kas,
        table=result.rows,
        slopes=result.slopes,
    )


def get_dataset_summary(session: Session) -> dict:
    """Row and distinct-KA counts for the two upload steps."""
    return {
        "cy_rows": len(session.cy_rows),
        "cy_distinct_kas": session.cy_distinct_kas,
        "prod_rows": len(session.prod_rows),
        "prod_distinct_kas": session.prod_distinct_kas,
    }
