"""
Loader for the Comparative Yield sheet of a RAW survey export.

Source: C3VGS-Export_RAW_*.xlsx

Each RAW export carries several sheets; only "Comparative Yield" is used.
Columns of interest:
    Date      survey date (datetime cell, occasionally text)
    Ancestry  "<name> Allotment > <name> Pasture"
    SiteID    numeric site path ending in the KA, e.g. 03-01-01-00112-001-C3
    nValue    yield-proxy measurement averaged per site
"""

import logging

from ..config import (
    COMPARATIVE_YIELD_SHEET,
    CY_ANCESTRY_COLUMN,
    CY_DATE_COLUMN,
    CY_SITE_ID_COLUMN,
    CY_YIELD_VALUE_COLUMN,
)
from ..models import YieldRow
from .utils import as_number, extract_ka, normalise_date, parse_ancestry
from .workbook import Workbook

logger = logging.getLogger(__name__)


def parse_comparative_yield(workbook: Workbook, name: str = "") -> list[YieldRow] | None:
    """Normalise every row of the Comparative Yield sheet.

    Assumptions
    -----------
    - The sheet name matches "Comparative Yield" exactly.
    - Rows missing Date or SiteID are still returned; they carry an empty
      date or KA and are filtered out by the transforms.

    Returns
    -------
    List of YieldRow in sheet order, or None when the workbook has no
    Comparative Yield sheet.
    """
    if COMPARATIVE_YIELD_SHEET not in workbook:
        logger.warning(
            "File %s has no '%s' sheet; skipping.", name or "<workbook>", COMPARATIVE_YIELD_SHEET
        )
        return None

    rows = []
    for record in workbook[COMPARATIVE_YIELD_SHEET]:
        ancestry = parse_ancestry(record.get(CY_ANCESTRY_COLUMN))
        rows.append(YieldRow(
            date=normalise_date(record.get(CY_DATE_COLUMN)),
            allotment=ancestry["allotment"],
            pasture=ancestry["pasture"],
            ka=extract_ka(record.get(CY_SITE_ID_COLUMN)),
            n_value=as_number(record.get(CY_YIELD_VALUE_COLUMN)),
            extras=dict(record),
        ))

    logger.info("Parsed %d Comparative Yield rows from %s", len(rows), name or "<workbook>")
    return rows
