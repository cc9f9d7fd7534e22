"""
Loader for filled production (Bag / NET WT.) files.

These are copies of the exported template with the weights entered in the
field, e.g. "20250930 TurkeyCreekProduction.xlsx". The first sheet is used
whatever its name.
"""

import logging

from ..config import CAL_BAG_COLUMN, CAL_DATE_COLUMN, CAL_KA_COLUMN, CAL_NET_WEIGHT_COLUMN
from ..models import CalibrationRow
from .utils import as_number, normalise_date
from .workbook import Workbook

logger = logging.getLogger(__name__)


def parse_production_file(workbook: Workbook, name: str = "") -> list[CalibrationRow]:
    """Read calibration rows from the first sheet of a filled template.

    KA is passed through as-is; DATE is normalised like the RAW export so
    both datasets share one key format.
    """
    if not workbook:
        logger.warning("File %s contains no sheets", name or "<workbook>")
        return []

    first_sheet = next(iter(workbook))
    rows = []
    for record in workbook[first_sheet]:
        rows.append(CalibrationRow(
            ka=record.get(CAL_KA_COLUMN),
            date=normalise_date(record.get(CAL_DATE_COLUMN)),
            bag_number=as_number(record.get(CAL_BAG_COLUMN)),
            net_weight=as_number(record.get(CAL_NET_WEIGHT_COLUMN)),
            extras=dict(record),
        ))

    logger.info(
        "Parsed %d production rows from %s [%s]", len(rows), name or "<workbook>", first_sheet
    )
    return rows
