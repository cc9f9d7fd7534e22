"""
Shared field normalisation for ingestion: date canonicalisation, ancestry
splitting, KA extraction, numeric coercion and rounding.
"""

import logging
import math
import re
from datetime import date, datetime
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

_ALLOTMENT_SUFFIX = re.compile(r"\s+Allotment$", re.IGNORECASE)
_PASTURE_SUFFIX = re.compile(r"\s+Pasture$", re.IGNORECASE)
_KA_PATTERN = re.compile(r"[A-Za-z].*$")


def _is_blank(val: Any) -> bool:
    """True for None, NaN/NaT and empty strings."""
    if val is None:
        return True
    if isinstance(val, str):
        return val == ""
    try:
        return bool(pd.isna(val))
    except (TypeError, ValueError):
        return False


def normalise_date(val: Any) -> str:
    """Convert a cell value to a ``YYYY-MM-DD`` string.

    Native date/datetime values (including pd.Timestamp) are formatted with
    zero padding. Text is returned unchanged without checking its format, so
    a malformed text date simply never matches another key downstream.
    Anything else (None, NaT, numbers) becomes "".
    """
    if isinstance(val, str):
        return val
    if _is_blank(val):
        return ""
    if isinstance(val, (datetime, date)):
        return f"{val.year:04d}-{val.month:02d}-{val.day:02d}"
    return ""


def parse_ancestry(ancestry: Any) -> dict[str, str]:
    """Split an Ancestry path into allotment and pasture names.

    "Turkey Creek Allotment > Turkey Creek Pasture" gives
    {"allotment": "Turkey Creek", "pasture": "Turkey Creek"}.
    Only the first two ``>`` segments are used.
    """
    if _is_blank(ancestry):
        return {"allotment": "", "pasture": ""}

    parts = str(ancestry).split(">")
    allotment = parts[0].strip() if len(parts) > 0 else ""
    pasture = parts[1].strip() if len(parts) > 1 else ""

    allotment = _ALLOTMENT_SUFFIX.sub("", allotment).strip()
    pasture = _PASTURE_SUFFIX.sub("", pasture).strip()

    return {"allotment": allotment, "pasture": pasture}


def extract_ka(site_id: Any) -> str:
    """Return everything from the first letter of a SiteID onward.

    "03-01-01-00112-001-C3" -> "C3"; "00112-001" -> "".
    """
    if _is_blank(site_id):
        return ""
    match = _KA_PATTERN.search(str(site_id))
    return match.group(0) if match else ""


def as_number(val: Any) -> float:
    """Coerce a value to float, returning NaN for anything non-numeric.

    Blank cells count as non-numeric, so unfilled template rows never
    contribute a zero.
    """
    # Blank is NaN, never 0: an unfilled NET WT. or nValue drops out of slope
    # fits and averages instead of being counted as a zero reading.
    if _is_blank(val) or isinstance(val, bool):
        return math.nan
    if isinstance(val, str):
        val = val.strip()
        if not val:
            return math.nan
    try:
        return float(val)
    except (ValueError, TypeError):
        return math.nan


def to_rounded_number(val: Any, digits: int = 2) -> float | str:
    """Round half away from zero to ``digits`` decimals.

    Returns "" when the value is not a finite number.
    """
    n = as_number(val)
    if not math.isfinite(n):
        return ""
    factor = 10 ** digits
    scaled = math.floor(abs(n) * factor + 0.5)
    return math.copysign(scaled, n) / factor
