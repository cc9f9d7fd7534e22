"""
Simulated data generator for demos and tests.

Produces a RAW export workbook (with a Comparative Yield sheet) and a
matching filled production file. All values are synthetic.
"""

import io

import numpy as np
import pandas as pd

from .config import (
    BAG_NUMBERS,
    COMPARATIVE_YIELD_SHEET,
    CY_ANCESTRY_COLUMN,
    CY_DATE_COLUMN,
    CY_SITE_ID_COLUMN,
    CY_YIELD_VALUE_COLUMN,
)
from .transforms import build_production_template

# ---------------------------------------------------------------------------
# Typical sites: (ancestry, site id, true slope g/bag)
# ---------------------------------------------------------------------------
_SITES = [
    ("Turkey Creek Allotment > Turkey Creek Pasture", "03-01-01-00112-001-C3", 11.5),
    ("Turkey Creek Allotment > Turkey Creek Pasture", "03-01-01-00112-002-C4", 9.8),
    ("Turkey Creek Allotment > Dry Lake Pasture", "03-01-01-00113-001-K1", 14.2),
    ("Horse Mesa Allotment > North Pasture", "03-01-02-00201-001-C3", 12.1),
    ("Horse Mesa Allotment > South Pasture", "03-01-02-00202-001-K2", 7.6),
]

# Empty bag weight in grams
_BAG_TARE_G = 18.0

# Transects read per site visit
_READINGS_PER_SITE = 5


def generate_comparative_yield(
    survey_date: str = "2025-09-30",
    seed: int = 42,
) -> pd.DataFrame:
    """Generate Comparative Yield observations for every simulated site."""
    rng = np.random.default_rng(seed)
    date = pd.Timestamp(survey_date)
    rows = []

    for ancestry, site_id, _ in _SITES:
        base = rng.uniform(1.5, 4.5)
        for transect in range(1, _READINGS_PER_SITE + 1):
            rows.append({
                CY_DATE_COLUMN: date,
                CY_ANCESTRY_COLUMN: ancestry,
                CY_SITE_ID_COLUMN: site_id,
                "Transect": transect,
                CY_YIELD_VALUE_COLUMN: int(max(rng.normal(base, 1.0), 0) + 0.5),
            })

    return pd.DataFrame(rows)


def fill_production_template(template: pd.DataFrame, seed: int = 42) -> pd.DataFrame:
    """Fill the blank weight columns of a template as a field crew would.

    NET WT. follows the site's true slope through the origin plus noise.
    """
    rng = np.random.default_rng(seed)
    true_slopes = {site_id.rsplit("-", 1)[-1]: slope for _, site_id, slope in _SITES}

    filled = template.copy()
    net = [
        round(max(true_slopes.get(ka, 10.0) * bag + rng.normal(0, 1.5), 0.0), 1)
        for ka, bag in zip(filled["KA"], filled["BAG #"])
    ]
    filled["NET WT."] = net
    filled["Dry WT. (g)"] = [round(n + _BAG_TARE_G, 1) for n in net]
    filled["(-BAG)"] = _BAG_TARE_G
    filled["GW (g)"] = [round((n * 1.6) + _BAG_TARE_G, 1) for n in net]
    return filled


def _to_workbook(sheets: dict[str, pd.DataFrame]) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, sheet_name=name, index=False)
    return buffer.getvalue()


def generate_raw_export(survey_date: str = "2025-09-30", seed: int = 42) -> bytes:
    """RAW export workbook bytes: a summary sheet then Comparative Yield."""
    cy = generate_comparative_yield(survey_date, seed)
    summary = pd.DataFrame({
        "Sites": [cy[CY_SITE_ID_COLUMN].nunique()],
        "Readings": [len(cy)],
        "Bags per site": [len(BAG_NUMBERS)],
    })
    return _to_workbook({"Summary": summary, COMPARATIVE_YIELD_SHEET: cy})


def generate_production_file(cy_rows, seed: int = 42) -> bytes:
    """Filled production file bytes for the site visits in ``cy_rows``."""
    template = build_production_template(cy_rows)
    return _to_workbook({"Production": fill_production_template(template, seed)})
