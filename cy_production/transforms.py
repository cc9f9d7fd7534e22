"""
Data transforms: derive the production template and the Production
(lbs/acre) table from the accumulated session datasets.

Both outputs are keyed by (DATE, ALLOTMENT, PASTURE, KA) and sorted the
same way: ALLOTMENT, PASTURE, DATE, KA.
"""

import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from .calibration import compute_slopes_by_ka
from .config import (
    BAG_NUMBERS,
    KEY_COLUMNS,
    LBS_PER_ACRE_FACTOR,
    PRODUCTION_COLUMNS,
    ROUND_AVG_N_VALUE,
    ROUND_PRODUCTION,
    ROUND_SLOPE,
    TEMPLATE_BLANK_COLUMNS,
    TEMPLATE_COLUMNS,
)
from .loaders.utils import to_rounded_number
from .models import CalibrationRow, YieldRow

logger = logging.getLogger(__name__)

_SORT_ORDER = ["ALLOTMENT", "PASTURE", "DATE", "KA"]


@dataclass
class ProductionResult:
    rows: pd.DataFrame
    missing_kas: list = field(default_factory=list)
    slopes: dict = field(default_factory=dict)


def _sort_by_site(df: pd.DataFrame) -> pd.DataFrame:
    """Sort by ALLOTMENT, PASTURE, DATE, KA, case-insensitively.

    All four keys, DATE and KA included, compare casefolded in the manner of
    a locale-aware comparison, not by raw code point: "c3" and "C3" tie, and
    "b" sorts before "C". The sort is stable, so rows sharing a key keep
    their generated order.
    """
    if df.empty:
        return df
    return df.sort_values(
        by=_SORT_ORDER,
        key=lambda col: col.astype(str).str.casefold(),
    ).reset_index(drop=True)


def build_production_template(cy_rows: list[YieldRow]) -> pd.DataFrame:
    """Expand each distinct site visit into one blank row per bag number.

    A site visit is a distinct (DATE, ALLOTMENT, PASTURE, KA); rows missing
    DATE or KA are ignored. The first occurrence in ingestion order wins,
    so uploading the same rows twice yields the same template.

    Returns
    -------
    DataFrame with TEMPLATE_COLUMNS: DATE, ALLOTMENT, PASTURE, KA, BAG #,
    then blank GW (g), Dry WT. (g), (-BAG), NET WT.
    """
    # dict as an insertion-ordered set of site keys
    site_keys = dict.fromkeys(r.key for r in cy_rows if r.is_usable)

    rows = []
    for date, allotment, pasture, ka in site_keys:
        for bag in BAG_NUMBERS:
            record = {
                "DATE": date,
                "ALLOTMENT": allotment,
                "PASTURE": pasture,
                "KA": ka,
                "BAG #": bag,
            }
            record.update({col: "" for col in TEMPLATE_BLANK_COLUMNS})
            rows.append(record)

    df = pd.DataFrame(rows, columns=TEMPLATE_COLUMNS)
    df = _sort_by_site(df)
    logger.info(
        "Built production template with %d rows for %d site visits", len(df), len(site_keys)
    )
    return df


def average_n_value(cy_rows: list[YieldRow]) -> pd.DataFrame:
    """Mean nValue per (DATE, ALLOTMENT, PASTURE, KA).

    Rows missing DATE or KA, or with a non-numeric nValue, do not count.
    Groups come back in first-seen order with columns KEY_COLUMNS + avg_n.
    """
    records = [
        dict(zip(KEY_COLUMNS, r.key), n_value=r.n_value)
        for r in cy_rows
        if r.is_usable
    ]
    if not records:
        return pd.DataFrame(columns=KEY_COLUMNS + ["avg_n"])

    df = pd.DataFrame(records)
    df = df[np.isfinite(df["n_value"].astype(float))]
    if df.empty:
        return pd.DataFrame(columns=KEY_COLUMNS + ["avg_n"])

    grouped = (
        df.groupby(KEY_COLUMNS, sort=False)["n_value"]
        .mean()
        .rename("avg_n")
        .reset_index()
    )
    return grouped


def compute_production(
    cy_rows: list[YieldRow],
    prod_rows: list[CalibrationRow],
) -> ProductionResult:
    """Join averaged nValue against per-KA slopes into Production (lbs/acre).

    production = slope x avg nValue x LBS_PER_ACRE_FACTOR

    Site visits whose KA has no slope are left out of ``rows`` and their KA
    is reported in ``missing_kas`` (first-seen order). An empty ``rows``
    with no missing KAs means no site visit had a usable nValue at all.

    Returns
    -------
    ProductionResult with rows (PRODUCTION_COLUMNS, rounded for export),
    missing_kas and the unrounded slope table.
    """
    slopes = compute_slopes_by_ka(prod_rows)
    groups = average_n_value(cy_rows)

    # dict as an insertion-ordered set
    missing: dict = {}
    rows = []
    for group in groups.itertuples(index=False):
        slope = slopes.get(group.KA)
        if slope is None or not np.isfinite(slope):
            missing[group.KA] = None
            continue

        production = slope * group.avg_n * LBS_PER_ACRE_FACTOR
        rows.append({
            "DATE": group.DATE,
            "ALLOTMENT": group.ALLOTMENT,
            "PASTURE": group.PASTURE,
            "KA": group.KA,
            "avg nValue": to_rounded_number(group.avg_n, ROUND_AVG_N_VALUE),
            "slope_g_per_bag": to_rounded_number(slope, ROUND_SLOPE),
            "Production (lbs/acre)": to_rounded_number(production, ROUND_PRODUCTION),
        })

    df = _sort_by_site(pd.DataFrame(rows, columns=PRODUCTION_COLUMNS))

    if missing:
        logger.warning("No calibration found for KAs: %s", ", ".join(map(str, missing)))
    logger.info("Computed %d Production (lbs/acre) rows", len(df))

    return ProductionResult(rows=df, missing_kas=list(missing), slopes=slopes)
