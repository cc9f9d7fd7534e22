"""
Calibration: per-KA bag-weight slopes from filled production files.

Pure functions with no side effects. The fit is ordinary least squares
through the origin (NET WT. = slope x BAG #), so a KA needs at least one
row with a non-zero bag number to get a slope.
"""

import logging

import numpy as np
import pandas as pd

from .models import CalibrationRow

logger = logging.getLogger(__name__)


def _has_ka(ka) -> bool:
    if ka is None:
        return False
    if isinstance(ka, str):
        return ka != ""
    return not pd.isna(ka) and bool(ka)


def _eligible_points(prod_rows: list[CalibrationRow]) -> pd.DataFrame:
    """Rows with a KA and finite BAG # / NET WT., as columns ka, x, y."""
    records = [
        {"ka": r.ka, "x": r.bag_number, "y": r.net_weight}
        for r in prod_rows
        if _has_ka(r.ka)
    ]
    if not records:
        return pd.DataFrame(columns=["ka", "x", "y"])

    df = pd.DataFrame(records)
    finite = np.isfinite(df["x"].astype(float)) & np.isfinite(df["y"].astype(float))
    return df[finite].reset_index(drop=True)


def compute_slopes_by_ka(prod_rows: list[CalibrationRow]) -> dict:
    """Fit NET WT. against BAG # with zero intercept, one slope per KA.

    slope = sum(x*y) / sum(x^2). KAs with no usable rows, or only
    zero-bag rows, are absent from the result rather than mapped to 0/NaN.
    Slopes are unrounded.
    """
    points = _eligible_points(prod_rows)
    if points.empty:
        logger.warning("No usable BAG # / NET WT. rows; no slopes fitted")
        return {}

    points = points.assign(xy=points["x"] * points["y"], x2=points["x"] * points["x"])
    sums = points.groupby("ka", sort=False)[["xy", "x2"]].sum()

    slopes = {}
    for ka, row in sums.iterrows():
        if row["x2"] > 0:
            slopes[ka] = row["xy"] / row["x2"]

    dropped = len(sums) - len(slopes)
    if dropped:
        logger.warning("%d KA(s) had only zero bag numbers and got no slope", dropped)

    logger.info("Fitted slopes for %d KA(s)", len(slopes))
    return slopes


def build_slope_table(prod_rows: list[CalibrationRow], slopes: dict | None = None) -> pd.DataFrame:
    """Diagnostic table: one row per KA with point count and fitted slope.

    Returns
    -------
    DataFrame with columns: KA, n_points, slope_g_per_bag
    (slope is NaN for KAs that could not be fitted).
    """
    if slopes is None:
        slopes = compute_slopes_by_ka(prod_rows)

    points = _eligible_points(prod_rows)
    if points.empty:
        return pd.DataFrame(columns=["KA", "n_points", "slope_g_per_bag"])

    counts = points.groupby("ka", sort=False).size()
    table = pd.DataFrame({
        "KA": counts.index,
        "n_points": counts.values,
        "slope_g_per_bag": [slopes.get(ka, np.nan) for ka in counts.index],
    })
    return table
