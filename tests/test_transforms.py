"""Tests for the production template and Production (lbs/acre) transforms."""

import math

import pandas as pd

from cy_production.config import PRODUCTION_COLUMNS, TEMPLATE_COLUMNS
from cy_production.transforms import (
    average_n_value,
    build_production_template,
    compute_production,
)

from conftest import cal_row, yield_row

CALIBRATED_U = [cal_row("U", 1, 10), cal_row("U", 3, 30), cal_row("U", 5, 50)]


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------

def test_template_three_rows_per_site_visit():
    rows = [
        yield_row(ka="C3", allotment="Turkey Creek", pasture="Turkey Creek"),
        yield_row(ka="K2", allotment="Horse Mesa", pasture="North"),
    ]

    template = build_production_template(rows)

    assert list(template.columns) == TEMPLATE_COLUMNS
    assert len(template) == 6
    # Horse Mesa sorts before Turkey Creek; bags keep 1, 3, 5 order
    assert template["KA"].tolist() == ["K2"] * 3 + ["C3"] * 3
    assert template["BAG #"].tolist() == [1, 3, 5, 1, 3, 5]
    assert (template[["GW (g)", "Dry WT. (g)", "(-BAG)", "NET WT."]] == "").all().all()


def test_template_deduplicates_site_visits():
    row = yield_row()
    single = build_production_template([row])
    doubled = build_production_template([row, yield_row(n_value=9.0)])

    pd.testing.assert_frame_equal(single, doubled)
    assert len(single) == 3


def test_template_ignores_rows_without_date_or_ka():
    rows = [yield_row(ka=""), yield_row(date=""), yield_row(ka="C3")]
    template = build_production_template(rows)
    assert template["KA"].unique().tolist() == ["C3"]
    assert len(template) == 3


def test_template_sort_order():
    rows = [
        yield_row(ka="B", allotment="beta", pasture="p", date="2025-09-02"),
        yield_row(ka="A", allotment="beta", pasture="p", date="2025-09-02"),
        yield_row(ka="A", allotment="beta", pasture="p", date="2025-09-01"),
        yield_row(ka="Z", allotment="Alpha", pasture="z"),
    ]

    template = build_production_template(rows)
    visits = template.drop_duplicates(subset=["DATE", "ALLOTMENT", "PASTURE", "KA"])

    assert list(zip(visits["ALLOTMENT"], visits["DATE"], visits["KA"])) == [
        ("Alpha", "2025-09-30", "Z"),
        ("beta", "2025-09-01", "A"),
        ("beta", "2025-09-02", "A"),
        ("beta", "2025-09-02", "B"),
    ]


def test_template_date_and_ka_sort_ignore_case():
    rows = [
        yield_row(ka="b", date="2025-09-30"),
        yield_row(ka="C", date="2025-09-30"),
        yield_row(ka="a", date="2025-09-30"),
        yield_row(ka="a", date="2025-Sep-01"),
        yield_row(ka="a", date="2025-sep-02"),
    ]

    visits = build_production_template(rows).drop_duplicates(subset=["DATE", "KA"])

    assert list(zip(visits["DATE"], visits["KA"])) == [
        ("2025-09-30", "a"),
        ("2025-09-30", "b"),
        ("2025-09-30", "C"),
        ("2025-Sep-01", "a"),
        ("2025-sep-02", "a"),
    ]


def test_template_empty_input():
    template = build_production_template([])
    assert template.empty
    assert list(template.columns) == TEMPLATE_COLUMNS


# ---------------------------------------------------------------------------
# Production
# ---------------------------------------------------------------------------

def test_average_n_value_skips_non_numeric():
    rows = [yield_row(n_value=2.0), yield_row(n_value=math.nan), yield_row(n_value=4.0)]
    groups = average_n_value(rows)
    assert len(groups) == 1
    assert groups.loc[0, "avg_n"] == 3.0


def test_production_value_and_rounding():
    """slope 10 x avg 2.0 x 55.7612 = 1115.224 -> 1115.22."""
    result = compute_production([yield_row(ka="U", n_value=2.0)], CALIBRATED_U)

    assert list(result.rows.columns) == PRODUCTION_COLUMNS
    assert len(result.rows) == 1
    row = result.rows.iloc[0]
    assert row["avg nValue"] == 2.0
    assert row["slope_g_per_bag"] == 10.0
    assert row["Production (lbs/acre)"] == 1115.22
    assert result.missing_kas == []
    assert result.slopes == {"U": 10.0}


def test_production_rounds_each_column():
    rows = [yield_row(ka="U", n_value=1.0), yield_row(ka="U", n_value=1.0),
            yield_row(ka="U", n_value=2.0)]
    cal = [cal_row("U", 3, 10)]

    row = compute_production(rows, cal).rows.iloc[0]

    assert row["avg nValue"] == 1.333
    assert row["slope_g_per_bag"] == 3.3333
    # (10 / 3) x (4 / 3) x 55.7612 = 247.8275...
    assert row["Production (lbs/acre)"] == 247.83


def test_missing_calibration_is_reported_not_output():
    rows = [yield_row(ka="U", n_value=2.0), yield_row(ka="X", n_value=5.0)]

    result = compute_production(rows, CALIBRATED_U)

    assert result.missing_kas == ["X"]
    assert result.rows["KA"].tolist() == ["U"]


def test_no_overlap_gives_empty_rows():
    result = compute_production([yield_row(ka="X")], CALIBRATED_U)

    assert result.rows.empty
    assert list(result.rows.columns) == PRODUCTION_COLUMNS
    assert result.missing_kas == ["X"]


def test_groups_without_numeric_n_value_are_not_reported():
    result = compute_production([yield_row(ka="X", n_value=math.nan)], CALIBRATED_U)

    assert result.rows.empty
    assert result.missing_kas == []


def test_groups_split_by_date_and_pasture():
    rows = [
        yield_row(ka="U", date="2025-09-30", pasture="North", n_value=2.0),
        yield_row(ka="U", date="2025-10-01", pasture="North", n_value=4.0),
        yield_row(ka="U", date="2025-09-30", pasture="South", n_value=6.0),
    ]

    result = compute_production(rows, CALIBRATED_U)

    assert len(result.rows) == 3
    assert result.rows["PASTURE"].tolist() == ["North", "North", "South"]
    assert result.rows["avg nValue"].tolist() == [2.0, 4.0, 6.0]
