"""Shared fixtures: in-memory workbooks and row builders."""

import io
import math
from datetime import datetime

import openpyxl
import pytest

from cy_production.models import CalibrationRow, YieldRow


def build_xlsx(sheets: dict[str, list[list]]) -> bytes:
    """Write ``{sheet_name: [header, *rows]}`` to .xlsx bytes."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx():
    return build_xlsx


@pytest.fixture
def raw_export_bytes():
    return build_xlsx({
        "Summary": [["Sites"], [2]],
        "Comparative Yield": [
            ["Date", "Ancestry", "SiteID", "nValue"],
            [datetime(2025, 9, 30), "Turkey Creek Allotment > Turkey Creek Pasture",
             "03-01-01-00112-001-C3", 2],
            [datetime(2025, 9, 30), "Turkey Creek Allotment > Turkey Creek Pasture",
             "03-01-01-00112-001-C3", 4],
            [datetime(2025, 9, 30), "Horse Mesa Allotment > North Pasture",
             "03-01-02-00201-001-K2", 3],
        ],
    })


@pytest.fixture
def production_bytes():
    return build_xlsx({
        "ProductionTemplate": [
            ["DATE", "ALLOTMENT", "PASTURE", "KA", "BAG #", "GW (g)", "Dry WT. (g)",
             "(-BAG)", "NET WT."],
            ["2025-09-30", "Turkey Creek", "Turkey Creek", "C3", 1, 40, 28, 18, 10],
            ["2025-09-30", "Turkey Creek", "Turkey Creek", "C3", 3, 80, 48, 18, 30],
            ["2025-09-30", "Turkey Creek", "Turkey Creek", "C3", 5, 120, 68, 18, 50],
        ],
    })


def yield_row(ka="C3", date="2025-09-30", allotment="Turkey Creek",
              pasture="Turkey Creek", n_value=2.0, **extras) -> YieldRow:
    return YieldRow(
        date=date, allotment=allotment, pasture=pasture, ka=ka,
        n_value=n_value, extras=extras,
    )


def cal_row(ka="C3", bag=1, net=10.0, date="2025-09-30") -> CalibrationRow:
    return CalibrationRow(
        ka=ka, date=date,
        bag_number=math.nan if bag is None else float(bag),
        net_weight=math.nan if net is None else float(net),
    )
