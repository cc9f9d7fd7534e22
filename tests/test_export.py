"""Tests for the .xlsx exporter."""

import pandas as pd

from cy_production.config import TEMPLATE_COLUMNS
from cy_production.export import to_xlsx_bytes
from cy_production.loaders import read_workbook


def test_empty_frame_is_not_exported():
    assert to_xlsx_bytes(pd.DataFrame(columns=TEMPLATE_COLUMNS), "ProductionTemplate") is None
    assert to_xlsx_bytes(None) is None


def test_export_single_sheet_with_exact_columns():
    df = pd.DataFrame([{"DATE": "2025-09-30", "KA": "C3", "value": 1.5}])

    payload = to_xlsx_bytes(df, "Production_lbs_acre")
    workbook = read_workbook(payload)

    assert list(workbook) == ["Production_lbs_acre"]
    assert workbook["Production_lbs_acre"] == [{"DATE": "2025-09-30", "KA": "C3", "value": 1.5}]
