"""Tests for the .xlsx codec."""

from datetime import datetime

import pytest

from cy_production.loaders.workbook import WorkbookReadError, read_workbook


def test_read_workbook_keeps_sheet_order_and_types(xlsx):
    data = xlsx({
        "First": [["A", "B"], [1, "x"]],
        "Second": [["Date"], [datetime(2025, 9, 30)]],
    })

    workbook = read_workbook(data, "sample.xlsx")

    assert list(workbook) == ["First", "Second"]
    assert workbook["First"] == [{"A": 1, "B": "x"}]
    assert workbook["Second"][0]["Date"] == datetime(2025, 9, 30)


def test_read_workbook_blank_cells_and_rows(xlsx):
    data = xlsx({"S": [["A", "B"], [1, None], [None, None], [None, 2]]})

    rows = read_workbook(data)["S"]

    assert rows == [{"A": 1, "B": None}, {"A": None, "B": 2}]


def test_read_workbook_names_blank_and_duplicate_headers(xlsx):
    data = xlsx({"S": [["A", "A", None], [1, 2, 3]]})

    rows = read_workbook(data)["S"]

    assert rows == [{"A": 1, "A_1": 2, "__EMPTY": 3}]


def test_read_workbook_rejects_garbage():
    with pytest.raises(WorkbookReadError, match="broken.xlsx"):
        read_workbook(b"definitely not a zip file", "broken.xlsx")
