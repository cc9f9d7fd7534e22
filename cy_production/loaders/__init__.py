"""Data ingestion loaders for RAW exports and filled production files."""

from .workbook import Workbook, WorkbookReadError, read_workbook
from .comparative_yield import parse_comparative_yield
from .production_file import parse_production_file

__all__ = [
    "Workbook",
    "WorkbookReadError",
    "read_workbook",
    "parse_comparative_yield",
    "parse_production_file",
]
