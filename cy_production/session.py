"""
Session state: the two accumulated datasets for one user session.

The host (Streamlit app or CLI run) owns a Session and passes it into each
operation. Uploads only ever append; nothing is de-duplicated across
uploads, so loading the same file twice doubles its rows.
"""

import logging
from dataclasses import dataclass, field

from .loaders import Workbook, parse_comparative_yield, parse_production_file
from .models import CalibrationRow, YieldRow

logger = logging.getLogger(__name__)


@dataclass
class Session:
    cy_rows: list[YieldRow] = field(default_factory=list)
    prod_rows: list[CalibrationRow] = field(default_factory=list)

    @property
    def cy_distinct_kas(self) -> int:
        return len({r.ka for r in self.cy_rows if r.ka})

    @property
    def prod_distinct_kas(self) -> int:
        return len({r.ka for r in self.prod_rows if r.ka})

    def reset(self) -> None:
        """Drop both datasets (the host's "start over" action)."""
        self.cy_rows.clear()
        self.prod_rows.clear()
        logger.info("Session cleared")


def ingest_yield_workbook(session: Session, workbook: Workbook, name: str = "") -> int:
    """Append the workbook's Comparative Yield rows to the session.

    A workbook without the sheet is skipped (logged by the loader) and the
    session is left untouched. Returns the session's total CY row count.
    """
    rows = parse_comparative_yield(workbook, name)
    if rows is not None:
        session.cy_rows.extend(rows)
    return len(session.cy_rows)


def ingest_calibration_workbook(session: Session, workbook: Workbook, name: str = "") -> int:
    """Append the first sheet's production rows to the session.

    Returns the session's total production row count.
    """
    session.prod_rows.extend(parse_production_file(workbook, name))
    return len(session.prod_rows)
