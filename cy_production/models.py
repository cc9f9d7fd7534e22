"""
Row types held by a session.

Normalised fields are plain attributes; every column of the source row is
kept untouched in ``extras`` so exports and diagnostics can still reach it.
"""

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass
class YieldRow:
    """One Comparative Yield observation from a RAW export."""

    date: str
    allotment: str
    pasture: str
    ka: str
    n_value: float = math.nan
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> tuple[str, str, str, str]:
        return (self.date, self.allotment, self.pasture, self.ka)

    @property
    def is_usable(self) -> bool:
        """Rows without a DATE or KA are kept but never aggregated."""
        return bool(self.date) and bool(self.ka)


@dataclass
class CalibrationRow:
    """One filled line of the production template."""

    ka: Any
    date: str
    bag_number: float = math.nan
    net_weight: float = math.nan
    extras: dict[str, Any] = field(default_factory=dict)
