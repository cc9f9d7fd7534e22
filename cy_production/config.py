"""
Configuration: domain constants, source/export column names, file paths.

BAG_NUMBERS and LBS_PER_ACRE_FACTOR are fixed by the field protocol and
are not meant to be tuned per run.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths: default output location for the command-line runner
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent

# ---------------------------------------------------------------------------
# Sampling protocol
# ---------------------------------------------------------------------------
# Replicate bag numbers clipped at every site / KA
BAG_NUMBERS: tuple[int, ...] = (1, 3, 5)

# g/bag slope x average nValue -> lbs/acre
LBS_PER_ACRE_FACTOR = 55.7612

# ---------------------------------------------------------------------------
# RAW export (Comparative Yield) columns
# ---------------------------------------------------------------------------
COMPARATIVE_YIELD_SHEET = "Comparative Yield"

CY_DATE_COLUMN = "Date"
CY_ANCESTRY_COLUMN = "Ancestry"
CY_SITE_ID_COLUMN = "SiteID"
CY_YIELD_VALUE_COLUMN = "nValue"

# ---------------------------------------------------------------------------
# Filled production template (calibration) columns
# ---------------------------------------------------------------------------
CAL_KA_COLUMN = "KA"
CAL_DATE_COLUMN = "DATE"
CAL_BAG_COLUMN = "BAG #"
CAL_NET_WEIGHT_COLUMN = "NET WT."

# ---------------------------------------------------------------------------
# Export schemas
# ---------------------------------------------------------------------------
KEY_COLUMNS = ["DATE", "ALLOTMENT", "PASTURE", "KA"]

# Blank measurement columns filled in by hand in the field
TEMPLATE_BLANK_COLUMNS = ["GW (g)", "Dry WT. (g)", "(-BAG)", "NET WT."]

TEMPLATE_COLUMNS = KEY_COLUMNS + ["BAG #"] + TEMPLATE_BLANK_COLUMNS

PRODUCTION_COLUMNS = KEY_COLUMNS + [
    "avg nValue",
    "slope_g_per_bag",
    "Production (lbs/acre)",
]

# Decimal places applied at export time
ROUND_AVG_N_VALUE = 3
ROUND_SLOPE = 4
ROUND_PRODUCTION = 2

TEMPLATE_FILENAME = "CY_ProductionTemplate.xlsx"
TEMPLATE_SHEET = "ProductionTemplate"

PRODUCTION_FILENAME = "CY_Production_lbs_per_acre.xlsx"
PRODUCTION_SHEET = "Production_lbs_acre"
