"""
Comparative Yield -> Production: command-line pipeline.

Loads RAW exports and filled production files, writes the production
template and the Production (lbs/acre) workbook, and prints summaries.

Usage:
    python main.py --raw RAW1.xlsx RAW2.xlsx --production filled.xlsx
    python main.py --demo
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from cy_production.config import DATA_DIR
from cy_production.calibration import build_slope_table
from cy_production.dashboard import (
    export_production,
    export_template,
    get_dataset_summary,
    upload_production_files,
    upload_raw_files,
)
from cy_production.session import Session
from cy_production.simulator import generate_production_file, generate_raw_export

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def _read_files(paths: list[str]) -> list[tuple[str, bytes]]:
    return [(Path(p).name, Path(p).read_bytes()) for p in paths]


def _write(result, out_dir: Path) -> None:
    print(f"  {result.status}")
    if result.payload is not None:
        target = out_dir / result.filename
        target.write_bytes(result.payload)
        print(f"  -> {target}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--raw", nargs="*", default=[], help="RAW export workbook(s)")
    parser.add_argument(
        "--production", nargs="*", default=[], help="filled production workbook(s)"
    )
    parser.add_argument(
        "--out", type=Path, default=DATA_DIR, help="output directory (default: project root)"
    )
    parser.add_argument(
        "--demo", action="store_true", help="run on simulated RAW and production files"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the full pipeline and print smoke-test outputs."""
    args = parse_args(argv)
    args.out.mkdir(parents=True, exist_ok=True)
    session = Session()

    print("=" * 70)
    print("  COMPARATIVE YIELD -> PRODUCTION (lbs/acre)")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load RAW exports
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING RAW EXPORTS")
    print("-" * 40)

    raw_files = _read_files(args.raw)
    if args.demo:
        raw_files.append(("demo_RAW_export.xlsx", generate_raw_export()))

    upload = upload_raw_files(session, raw_files)
    print(f"  {upload.status}")
    if upload.error:
        return 1

    # ------------------------------------------------------------------
    # 2. Production template
    # ------------------------------------------------------------------
    print("\n[ 2 ] PRODUCTION TEMPLATE")
    print("-" * 40)
    template = export_template(session)
    _write(template, args.out)
    if template.table is not None and not template.table.empty:
        print(template.table.head(9).to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Load filled production files
    # ------------------------------------------------------------------
    print("\n[ 3 ] LOADING PRODUCTION FILES")
    print("-" * 40)

    prod_files = _read_files(args.production)
    if args.demo:
        prod_files.append(("demo_production.xlsx", generate_production_file(session.cy_rows)))

    upload = upload_production_files(session, prod_files)
    print(f"  {upload.status}")
    if upload.error:
        return 1

    summary = get_dataset_summary(session)
    print(
        f"  CY rows: {summary['cy_rows']} ({summary['cy_distinct_kas']} KAs) | "
        f"production rows: {summary['prod_rows']} ({summary['prod_distinct_kas']} KAs)"
    )

    # ------------------------------------------------------------------
    # 4. Production (lbs/acre)
    # ------------------------------------------------------------------
    print("\n[ 4 ] PRODUCTION (lbs/acre)")
    print("-" * 40)

    production = export_production(session)

    slope_table = build_slope_table(session.prod_rows, production.slopes or None)
    if not slope_table.empty:
        print(slope_table.to_string(index=False))
        print()

    _write(production, args.out)
    if production.table is not None and not production.table.empty:
        with pd.option_context("display.width", 120):
            print(production.table.to_string(index=False))

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
