#!/usr/bin/env python3
"""
Export a planner JSON export as an iCalendar file and/or an Excel workload report.

Usage:
    uv run python src/scripts/export_plan.py <export.json> [--ics PATH] [--xlsx PATH]

With neither option, both files are written to output/.
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import EXCEL_REPORT_NAME, ICS_EXPORT_NAME, OUTPUT_DIR
from services.calendar import save_to_ics
from services.planner import load_from_json
from services.reports import create_planner_excel_report


def main():
    parser = argparse.ArgumentParser(
        description="Export planner tasks to .ics and/or .xlsx"
    )
    parser.add_argument(
        "input_file",
        type=Path,
        help="Path to the planner JSON export",
    )
    parser.add_argument("--ics", type=Path, help="Calendar output path")
    parser.add_argument("--xlsx", type=Path, help="Excel report output path")

    args = parser.parse_args()

    ics_path = args.ics
    xlsx_path = args.xlsx
    if ics_path is None and xlsx_path is None:
        ics_path = OUTPUT_DIR / ICS_EXPORT_NAME
        xlsx_path = OUTPUT_DIR / EXCEL_REPORT_NAME

    try:
        data = load_from_json(args.input_file)
        print(f"Loaded {len(data['tasks'])} tasks, {len(data['milestones'])} milestones")

        if ics_path is not None:
            save_to_ics(data["tasks"], ics_path)
        if xlsx_path is not None:
            create_planner_excel_report(data["tasks"], xlsx_path)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
