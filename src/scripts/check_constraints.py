#!/usr/bin/env python3
"""
Check a planner JSON export against the scheduling constraints.

Prints every warning grouped by rule. Dismissed warnings are given as
TASK_ID:TYPE pairs and hidden from the output.

Usage:
    uv run python src/scripts/check_constraints.py <export.json>

Example:
    uv run python src/scripts/check_constraints.py output/podas-planner-export.json \
        --dismiss 3f2a...:jannes-hours --strict
"""

import argparse
import sys
from collections import defaultdict
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import WARNING_TYPES
from services.planner import PlannerStore, load_from_json


def parse_dismissal(value: str) -> tuple[str, str]:
    """Parse 'TASK_ID:TYPE' into a dismissal key."""
    task_id, sep, warning_type = value.rpartition(":")
    if not sep or not task_id or warning_type not in WARNING_TYPES:
        raise argparse.ArgumentTypeError(
            f"Expected TASK_ID:TYPE with TYPE one of {', '.join(WARNING_TYPES)}, got '{value}'"
        )
    return task_id, warning_type


def print_warnings(store: PlannerStore):
    """Print warnings grouped by rule type."""
    by_type = defaultdict(list)
    for warning in store.warnings:
        by_type[warning.type].append(warning)

    for warning_type in WARNING_TYPES:
        warnings = by_type.get(warning_type)
        if not warnings:
            continue
        print(f"\n{warning_type} ({len(warnings)})")
        for warning in warnings:
            task = warning.task
            print(
                f"  - {task['date']} {task['start']}-{task['end']} "
                f"{task['assignee']}: {task['title']} [{task['id']}]"
            )
            print(f"    {warning.message}")


def main():
    parser = argparse.ArgumentParser(
        description="Check a planner export against the scheduling constraints"
    )
    parser.add_argument(
        "input_file",
        type=Path,
        help="Path to the planner JSON export",
    )
    parser.add_argument(
        "--dismiss",
        type=parse_dismissal,
        action="append",
        default=[],
        metavar="TASK_ID:TYPE",
        help="Hide a warning (may be repeated)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any warning remains",
    )

    args = parser.parse_args()

    try:
        data = load_from_json(args.input_file)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)

    store = PlannerStore(tasks=data["tasks"], milestones=data["milestones"])
    for task_id, warning_type in args.dismiss:
        store.dismiss_warning(task_id, warning_type)

    print(f"Checked {len(store.tasks)} tasks: {len(store.warnings)} warning(s)")
    print_warnings(store)

    if args.strict and store.warnings:
        sys.exit(1)


if __name__ == "__main__":
    main()
