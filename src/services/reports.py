"""
Excel workload report: tasks, constraint warnings and weekly hours per assignee.
"""

import math
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from core.config import ASSIGNEES, TASK_HEADERS, WARNING_HEADERS
from core.constraints import (
    WeekKey,
    check_constraints,
    get_week_key,
    group_tasks_by_week,
    task_duration_hours,
)
from models.tasks import ConstraintWarning, Task

WARNING_FILL = PatternFill(start_color="FFF4CE", end_color="FFF4CE", fill_type="solid")


def format_week_label(week_key: WeekKey | None) -> str:
    """Format an ISO week key as '2025-W01'."""
    if week_key is None:
        return ""
    year, week = week_key
    return f"{year}-W{week:02d}"


def get_report_hours(task: Task) -> float | None:
    """Duration rounded for display, or None when the times are malformed."""
    hours = task_duration_hours(task)
    return round(hours, 2) if math.isfinite(hours) else None


def write_header_row(ws, headers: list[str]):
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)


def write_tasks_sheet(ws, tasks: list[Task], flagged_ids: set[str]):
    """
    Write one row per task. Tasks with at least one warning are highlighted.
    """
    write_header_row(ws, TASK_HEADERS)

    for row_idx, task in enumerate(tasks, start=2):
        row_data = [
            task.get("id", ""),
            task.get("date", ""),
            format_week_label(get_week_key(task)),
            task.get("assignee", ""),
            task.get("start", ""),
            task.get("end", ""),
            get_report_hours(task),
            task.get("title", ""),
            ", ".join(task.get("tags") or []),
            task.get("notes") or "",
        ]
        for col_idx, value in enumerate(row_data, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if task.get("id") in flagged_ids:
                cell.fill = WARNING_FILL


def write_warnings_sheet(ws, warnings: list[ConstraintWarning]):
    write_header_row(ws, WARNING_HEADERS)

    for row_idx, warning in enumerate(warnings, start=2):
        row_data = [
            warning.type,
            warning.task.get("date", ""),
            warning.task.get("assignee", ""),
            warning.task.get("title", ""),
            warning.message,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def write_weekly_hours_sheet(ws, tasks: list[Task]):
    """
    Write the weekly hours matrix.

    Structure:
    Row 1: Headers - Week | Vincent | Jannes | Joy | Partners | Total
    Rows 2..n: one ISO week each (chronological), Total = SUM of the row
    Last row: Total - SUM of each column
    """
    headers = ["Week"] + list(ASSIGNEES) + ["Total"]
    write_header_row(ws, headers)

    tasks_by_week = group_tasks_by_week(tasks)
    weeks = sorted(tasks_by_week)

    first_col = get_column_letter(2)
    last_col = get_column_letter(len(ASSIGNEES) + 1)
    total_col = len(ASSIGNEES) + 2

    for row_idx, week_key in enumerate(weeks, start=2):
        ws.cell(row=row_idx, column=1, value=format_week_label(week_key))

        hours_by_assignee = {assignee: 0.0 for assignee in ASSIGNEES}
        for task in tasks_by_week[week_key]:
            hours = task_duration_hours(task)
            if task.get("assignee") in hours_by_assignee and math.isfinite(hours):
                hours_by_assignee[task["assignee"]] += hours

        for col_idx, assignee in enumerate(ASSIGNEES, start=2):
            ws.cell(row=row_idx, column=col_idx, value=round(hours_by_assignee[assignee], 2))
        ws.cell(
            row=row_idx,
            column=total_col,
            value=f"=SUM({first_col}{row_idx}:{last_col}{row_idx})",
        )

    total_row = len(weeks) + 2
    ws.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
    for col_idx in range(2, total_col + 1):
        col_letter = get_column_letter(col_idx)
        ws.cell(
            row=total_row,
            column=col_idx,
            value=f"=SUM({col_letter}2:{col_letter}{total_row - 1})" if weeks else 0,
        )


def create_planner_workbook(tasks: list[Task], warnings: list[ConstraintWarning]) -> Workbook:
    """
    Create the workload workbook with three sheets.

    Sheet 1: "Tasks" - every task, flagged rows highlighted
    Sheet 2: "Warnings" - one row per constraint warning
    Sheet 3: "Weekly Hours" - ISO week x assignee hour totals
    """
    wb = Workbook()

    ws_tasks = wb.active
    ws_tasks.title = "Tasks"
    flagged_ids = {warning.task.get("id") for warning in warnings}
    write_tasks_sheet(ws_tasks, tasks, flagged_ids)

    ws_warnings = wb.create_sheet(title="Warnings")
    write_warnings_sheet(ws_warnings, warnings)

    ws_hours = wb.create_sheet(title="Weekly Hours")
    write_weekly_hours_sheet(ws_hours, tasks)

    return wb


def create_planner_excel_report(tasks: list[Task], output_path: Path) -> Path:
    """Evaluate constraints and save the workbook."""
    warnings = check_constraints(tasks)
    wb = create_planner_workbook(tasks, warnings)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path} ({len(warnings)} warnings)")
    return output_path


def create_planner_report_bytes(tasks: list[Task]) -> tuple[bytes, int]:
    """
    Evaluate constraints and return the workbook as bytes (for API usage).

    Returns:
        Tuple of (xlsx bytes, warning count)
    """
    warnings = check_constraints(tasks)
    wb = create_planner_workbook(tasks, warnings)

    output = BytesIO()
    wb.save(output)
    return output.getvalue(), len(warnings)
