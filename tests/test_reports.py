"""Tests for the Excel workload report."""

from io import BytesIO

from openpyxl import load_workbook

from core.constraints import check_constraints
from services.reports import (
    create_planner_excel_report,
    create_planner_report_bytes,
    create_planner_workbook,
    format_week_label,
)


def jannes_week(make_task) -> list[dict]:
    return [
        make_task(assignee="Jannes", date="2025-01-06", start="09:00", end="17:00"),
        make_task(assignee="Jannes", date="2025-01-07", start="09:00", end="17:30"),
        make_task(assignee="Joy", date="2025-01-08", start="10:00", end="12:00"),
        make_task(assignee="Vincent", date="2025-01-14", start="18:00", end="20:15"),
    ]


class TestWorkbook:
    def test_sheets(self, make_task) -> None:
        tasks = jannes_week(make_task)
        wb = create_planner_workbook(tasks, check_constraints(tasks))
        assert wb.sheetnames == ["Tasks", "Warnings", "Weekly Hours"]

    def test_tasks_sheet(self, make_task) -> None:
        tasks = jannes_week(make_task)
        ws = create_planner_workbook(tasks, check_constraints(tasks))["Tasks"]

        assert ws["A1"].value == "ID"
        assert ws.max_row == len(tasks) + 1
        assert ws["A2"].value == tasks[0]["id"]
        assert ws["C2"].value == "2025-W02"
        assert ws["G3"].value == 8.5
        assert ws["C5"].value == "2025-W03"

    def test_flagged_rows_highlighted(self, make_task) -> None:
        tasks = jannes_week(make_task)
        ws = create_planner_workbook(tasks, check_constraints(tasks))["Tasks"]
        assert ws["A2"].fill.fill_type == "solid"
        assert ws["A4"].fill.fill_type is None

    def test_warnings_sheet(self, make_task) -> None:
        tasks = jannes_week(make_task)
        warnings = check_constraints(tasks)
        ws = create_planner_workbook(tasks, warnings)["Warnings"]

        assert [cell.value for cell in ws[1]] == ["Type", "Date", "Assignee", "Task", "Message"]
        assert ws.max_row == len(warnings) + 1 == 3
        assert ws["A2"].value == "jannes-hours"
        assert ws["E2"].value == "Jannes is scheduled for 16.5 hours this week (>15 hour limit)"

    def test_weekly_hours_sheet(self, make_task) -> None:
        tasks = jannes_week(make_task)
        ws = create_planner_workbook(tasks, check_constraints(tasks))["Weekly Hours"]

        assert [cell.value for cell in ws[1]] == [
            "Week", "Vincent", "Jannes", "Joy", "Partners", "Total"
        ]
        assert [cell.value for cell in ws[2]] == [
            "2025-W02", 0.0, 16.5, 2.0, 0.0, "=SUM(B2:E2)"
        ]
        assert ws["A3"].value == "2025-W03"
        assert ws["B3"].value == 2.25
        assert ws["A4"].value == "Total"
        assert ws["C4"].value == "=SUM(C2:C3)"

    def test_malformed_times_left_blank(self, make_task) -> None:
        tasks = [make_task(start="09:00", end="oops")]
        wb = create_planner_workbook(tasks, check_constraints(tasks))
        assert wb["Tasks"]["G2"].value is None
        assert wb["Weekly Hours"]["D2"].value == 0.0

    def test_empty_plan(self) -> None:
        ws = create_planner_workbook([], [])["Weekly Hours"]
        assert ws["A2"].value == "Total"
        assert ws["F2"].value == 0


class TestReportOutput:
    def test_save_report(self, tmp_path, make_task) -> None:
        path = create_planner_excel_report(jannes_week(make_task), tmp_path / "r" / "plan.xlsx")
        assert load_workbook(path).sheetnames == ["Tasks", "Warnings", "Weekly Hours"]

    def test_report_bytes(self, make_task) -> None:
        content, warning_count = create_planner_report_bytes(jannes_week(make_task))
        assert warning_count == 2
        wb = load_workbook(BytesIO(content))
        assert wb["Warnings"].max_row == 3


def test_format_week_label() -> None:
    assert format_week_label((2025, 1)) == "2025-W01"
    assert format_week_label(None) == ""
