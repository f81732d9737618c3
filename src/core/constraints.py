"""
Scheduling constraint checks.

Re-derives the full warning list from the full task list on every call.
Weekly rules bucket tasks by ISO-8601 (year, week); the Physical BD rule
looks at every task regardless of week.
"""

import math
import re
from collections import defaultdict
from collections.abc import Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from core.config import (
    JANNES_HOURS_MESSAGE,
    JANNES_LATE_EVENING_HOUR,
    JANNES_LATE_EVENINGS_MESSAGE,
    JANNES_MAX_WEEKLY_HOURS,
    PHYSICAL_BD_DAYS_MESSAGE,
    PHYSICAL_BD_TAG,
    PHYSICAL_BD_WEEKDAYS,
    VINCENT_EVENINGS_MESSAGE,
    VINCENT_LATE_NIGHT_HOUR,
    VINCENT_MAX_LATE_NIGHTS,
    WORKING_WEEKDAYS,
)
from models.tasks import ConstraintWarning, Task

WeekKey = tuple[int, int]

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


# =============================================================================
# PARSING HELPERS
# =============================================================================


def parse_int(value) -> int | float:
    """
    Parse the leading integer of a string, e.g. '09' -> 9, '7pm' -> 7.

    Returns NaN when there is no leading integer. NaN fails every
    comparison, so a malformed value never satisfies a threshold.
    """
    if not isinstance(value, str):
        return math.nan
    match = _LEADING_INT.match(value)
    if not match:
        return math.nan
    digits = match.group(1)
    # float() saturates to inf where int / 60 would overflow
    return int(digits) if len(digits) <= 15 else float(digits)


def time_component(value, index: int) -> int | float:
    """Return the hour (index 0) or minute (index 1) of an 'HH:MM' string."""
    if not isinstance(value, str):
        return math.nan
    parts = value.split(":")
    if index >= len(parts):
        return math.nan
    return parse_int(parts[index])


def end_hour(task: Task) -> int | float:
    return time_component(task.get("end"), 0)


def parse_task_date(task: Task) -> date | None:
    """Parse the task's ISO date, or None if it is not a valid date."""
    value = task.get("date")
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def get_week_key(task: Task) -> WeekKey | None:
    """ISO-8601 (year, week) of the task date. Dec 31 2024 -> (2025, 1)."""
    task_date = parse_task_date(task)
    if task_date is None:
        return None
    iso = task_date.isocalendar()
    return (iso.year, iso.week)


def task_duration_hours(task: Task) -> float:
    """
    Duration in fractional hours.

    Not clamped: a task ending before it starts has a negative duration.
    """
    start_hour = time_component(task.get("start"), 0)
    start_min = time_component(task.get("start"), 1)
    finish_hour = time_component(task.get("end"), 0)
    finish_min = time_component(task.get("end"), 1)
    return (finish_hour + finish_min / 60) - (start_hour + start_min / 60)


def format_hours(total: float) -> str:
    """One decimal place, halves rounded away from zero (15.25 -> '15.3')."""
    if math.isnan(total):
        return "NaN"
    if math.isinf(total):
        return "Infinity" if total > 0 else "-Infinity"
    return str(Decimal(total).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def group_tasks_by_week(tasks: Sequence[Task]) -> dict[WeekKey, list[Task]]:
    """
    Bucket tasks by ISO week, weeks in first-seen order, tasks in input order.

    Tasks without a valid date are left out.
    """
    tasks_by_week: dict[WeekKey, list[Task]] = defaultdict(list)
    for task in tasks:
        week_key = get_week_key(task)
        if week_key is not None:
            tasks_by_week[week_key].append(task)
    return tasks_by_week


# =============================================================================
# RULES
# =============================================================================


def check_vincent_evenings(week_tasks: list[Task]) -> list[ConstraintWarning]:
    """Vincent: more than 5 tasks ending at 19:00 or later in one week."""
    late_nights = [
        task
        for task in week_tasks
        if task.get("assignee") == "Vincent" and end_hour(task) >= VINCENT_LATE_NIGHT_HOUR
    ]
    if len(late_nights) <= VINCENT_MAX_LATE_NIGHTS:
        return []
    return [
        ConstraintWarning(message=VINCENT_EVENINGS_MESSAGE, task=task, type="vincent-evenings")
        for task in late_nights
    ]


def check_jannes_hours(week_tasks: list[Task]) -> list[ConstraintWarning]:
    """Jannes: more than 15 scheduled hours in one week."""
    jannes_tasks = [task for task in week_tasks if task.get("assignee") == "Jannes"]
    jannes_hours = sum((task_duration_hours(task) for task in jannes_tasks), 0.0)

    # NaN from a malformed time never compares greater
    if not jannes_hours > JANNES_MAX_WEEKLY_HOURS:
        return []

    message = JANNES_HOURS_MESSAGE.format(hours=format_hours(jannes_hours))
    return [
        ConstraintWarning(message=message, task=task, type="jannes-hours")
        for task in jannes_tasks
    ]


def check_jannes_late_evenings(week_tasks: list[Task]) -> list[ConstraintWarning]:
    """Jannes: weekday tasks ending at 21:00 or later."""
    warnings = []
    for task in week_tasks:
        if task.get("assignee") != "Jannes":
            continue
        task_date = parse_task_date(task)
        if task_date is None or task_date.isoweekday() not in WORKING_WEEKDAYS:
            continue
        if end_hour(task) >= JANNES_LATE_EVENING_HOUR:
            warnings.append(
                ConstraintWarning(
                    message=JANNES_LATE_EVENINGS_MESSAGE,
                    task=task,
                    type="jannes-late-evenings",
                )
            )
    return warnings


def check_physical_bd_days(tasks: Sequence[Task]) -> list[ConstraintWarning]:
    """Physical BD tasks belong on Wednesday or Friday. Not bucketed by week."""
    warnings = []
    for task in tasks:
        if PHYSICAL_BD_TAG not in (task.get("tags") or ()):
            continue
        task_date = parse_task_date(task)
        if task_date is None:
            continue
        if task_date.isoweekday() not in PHYSICAL_BD_WEEKDAYS:
            warnings.append(
                ConstraintWarning(
                    message=PHYSICAL_BD_DAYS_MESSAGE,
                    task=task,
                    type="physical-bd-days",
                )
            )
    return warnings


# =============================================================================
# ENTRY POINT
# =============================================================================


def check_constraints(tasks: Sequence[Task]) -> list[ConstraintWarning]:
    """
    Evaluate every scheduling policy against the full task list.

    Output order: for each week (first-seen order) the Vincent evening,
    Jannes hours and Jannes late-evening warnings; then the Physical BD
    warnings for the whole list. Never raises and never mutates `tasks`.
    """
    warnings: list[ConstraintWarning] = []

    for week_tasks in group_tasks_by_week(tasks).values():
        warnings.extend(check_vincent_evenings(week_tasks))
        warnings.extend(check_jannes_hours(week_tasks))
        warnings.extend(check_jannes_late_evenings(week_tasks))

    warnings.extend(check_physical_bd_days(tasks))

    return warnings
