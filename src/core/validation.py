"""
Task and milestone record validation.

The constraint engine tolerates malformed records; the store does not
accept them in the first place.
"""

import re
from datetime import datetime

from core.config import ASSIGNEES, TASK_TAGS

TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


def is_iso_date(value) -> bool:
    """Check for a YYYY-MM-DD calendar date."""
    if not isinstance(value, str):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def is_time_of_day(value) -> bool:
    """Check for a zero-padded 24-hour HH:MM time."""
    return isinstance(value, str) and TIME_PATTERN.fullmatch(value) is not None


def get_task_label(task: dict) -> str:
    return task.get("title") or task.get("id") or "<untitled>"


def validate_task(task: dict) -> list[str]:
    """
    Validate a task record and return a list of problems.

    Checks:
    1. Title is present
    2. Assignee and tags come from the known sets
    3. Date is YYYY-MM-DD, start/end are HH:MM
    4. Start is before end (no tasks crossing midnight)
    """
    errors = []

    if not isinstance(task.get("title"), str) or not task["title"].strip():
        errors.append("Missing title")

    assignee = task.get("assignee")
    if assignee not in ASSIGNEES:
        errors.append(f"Unknown assignee '{assignee}'")

    tags = task.get("tags", [])
    if not isinstance(tags, list):
        errors.append("Tags must be a list")
    else:
        for tag in tags:
            if tag not in TASK_TAGS:
                errors.append(f"Unknown tag '{tag}'")

    if not is_iso_date(task.get("date")):
        errors.append(f"Invalid date '{task.get('date')}', expected YYYY-MM-DD")

    start = task.get("start")
    end = task.get("end")
    if not is_time_of_day(start):
        errors.append(f"Invalid start time '{start}', expected HH:MM")
    if not is_time_of_day(end):
        errors.append(f"Invalid end time '{end}', expected HH:MM")
    if is_time_of_day(start) and is_time_of_day(end) and start >= end:
        errors.append(f"Start time {start} must be before end time {end}")

    for optional in ("notes", "rrule"):
        value = task.get(optional)
        if value is not None and not isinstance(value, str):
            errors.append(f"'{optional}' must be text")

    return errors


def validate_milestone(milestone: dict) -> list[str]:
    """Validate a milestone record and return a list of problems."""
    errors = []
    if not isinstance(milestone.get("title"), str) or not milestone["title"].strip():
        errors.append("Missing title")
    if not is_iso_date(milestone.get("targetDate")):
        errors.append(
            f"Invalid target date '{milestone.get('targetDate')}', expected YYYY-MM-DD"
        )
    return errors


def validate_planner_data(data) -> list[str]:
    """Validate an import payload of the form {tasks: [...], milestones: [...]}."""
    if not isinstance(data, dict):
        return ["Import data must be an object with 'tasks' and 'milestones'"]

    tasks = data.get("tasks")
    milestones = data.get("milestones", [])
    if not isinstance(tasks, list):
        return ["Import data is missing a 'tasks' list"]
    if not isinstance(milestones, list):
        return ["'milestones' must be a list"]

    errors = []
    seen_ids: set[str] = set()
    seen_milestone_ids: set[str] = set()

    for task in tasks:
        if not isinstance(task, dict):
            errors.append("Every task must be an object")
            continue
        task_id = task.get("id")
        if not task_id:
            errors.append(f"Task '{get_task_label(task)}': Missing id")
        elif task_id in seen_ids:
            errors.append(f"Task '{get_task_label(task)}': Duplicate id '{task_id}'")
        else:
            seen_ids.add(task_id)
        for error in validate_task(task):
            errors.append(f"Task '{get_task_label(task)}': {error}")

    for milestone in milestones:
        if not isinstance(milestone, dict):
            errors.append("Every milestone must be an object")
            continue
        label = milestone.get("title") or milestone.get("id") or "<untitled>"
        milestone_id = milestone.get("id")
        if not milestone_id:
            errors.append(f"Milestone '{label}': Missing id")
        elif milestone_id in seen_milestone_ids:
            errors.append(f"Milestone '{label}': Duplicate id '{milestone_id}'")
        else:
            seen_milestone_ids.add(milestone_id)
        for error in validate_milestone(milestone):
            errors.append(f"Milestone '{label}': {error}")

    return errors
