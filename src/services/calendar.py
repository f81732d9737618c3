"""
Calendar (.ics) export of planner tasks.

Times are written as floating local times: the planner has no notion of
timezones, so DTSTART/DTEND carry no TZID.
"""

from datetime import datetime, timezone
from pathlib import Path

from icalendar import Calendar, Event, vRecur

from core.validation import get_task_label, is_iso_date, is_time_of_day
from models.tasks import Task

PRODID = "-//Podas Planner//podas-planner//EN"
UID_DOMAIN = "podas-planner"


def parse_rrule(rrule: str) -> vRecur:
    """Parse 'FREQ=WEEKLY;BYDAY=MO' (an 'RRULE:' prefix is allowed)."""
    return vRecur.from_ical(rrule.strip().removeprefix("RRULE:"))


def get_task_times(task: Task) -> tuple[datetime, datetime]:
    """Combine the task date with its start and end times."""
    year, month, day = (int(part) for part in task["date"].split("-"))
    start_hour, start_minute = (int(part) for part in task["start"].split(":"))
    end_hour, end_minute = (int(part) for part in task["end"].split(":"))
    return (
        datetime(year, month, day, start_hour, start_minute),
        datetime(year, month, day, end_hour, end_minute),
    )


def build_description(task: Task) -> str:
    tags = ", ".join(task.get("tags") or [])
    return f"Assignee: {task['assignee']}\nTags: {tags}\n{task.get('notes') or ''}"


def check_exportable(tasks: list[Task]) -> list[str]:
    """Collect problems that would stop a task from becoming a VEVENT."""
    errors = []
    for task in tasks:
        label = get_task_label(task)
        if not is_iso_date(task.get("date")):
            errors.append(f"Task '{label}': invalid date '{task.get('date')}'")
        for field in ("start", "end"):
            if not is_time_of_day(task.get(field)):
                errors.append(f"Task '{label}': invalid {field} time '{task.get(field)}'")
        if task.get("rrule"):
            try:
                parse_rrule(task["rrule"])
            except ValueError:
                errors.append(f"Task '{label}': invalid recurrence rule '{task['rrule']}'")
    return errors


def build_event(task: Task, stamp: datetime) -> Event:
    """Convert a task into a busy, confirmed VEVENT."""
    start, end = get_task_times(task)

    event = Event()
    event.add("uid", f"{task['id']}@{UID_DOMAIN}")
    event.add("dtstamp", stamp)
    event.add("summary", task["title"])
    event.add("description", build_description(task))
    event.add("dtstart", start)
    event.add("dtend", end)
    if task.get("tags"):
        event.add("categories", list(task["tags"]))
    event.add("status", "CONFIRMED")
    event.add("transp", "OPAQUE")
    if task.get("rrule"):
        event.add("rrule", parse_rrule(task["rrule"]))
    return event


def export_to_ics(tasks: list[Task]) -> str:
    """
    Render tasks as an iCalendar document.

    Raises:
        ValueError: listing every task that cannot be converted
    """
    errors = check_exportable(tasks)
    if errors:
        raise ValueError("\n".join(errors))

    calendar = Calendar()
    calendar.add("prodid", PRODID)
    calendar.add("version", "2.0")

    stamp = datetime.now(timezone.utc)
    for task in tasks:
        calendar.add_component(build_event(task, stamp))

    return calendar.to_ical().decode("utf-8")


def save_to_ics(tasks: list[Task], output_path: Path) -> Path:
    """Write the calendar export to disk."""
    ics_content = export_to_ics(tasks)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(ics_content, encoding="utf-8", newline="")
    print(f"Saved calendar to: {output_path} ({len(tasks)} events)")
    return output_path
