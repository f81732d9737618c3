"""
Data models for planner tasks, milestones and constraint warnings.

Tasks and milestones are TypedDicts so they can travel as plain dicts
between the store, the JSON files and the database layer.
"""

from dataclasses import dataclass
from typing import Literal, NotRequired, TypedDict

Assignee = Literal["Vincent", "Jannes", "Joy", "Partners"]

TaskTag = Literal[
    "Physical BD",
    "Cold-call",
    "Marketing",
    "Build",
    "Admin",
    "Content",
    "Networking",
    "Tooling",
    "Referral",
    "Audit",
]

WarningType = Literal[
    "vincent-evenings",
    "jannes-hours",
    "jannes-late-evenings",
    "physical-bd-days",
]

View = Literal["day", "week", "month", "timeline"]


class Task(TypedDict):
    """A single scheduled work item."""
    id: str
    title: str
    assignee: Assignee
    date: str  # YYYY-MM-DD
    start: str  # HH:MM
    end: str  # HH:MM
    tags: list[TaskTag]
    notes: NotRequired[str | None]
    rrule: NotRequired[str | None]


class Milestone(TypedDict):
    """Dated goal with a KPI. Not evaluated by the constraint engine."""
    id: str
    title: str
    targetDate: str
    kpi: str
    description: str


class PlannerData(TypedDict):
    """Shape of a JSON export / import."""
    tasks: list[Task]
    milestones: list[Milestone]


@dataclass
class ConstraintWarning:
    """Advisory warning attached to one task by one rule."""

    message: str
    task: Task
    type: WarningType

    @property
    def dismissal_key(self) -> tuple[str, str]:
        return (self.task["id"], self.type)
