"""Pydantic request models for API endpoints."""

from pydantic import BaseModel

from models.tasks import Assignee, Task, TaskTag, WarningType


class TaskModel(BaseModel):
    """
    Task as sent by clients.

    Date and time fields are plain strings: malformed values are reported
    by the export endpoints and ignored by the constraint check.
    """

    id: str
    title: str
    assignee: Assignee
    date: str  # YYYY-MM-DD
    start: str  # HH:MM
    end: str  # HH:MM
    tags: list[TaskTag] = []
    notes: str | None = None
    rrule: str | None = None

    def to_task(self) -> Task:
        return self.model_dump(exclude_none=True)


class DismissalKey(BaseModel):
    """A warning the client has dismissed."""

    task_id: str
    type: WarningType


class ConstraintCheckRequest(BaseModel):
    tasks: list[TaskModel]
    dismissed: list[DismissalKey] = []


class TasksRequest(BaseModel):
    tasks: list[TaskModel]
