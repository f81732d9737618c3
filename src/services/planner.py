"""
Planner store: tasks, milestones, the active view and the current warnings.

Every task mutation re-runs the constraint checks over the full task list
and replaces the warning list. Dismissals only filter the current list;
they are not remembered, so a dismissed warning whose condition still
holds comes back after the next mutation.
"""

import copy
import json
import sqlite3
import uuid
from pathlib import Path

from core.config import DEFAULT_VIEW, VIEWS
from core.constraints import check_constraints
from core.database import load_planner_state, save_planner_state
from core.validation import validate_milestone, validate_planner_data, validate_task
from models.tasks import ConstraintWarning, Milestone, PlannerData, Task


class PlannerStore:
    """In-memory planner state with constraint re-evaluation."""

    def __init__(
        self,
        tasks: list[Task] | None = None,
        milestones: list[Milestone] | None = None,
        view: str = DEFAULT_VIEW,
    ):
        self.tasks: list[Task] = copy.deepcopy(list(tasks or []))
        self.milestones: list[Milestone] = copy.deepcopy(list(milestones or []))
        self.view = view
        self.warnings: list[ConstraintWarning] = check_constraints(self.tasks)

    def _set_tasks(self, tasks: list[Task]):
        self.tasks = tasks
        self.warnings = check_constraints(tasks)

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def add_task(self, task_data: dict) -> Task:
        """Validate and append a task with a fresh id. Returns the stored task."""
        task = {"tags": [], **copy.deepcopy(task_data), "id": str(uuid.uuid4())}
        errors = validate_task(task)
        if errors:
            raise ValueError("\n".join(errors))

        self._set_tasks([*self.tasks, task])
        return task

    def update_task(self, task_id: str, updates: dict) -> Task | None:
        """
        Merge updates into a task. The id itself cannot be changed.

        Returns the updated task, or None when no task has this id.
        """
        changes = {key: value for key, value in copy.deepcopy(updates).items() if key != "id"}
        updated = None
        new_tasks = []

        for task in self.tasks:
            if task["id"] == task_id:
                updated = {**task, **changes}
                errors = validate_task(updated)
                if errors:
                    raise ValueError("\n".join(errors))
                new_tasks.append(updated)
            else:
                new_tasks.append(task)

        self._set_tasks(new_tasks)
        return updated

    def delete_task(self, task_id: str) -> bool:
        """Remove a task. Returns True if it existed."""
        new_tasks = [task for task in self.tasks if task["id"] != task_id]
        deleted = len(new_tasks) != len(self.tasks)
        self._set_tasks(new_tasks)
        return deleted

    # -------------------------------------------------------------------------
    # Milestones
    # -------------------------------------------------------------------------

    def add_milestone(self, milestone_data: dict) -> Milestone:
        milestone = {
            "kpi": "",
            "description": "",
            **copy.deepcopy(milestone_data),
            "id": str(uuid.uuid4()),
        }
        errors = validate_milestone(milestone)
        if errors:
            raise ValueError("\n".join(errors))

        self.milestones = [*self.milestones, milestone]
        return milestone

    def update_milestone(self, milestone_id: str, updates: dict) -> Milestone | None:
        changes = {key: value for key, value in copy.deepcopy(updates).items() if key != "id"}
        updated = None
        new_milestones = []

        for milestone in self.milestones:
            if milestone["id"] == milestone_id:
                updated = {**milestone, **changes}
                errors = validate_milestone(updated)
                if errors:
                    raise ValueError("\n".join(errors))
                new_milestones.append(updated)
            else:
                new_milestones.append(milestone)

        self.milestones = new_milestones
        return updated

    def delete_milestone(self, milestone_id: str) -> bool:
        new_milestones = [m for m in self.milestones if m["id"] != milestone_id]
        deleted = len(new_milestones) != len(self.milestones)
        self.milestones = new_milestones
        return deleted

    # -------------------------------------------------------------------------
    # View, import/export, dismissals
    # -------------------------------------------------------------------------

    def set_view(self, view: str):
        if view not in VIEWS:
            raise ValueError(f"Unknown view '{view}', expected one of: {', '.join(VIEWS)}")
        self.view = view

    def import_data(self, data: PlannerData):
        """Replace all tasks and milestones after validating the whole payload."""
        errors = validate_planner_data(data)
        if errors:
            raise ValueError("\n".join(errors))

        self.milestones = copy.deepcopy(data.get("milestones", []))
        self._set_tasks([{"tags": [], **task} for task in copy.deepcopy(data["tasks"])])

    def export_data(self) -> PlannerData:
        return {
            "tasks": copy.deepcopy(self.tasks),
            "milestones": copy.deepcopy(self.milestones),
        }

    def dismiss_warning(self, task_id: str, warning_type: str):
        """Hide every current warning with this (task id, type) key."""
        self.warnings = [
            warning
            for warning in self.warnings
            if warning.dismissal_key != (task_id, warning_type)
        ]

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self, conn: sqlite3.Connection):
        save_planner_state(conn, self.tasks, self.milestones, self.view)

    @classmethod
    def load(cls, conn: sqlite3.Connection) -> "PlannerStore":
        state = load_planner_state(conn)
        return cls(tasks=state["tasks"], milestones=state["milestones"], view=state["view"])


# =============================================================================
# JSON FILES
# =============================================================================


def save_to_json(data: PlannerData, output_path: Path) -> Path:
    """Write {tasks, milestones} as indented JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    print(f"Saved JSON export to: {output_path}")
    return output_path


def load_from_json(input_file: Path) -> PlannerData:
    """
    Read and validate a JSON export.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file is not valid JSON or fails validation
    """
    if not input_file.exists():
        raise FileNotFoundError(f"Input file not found: {input_file}")

    try:
        data = json.loads(input_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {input_file}: {e}") from e

    errors = validate_planner_data(data)
    if errors:
        raise ValueError("\n".join(errors))

    return {"tasks": data["tasks"], "milestones": data.get("milestones", [])}
