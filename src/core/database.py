"""
SQLite database operations for planner state and API request logs.
"""

import json
import sqlite3
from pathlib import Path

from core.config import ASSIGNEES, DB_PATH, DEFAULT_VIEW
from models.tasks import Milestone, Task


def get_connection(db_path: Path = DB_PATH) -> sqlite3.Connection:
    """Get a database connection."""
    return sqlite3.connect(db_path)


def create_schema(conn: sqlite3.Connection):
    """Create planner and API logging tables if they don't exist."""
    assignee_list = ", ".join(f"'{name}'" for name in ASSIGNEES)
    cursor = conn.cursor()

    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS tasks (
            id TEXT PRIMARY KEY,
            position INTEGER NOT NULL,
            title TEXT NOT NULL,
            assignee TEXT NOT NULL CHECK(assignee IN ({assignee_list})),
            date TEXT NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            tags TEXT NOT NULL DEFAULT '[]',
            notes TEXT,
            rrule TEXT
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS milestones (
            id TEXT PRIMARY KEY,
            position INTEGER NOT NULL,
            title TEXT NOT NULL,
            target_date TEXT NOT NULL,
            kpi TEXT,
            description TEXT
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS planner_settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS api_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT UNIQUE NOT NULL,
            timestamp TEXT NOT NULL,
            endpoint TEXT NOT NULL,
            method TEXT NOT NULL,
            client_ip TEXT,
            status_code INTEGER NOT NULL,
            error_code TEXT,
            error_message TEXT,
            processing_time_ms INTEGER NOT NULL,
            tasks_evaluated INTEGER,
            warnings_generated INTEGER
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS api_request_details (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT NOT NULL,
            detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'warning')),
            message TEXT NOT NULL,
            FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
        )
    """)

    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)"
    )

    conn.commit()


def save_planner_state(
    conn: sqlite3.Connection,
    tasks: list[Task],
    milestones: list[Milestone],
    view: str,
):
    """
    Replace the stored tasks, milestones and view.

    Warnings are never stored; they are re-derived from the tasks on load.
    """
    with conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM tasks")
        cursor.execute("DELETE FROM milestones")

        for position, task in enumerate(tasks):
            cursor.execute(
                """
                INSERT INTO tasks (
                    id, position, title, assignee, date, start_time,
                    end_time, tags, notes, rrule
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task["id"],
                    position,
                    task["title"],
                    task["assignee"],
                    task["date"],
                    task["start"],
                    task["end"],
                    json.dumps(list(task.get("tags") or [])),
                    task.get("notes"),
                    task.get("rrule"),
                ),
            )

        for position, milestone in enumerate(milestones):
            cursor.execute(
                """
                INSERT INTO milestones (id, position, title, target_date, kpi, description)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    milestone["id"],
                    position,
                    milestone["title"],
                    milestone["targetDate"],
                    milestone.get("kpi", ""),
                    milestone.get("description", ""),
                ),
            )

        cursor.execute(
            "INSERT OR REPLACE INTO planner_settings (key, value) VALUES ('view', ?)",
            (view,),
        )


def load_planner_state(conn: sqlite3.Connection) -> dict:
    """Load tasks, milestones and view. Returns empty collections on a fresh database."""
    cursor = conn.cursor()

    tasks: list[Task] = []
    cursor.execute(
        """
        SELECT id, title, assignee, date, start_time, end_time, tags, notes, rrule
        FROM tasks ORDER BY position
        """
    )
    for row in cursor.fetchall():
        task_id, title, assignee, task_date, start, end, tags, notes, rrule = row
        task: Task = {
            "id": task_id,
            "title": title,
            "assignee": assignee,
            "date": task_date,
            "start": start,
            "end": end,
            "tags": json.loads(tags),
        }
        if notes is not None:
            task["notes"] = notes
        if rrule is not None:
            task["rrule"] = rrule
        tasks.append(task)

    cursor.execute(
        "SELECT id, title, target_date, kpi, description FROM milestones ORDER BY position"
    )
    milestones: list[Milestone] = [
        {
            "id": milestone_id,
            "title": title,
            "targetDate": target_date,
            "kpi": kpi or "",
            "description": description or "",
        }
        for milestone_id, title, target_date, kpi, description in cursor.fetchall()
    ]

    cursor.execute("SELECT value FROM planner_settings WHERE key = 'view'")
    row = cursor.fetchone()
    view = row[0] if row else DEFAULT_VIEW

    return {"tasks": tasks, "milestones": milestones, "view": view}
