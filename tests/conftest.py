"""
Pytest configuration and shared fixtures.
"""

import itertools
import sqlite3
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from core.database import create_schema  # noqa: E402


@pytest.fixture
def make_task():
    """Factory for task dicts with sensible defaults and unique ids."""
    counter = itertools.count(1)

    def _make_task(**overrides) -> dict:
        task = {
            "id": f"task-{next(counter)}",
            "title": "Client follow-up",
            "assignee": "Joy",
            "date": "2025-01-08",  # Wednesday
            "start": "09:00",
            "end": "10:00",
            "tags": [],
        }
        task.update(overrides)
        return task

    return _make_task


@pytest.fixture
def sample_task(make_task):
    """Sample task dictionary for testing."""
    return make_task(
        title="Pitch at the co-working space",
        assignee="Vincent",
        date="2025-01-08",
        start="17:00",
        end="19:30",
        tags=["Physical BD", "Networking"],
        notes="Bring flyers",
    )


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Path to a fresh planner database with all tables."""
    path = tmp_path / "podas-planner.db"
    conn = sqlite3.connect(path)
    try:
        create_schema(conn)
    finally:
        conn.close()
    return path


@pytest.fixture
def db_conn(db_path):
    conn = sqlite3.connect(db_path)
    yield conn
    conn.close()
