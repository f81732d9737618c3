"""Tests for the planner store, persistence and JSON files."""

import json
import sqlite3

import pytest

from core.database import save_planner_state
from services.planner import PlannerStore, load_from_json, save_to_json

MONDAY = "2025-01-06"
WEDNESDAY = "2025-01-08"
WEEK_DAYS = ["2025-01-06", "2025-01-07", "2025-01-08", "2025-01-09", "2025-01-10", "2025-01-11"]


def task_data(**overrides) -> dict:
    data = {
        "title": "Evening session",
        "assignee": "Vincent",
        "date": MONDAY,
        "start": "17:00",
        "end": "19:30",
        "tags": [],
    }
    data.update(overrides)
    return data


@pytest.fixture
def store() -> PlannerStore:
    return PlannerStore()


class TestTasks:
    def test_new_store_is_empty(self, store) -> None:
        assert store.tasks == []
        assert store.milestones == []
        assert store.warnings == []
        assert store.view == "week"

    def test_add_task_assigns_id(self, store) -> None:
        task = store.add_task(task_data(id="ignored"))
        assert task["id"] != "ignored"
        assert store.tasks == [task]

    def test_add_task_defaults_tags(self, store) -> None:
        data = task_data()
        del data["tags"]
        assert store.add_task(data)["tags"] == []

    def test_add_invalid_task_raises(self, store) -> None:
        with pytest.raises(ValueError) as exc_info:
            store.add_task(task_data(assignee="Bob", start="20:00", end="19:00"))
        assert str(exc_info.value).split("\n") == [
            "Unknown assignee 'Bob'",
            "Start time 20:00 must be before end time 19:00",
        ]
        assert store.tasks == []

    def test_every_mutation_re_evaluates(self, store) -> None:
        for day in WEEK_DAYS[:5]:
            store.add_task(task_data(date=day))
        assert store.warnings == []

        sixth = store.add_task(task_data(date=WEEK_DAYS[5]))
        assert len(store.warnings) == 6

        store.update_task(sixth["id"], {"end": "18:00"})
        assert store.warnings == []

        store.update_task(sixth["id"], {"end": "20:00"})
        assert len(store.warnings) == 6

        store.delete_task(sixth["id"])
        assert store.warnings == []

    def test_update_task_keeps_id(self, store) -> None:
        task = store.add_task(task_data(tags=["Physical BD"]))
        assert [w.type for w in store.warnings] == ["physical-bd-days"]

        updated = store.update_task(task["id"], {"id": "other", "date": WEDNESDAY})
        assert updated["id"] == task["id"]
        assert updated["date"] == WEDNESDAY
        assert store.warnings == []

    def test_update_unknown_task(self, store) -> None:
        store.add_task(task_data())
        assert store.update_task("missing", {"title": "x"}) is None
        assert len(store.tasks) == 1

    def test_invalid_update_leaves_store_unchanged(self, store) -> None:
        task = store.add_task(task_data())
        with pytest.raises(ValueError):
            store.update_task(task["id"], {"start": "21:00"})
        assert store.tasks == [task]

    def test_caller_changes_do_not_reach_store(self, store) -> None:
        data = task_data(tags=[])
        store.add_task(data)
        data["tags"].append("Physical BD")

        assert store.tasks[0]["tags"] == []
        assert store.warnings == []

    def test_update_copies_values(self, store) -> None:
        task = store.add_task(task_data())
        updates = {"tags": ["Admin"]}
        store.update_task(task["id"], updates)
        updates["tags"].append("Physical BD")

        assert store.tasks[0]["tags"] == ["Admin"]
        assert store.warnings == []

    def test_delete_task(self, store) -> None:
        task = store.add_task(task_data())
        assert store.delete_task(task["id"]) is True
        assert store.delete_task(task["id"]) is False
        assert store.tasks == []


class TestDismissals:
    def test_dismiss_removes_matching_warnings(self, store) -> None:
        tasks = [store.add_task(task_data(date=day)) for day in WEEK_DAYS]
        store.dismiss_warning(tasks[0]["id"], "vincent-evenings")

        assert len(store.warnings) == 5
        assert tasks[0]["id"] not in [w.task["id"] for w in store.warnings]

    def test_dismiss_other_type_keeps_warning(self, store) -> None:
        task = store.add_task(task_data(tags=["Physical BD"]))
        store.dismiss_warning(task["id"], "vincent-evenings")
        assert len(store.warnings) == 1

    def test_dismissed_warning_resurfaces_after_next_mutation(self, store) -> None:
        task = store.add_task(task_data(tags=["Physical BD"]))
        store.dismiss_warning(task["id"], "physical-bd-days")
        assert store.warnings == []

        store.add_task(task_data(assignee="Joy", date=WEDNESDAY))
        assert [w.dismissal_key for w in store.warnings] == [(task["id"], "physical-bd-days")]


class TestMilestonesAndView:
    def test_milestone_crud(self, store) -> None:
        milestone = store.add_milestone(
            {"title": "First 10 clients", "targetDate": "2025-03-31", "kpi": "10 signed"}
        )
        assert milestone["description"] == ""

        updated = store.update_milestone(milestone["id"], {"kpi": "12 signed"})
        assert updated["kpi"] == "12 signed"
        assert store.milestones == [updated]

        assert store.delete_milestone(milestone["id"]) is True
        assert store.milestones == []

    def test_milestones_do_not_trigger_evaluation(self, store) -> None:
        task = store.add_task(task_data(tags=["Physical BD"]))
        store.dismiss_warning(task["id"], "physical-bd-days")
        store.add_milestone({"title": "Launch", "targetDate": "2025-02-01"})
        assert store.warnings == []

    def test_invalid_milestone(self, store) -> None:
        with pytest.raises(ValueError, match="Invalid target date"):
            store.add_milestone({"title": "Launch", "targetDate": "next month"})

    def test_set_view(self, store) -> None:
        store.set_view("timeline")
        assert store.view == "timeline"
        with pytest.raises(ValueError, match="Unknown view 'year'"):
            store.set_view("year")


class TestImportExport:
    def test_import_replaces_and_evaluates(self, store, make_task) -> None:
        store.add_task(task_data())
        tasks = [make_task(date=MONDAY, tags=["Physical BD"])]
        milestones = [{"id": "m1", "title": "Launch", "targetDate": "2025-02-01",
                       "kpi": "", "description": ""}]

        store.import_data({"tasks": tasks, "milestones": milestones})

        assert store.tasks == tasks
        assert store.milestones == milestones
        assert [w.type for w in store.warnings] == ["physical-bd-days"]

    def test_invalid_import_keeps_state(self, store, make_task) -> None:
        existing = store.add_task(task_data())
        with pytest.raises(ValueError, match="Unknown assignee"):
            store.import_data({"tasks": [make_task(assignee="Bob")], "milestones": []})
        assert store.tasks == [existing]

    def test_export_returns_copies(self, store) -> None:
        store.add_task(task_data(tags=["Admin"]))
        exported = store.export_data()
        exported["tasks"][0]["tags"].append("Build")
        assert store.tasks[0]["tags"] == ["Admin"]


class TestPersistence:
    def test_round_trip(self, db_conn) -> None:
        store = PlannerStore()
        store.add_task(task_data(tags=["Physical BD", "Networking"], notes="Bring flyers"))
        store.add_task(task_data(assignee="Joy", rrule="FREQ=WEEKLY;BYDAY=WE", date=WEDNESDAY))
        store.add_milestone({"title": "Launch", "targetDate": "2025-02-01", "kpi": "5 demos"})
        store.set_view("month")
        store.save(db_conn)

        loaded = PlannerStore.load(db_conn)

        assert loaded.tasks == store.tasks
        assert loaded.milestones == store.milestones
        assert loaded.view == "month"
        assert [w.dismissal_key for w in loaded.warnings] == [
            w.dismissal_key for w in store.warnings
        ]

    def test_save_replaces_previous_state(self, db_conn) -> None:
        store = PlannerStore()
        task = store.add_task(task_data())
        store.save(db_conn)
        store.delete_task(task["id"])
        store.save(db_conn)

        assert PlannerStore.load(db_conn).tasks == []

    def test_duplicate_milestone_ids_rejected_on_import(self, store, make_task) -> None:
        milestone = {"id": "m1", "title": "Launch", "targetDate": "2025-02-01",
                     "kpi": "", "description": ""}
        with pytest.raises(ValueError, match="Duplicate id 'm1'"):
            store.import_data({"tasks": [make_task()], "milestones": [milestone, dict(milestone)]})
        assert store.milestones == []

    def test_failed_save_rolls_back(self, db_conn) -> None:
        store = PlannerStore()
        store.add_task(task_data())
        store.save(db_conn)

        milestone = {"id": "m1", "title": "Launch", "targetDate": "2025-02-01",
                     "kpi": "", "description": ""}
        with pytest.raises(sqlite3.IntegrityError):
            save_planner_state(db_conn, [], [milestone, dict(milestone)], "month")

        assert not db_conn.in_transaction
        loaded = PlannerStore.load(db_conn)
        assert loaded.tasks == store.tasks
        assert loaded.milestones == []
        assert loaded.view == "week"

    def test_load_fresh_database(self, db_conn) -> None:
        loaded = PlannerStore.load(db_conn)
        assert loaded.tasks == []
        assert loaded.view == "week"


class TestJsonFiles:
    def test_save_and_load(self, tmp_path, sample_task) -> None:
        data = {"tasks": [sample_task], "milestones": []}
        path = save_to_json(data, tmp_path / "exports" / "plan.json")

        assert json.loads(path.read_text()) == data
        assert load_from_json(path) == data

    def test_load_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_from_json(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{tasks: ")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_from_json(path)

    def test_load_defaults_milestones(self, tmp_path, sample_task) -> None:
        path = tmp_path / "plan.json"
        path.write_text(json.dumps({"tasks": [sample_task]}))
        assert load_from_json(path)["milestones"] == []
