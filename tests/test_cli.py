"""Tests for CLI commands."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
import yaml
from typer.testing import CliRunner

from smartplan.cli import app
from smartplan.models import PlanTask, ProjectPlan
from smartplan.parser import load_plan
from smartplan.storage import YamlPlanRepository
from tests.conftest import make_task

runner = CliRunner()

EXAMPLE_PLAN = Path(__file__).resolve().parent.parent / "examples" / "website_launch.yaml"


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep config discovery away from the working directory."""
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)


def _write_plan(path: Path, tasks: list[dict[str, Any]], **fields: Any) -> Path:
    data = {"projectName": "Launch", **fields, "tasks": tasks}
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    return path


@pytest.fixture
def chain_plan(tmp_path: Path) -> Path:
    return _write_plan(
        tmp_path / "plan.yaml",
        [
            {"id": 1, "title": "Design", "estimated_duration_hours": 8},
            {"id": 2, "title": "Build", "estimated_duration_hours": 8, "dependencies": [1]},
            {"id": 3, "title": "Ship", "estimated_duration_hours": 8, "dependencies": [2]},
        ],
    )


class TestScheduleCommand:
    """Test the schedule CLI command."""

    def test_text_output(self) -> None:
        """Test the human-readable preview of the example plan."""
        result = runner.invoke(
            app, ["schedule", str(EXAMPLE_PLAN), "--start", "2025-01-06T09:00"]
        )

        assert result.exit_code == 0
        assert "Schedule Results" in result.stdout
        assert "Gather requirements (1)  [critical]" in result.stdout
        assert "Copywriting (3)\n" in result.stdout
        assert "Start:    Mon 2025-01-06 09:00" in result.stdout
        assert "Depends on: 3, 4" in result.stdout
        assert "Project end:    Tue 2025-01-14 13:00" in result.stdout
        assert "Total days:     8" in result.stdout
        assert "Critical tasks: 5" in result.stdout

    def test_json_output(self, chain_plan: Path) -> None:
        result = runner.invoke(
            app, ["schedule", str(chain_plan), "--start", "2025-01-06T09:00", "--json"]
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert [t["scheduled_start"] for t in payload["tasks"]] == [
            "2025-01-06T09:00:00",
            "2025-01-07T09:00:00",
            "2025-01-08T09:00:00",
        ]
        assert all(t["is_critical_path"] for t in payload["tasks"])
        assert payload["statistics"]["totalDays"] == 2
        assert payload["statistics"]["criticalPathLength"] == 3

    def test_current_time_used_without_start(self, chain_plan: Path) -> None:
        result = runner.invoke(
            app, ["--current-time", "2025-01-04T12:00", "schedule", str(chain_plan), "--json"]
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["statistics"]["projectStart"] == "2025-01-06T09:00:00"

    def test_working_time_overrides(self, chain_plan: Path) -> None:
        result = runner.invoke(
            app,
            [
                "schedule",
                str(chain_plan),
                "--start",
                "2025-01-06",
                "--hours-start",
                "10:00",
                "--hours-end",
                "14:00",
                "--working-days",
                "1,3,5",
                "--json",
            ],
        )

        assert result.exit_code == 0
        tasks = json.loads(result.stdout)["tasks"]
        assert tasks[0]["scheduled_start"] == "2025-01-06T10:00:00"
        assert tasks[0]["scheduled_end"] == "2025-01-08T14:00:00"

    def test_ignore_dependencies_and_hours(self, chain_plan: Path) -> None:
        result = runner.invoke(
            app,
            [
                "schedule",
                str(chain_plan),
                "--start",
                "2025-01-06T09:00",
                "--ignore-dependencies",
                "--ignore-working-hours",
                "--json",
            ],
        )

        assert result.exit_code == 0
        tasks = json.loads(result.stdout)["tasks"]
        assert {t["scheduled_end"] for t in tasks} == {"2025-01-06T17:00:00"}

    def test_wall_clock_backward_pass(self, chain_plan: Path) -> None:
        result = runner.invoke(
            app,
            [
                "schedule",
                str(chain_plan),
                "--start",
                "2025-01-06T09:00",
                "--backward-pass",
                "wall_clock",
                "--json",
            ],
        )

        assert result.exit_code == 0
        tasks = json.loads(result.stdout)["tasks"]
        assert [t["slack_time"] for t in tasks] == [32, 16, 0]

    def test_csv_export(self, chain_plan: Path, tmp_path: Path) -> None:
        output = tmp_path / "schedule.csv"
        result = runner.invoke(
            app,
            [
                "schedule",
                str(chain_plan),
                "--start",
                "2025-01-06T09:00",
                "--output-csv",
                str(output),
            ],
        )

        assert result.exit_code == 0
        assert f"Schedule exported to {output}" in result.stdout
        with output.open() as f:
            rows = list(csv.DictReader(f))
        assert [row["title"] for row in rows] == ["Design", "Build", "Ship"]
        assert rows[2]["scheduled_end"] == "2025-01-08T17:00:00"
        assert rows[0]["is_critical_path"] == "True"

    def test_preview_does_not_modify_plan(self, chain_plan: Path) -> None:
        before = chain_plan.read_text()
        result = runner.invoke(app, ["schedule", str(chain_plan), "--start", "2025-01-06"])

        assert result.exit_code == 0
        assert chain_plan.read_text() == before

    def test_apply_writes_schedule(self, chain_plan: Path) -> None:
        result = runner.invoke(
            app,
            ["--current-time", "2025-01-05T18:00", "schedule", str(chain_plan), "--apply"],
        )

        assert result.exit_code == 0
        assert "Schedule applied to 3 tasks" in result.stdout

        plan = load_plan(chain_plan)
        assert plan.tasks[2].scheduled_end == datetime(2025, 1, 8, 17, 0)
        assert plan.tasks[0].is_critical_path is True
        assert plan.project_start_date == datetime(2025, 1, 6, 9, 0)
        assert plan.project_end_date == datetime(2025, 1, 8, 17, 0)
        assert plan.working_days == [1, 2, 3, 4, 5]
        assert plan.schedule_settings is not None
        assert plan.schedule_settings.auto_schedule_enabled is True
        assert plan.schedule_settings.last_scheduled_at == datetime(2025, 1, 5, 18, 0)

    def test_stored_settings_reused(self, tmp_path: Path) -> None:
        plan_path = _write_plan(
            tmp_path / "stored.yaml",
            [{"id": 1, "title": "Only", "estimated_duration_hours": 8}],
            project_start_date="2025-01-06T09:00:00",
            working_hours={"start": "09:00", "end": "13:00"},
        )

        result = runner.invoke(app, ["schedule", str(plan_path), "--json"])

        assert result.exit_code == 0
        tasks = json.loads(result.stdout)["tasks"]
        assert tasks[0]["scheduled_end"] == "2025-01-07T13:00:00"

    def test_config_file_next_to_plan(self, chain_plan: Path) -> None:
        (chain_plan.parent / "smartplan_config.yaml").write_text(
            "scheduler:\n  working_hours_start: '08:00'\n  working_hours_end: 12:00\n"
        )

        result = runner.invoke(
            app, ["schedule", str(chain_plan), "--start", "2025-01-06T08:00", "--json"]
        )

        assert result.exit_code == 0
        tasks = json.loads(result.stdout)["tasks"]
        assert tasks[0]["scheduled_end"] == "2025-01-07T12:00:00"

    def test_explicit_config_option(self, chain_plan: Path, tmp_path: Path) -> None:
        config = tmp_path / "custom.yaml"
        config.write_text("scheduler:\n  respect_dependencies: false\n")

        result = runner.invoke(
            app,
            [
                "--config",
                str(config),
                "schedule",
                str(chain_plan),
                "--start",
                "2025-01-06",
                "--json",
            ],
        )

        assert result.exit_code == 0
        tasks = json.loads(result.stdout)["tasks"]
        assert {t["scheduled_start"] for t in tasks} == {"2025-01-06T09:00:00"}

    def test_cycle_reports_error(self, tmp_path: Path) -> None:
        plan_path = _write_plan(
            tmp_path / "cycle.yaml",
            [
                {"id": 1, "title": "A", "estimated_duration_hours": 1, "dependencies": [2]},
                {"id": 2, "title": "B", "estimated_duration_hours": 1, "dependencies": [1]},
            ],
        )

        result = runner.invoke(app, ["schedule", str(plan_path)])

        assert result.exit_code == 1
        assert "Error: Cyclic dependency detected: 1 -> 2 -> 1" in result.output
        assert "Check your task dependencies and durations." in result.output
        assert "Schedule Results" not in result.output

    def test_invalid_duration(self, tmp_path: Path) -> None:
        plan_path = _write_plan(
            tmp_path / "bad.yaml", [{"id": 1, "title": "A", "estimated_duration_hours": 0}]
        )

        result = runner.invoke(app, ["schedule", str(plan_path)])

        assert result.exit_code == 1
        assert "invalid estimated_duration_hours" in result.output

    def test_empty_working_days(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["schedule", str(chain_plan), "--working-days", ""])

        assert result.exit_code == 1
        assert "working_days is empty" in result.output

    def test_bad_start(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["schedule", str(chain_plan), "--start", "someday"])

        assert result.exit_code == 1
        assert "Invalid --start 'someday'" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["schedule", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "File not found" in result.output


class TestStatsCommand:
    """Test the stats CLI command."""

    def test_text(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["stats", str(chain_plan), "--start", "2025-01-06T09:00"])

        assert result.exit_code == 0
        assert "Total days:     2" in result.stdout
        assert "- Build (2, 8h)" in result.stdout

    def test_json(self, chain_plan: Path) -> None:
        result = runner.invoke(
            app, ["stats", str(chain_plan), "--start", "2025-01-06T09:00", "--json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["projectEnd"] == "2025-01-08T17:00:00"
        assert data["totalTasks"] == 3

    def test_empty_plan(self, tmp_path: Path) -> None:
        plan_path = _write_plan(tmp_path / "empty.yaml", [])

        result = runner.invoke(app, ["stats", str(plan_path)])

        assert result.exit_code == 0
        assert "No tasks to schedule" in result.stdout


class TestValidateCommand:
    """Test the validate CLI command."""

    def test_valid_plan(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["validate", str(chain_plan)])

        assert result.exit_code == 0
        assert "OK: Launch (3 tasks)" in result.stdout

    def test_unknown_dependency(self, tmp_path: Path) -> None:
        plan_path = _write_plan(
            tmp_path / "plan.yaml",
            [{"id": 1, "title": "A", "estimated_duration_hours": 1, "dependencies": [9]}],
        )

        result = runner.invoke(app, ["validate", str(plan_path)])

        assert result.exit_code == 1
        assert "Task 1 depends on unknown task 9" in result.output


class TestPlansCommand:
    """Test the plans CLI command."""

    def test_lists_plans(self, tmp_path: Path) -> None:
        store = tmp_path / "plans"
        repository = YamlPlanRepository(store)
        repository.save(
            "launch",
            ProjectPlan(
                project_name="Launch",
                tasks=[PlanTask(make_task(1), completed=True), PlanTask(make_task(2))],
            ),
        )
        repository.save("empty", ProjectPlan(project_name="Empty"))

        result = runner.invoke(app, ["plans", "--store", str(store)])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "empty: Empty - 0 tasks, 0% done, never scheduled",
            "launch: Launch - 2 tasks, 50% done, never scheduled",
        ]

    def test_store_from_config(self, tmp_path: Path) -> None:
        cwd = Path.cwd()
        (cwd / "smartplan_config.yaml").write_text("plans_directory: store\n")

        result = runner.invoke(app, ["plans"])

        assert result.exit_code == 0
        assert f"No plans in {cwd / 'store'}" in result.stdout

    def test_no_store(self) -> None:
        result = runner.invoke(app, ["plans"])

        assert result.exit_code == 1
        assert "no plans_directory configured" in result.output
