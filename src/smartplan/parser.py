"""Reading and writing plan documents (YAML or JSON)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import PlanScheduleSettings, PlanTask, ProjectPlan, WorkingHours
from .scheduler.core import Task
from .schemas import PlanSchema, TaskSchema

DEFAULT_PLAN_NAME = "Untitled plan"


def task_from_schema(schema: TaskSchema) -> PlanTask:
    """Convert a validated task record into a PlanTask."""
    task = Task(
        id=schema.id,
        title=schema.title,
        estimated_duration_hours=schema.estimated_duration_hours,
        dependencies=list(schema.dependencies),
        description=schema.description,
        category=schema.category,
        meta=dict(schema.model_extra or {}),
    )
    return PlanTask(
        task=task,
        completed=schema.completed,
        scheduled_start=schema.scheduled_start,
        scheduled_end=schema.scheduled_end,
        slack_time=schema.slack_time,
        is_critical_path=schema.is_critical_path,
    )


class PlanParser:
    """Parser for plan documents.

    A document is either a plan mapping (``projectName``, ``tasks``, ...) or
    a bare list of task records, which becomes an untitled plan.
    """

    def parse_file(self, file_path: Path | str) -> ProjectPlan:
        """Parse a YAML or JSON file into a ProjectPlan."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    data: Any = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ParseError(f"Failed to parse {path.name}: {e}") from e

        return self.parse_data(data, default_name=path.stem or DEFAULT_PLAN_NAME)

    def parse_data(self, data: Any, default_name: str = DEFAULT_PLAN_NAME) -> ProjectPlan:
        """Parse loaded document data into a ProjectPlan."""
        if isinstance(data, list):
            data = {"projectName": default_name, "tasks": data}
        if not isinstance(data, dict):
            raise ParseError("Plan document must be a mapping or a list of tasks")

        try:
            schema = PlanSchema.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid plan document: {e}") from e

        working_hours = None
        if schema.working_hours is not None:
            working_hours = WorkingHours(
                start=schema.working_hours.start,
                end=schema.working_hours.end,
                hours_per_day=schema.working_hours.hours_per_day,
            )

        schedule_settings = None
        if schema.schedule_settings is not None:
            stored = schema.schedule_settings
            schedule_settings = PlanScheduleSettings(
                auto_schedule_enabled=stored.auto_schedule_enabled,
                last_scheduled_at=stored.last_scheduled_at,
                schedule_from=stored.schedule_from,
                respect_dependencies=stored.respect_dependencies,
                respect_working_hours=stored.respect_working_hours,
            )

        return ProjectPlan(
            project_name=schema.project_name,
            tasks=[task_from_schema(task) for task in schema.tasks],
            project_summary=schema.project_summary,
            goal_text=schema.goal_text,
            project_start_date=schema.project_start_date,
            project_end_date=schema.project_end_date,
            working_hours=working_hours,
            working_days=schema.working_days,
            schedule_settings=schedule_settings,
            tags=list(schema.tags),
        )

    def parse_tasks(self, data: Any) -> list[Task]:
        """Parse a bare list of task records into scheduler Tasks."""
        if not isinstance(data, list):
            raise ParseError("Expected a list of tasks")
        return self.parse_data(data).scheduler_tasks()


def load_plan(path: Path | str) -> ProjectPlan:
    """Load a plan document from disk."""
    return PlanParser().parse_file(path)


def write_plan_file(path: Path, plan: ProjectPlan) -> None:
    """Write a plan document, as JSON for ``.json`` files and YAML otherwise."""
    data = plan.to_dict()
    with path.open("w", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            json.dump(data, f, indent=2)
            f.write("\n")
        else:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
