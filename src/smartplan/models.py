"""Data models for plan documents."""

from __future__ import annotations

import copy
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .scheduler.config import ScheduleSettings
from .scheduler.core import ScheduledTask, ScheduleStatistics, Task


@dataclass
class WorkingHours:
    """Daily working window stored on a plan."""

    start: str = "09:00"
    end: str = "17:00"
    hours_per_day: float = 8.0


@dataclass
class PlanScheduleSettings:
    """Auto-schedule switches stored on a plan."""

    auto_schedule_enabled: bool = False
    last_scheduled_at: datetime | None = None
    schedule_from: str | None = None
    respect_dependencies: bool = True
    respect_working_hours: bool = True


@dataclass
class PlanTask:
    """A task record as stored in a plan document.

    The scheduling fields are None until a schedule has been applied and are
    overwritten in full by every later apply.
    """

    task: Task
    completed: bool = False
    scheduled_start: datetime | None = None
    scheduled_end: datetime | None = None
    slack_time: int | None = None
    is_critical_path: bool | None = None

    @property
    def is_done(self) -> bool:
        return self.completed or self.task.meta.get("status") == "completed"

    def to_dict(self) -> dict[str, Any]:
        data = self.task.to_dict()
        data["completed"] = self.completed
        if self.scheduled_start is not None:
            data["scheduled_start"] = self.scheduled_start.isoformat()
        if self.scheduled_end is not None:
            data["scheduled_end"] = self.scheduled_end.isoformat()
        if self.slack_time is not None:
            data["slack_time"] = self.slack_time
        if self.is_critical_path is not None:
            data["is_critical_path"] = self.is_critical_path
        return data


def _default_plan_tasks() -> list[PlanTask]:
    return []


def _default_str_list() -> list[str]:
    return []


@dataclass
class ProjectPlan:
    """A project plan document: a goal broken into tasks."""

    project_name: str
    tasks: list[PlanTask] = field(default_factory=_default_plan_tasks)
    project_summary: str = ""
    goal_text: str = ""
    project_start_date: datetime | None = None
    project_end_date: datetime | None = None
    working_hours: WorkingHours | None = None
    working_days: list[int] | None = None
    schedule_settings: PlanScheduleSettings | None = None
    tags: list[str] = field(default_factory=_default_str_list)

    @property
    def total_tasks(self) -> int:
        return len(self.tasks)

    @property
    def completed_tasks(self) -> int:
        return sum(1 for plan_task in self.tasks if plan_task.is_done)

    @property
    def progress_percentage(self) -> int:
        if not self.tasks:
            return 0
        return math.floor(self.completed_tasks / self.total_tasks * 100 + 0.5)

    @property
    def estimated_duration(self) -> float:
        """Total work-hours over all tasks."""
        return sum(plan_task.task.estimated_duration_hours for plan_task in self.tasks)

    def scheduler_tasks(self) -> list[Task]:
        return [plan_task.task for plan_task in self.tasks]

    def stored_settings(self) -> dict[str, Any]:
        """Schedule settings recorded on the plan by an earlier apply.

        Only fields the plan actually stores are returned, keyed by
        ScheduleSettings field name.
        """
        stored: dict[str, Any] = {}
        if self.project_start_date is not None:
            stored["project_start_date"] = self.project_start_date
        if self.working_hours is not None:
            stored["working_hours_start"] = self.working_hours.start
            stored["working_hours_end"] = self.working_hours.end
            stored["hours_per_day"] = self.working_hours.hours_per_day
        if self.working_days is not None:
            stored["working_days"] = list(self.working_days)
        if self.schedule_settings is not None:
            stored["respect_dependencies"] = self.schedule_settings.respect_dependencies
            stored["respect_working_hours"] = self.schedule_settings.respect_working_hours
        return stored

    def apply_schedule(
        self,
        scheduled_tasks: Sequence[ScheduledTask],
        statistics: ScheduleStatistics,
        settings: ScheduleSettings,
        applied_at: datetime,
    ) -> ProjectPlan:
        """Return a copy of the plan with a computed schedule written onto it.

        Scheduling fields of every task are overwritten; tasks keep their
        document order. The plan records the project span, the working
        hours and days, and when the schedule was applied.
        """
        by_id = {st.id: st for st in scheduled_tasks}
        updated = copy.deepcopy(self)

        for plan_task in updated.tasks:
            st = by_id.get(plan_task.task.id)
            if st is None:
                plan_task.scheduled_start = None
                plan_task.scheduled_end = None
                plan_task.slack_time = None
                plan_task.is_critical_path = None
                continue
            plan_task.scheduled_start = st.scheduled_start
            plan_task.scheduled_end = st.scheduled_end
            plan_task.slack_time = st.slack_time
            plan_task.is_critical_path = st.is_critical_path

        updated.project_start_date = statistics.project_start
        updated.project_end_date = statistics.project_end
        updated.working_hours = WorkingHours(
            start=settings.working_hours_start.strftime("%H:%M"),
            end=settings.working_hours_end.strftime("%H:%M"),
            hours_per_day=settings.hours_per_day,
        )
        updated.working_days = sorted(settings.working_days)
        previous_from = self.schedule_settings.schedule_from if self.schedule_settings else None
        updated.schedule_settings = PlanScheduleSettings(
            auto_schedule_enabled=True,
            last_scheduled_at=applied_at,
            schedule_from=previous_from,
            respect_dependencies=settings.respect_dependencies,
            respect_working_hours=settings.respect_working_hours,
        )
        return updated

    def to_dict(self) -> dict[str, Any]:
        """Return the stored document shape, including derived counters."""
        data: dict[str, Any] = {
            "projectName": self.project_name,
            "projectSummary": self.project_summary,
            "goalText": self.goal_text,
            "tags": list(self.tags),
            "tasks": [plan_task.to_dict() for plan_task in self.tasks],
        }
        if self.project_start_date is not None:
            data["project_start_date"] = self.project_start_date.isoformat()
        if self.project_end_date is not None:
            data["project_end_date"] = self.project_end_date.isoformat()
        if self.working_hours is not None:
            data["working_hours"] = {
                "start": self.working_hours.start,
                "end": self.working_hours.end,
                "hours_per_day": self.working_hours.hours_per_day,
            }
        if self.working_days is not None:
            data["working_days"] = list(self.working_days)
        if self.schedule_settings is not None:
            settings = self.schedule_settings
            data["schedule_settings"] = {
                "auto_schedule_enabled": settings.auto_schedule_enabled,
                "last_scheduled_at": (
                    settings.last_scheduled_at.isoformat() if settings.last_scheduled_at else None
                ),
                "schedule_from": settings.schedule_from,
                "respect_dependencies": settings.respect_dependencies,
                "respect_working_hours": settings.respect_working_hours,
            }
        data["totalTasks"] = self.total_tasks
        data["completedTasks"] = self.completed_tasks
        data["progressPercentage"] = self.progress_percentage
        data["estimatedDuration"] = self.estimated_duration
        return data
