"""Core dataclasses for the scheduling system."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _default_int_list() -> list[int]:
    return []


def _default_dict() -> dict[str, Any]:
    return {}


@dataclass
class Task:
    """A task to be scheduled.

    ``meta`` holds any other fields of the source record (status, assignee,
    priority, ...). They are not used by the scheduler and are passed through
    to the output unchanged.
    """

    id: int
    title: str
    estimated_duration_hours: float  # Work-hours, not wall-clock hours
    dependencies: list[int] = field(default_factory=_default_int_list)
    description: str = ""
    category: str = ""
    meta: dict[str, Any] = field(default_factory=_default_dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serializable input shape of the task."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "estimated_duration_hours": self.estimated_duration_hours,
            "dependencies": list(self.dependencies),
        }
        for key, value in self.meta.items():
            data.setdefault(key, value)
        return data


@dataclass(frozen=True)
class TimeWindow:
    """A start/end pair of instants."""

    start: datetime
    end: datetime


@dataclass
class ScheduledTask:
    """A task annotated with its computed schedule.

    ``earliest`` is the forward-pass interval and doubles as the scheduled
    interval; ``latest`` comes from the backward pass.
    """

    task: Task
    earliest: TimeWindow
    latest: TimeWindow
    slack_time: int  # Whole hours, never negative
    is_critical_path: bool

    @property
    def id(self) -> int:
        return self.task.id

    @property
    def title(self) -> str:
        return self.task.title

    @property
    def scheduled_start(self) -> datetime:
        return self.earliest.start

    @property
    def scheduled_end(self) -> datetime:
        return self.earliest.end

    @property
    def latest_start(self) -> datetime:
        return self.latest.start

    @property
    def latest_end(self) -> datetime:
        return self.latest.end

    def to_dict(self) -> dict[str, Any]:
        """Return the task record with the schedule fields merged in."""
        data = self.task.to_dict()
        data.update(
            {
                "scheduled_start": self.scheduled_start.isoformat(),
                "scheduled_end": self.scheduled_end.isoformat(),
                "is_critical_path": self.is_critical_path,
                "slack_time": self.slack_time,
            }
        )
        return data


@dataclass(frozen=True)
class CriticalPathTask:
    """Summary entry for a task on the critical path."""

    id: int
    title: str
    duration: float

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "duration": self.duration}


@dataclass
class ScheduleStatistics:
    """Project-level summary of a schedule.

    ``project_start`` and ``project_end`` are None only for an empty schedule.
    """

    project_start: datetime | None
    project_end: datetime | None
    total_days: int  # Calendar days between the start date and the end date
    critical_path_length: int
    total_tasks: int
    critical_path_tasks: list[CriticalPathTask]

    def to_dict(self) -> dict[str, Any]:
        """Return the statistics in the camelCase shape used by plan views."""
        return {
            "projectStart": self.project_start.isoformat() if self.project_start else None,
            "projectEnd": self.project_end.isoformat() if self.project_end else None,
            "totalDays": self.total_days,
            "criticalPathLength": self.critical_path_length,
            "totalTasks": self.total_tasks,
            "criticalPathTasks": [t.to_dict() for t in self.critical_path_tasks],
        }
