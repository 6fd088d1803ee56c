"""Scheduler facade: one call from task list to annotated schedule."""

from __future__ import annotations

import copy
from collections.abc import Sequence
from datetime import datetime

from smartplan.logger import get_logger

from .config import ScheduleSettings
from .core import CriticalPathTask, ScheduledTask, ScheduleStatistics, Task
from .critical_path import analyze_critical_path
from .passes import BackwardPass, ForwardPass
from .validator import ScheduleInputValidator

logger = get_logger()


class SchedulingService:
    """Schedules a task list with the critical path method.

    This service coordinates:
    - ScheduleInputValidator (settings, durations, dependency graph)
    - ForwardPass (earliest times under dependency and calendar constraints)
    - BackwardPass (latest times that keep the project end)
    - analyze_critical_path (slack and critical flags)

    Runs are stateless. Each call to schedule() recomputes everything from
    the input tasks, which are never mutated.
    """

    def __init__(
        self,
        tasks: Sequence[Task],
        settings: ScheduleSettings | None = None,
        current_time: datetime | None = None,
    ):
        """Initialize the service.

        Args:
            tasks: Tasks to schedule
            settings: Working-time settings (defaults apply when omitted)
            current_time: Project start used when settings have none
                (defaults to the wall clock)
        """
        self.tasks = list(tasks)
        self.settings = settings or ScheduleSettings()
        self.current_time = current_time
        self.validator = ScheduleInputValidator(self.settings)

    def resolve_project_start(self) -> datetime:
        if self.settings.project_start_date is not None:
            return self.settings.project_start_date
        if self.current_time is not None:
            return self.current_time
        return datetime.now()  # noqa: DTZ005 - schedules run in local wall-clock time

    def schedule(self) -> list[ScheduledTask]:
        """Schedule every task.

        Returns:
            Annotated copies of the tasks sorted by scheduled start
            (ties keep input order)

        Raises:
            ConfigurationError: For unusable settings
            ValidationError: For bad task data, unknown dependencies or cycles
        """
        ordered = self.validator.validate(self.tasks)
        if not ordered:
            return []

        project_start = self.resolve_project_start()
        logger.placements(f"Scheduling {len(ordered)} tasks from {project_start.isoformat()}")

        earliest = ForwardPass(self.settings).compute(ordered, project_start)
        latest = BackwardPass(self.settings).compute(ordered, earliest)
        analysis = analyze_critical_path(ordered, earliest, latest)

        scheduled = [
            ScheduledTask(
                task=copy.deepcopy(task),
                earliest=earliest[task.id],
                latest=latest[task.id],
                slack_time=analysis.slack[task.id],
                is_critical_path=analysis.is_critical(task.id),
            )
            for task in self.tasks
        ]
        scheduled.sort(key=lambda st: st.scheduled_start)

        logger.placements(f"Critical path: {analysis.critical_ids}")
        return scheduled

    def schedule_with_statistics(self) -> tuple[list[ScheduledTask], ScheduleStatistics]:
        scheduled = self.schedule()
        return scheduled, get_schedule_statistics(scheduled)


def schedule_tasks_automatically(
    tasks: Sequence[Task],
    settings: ScheduleSettings | None = None,
    *,
    current_time: datetime | None = None,
) -> list[ScheduledTask]:
    """Schedule tasks and annotate them with slack and critical-path flags.

    Args:
        tasks: Tasks to schedule
        settings: Working-time settings
        current_time: Project start when settings have none

    Returns:
        Annotated task copies sorted by scheduled start
    """
    return SchedulingService(tasks, settings, current_time).schedule()


def get_schedule_statistics(scheduled_tasks: Sequence[ScheduledTask]) -> ScheduleStatistics:
    """Summarize a schedule for display.

    ``total_days`` counts calendar days between the first start date and the
    last end date, so a Monday-to-Wednesday schedule spans 2 days.
    """
    if not scheduled_tasks:
        return ScheduleStatistics(
            project_start=None,
            project_end=None,
            total_days=0,
            critical_path_length=0,
            total_tasks=0,
            critical_path_tasks=[],
        )

    project_start = min(st.scheduled_start for st in scheduled_tasks)
    project_end = max(st.scheduled_end for st in scheduled_tasks)
    critical = [st for st in scheduled_tasks if st.is_critical_path]

    return ScheduleStatistics(
        project_start=project_start,
        project_end=project_end,
        total_days=(project_end.date() - project_start.date()).days,
        critical_path_length=len(critical),
        total_tasks=len(scheduled_tasks),
        critical_path_tasks=[
            CriticalPathTask(id=st.id, title=st.title, duration=st.task.estimated_duration_hours)
            for st in critical
        ],
    )
