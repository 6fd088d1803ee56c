"""Validation pre-pass for scheduling input."""

from __future__ import annotations

import math
from collections.abc import Sequence

from smartplan.exceptions import InvalidDurationError, ValidationError
from smartplan.logger import get_logger

from .config import ScheduleSettings
from .core import Task
from .graph import topological_order
from .working_time import check_calendar

logger = get_logger()


class ScheduleInputValidator:
    """Checks tasks and settings before any scheduling pass runs.

    Every input problem is reported here, so a scheduling run either fails
    up front or produces a fully annotated task list.
    """

    def __init__(self, settings: ScheduleSettings):
        self.settings = settings

    def validate_settings(self) -> None:
        """Reject settings that would make calendar arithmetic loop forever.

        Raises:
            ConfigurationError: If working days are empty or the window is empty
        """
        if self.settings.respect_working_hours:
            check_calendar(self.settings)

    def validate_task(self, task: Task) -> None:
        """Check one task's id and duration.

        Raises:
            ValidationError: If the id is not a positive integer
            InvalidDurationError: If the duration is not a positive finite number
        """
        if isinstance(task.id, bool) or not isinstance(task.id, int) or task.id <= 0:
            raise ValidationError(f"Task id must be a positive integer, got {task.id!r}")

        duration = task.estimated_duration_hours
        if (
            isinstance(duration, bool)
            or not isinstance(duration, (int, float))
            or not math.isfinite(duration)
            or duration <= 0
        ):
            raise InvalidDurationError(task.id, duration)

    def validate(self, tasks: Sequence[Task]) -> list[Task]:
        """Validate everything and return the tasks in dependency order.

        Raises:
            ConfigurationError: For unusable settings
            ValidationError: For bad ids, durations, duplicate ids,
                unknown dependencies or cycles
        """
        self.validate_settings()

        seen: set[int] = set()
        for task in tasks:
            self.validate_task(task)
            if task.id in seen:
                raise ValidationError(f"Duplicate task id {task.id}")
            seen.add(task.id)

        order = topological_order(tasks)
        logger.checks(f"  validated {len(tasks)} tasks")
        return order
