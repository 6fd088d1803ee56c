"""Forward pass: earliest start and end of every task."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from smartplan.logger import get_logger

from ..config import ScheduleSettings
from ..core import Task, TimeWindow
from ..working_time import SnapDirection, add_working_duration, snap_to_working_window

logger = get_logger()


class ForwardPass:
    """Computes earliest times by walking tasks in dependency order.

    A task starts at the project start, or after its last dependency ends
    when dependencies are respected. The start is then snapped forward into
    a working window and the duration is consumed in working time.
    """

    def __init__(self, settings: ScheduleSettings):
        self.settings = settings

    def compute(
        self, ordered_tasks: Sequence[Task], project_start: datetime
    ) -> dict[int, TimeWindow]:
        """Run the forward pass.

        Args:
            ordered_tasks: Tasks in topological order
            project_start: Instant no task may start before

        Returns:
            Task id to earliest (start, end) window
        """
        times: dict[int, TimeWindow] = {}

        for task in ordered_tasks:
            candidate = project_start
            if self.settings.respect_dependencies:
                for dep_id in task.dependencies:
                    dep_end = times[dep_id].end
                    if dep_end > candidate:
                        candidate = dep_end

            start = snap_to_working_window(candidate, self.settings, SnapDirection.FORWARD)
            end = add_working_duration(start, task.estimated_duration_hours, self.settings)
            times[task.id] = TimeWindow(start=start, end=end)
            logger.placements(
                f"  {task.id} '{task.title}': {start:%a %Y-%m-%d %H:%M} -> {end:%a %Y-%m-%d %H:%M}"
            )

        return times


def compute_earliest(
    ordered_tasks: Sequence[Task], project_start: datetime, settings: ScheduleSettings
) -> dict[int, TimeWindow]:
    """Earliest (start, end) of every task; see ForwardPass."""
    return ForwardPass(settings).compute(ordered_tasks, project_start)
