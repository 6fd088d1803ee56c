"""Backward pass: latest start and end that keep the project end date."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

from smartplan.logger import get_logger

from ..config import BackwardPassMode, ScheduleSettings
from ..core import Task, TimeWindow
from ..graph import build_successors
from ..working_time import SnapDirection, snap_to_working_window, subtract_working_duration

logger = get_logger()


class BackwardPass:
    """Computes latest times by walking the reversed dependency graph.

    The project end is the latest earliest-end of any task. A task without
    successors may finish as late as the project end; any other task must
    finish by the earliest latest-start of its successors.

    In ``working_time`` mode the latest end is snapped backward into a
    working window and the duration is subtracted in working time, so a
    chain that the forward pass packed back to back has zero slack. In
    ``wall_clock`` mode the duration is subtracted as plain hours.
    """

    def __init__(self, settings: ScheduleSettings):
        self.settings = settings

    def compute(
        self, ordered_tasks: Sequence[Task], earliest: dict[int, TimeWindow]
    ) -> dict[int, TimeWindow]:
        """Run the backward pass.

        Args:
            ordered_tasks: Tasks in topological order (walked in reverse)
            earliest: Output of the forward pass

        Returns:
            Task id to latest (start, end) window
        """
        if not ordered_tasks:
            return {}

        project_end = max(window.end for window in earliest.values())
        # Without dependency constraints every task may run until the project end
        successors = (
            build_successors(ordered_tasks) if self.settings.respect_dependencies else {}
        )
        working_time = self.settings.backward_pass_mode == BackwardPassMode.WORKING_TIME

        latest: dict[int, TimeWindow] = {}
        for task in reversed(ordered_tasks):
            latest_end = min(
                (latest[succ_id].start for succ_id in successors.get(task.id, [])),
                default=project_end,
            )

            if working_time:
                latest_end = snap_to_working_window(
                    latest_end, self.settings, SnapDirection.BACKWARD
                )
                latest_start = subtract_working_duration(
                    latest_end, task.estimated_duration_hours, self.settings
                )
            else:
                latest_start = latest_end - timedelta(hours=task.estimated_duration_hours)

            latest[task.id] = TimeWindow(start=latest_start, end=latest_end)
            logger.checks(
                f"  {task.id} latest: {latest_start:%a %Y-%m-%d %H:%M} -> "
                f"{latest_end:%a %Y-%m-%d %H:%M}"
            )

        return latest


def compute_latest(
    ordered_tasks: Sequence[Task], earliest: dict[int, TimeWindow], settings: ScheduleSettings
) -> dict[int, TimeWindow]:
    """Latest (start, end) of every task; see BackwardPass."""
    return BackwardPass(settings).compute(ordered_tasks, earliest)
