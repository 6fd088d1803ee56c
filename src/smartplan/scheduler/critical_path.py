"""Slack computation and critical path identification."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from smartplan.exceptions import SchedulingInvariantError

from .core import Task, TimeWindow
from .working_time import hours_between


@dataclass
class CriticalPathAnalysis:
    """Slack per task and the zero-slack tasks in schedule order."""

    slack: dict[int, int]
    critical_ids: list[int]

    def is_critical(self, task_id: int) -> bool:
        return self.slack[task_id] == 0


def compute_slack(
    earliest: dict[int, TimeWindow], latest: dict[int, TimeWindow]
) -> dict[int, int]:
    """Whole hours each task's start can slip without moving the project end.

    Raises:
        SchedulingInvariantError: If a latest start precedes its earliest start,
            which means the two passes disagree
    """
    slack: dict[int, int] = {}
    for task_id, window in earliest.items():
        hours = hours_between(window.start, latest[task_id].start)
        if hours < 0:
            raise SchedulingInvariantError(
                f"Task {task_id} has negative slack ({hours:.2f}h): latest start "
                f"{latest[task_id].start.isoformat()} is before earliest start "
                f"{window.start.isoformat()}"
            )
        slack[task_id] = math.floor(hours)
    return slack


def analyze_critical_path(
    ordered_tasks: Sequence[Task],
    earliest: dict[int, TimeWindow],
    latest: dict[int, TimeWindow],
) -> CriticalPathAnalysis:
    """Compute slack and list critical tasks by earliest start.

    Ties on earliest start keep dependency order.
    """
    slack = compute_slack(earliest, latest)
    position = {task.id: index for index, task in enumerate(ordered_tasks)}
    critical_ids = sorted(
        (task.id for task in ordered_tasks if slack[task.id] == 0),
        key=lambda task_id: (earliest[task_id].start, position[task_id]),
    )
    return CriticalPathAnalysis(slack=slack, critical_ids=critical_ids)
